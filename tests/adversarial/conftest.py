"""
Shared fixtures for adversarial tests.

Provides PostgreSQL-backed services for race condition tests. The
connection pool itself comes from the top-level conftest.
"""

import pytest
from psycopg_pool import ConnectionPool

from airgo_accounts.adapters.otp.memory import InMemoryOtpStore
from airgo_accounts.adapters.repository.postgres import PostgresIdentityRepository
from airgo_accounts.domain.credentials import CredentialManager
from airgo_accounts.domain.otp import OtpLedger
from airgo_accounts.domain.registration import RegistrationService
from tests.fakes import RecordingEmailSender

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture
def pg_repository(pool: ConnectionPool) -> PostgresIdentityRepository:
    """Create repository instance for each test."""
    return PostgresIdentityRepository(pool)


@pytest.fixture
def pg_registration(pg_repository: PostgresIdentityRepository) -> RegistrationService:
    """Registration service over PostgreSQL with a fresh in-memory OTP ledger."""
    return RegistrationService(
        repository=pg_repository,
        email_sender=RecordingEmailSender(),
        ledger=OtpLedger(InMemoryOtpStore()),
        credentials=CredentialManager(cost=4),
    )

