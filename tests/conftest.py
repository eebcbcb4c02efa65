"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory repository, OTP store and email sender doubles
- A controllable clock
- Fully wired domain services built on those doubles
- A PostgreSQL connection pool for integration and adversarial tests,
  skipped when the database cannot be reached
"""

from collections.abc import Generator
from datetime import timedelta

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from airgo_accounts.adapters.otp.memory import InMemoryOtpStore
from airgo_accounts.adapters.repository.postgres import run_migrations
from airgo_accounts.config.settings import get_settings
from airgo_accounts.domain.addresses import AddressService
from airgo_accounts.domain.credentials import CredentialManager
from airgo_accounts.domain.otp import OtpLedger
from airgo_accounts.domain.registration import RegistrationService
from airgo_accounts.domain.sessions import SessionService
from tests.fakes import (
    TEST_SECRET,
    FakeClock,
    InMemoryIdentityRepository,
    RecordingEmailSender,
    registration_data,
)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repository() -> InMemoryIdentityRepository:
    return InMemoryIdentityRepository()


@pytest.fixture
def otp_store() -> InMemoryOtpStore:
    return InMemoryOtpStore()


@pytest.fixture
def ledger(otp_store: InMemoryOtpStore, clock: FakeClock) -> OtpLedger:
    return OtpLedger(otp_store, ttl_seconds=60, code_length=6, clock=clock)


@pytest.fixture
def sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def credentials() -> CredentialManager:
    # Lowest bcrypt cost keeps the suite fast.
    return CredentialManager(cost=4)


@pytest.fixture
def registration(
    repository: InMemoryIdentityRepository,
    sender: RecordingEmailSender,
    ledger: OtpLedger,
    credentials: CredentialManager,
) -> RegistrationService:
    return RegistrationService(
        repository=repository, email_sender=sender, ledger=ledger, credentials=credentials
    )


@pytest.fixture
def sessions(
    repository: InMemoryIdentityRepository, credentials: CredentialManager
) -> SessionService:
    return SessionService(
        repository=repository,
        credentials=credentials,
        secret=TEST_SECRET,
        token_ttl=timedelta(days=7),
    )


@pytest.fixture
def addresses(repository: InMemoryIdentityRepository) -> AddressService:
    return AddressService(repository=repository)


@pytest.fixture
def register_account(registration: RegistrationService, sender: RecordingEmailSender):
    """Run the full verify-then-register flow; returns the new identity id."""

    def _register(**overrides) -> str:
        data = registration_data(**overrides)
        registration.request_code(data.email)
        registration.verify_code(data.email, sender.last_code_for(data.email.strip().lower()))
        return registration.register(data)

    return _register


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for database tests, with migrations applied."""
    settings = get_settings()
    try:
        psycopg.connect(settings.database_url, connect_timeout=2).close()
    except psycopg.OperationalError:
        pytest.skip("PostgreSQL not reachable")

    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=True)
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture(autouse=True)
def clean_database(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    """Clean identities (and, by cascade, addresses) before each database test."""
    if "pool" in request.fixturenames:
        with request.getfixturevalue("pool").connection() as conn:
            conn.execute("DELETE FROM identities")
            conn.commit()
    yield
