"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.

Process-wide collaborators (connection pool, OTP ledger, email sender)
are created in the application lifespan and kept on ``app.state``.
"""

from datetime import timedelta

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from psycopg_pool import ConnectionPool

from airgo_accounts.adapters.repository.postgres import PostgresIdentityRepository
from airgo_accounts.adapters.smtp.console import ConsoleEmailSender
from airgo_accounts.adapters.smtp.smtp import SmtpEmailSender
from airgo_accounts.config.settings import Settings, get_settings
from airgo_accounts.domain.addresses import AddressService
from airgo_accounts.domain.credentials import CredentialManager
from airgo_accounts.domain.otp import OtpLedger
from airgo_accounts.domain.ports import EmailSender
from airgo_accounts.domain.registration import RegistrationService
from airgo_accounts.domain.sessions import SessionService


def build_email_sender(settings: Settings) -> EmailSender:
    """Select the email adapter named by ``settings.email_backend``."""
    if settings.email_backend == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            sender=settings.smtp_sender,
            use_tls=settings.smtp_use_tls,
            ttl_seconds=settings.otp_ttl_seconds,
        )
    return ConsoleEmailSender()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresIdentityRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresIdentityRepository(pool)


def get_ledger(request: Request) -> OtpLedger:
    """OTP ledger owned by the application lifespan."""
    return request.app.state.otp_ledger


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender


def get_credentials() -> CredentialManager:
    return CredentialManager(cost=get_settings().bcrypt_cost)


def get_registration_service(request: Request) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository, OTP ledger and email sender.
    """
    return RegistrationService(
        repository=get_repository(request),
        email_sender=get_email_sender(request),
        ledger=get_ledger(request),
        credentials=get_credentials(),
    )


def get_session_service(request: Request) -> SessionService:
    settings = get_settings()
    return SessionService(
        repository=get_repository(request),
        credentials=get_credentials(),
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        token_ttl=timedelta(days=settings.token_ttl_days),
        min_password_length=settings.min_password_length,
    )


def get_address_service(request: Request) -> AddressService:
    return AddressService(repository=get_repository(request))


# Bearer token security scheme for OpenAPI documentation.
# auto_error=False so a missing header reaches the domain gate as TOKEN_MISSING.
http_bearer = HTTPBearer(auto_error=False)


def get_current_identity_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    sessions: SessionService = Depends(get_session_service),
) -> str:
    """
    Resolve the bearer token to the authenticated identity id.

    Every owner-scoped route depends on this; a failure rejects the request
    before the route body runs.
    """
    token = credentials.credentials if credentials is not None else None
    return sessions.authenticate(token)
