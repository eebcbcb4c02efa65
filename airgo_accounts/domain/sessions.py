"""
Session token service - Login, password changes and the bearer-token gate.

Tokens are HS256 JWTs carrying ``sub`` (identity id), ``iat`` and ``exp``.
Verification is stateless: a password change does not revoke tokens that
were already issued, they stay valid until ``exp``. The gate additionally
rejects tokens whose subject account no longer exists.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

import jwt

from .credentials import CredentialManager
from .exceptions import AuthError, ErrorKind, InputError, NotFoundError
from .otp import utc_now
from .ports import IdentityRepository
from .registration import normalize_email

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    """Issued token plus the public profile of the account."""

    token: str
    expires_at: datetime
    profile: dict


@dataclass
class SessionService:
    """Issues and verifies bearer tokens and manages password credentials."""

    repository: IdentityRepository
    credentials: CredentialManager
    secret: str
    algorithm: str = "HS256"
    token_ttl: timedelta = timedelta(days=7)
    min_password_length: int = 6
    clock: Callable[[], datetime] = field(default=utc_now)

    def issue_token(self, identity_id: str) -> tuple[str, datetime]:
        """Sign a token for ``identity_id``. Returns the token and its expiry."""
        issued_at = self.clock()
        expires_at = issued_at + self.token_ttl
        payload = {"sub": str(identity_id), "iat": issued_at, "exp": expires_at}
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        return token, expires_at

    def verify_token(self, token: str | None) -> str:
        """
        Resolve a token to its subject identity id.

        Raises:
            AuthError: TOKEN_MISSING, TOKEN_MALFORMED or TOKEN_EXPIRED
        """
        if not token:
            raise AuthError(ErrorKind.TOKEN_MISSING, "No token provided")
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthError(ErrorKind.TOKEN_EXPIRED, "Token has expired") from None
        except jwt.InvalidTokenError:
            raise AuthError(ErrorKind.TOKEN_MALFORMED, "Token is not valid") from None
        return payload["sub"]

    def authenticate(self, token: str | None) -> str:
        """
        Gate for protected operations: verify the token and its subject.

        Raises:
            AuthError: token errors, or TOKEN_SUBJECT_UNKNOWN when the
                account was deleted after the token was issued
        """
        identity_id = self.verify_token(token)
        if self.repository.find_by_id(identity_id) is None:
            raise AuthError(ErrorKind.TOKEN_SUBJECT_UNKNOWN, "Account no longer exists")
        return identity_id

    def login(self, email: str, password: str) -> LoginResult:
        """
        Check credentials and issue a token.

        Raises:
            AuthError: UNKNOWN_EMAIL or WRONG_PASSWORD
        """
        normalized_email = normalize_email(email)
        identity = self.repository.find_by_email(normalized_email)
        if identity is None:
            logger.info("Login rejected, no account for %s", normalized_email)
            raise AuthError(
                ErrorKind.UNKNOWN_EMAIL, "No account found with this email", field="email"
            )

        if not self.credentials.verify_password(password, identity.password_hash):
            logger.info("Login rejected, wrong password for %s", normalized_email)
            raise AuthError(ErrorKind.WRONG_PASSWORD, "Incorrect password", field="password")

        token, expires_at = self.issue_token(identity.id)
        logger.info("Login successful: %s", identity.id)
        return LoginResult(token=token, expires_at=expires_at, profile=identity.public_view())

    def change_password(self, identity_id: str, current_password: str, new_password: str) -> None:
        """
        Replace the stored hash after checking the current password.

        Raises:
            NotFoundError: ACCOUNT_NOT_FOUND
            AuthError: WRONG_CURRENT_PASSWORD
            InputError: MISSING_FIELDS, WEAK_PASSWORD or PASSWORD_TOO_LONG
        """
        if not current_password or not new_password:
            raise InputError(
                ErrorKind.MISSING_FIELDS, "Current and new password are required"
            )

        identity = self.repository.find_by_id(identity_id)
        if identity is None:
            raise NotFoundError(ErrorKind.ACCOUNT_NOT_FOUND, "User not found")

        if not self.credentials.verify_password(current_password, identity.password_hash):
            raise AuthError(
                ErrorKind.WRONG_CURRENT_PASSWORD,
                "Current password is incorrect",
                field="current_password",
            )

        if len(new_password) < self.min_password_length:
            raise InputError(
                ErrorKind.WEAK_PASSWORD,
                f"New password must be at least {self.min_password_length} characters",
                field="new_password",
            )

        if not self.repository.update_password_hash(
            identity_id, self.credentials.hash_password(new_password, field="new_password")
        ):
            raise NotFoundError(ErrorKind.ACCOUNT_NOT_FOUND, "User not found")
        logger.info("Password changed: %s", identity_id)

    def get_profile(self, identity_id: str) -> dict:
        """Public profile of the authenticated account."""
        identity = self.repository.find_by_id(identity_id)
        if identity is None:
            raise NotFoundError(ErrorKind.ACCOUNT_NOT_FOUND, "User not found")
        return identity.public_view()

    def list_profiles(self) -> list[dict]:
        """Public profiles of every account, newest first."""
        return [identity.public_view() for identity in self.repository.list_identities()]
