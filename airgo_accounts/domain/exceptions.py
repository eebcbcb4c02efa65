"""
Domain exceptions - Semantic error types for account provisioning.

Every error carries an explicit ErrorKind plus a human-readable message.
Messages never include passwords, verification codes or tokens. The HTTP
layer maps exception classes to status codes; the domain does not.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Specific failure reasons surfaced to callers."""

    MISSING_FIELDS = "missing_fields"
    WEAK_PASSWORD = "weak_password"
    PASSWORD_TOO_LONG = "password_too_long"

    ALREADY_REGISTERED = "already_registered"
    DUPLICATE_EMAIL = "duplicate_email"
    DUPLICATE_FIELD = "duplicate_field"

    UNKNOWN_EMAIL = "unknown_email"
    WRONG_PASSWORD = "wrong_password"
    WRONG_CURRENT_PASSWORD = "wrong_current_password"
    TOKEN_MISSING = "token_missing"
    TOKEN_MALFORMED = "token_malformed"
    TOKEN_EXPIRED = "token_expired"
    TOKEN_SUBJECT_UNKNOWN = "token_subject_unknown"

    OTP_NOT_REQUESTED = "otp_not_requested"
    OTP_EXPIRED = "otp_expired"
    OTP_MISMATCH = "otp_mismatch"
    EMAIL_NOT_VERIFIED = "email_not_verified"

    ACCOUNT_NOT_FOUND = "account_not_found"
    ADDRESS_NOT_FOUND = "address_not_found"

    EMAIL_DELIVERY_FAILED = "email_delivery_failed"


class AccountError(Exception):
    """Base class for account domain errors."""

    def __init__(self, kind: ErrorKind, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.field = field

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.value!r}, {self.message!r})"


class InputError(AccountError):
    """Missing or malformed input; retry with corrected data."""


class ConflictError(AccountError):
    """Email, phone or national-id already belongs to an account."""


class AuthError(AccountError):
    """Wrong password, or a missing, malformed or expired token."""


class OtpStateError(AccountError):
    """Verification code not requested, expired, mismatched or not verified."""


class NotFoundError(AccountError):
    """Unknown account or address."""


class DeliveryError(AccountError):
    """Outbound email could not be delivered."""
