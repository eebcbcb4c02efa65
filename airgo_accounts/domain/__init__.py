"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account provisioning and session authentication
logic. It defines its own port interfaces for infrastructure abstraction;
the only third-party imports are bcrypt and PyJWT.
"""

from .addresses import AddressService
from .credentials import CredentialManager
from .exceptions import (
    AccountError,
    AuthError,
    ConflictError,
    DeliveryError,
    ErrorKind,
    InputError,
    NotFoundError,
    OtpStateError,
)
from .models import Address, Identity, NewIdentity, OtpRecord, RegistrationData
from .otp import OtpLedger
from .ports import EmailSender, IdentityRepository, OtpStore
from .registration import RegistrationService
from .sessions import LoginResult, SessionService
from .uniqueness import UniquenessValidator

__all__ = [
    "AccountError",
    "Address",
    "AddressService",
    "AuthError",
    "ConflictError",
    "CredentialManager",
    "DeliveryError",
    "EmailSender",
    "ErrorKind",
    "Identity",
    "IdentityRepository",
    "InputError",
    "LoginResult",
    "NewIdentity",
    "NotFoundError",
    "OtpLedger",
    "OtpRecord",
    "OtpStateError",
    "OtpStore",
    "RegistrationData",
    "RegistrationService",
    "SessionService",
    "UniquenessValidator",
]
