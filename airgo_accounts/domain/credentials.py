"""
Credential manager - bcrypt password hashing and verification.

bcrypt salts every hash and compares in constant time, so both
functions are pure over the bytes they are given. bcrypt only reads the
first 72 bytes of a password; longer passwords are rejected rather than
silently truncated.
"""

from dataclasses import dataclass

import bcrypt

from .exceptions import ErrorKind, InputError

MAX_PASSWORD_BYTES = 72


def check_password_length(password: str, field: str = "password") -> None:
    """
    Reject passwords bcrypt cannot hash in full.

    Raises:
        InputError: PASSWORD_TOO_LONG when the UTF-8 encoding exceeds 72 bytes
    """
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        raise InputError(
            ErrorKind.PASSWORD_TOO_LONG,
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
            field=field,
        )


@dataclass(frozen=True)
class CredentialManager:
    """Hashes and verifies passwords with a fixed bcrypt cost factor."""

    cost: int = 10

    def hash_password(self, password: str, field: str = "password") -> str:
        """
        Hash password using bcrypt.

        Empty passwords are accepted here; upstream validation rejects them.

        Raises:
            InputError: PASSWORD_TOO_LONG for more than 72 UTF-8 bytes
        """
        check_password_length(password, field)
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.cost)).decode()

    def verify_password(self, password: str, password_hash: str) -> bool:
        """
        Check a plaintext password against a stored bcrypt hash.

        Returns False for a mismatch, for a malformed or empty stored hash,
        and for a password too long to have been hashed.
        """
        if not password_hash or len(password.encode()) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(password.encode(), password_hash.encode())
        except ValueError:
            return False
