"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from typing import Protocol

from .models import Address, Identity, NewIdentity, OtpRecord


class IdentityRepository(Protocol):
    """Port interface for identity persistence."""

    def find_by_email(self, email: str) -> Identity | None:
        """Return the identity registered with this email, if any."""
        ...

    def find_by_id(self, identity_id: str) -> Identity | None:
        """Return the identity with this id (addresses included), if any."""
        ...

    def list_identities(self) -> list[Identity]:
        """Every identity, newest first."""
        ...

    def exists_with(self, field: str, value: str) -> bool:
        """
        Check whether any identity holds ``value`` in a unique field.

        Args:
            field: One of "email", "phone", "cnic_number"
            value: Exact value to look up
        """
        ...

    def insert_identity(self, identity: NewIdentity) -> str:
        """
        Persist a new identity in a single atomic write.

        Returns:
            The store-assigned identity id

        Raises:
            ConflictError: A unique constraint was violated. ``field`` names
                the offending column.
        """
        ...

    def update_password_hash(self, identity_id: str, password_hash: str) -> bool:
        """Replace the stored hash. Returns False if the identity is gone."""
        ...

    def delete_identity(self, identity_id: str) -> bool:
        """
        Delete an identity and, by cascade, its addresses.

        Administrative removal; no HTTP route calls it.
        """
        ...

    def list_addresses(self, identity_id: str) -> list[Address] | None:
        """Addresses in insertion order, or None for an unknown identity."""
        ...

    def add_address(self, identity_id: str, label: str, address: str) -> list[Address] | None:
        """Append an address. Returns the updated list, or None for an unknown identity."""
        ...

    def update_address(
        self, identity_id: str, address_id: str, label: str | None, address: str | None
    ) -> bool:
        """
        Update an address owned by ``identity_id``.

        ``None`` fields keep their stored value.

        Returns:
            True if a row owned by that identity was updated
        """
        ...

    def remove_address(self, identity_id: str, address_id: str) -> bool:
        """Delete an address owned by ``identity_id``. Returns whether a row was deleted."""
        ...


class OtpStore(Protocol):
    """Port interface for ephemeral verification-code records keyed by email."""

    def get(self, email: str) -> OtpRecord | None: ...

    def put(self, email: str, record: OtpRecord) -> None: ...

    def delete(self, email: str) -> None: ...

    def items(self) -> list[tuple[str, OtpRecord]]: ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_verification_code(self, email: str, code: str) -> None:
        """
        Send verification code to email address.

        Args:
            email: Recipient email address
            code: 6-digit verification code

        Raises:
            DeliveryError: The message could not be handed off
        """
        ...
