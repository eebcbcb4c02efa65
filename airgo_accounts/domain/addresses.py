"""
Address service - Ownership-scoped CRUD over an account's saved addresses.

``identity_id`` always comes from the authenticated session, never from the
request body, and every repository call is scoped by it. Removing an
unknown address id is a silent no-op while updating one is NotFound.
"""

from dataclasses import dataclass

from .exceptions import ErrorKind, InputError, NotFoundError
from .models import Address
from .ports import IdentityRepository


def _account_not_found() -> NotFoundError:
    return NotFoundError(ErrorKind.ACCOUNT_NOT_FOUND, "User not found")


@dataclass
class AddressService:
    repository: IdentityRepository

    def list_addresses(self, identity_id: str) -> list[Address]:
        addresses = self.repository.list_addresses(identity_id)
        if addresses is None:
            raise _account_not_found()
        return addresses

    def add_address(self, identity_id: str, label: str, address: str) -> list[Address]:
        """Append an address and return the full updated list."""
        label = (label or "").strip()
        address = (address or "").strip()
        if not label or not address:
            raise InputError(ErrorKind.MISSING_FIELDS, "Label and address required")

        addresses = self.repository.add_address(identity_id, label, address)
        if addresses is None:
            raise _account_not_found()
        return addresses

    def update_address(
        self,
        identity_id: str,
        address_id: str,
        label: str | None = None,
        address: str | None = None,
    ) -> list[Address]:
        """
        Update one of the owner's addresses; blank fields keep prior values.

        Raises:
            NotFoundError: ADDRESS_NOT_FOUND if ``address_id`` is not in the
                owner's list, ACCOUNT_NOT_FOUND for an unknown owner
        """
        label = (label or "").strip() or None
        address = (address or "").strip() or None

        if not self.repository.update_address(identity_id, address_id, label, address):
            # Distinguish a vanished owner from a foreign/unknown address id.
            self.list_addresses(identity_id)
            raise NotFoundError(ErrorKind.ADDRESS_NOT_FOUND, "Address not found")
        return self.list_addresses(identity_id)

    def remove_address(self, identity_id: str, address_id: str) -> list[Address]:
        """Delete one of the owner's addresses; unknown ids are ignored."""
        self.repository.remove_address(identity_id, address_id)
        return self.list_addresses(identity_id)
