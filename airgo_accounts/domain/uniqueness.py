"""
Uniqueness validator - Early feedback on duplicate identity fields.

The check is advisory: another registration may claim a value between this
lookup and the insert. The database unique constraints are authoritative.
"""

from dataclasses import dataclass

from .ports import IdentityRepository

CONFLICT_MESSAGES = {
    "email": "This email is already registered.",
    "phone": "This phone number is already registered.",
    "cnic_number": "This CNIC is already registered.",
}


@dataclass
class UniquenessValidator:
    """Looks up each provided identity field against persisted accounts."""

    repository: IdentityRepository

    def check_unique(
        self,
        email: str | None = None,
        phone: str | None = None,
        cnic_number: str | None = None,
    ) -> dict[str, str]:
        """
        Report which of the provided fields already belong to an account.

        Returns:
            Mapping of colliding field name to message; empty when all are free
        """
        candidates = {"email": email, "phone": phone, "cnic_number": cnic_number}
        conflicts: dict[str, str] = {}
        for field, value in candidates.items():
            if value and self.repository.exists_with(field, value):
                conflicts[field] = CONFLICT_MESSAGES[field]
        return conflicts
