"""
Domain models - Identity records and their embedded addresses.

Plain dataclasses shared between the domain services and the repository
adapters. The store assigns identity and address ids.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime


@dataclass
class Address:
    """A saved delivery address owned by exactly one identity."""

    id: str
    label: str
    address: str


@dataclass
class OtpRecord:
    """
    Ephemeral verification code issued to one email address.

    Never persisted with the identity. ``code`` is kept as a string so
    leading zeros survive.
    """

    code: str
    expires_at: datetime
    verified: bool = False


@dataclass
class RegistrationData:
    """Fields collected by the registration form."""

    full_name: str
    father_name: str
    email: str
    password: str
    cnic_number: str
    cnic_image: str
    country_code: str
    phone: str
    country: str
    city: str
    dob: str
    education_level: str

    def missing_required(self) -> list[str]:
        """Names of required fields that are absent or blank."""
        required = ("email", "password", "full_name", "cnic_number", "phone")
        return [name for name in required if not (getattr(self, name) or "").strip()]


@dataclass
class NewIdentity:
    """Identity payload handed to the repository for insertion."""

    full_name: str
    father_name: str
    email: str
    password_hash: str
    cnic_number: str
    cnic_image: str
    country_code: str
    phone: str
    country: str
    city: str
    dob: str
    education_level: str


@dataclass
class Identity:
    """A persisted account."""

    id: str
    full_name: str
    father_name: str
    email: str
    password_hash: str
    cnic_number: str
    cnic_image: str
    country_code: str
    phone: str
    country: str
    city: str
    dob: str
    education_level: str
    addresses: list[Address] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def public_view(self) -> dict:
        """Profile projection safe to return to clients (no password hash)."""
        data = asdict(self)
        data.pop("password_hash")
        return data
