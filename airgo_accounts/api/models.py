"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Request models forbid unknown fields so malformed bodies are rejected at the
boundary, before any domain logic runs.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from airgo_accounts.config.settings import get_settings
from airgo_accounts.domain.credentials import MAX_PASSWORD_BYTES
from airgo_accounts.domain.models import RegistrationData

NAME_PATTERN = r"^[A-Za-z ]{3,15}$"


def _check_password_bytes(value: str) -> str:
    if len(value.encode()) > MAX_PASSWORD_BYTES:
        raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class StrictRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class CheckUniqueRequest(StrictRequest):
    """Any subset of the unique identity fields."""

    email: EmailStr | None = None
    phone: str | None = None
    cnic_number: str | None = None


class CheckUniqueResponse(BaseModel):
    success: bool
    errors: dict[str, str] = Field(default_factory=dict)


class SendOtpRequest(StrictRequest):
    email: EmailStr


class VerifyOtpRequest(StrictRequest):
    email: EmailStr
    otp: str = Field(..., description="Numeric verification code of the configured length")

    @field_validator("otp")
    @classmethod
    def otp_format(cls, value: str) -> str:
        length = get_settings().otp_length
        if len(value) != length or not (value.isascii() and value.isdigit()):
            raise ValueError(f"must be {length} digits")
        return value


class RegisterRequest(StrictRequest):
    """Full registration payload submitted after the email is verified."""

    full_name: str = Field(..., pattern=NAME_PATTERN, description="3-15 letters")
    father_name: str = Field(..., pattern=NAME_PATTERN, description="3-15 letters")
    email: EmailStr
    password: str = Field(..., min_length=6)
    cnic_number: str = Field(..., min_length=1)
    cnic_image: str = Field("", description="Reference to the uploaded CNIC image")
    country_code: str = ""
    phone: str = Field(..., min_length=1)
    country: str = ""
    city: str = ""
    dob: str = ""
    education_level: str = ""

    @field_validator("password")
    @classmethod
    def password_bytes(cls, value: str) -> str:
        return _check_password_bytes(value)

    def to_domain(self) -> RegistrationData:
        return RegistrationData(**self.model_dump())


class RegisterResponse(BaseModel):
    message: str
    id: str


class LoginRequest(StrictRequest):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AddressModel(BaseModel):
    id: str
    label: str
    address: str


class ProfileResponse(BaseModel):
    id: str
    full_name: str
    father_name: str
    email: str
    cnic_number: str
    cnic_image: str
    country_code: str
    phone: str
    country: str
    city: str
    dob: str
    education_level: str
    addresses: list[AddressModel] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LoginResponse(BaseModel):
    message: str
    token: str
    expires_at: datetime
    user: ProfileResponse


class ChangePasswordRequest(StrictRequest):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)

    @field_validator("new_password")
    @classmethod
    def new_password_bytes(cls, value: str) -> str:
        return _check_password_bytes(value)


class AddAddressRequest(StrictRequest):
    label: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)


class UpdateAddressRequest(StrictRequest):
    label: str | None = None
    address: str | None = None


class MessageResponse(BaseModel):
    message: str
    email: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
    kind: str | None = None
    field: str | None = None
