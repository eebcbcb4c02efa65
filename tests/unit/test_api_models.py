"""
Unit tests for API request/response models.

Tests Pydantic model validation at the HTTP boundary.
"""

import pytest
from pydantic import ValidationError

from airgo_accounts.api.models import (
    AddAddressRequest,
    ChangePasswordRequest,
    CheckUniqueRequest,
    ErrorResponse,
    ProfileResponse,
    RegisterRequest,
    UpdateAddressRequest,
    VerifyOtpRequest,
)
from airgo_accounts.config.settings import Settings
from airgo_accounts.domain.models import RegistrationData


def register_payload(**overrides) -> dict:
    payload = {
        "full_name": "Ayesha Khan",
        "father_name": "Imran Khan",
        "email": "a@x.com",
        "password": "secret123",
        "cnic_number": "35202-1234567-1",
        "phone": "3001234567",
    }
    payload.update(overrides)
    return payload


class TestRegisterRequest:
    """Tests for RegisterRequest model."""

    def test_valid_register_request(self) -> None:
        request = RegisterRequest(**register_payload())
        assert request.email == "a@x.com"
        assert request.cnic_image == ""

    def test_to_domain(self) -> None:
        data = RegisterRequest(**register_payload(city="Lahore")).to_domain()

        assert isinstance(data, RegistrationData)
        assert data.city == "Lahore"
        assert data.missing_required() is None

    def test_invalid_email_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(**register_payload(email="not-an-email"))
        assert "email" in str(exc_info.value)

    def test_password_minimum_length(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(**register_payload(password="12345"))
        assert "password" in str(exc_info.value)

    def test_password_exactly_6_chars(self) -> None:
        assert RegisterRequest(**register_payload(password="123456")).password == "123456"

    def test_password_72_bytes_accepted(self) -> None:
        assert RegisterRequest(**register_payload(password="a" * 72)).password == "a" * 72

    @pytest.mark.parametrize("password", ["a" * 73, "é" * 37])
    def test_password_over_72_bytes_rejected(self, password: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(**register_payload(password=password))
        assert "72 bytes" in str(exc_info.value)

    @pytest.mark.parametrize("name", ["Al", "Ayesha Khan Siddiqui", "Ayesha2", "O'Brien"])
    def test_name_format(self, name: str) -> None:
        """Names are 3-15 letters or spaces."""
        with pytest.raises(ValidationError):
            RegisterRequest(**register_payload(full_name=name))

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(**register_payload(role="admin"))

    @pytest.mark.parametrize("field", ["email", "password", "cnic_number", "phone", "full_name"])
    def test_missing_required_field(self, field: str) -> None:
        payload = register_payload()
        del payload[field]
        with pytest.raises(ValidationError):
            RegisterRequest(**payload)


class TestVerifyOtpRequest:
    @pytest.mark.parametrize("otp", ["012345", "999999"])
    def test_six_digit_codes_accepted(self, otp: str) -> None:
        assert VerifyOtpRequest(email="a@x.com", otp=otp).otp == otp

    @pytest.mark.parametrize("otp", ["12345", "1234567", "12a456", ""])
    def test_malformed_codes_rejected(self, otp: str) -> None:
        with pytest.raises(ValidationError):
            VerifyOtpRequest(email="a@x.com", otp=otp)

    def test_length_follows_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            "airgo_accounts.api.models.get_settings", lambda: Settings(otp_length=8)
        )

        assert VerifyOtpRequest(email="a@x.com", otp="01234567").otp == "01234567"
        with pytest.raises(ValidationError):
            VerifyOtpRequest(email="a@x.com", otp="012345")


class TestSmallRequests:
    def test_check_unique_fields_optional(self) -> None:
        request = CheckUniqueRequest(phone="3001234567")
        assert request.email is None
        assert request.cnic_number is None

    def test_change_password_requires_both(self) -> None:
        with pytest.raises(ValidationError):
            ChangePasswordRequest(current_password="secret123", new_password="")

    def test_change_password_new_password_over_72_bytes(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ChangePasswordRequest(current_password="secret123", new_password="a" * 73)
        assert "new_password" in str(exc_info.value)

    def test_add_address_whitespace_is_blank(self) -> None:
        with pytest.raises(ValidationError):
            AddAddressRequest(label="   ", address="1 Main St")

    def test_update_address_partial(self) -> None:
        request = UpdateAddressRequest(label="Home")
        assert request.address is None


class TestResponses:
    def test_profile_from_public_view(self) -> None:
        profile = ProfileResponse(
            id="abc",
            full_name="Ayesha Khan",
            father_name="Imran Khan",
            email="a@x.com",
            cnic_number="35202-1234567-1",
            cnic_image="",
            country_code="+92",
            phone="3001234567",
            country="Pakistan",
            city="Lahore",
            dob="1998-04-12",
            education_level="Bachelors",
            addresses=[{"id": "1", "label": "Home", "address": "1 Main St"}],
        )
        assert profile.addresses[0].label == "Home"
        assert "password_hash" not in profile.model_dump()

    def test_error_response(self) -> None:
        error = ErrorResponse(detail="Address not found", kind="address_not_found")
        assert error.model_dump() == {
            "detail": "Address not found",
            "kind": "address_not_found",
            "field": None,
        }
