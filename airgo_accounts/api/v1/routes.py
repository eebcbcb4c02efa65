"""
API v1 routes.

Defines REST endpoints for account registration, sessions and saved
addresses. Domain errors are not caught here; the application-level
AccountError handler turns them into responses.
"""

from fastapi import APIRouter, Depends, status

from airgo_accounts.api.dependencies import (
    get_address_service,
    get_current_identity_id,
    get_registration_service,
    get_session_service,
)
from airgo_accounts.api.models import (
    AddAddressRequest,
    AddressModel,
    ChangePasswordRequest,
    CheckUniqueRequest,
    CheckUniqueResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    SendOtpRequest,
    UpdateAddressRequest,
    VerifyOtpRequest,
)
from airgo_accounts.domain.addresses import AddressService
from airgo_accounts.domain.models import Address
from airgo_accounts.domain.registration import RegistrationService
from airgo_accounts.domain.sessions import SessionService

router = APIRouter(prefix="/auth", tags=["v1"])

_auth_errors = {
    401: {"model": ErrorResponse, "description": "Missing token or unknown account"},
    403: {"model": ErrorResponse, "description": "Malformed or expired token"},
}


def _addresses(addresses: list[Address]) -> list[AddressModel]:
    return [AddressModel(id=a.id, label=a.label, address=a.address) for a in addresses]


@router.post(
    "/check-unique",
    response_model=CheckUniqueResponse,
    summary="Check identity fields for duplicates",
    description="Advisory check of email, phone and CNIC against existing accounts.",
)
def check_unique(
    request_data: CheckUniqueRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> CheckUniqueResponse:
    errors = service.check_unique(
        email=request_data.email,
        phone=request_data.phone,
        cnic_number=request_data.cnic_number,
    )
    return CheckUniqueResponse(success=not errors, errors=errors)


@router.post(
    "/send-otp",
    response_model=MessageResponse,
    responses={
        409: {"model": ErrorResponse, "description": "Email already registered"},
        502: {"model": ErrorResponse, "description": "Email delivery failed"},
    },
    summary="Send a verification code",
    description="Issue a 6-digit code valid for 60 seconds and email it. "
    "Requesting again replaces the previous code.",
)
def send_otp(
    request_data: SendOtpRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> MessageResponse:
    email = service.request_code(request_data.email)
    return MessageResponse(message="OTP sent successfully", email=email)


@router.post(
    "/verify-otp",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse, "description": "Not requested, expired or invalid"}},
    summary="Verify the emailed code",
)
def verify_otp(
    request_data: VerifyOtpRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> MessageResponse:
    email = service.verify_code(request_data.email, request_data.otp)
    return MessageResponse(message="OTP verified successfully", email=email)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Missing fields or email not verified"},
        409: {"model": ErrorResponse, "description": "Email, phone or CNIC already registered"},
    },
    summary="Create an account",
    description="Requires a verified code for the email. The code is consumed on success.",
)
def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> RegisterResponse:
    identity_id = service.register(request_data.to_domain())
    return RegisterResponse(message="Account created successfully", id=identity_id)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse, "description": "Unknown email or wrong password"}},
    summary="Log in and receive a bearer token",
)
def login(
    request_data: LoginRequest,
    sessions: SessionService = Depends(get_session_service),
) -> LoginResponse:
    result = sessions.login(request_data.email, request_data.password)
    return LoginResponse(
        message="Login successful",
        token=result.token,
        expires_at=result.expires_at,
        user=ProfileResponse(**result.profile),
    )


@router.post(
    "/change-password",
    response_model=MessageResponse,
    responses={
        **_auth_errors,
        400: {"model": ErrorResponse, "description": "Wrong current password or weak password"},
    },
    summary="Change the account password",
    description="Previously issued tokens stay valid until they expire.",
)
def change_password(
    request_data: ChangePasswordRequest,
    identity_id: str = Depends(get_current_identity_id),
    sessions: SessionService = Depends(get_session_service),
) -> MessageResponse:
    sessions.change_password(
        identity_id, request_data.current_password, request_data.new_password
    )
    return MessageResponse(message="Password updated successfully")


@router.get(
    "/profile",
    response_model=ProfileResponse,
    responses=_auth_errors,
    summary="Get the authenticated profile",
)
def get_profile(
    identity_id: str = Depends(get_current_identity_id),
    sessions: SessionService = Depends(get_session_service),
) -> ProfileResponse:
    return ProfileResponse(**sessions.get_profile(identity_id))


@router.get(
    "/addresses",
    response_model=list[AddressModel],
    responses=_auth_errors,
    summary="List saved addresses",
)
def list_addresses(
    identity_id: str = Depends(get_current_identity_id),
    service: AddressService = Depends(get_address_service),
) -> list[AddressModel]:
    return _addresses(service.list_addresses(identity_id))


@router.post(
    "/addresses",
    response_model=list[AddressModel],
    status_code=status.HTTP_201_CREATED,
    responses=_auth_errors,
    summary="Add a saved address",
)
def add_address(
    request_data: AddAddressRequest,
    identity_id: str = Depends(get_current_identity_id),
    service: AddressService = Depends(get_address_service),
) -> list[AddressModel]:
    return _addresses(service.add_address(identity_id, request_data.label, request_data.address))


@router.put(
    "/addresses/{address_id}",
    response_model=list[AddressModel],
    responses={**_auth_errors, 404: {"model": ErrorResponse, "description": "Address not found"}},
    summary="Update a saved address",
)
def update_address(
    address_id: str,
    request_data: UpdateAddressRequest,
    identity_id: str = Depends(get_current_identity_id),
    service: AddressService = Depends(get_address_service),
) -> list[AddressModel]:
    return _addresses(
        service.update_address(
            identity_id, address_id, label=request_data.label, address=request_data.address
        )
    )


@router.delete(
    "/addresses/{address_id}",
    response_model=list[AddressModel],
    responses=_auth_errors,
    summary="Delete a saved address",
    description="Deleting an unknown id succeeds and returns the unchanged list.",
)
def delete_address(
    address_id: str,
    identity_id: str = Depends(get_current_identity_id),
    service: AddressService = Depends(get_address_service),
) -> list[AddressModel]:
    return _addresses(service.remove_address(identity_id, address_id))


@router.get(
    "/users",
    response_model=list[ProfileResponse],
    responses=_auth_errors,
    summary="List registered accounts",
    description="Every account's public profile, newest first. Requires a bearer token.",
    dependencies=[Depends(get_current_identity_id)],
)
def list_users(
    sessions: SessionService = Depends(get_session_service),
) -> list[ProfileResponse]:
    return [ProfileResponse(**profile) for profile in sessions.list_profiles()]
