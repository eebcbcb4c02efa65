"""
Registration domain service - Email-verified account provisioning.

Registration Flow
=================

    FieldsCollected -> UniquenessPassed -> OTPRequested -> OTPVerified -> Persisted

1. check_unique:  advisory duplicate lookup for email / phone / CNIC
2. request_code:  issue a 6-digit code and hand it to the email sender
3. verify_code:   mark the code verified (retries allowed until expiry)
4. register:      consume the verified code, hash the password and insert

The insert is a single atomic write guarded by the database unique
constraints. If it fails after the code was consumed, the code is put
back so the user does not have to verify again.
"""

import logging
from dataclasses import dataclass

from .credentials import CredentialManager, check_password_length
from .exceptions import ConflictError, DeliveryError, ErrorKind, InputError, OtpStateError
from .models import NewIdentity, RegistrationData
from .otp import OtpLedger
from .ports import EmailSender, IdentityRepository
from .uniqueness import UniquenessValidator

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


@dataclass
class RegistrationService:
    """
    Domain service for account registration.

    Orchestrates uniqueness checks, code issuance and verification,
    password hashing and identity persistence.
    """

    repository: IdentityRepository
    email_sender: EmailSender
    ledger: OtpLedger
    credentials: CredentialManager

    @property
    def validator(self) -> UniquenessValidator:
        return UniquenessValidator(self.repository)

    def check_unique(
        self,
        email: str | None = None,
        phone: str | None = None,
        cnic_number: str | None = None,
    ) -> dict[str, str]:
        """Advisory duplicate check; see UniquenessValidator."""
        if email:
            email = normalize_email(email)
        return self.validator.check_unique(email=email, phone=phone, cnic_number=cnic_number)

    def request_code(self, email: str) -> str:
        """
        Issue a verification code and send it to ``email``.

        The record survives a delivery failure so a resend works at once.

        Returns:
            Normalized email address

        Raises:
            ConflictError: ALREADY_REGISTERED
            DeliveryError: the email sender failed
        """
        normalized_email = normalize_email(email)
        if self.validator.check_unique(email=normalized_email):
            raise ConflictError(
                ErrorKind.ALREADY_REGISTERED, "This email is already registered", field="email"
            )

        code = self.ledger.issue(normalized_email)
        try:
            self.email_sender.send_verification_code(normalized_email, code)
        except DeliveryError:
            logger.warning("Verification email delivery failed for %s", normalized_email)
            raise
        return normalized_email

    def verify_code(self, email: str, code: str) -> str:
        """
        Check a submitted code.

        Raises:
            OtpStateError: OTP_NOT_REQUESTED, OTP_EXPIRED or OTP_MISMATCH
        """
        normalized_email = normalize_email(email)
        self.ledger.check(normalized_email, code)
        return normalized_email

    def register(self, data: RegistrationData) -> str:
        """
        Create the account for a verified email.

        Returns:
            The new identity id

        Raises:
            InputError: MISSING_FIELDS or PASSWORD_TOO_LONG
            ConflictError: DUPLICATE_EMAIL, or DUPLICATE_FIELD naming the column
            OtpStateError: EMAIL_NOT_VERIFIED
        """
        missing = data.missing_required()
        if missing:
            raise InputError(
                ErrorKind.MISSING_FIELDS,
                "Missing required fields: " + ", ".join(missing),
                field=missing[0],
            )
        check_password_length(data.password)

        email = normalize_email(data.email)

        if self.repository.find_by_email(email) is not None:
            raise ConflictError(ErrorKind.DUPLICATE_EMAIL, "Email already registered", field="email")

        otp_record = self.ledger.consume_on_register(email)
        if otp_record is None:
            raise OtpStateError(
                ErrorKind.EMAIL_NOT_VERIFIED,
                "Please verify your email before registering",
                field="email",
            )

        try:
            identity = NewIdentity(
                full_name=data.full_name.strip(),
                father_name=data.father_name.strip(),
                email=email,
                password_hash=self.credentials.hash_password(data.password),
                cnic_number=data.cnic_number.strip(),
                cnic_image=data.cnic_image,
                country_code=data.country_code,
                phone=data.phone.strip(),
                country=data.country,
                city=data.city,
                dob=data.dob,
                education_level=data.education_level,
            )
            identity_id = self.repository.insert_identity(identity)
        except Exception:
            self.ledger.restore(email, otp_record)
            raise

        logger.info("New account registered: %s (%s)", email, identity_id)
        return identity_id
