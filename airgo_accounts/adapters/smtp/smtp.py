"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers verification codes through an SMTP relay (STARTTLS + login).
Transport failures are reported as DeliveryError; the code itself is never
written to the log.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from airgo_accounts.domain.exceptions import DeliveryError, ErrorKind

logger = logging.getLogger(__name__)


class SmtpEmailSender:
    """
    Implements EmailSender protocol via smtplib.

    Uses structural subtyping - no explicit inheritance from Protocol.
    A new connection is opened per message.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str,
        use_tls: bool = True,
        ttl_seconds: int = 60,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._sender = sender
        self._use_tls = use_tls
        self._ttl_seconds = ttl_seconds
        self._timeout = timeout

    def build_message(self, email: str, code: str) -> MIMEMultipart:
        """Plain-text and HTML alternatives; the HTML part shows the code in bold."""
        msg = MIMEMultipart("alternative")
        msg.attach(
            MIMEText(
                f"Your AirGo verification code is: {code}\n"
                f"It is valid for {self._ttl_seconds} seconds.",
                "plain",
            )
        )
        msg.attach(
            MIMEText(
                f"<p>Your AirGo verification code is: <b>{code}</b></p>"
                f"<p>It is valid for {self._ttl_seconds} seconds.</p>",
                "html",
            )
        )
        msg["Subject"] = "Your AirGo OTP Code"
        msg["From"] = self._sender
        msg["To"] = email
        return msg

    def send_verification_code(self, email: str, code: str) -> None:
        """
        Send the code to ``email``.

        Raises:
            DeliveryError: connection, authentication or send failure
        """
        msg = self.build_message(email, code)
        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
                if self._use_tls:
                    server.starttls()
                if self._username:
                    server.login(self._username, self._password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP delivery to %s failed: %s", email, type(e).__name__)
            raise DeliveryError(
                ErrorKind.EMAIL_DELIVERY_FAILED, "Failed to send OTP", field="email"
            ) from e
        logger.info("Verification email sent to %s", email)
