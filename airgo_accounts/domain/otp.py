"""
OTP ledger - Time-boxed, single-use email verification codes.

Per-email state machine
=======================

    NoRecord -> Issued              (issue)
    Issued   -> Issued              (issue again: code replaced, window restarts)
    Issued   -> Verified            (check with the matching code)
    Issued   -> NoRecord            (check after expiry: record purged)
    Verified -> NoRecord            (consume_on_register)

At most one record exists per email. Records that are never checked again
are swept by ``issue`` at most once per TTL window, so the store only holds
codes requested within roughly the last two windows.

Every read-modify-write runs under the lock stripe owning that email, so
concurrent issue/check/consume calls for the same address never lose
updates. Different addresses only share a lock on a stripe collision.
"""

import logging
import secrets
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from .exceptions import ErrorKind, OtpStateError
from .models import OtpRecord
from .ports import OtpStore

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OtpLedger:
    """Issues, checks and consumes verification codes keyed by email."""

    def __init__(
        self,
        store: OtpStore,
        ttl_seconds: int = 60,
        code_length: int = 6,
        lock_stripes: int = 64,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._ttl = timedelta(seconds=ttl_seconds)
        self._code_length = code_length
        self._clock = clock
        self._locks = [threading.Lock() for _ in range(max(1, lock_stripes))]
        self._sweep_lock = threading.Lock()
        self._last_sweep: datetime | None = None

    @property
    def ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    def _lock_for(self, email: str) -> threading.Lock:
        return self._locks[hash(email) % len(self._locks)]

    def _generate_code(self) -> str:
        """Uniformly random, zero-padded numeric code."""
        return str(secrets.randbelow(10**self._code_length)).zfill(self._code_length)

    def issue(self, email: str) -> str:
        """
        Store a fresh code for ``email``, replacing any previous record.

        Returns:
            The code, for hand-off to the email collaborator
        """
        code = self._generate_code()
        with self._lock_for(email):
            self._store.put(
                email, OtpRecord(code=code, expires_at=self._clock() + self._ttl, verified=False)
            )
        self._maybe_sweep()
        logger.info("Verification code issued for %s", email)
        return code

    def _maybe_sweep(self) -> None:
        """Run purge_expired if a full TTL has passed since the last sweep."""
        if not self._sweep_lock.acquire(blocking=False):
            return
        try:
            now = self._clock()
            if self._last_sweep is not None and now - self._last_sweep < self._ttl:
                return
            self._last_sweep = now
        finally:
            self._sweep_lock.release()
        self.purge_expired()

    def check(self, email: str, code: str) -> None:
        """
        Mark the record verified if ``code`` matches and is still live.

        A mismatch keeps the record so the user can retry until expiry.

        Raises:
            OtpStateError: OTP_NOT_REQUESTED, OTP_EXPIRED or OTP_MISMATCH
        """
        with self._lock_for(email):
            record = self._store.get(email)
            if record is None:
                raise OtpStateError(ErrorKind.OTP_NOT_REQUESTED, "OTP not requested", field="otp")

            if self._clock() > record.expires_at:
                self._store.delete(email)
                logger.info("Verification code expired for %s", email)
                raise OtpStateError(ErrorKind.OTP_EXPIRED, "OTP expired", field="otp")

            if not secrets.compare_digest(record.code.encode(), str(code).encode()):
                raise OtpStateError(ErrorKind.OTP_MISMATCH, "Invalid OTP", field="otp")

            record.verified = True
            self._store.put(email, record)
        logger.info("Email verified: %s", email)

    def consume_on_register(self, email: str) -> OtpRecord | None:
        """
        Take the verified record for ``email`` as part of a registration.

        Returns:
            The removed record if it was verified and unexpired; otherwise
            None, with the stored record left untouched.
        """
        with self._lock_for(email):
            record = self._store.get(email)
            if record is None or not record.verified or self._clock() > record.expires_at:
                return None
            self._store.delete(email)
            return record

    def restore(self, email: str, record: OtpRecord) -> bool:
        """
        Put back a record taken by consume_on_register after a failed write.

        A record issued in the meantime wins; the old one is dropped.

        Returns:
            True if the record was restored
        """
        with self._lock_for(email):
            if self._store.get(email) is not None:
                return False
            self._store.put(email, record)
            return True

    def purge_expired(self) -> int:
        """Drop every expired record. Returns how many were removed."""
        now = self._clock()
        purged = 0
        for email, _ in self._store.items():
            with self._lock_for(email):
                record = self._store.get(email)
                if record is not None and now > record.expires_at:
                    self._store.delete(email)
                    purged += 1
        if purged:
            logger.info("Purged %d expired verification code(s)", purged)
        return purged
