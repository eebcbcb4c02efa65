"""
In-memory OTP store adapter - Implements OtpStore protocol.

Records live only as long as the process. The ledger owns locking; this
store is a plain dictionary and is created once per application lifespan.
"""

from airgo_accounts.domain.models import OtpRecord


class InMemoryOtpStore:
    """
    Implements OtpStore protocol with a dict keyed by normalized email.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._records: dict[str, OtpRecord] = {}

    def get(self, email: str) -> OtpRecord | None:
        return self._records.get(email)

    def put(self, email: str, record: OtpRecord) -> None:
        self._records[email] = record

    def delete(self, email: str) -> None:
        self._records.pop(email, None)

    def items(self) -> list[tuple[str, OtpRecord]]:
        # Snapshot so callers may delete while iterating.
        return list(self._records.items())

    def __len__(self) -> int:
        return len(self._records)
