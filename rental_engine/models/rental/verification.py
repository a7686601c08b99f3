"""Advisory result of an automated document check."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from rental_engine.exceptions import (
    VerificationError,
    VerificationRejected,
    VerificationUnavailable,
)

UNAVAILABLE_MESSAGE = "verification service unavailable"


@dataclass(frozen=True)
class VerificationOutcome:
    """Outcome of one verification call. Never persisted on the aggregate."""

    is_valid: bool
    matched_name: str | None = None
    error: str | None = None
    unavailable: bool = False  # Transport failure, as opposed to a rejection
    checked_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def valid(cls, matched_name: str | None = None) -> VerificationOutcome:
        return cls(is_valid=True, matched_name=matched_name)

    @classmethod
    def rejected(cls, error: str) -> VerificationOutcome:
        return cls(is_valid=False, error=error)

    @classmethod
    def service_unavailable(cls) -> VerificationOutcome:
        return cls(is_valid=False, error=UNAVAILABLE_MESSAGE, unavailable=True)

    def to_error(self) -> VerificationError | None:
        """Typed error for a failed outcome, ``None`` when valid."""
        if self.is_valid:
            return None
        if self.unavailable:
            return VerificationUnavailable(self.error or UNAVAILABLE_MESSAGE)
        return VerificationRejected(self.error or "document rejected by verification service")
