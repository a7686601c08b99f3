"""In-memory rental request store."""

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from rental_engine.exceptions import (
    InvalidFinancialTerms,
    InvalidRentalTerms,
    PersistenceError,
    RequestNotFound,
)
from rental_engine.models.rental import RentalRequest
from rental_engine.store.base import RentalRequestStore
from rental_engine.store.serialization import apply_field_updates, from_record, to_record


@dataclass
class InMemoryRentalStore(RentalRequestStore):
    """Dict-backed store, used for tests, demos and the default config."""

    requests: dict[str, RentalRequest] = field(default_factory=dict)

    def list_all(self) -> list[RentalRequest]:
        return sorted(self.requests.values(), key=lambda r: r.created_at, reverse=True)

    def load_one(self, request_id: str) -> RentalRequest:
        try:
            return self.requests[request_id]
        except KeyError:
            raise RequestNotFound(f"Rental request {request_id} not found") from None

    def apply_partial_update(self, request_id: str, fields: Mapping[str, Any]) -> None:
        current = self.load_one(request_id)
        try:
            record = apply_field_updates(to_record(current), fields)
        except KeyError as exc:
            raise PersistenceError(f"Unknown field {exc.args[0]!r} for request {request_id}") from exc
        # Built completely before the swap, so a bad update leaves nothing behind
        try:
            updated = from_record(record)
        except (TypeError, ValueError, InvalidFinancialTerms, InvalidRentalTerms) as exc:
            raise PersistenceError(f"Invalid update for request {request_id}: {exc}") from exc
        self.requests[request_id] = updated

    def add(self, request: RentalRequest) -> RentalRequest:
        stored = replace(request, id=request.id or uuid.uuid4().hex)
        self.requests[stored.id] = stored
        return stored

    def summary(self) -> dict[str, int]:
        """Return request counts."""
        return {"rental_requests": len(self.requests)}
