"""Read-side helpers for the admin dashboard."""

from collections.abc import Iterable

from rental_engine.lifecycle.gate import DocumentVerificationGate
from rental_engine.models.rental import RentalRequest, RentalStatus


def filter_by_status(
    requests: Iterable[RentalRequest], status: RentalStatus | None = None
) -> list[RentalRequest]:
    """Keep requests in ``status``; ``None`` keeps all."""
    if status is None:
        return list(requests)
    return [r for r in requests if r.status == status]


def status_counts(requests: Iterable[RentalRequest]) -> dict[str, int]:
    """Number of requests per status, every status present."""
    counts = {status.value: 0 for status in RentalStatus}
    for request in requests:
        counts[request.status.value] += 1
    return counts


def awaiting_documents(requests: Iterable[RentalRequest]) -> list[RentalRequest]:
    """Requests under document verification whose gate is still unsatisfied."""
    return [
        r
        for r in requests
        if r.status == RentalStatus.DOCUMENT_VERIFICATION
        and not DocumentVerificationGate(r.documents).is_satisfied()
    ]
