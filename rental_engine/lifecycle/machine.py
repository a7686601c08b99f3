"""Rental lifecycle state machine.

Validates and applies status, payment and document changes for one
rental request. Every change that passes its guards becomes exactly one
``apply_partial_update`` call; the in-memory aggregate is only replaced
once that write has succeeded.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Callable, Generic, Protocol, TypeVar

from rental_engine.exceptions import (
    ConfigurationError,
    DocumentsNotVerified,
    InvalidDocumentFormat,
    InvalidFinancialTerms,
    InvalidRentalTerms,
    InvalidTransition,
    PersistenceError,
    RefundNotEligible,
    RentalEngineError,
    RequestNotFound,
    SinkError,
    TermsLocked,
)
from rental_engine.lifecycle.gate import DocumentVerificationGate
from rental_engine.models.base import Event
from rental_engine.models.rental import (
    DocumentKind,
    FinancialTerms,
    PaymentStatus,
    RentalRequest,
    RentalStatus,
    RentalTerms,
    VerificationOutcome,
)
from rental_engine.store import serialization
from rental_engine.store.base import RentalRequestStore
from rental_engine.verification.client import VerificationClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

EVENT_SOURCE = "rental-engine"
DEFAULT_TOPIC = "rentals.lifecycle"

STATUS_TRANSITIONS: dict[RentalStatus, frozenset[RentalStatus]] = {
    RentalStatus.PENDING: frozenset(
        {RentalStatus.DOCUMENT_VERIFICATION, RentalStatus.REJECTED, RentalStatus.CANCELLED}
    ),
    RentalStatus.DOCUMENT_VERIFICATION: frozenset(
        {RentalStatus.APPROVED, RentalStatus.REJECTED, RentalStatus.CANCELLED}
    ),
    RentalStatus.APPROVED: frozenset({RentalStatus.DELIVERED, RentalStatus.CANCELLED}),
    RentalStatus.DELIVERED: frozenset({RentalStatus.RETURNED}),
    RentalStatus.RETURNED: frozenset(),
    RentalStatus.REJECTED: frozenset(),
    RentalStatus.CANCELLED: frozenset(),
}

PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.ADVANCE_PAID}),
    PaymentStatus.ADVANCE_PAID: frozenset({PaymentStatus.FULLY_PAID, PaymentStatus.REFUNDED}),
    PaymentStatus.FULLY_PAID: frozenset({PaymentStatus.REFUNDED}),
    PaymentStatus.REFUNDED: frozenset(),
}

# A refund only makes sense once the rental is over
REFUND_ELIGIBLE_STATUSES = frozenset(
    {RentalStatus.REJECTED, RentalStatus.CANCELLED, RentalStatus.RETURNED}
)

TERMS_EDITABLE_STATUSES = frozenset({RentalStatus.PENDING, RentalStatus.DOCUMENT_VERIFICATION})


class EventSink(Protocol):
    def send(self, topic: str, record: Any, key: str | None = None) -> None: ...


@dataclass
class OperationResult(Generic[T]):
    """Outcome of an admin command: a value, an error, or both.

    ``error`` is one of the typed ``RentalEngineError`` subclasses; an
    automated verification that failed carries its outcome as ``value``
    alongside the error.
    """

    value: T | None = None
    error: RentalEngineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def retryable(self) -> bool:
        return self.error is not None and self.error.retryable

    def unwrap(self) -> T:
        """Return the value, raising the error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


class RentalLifecycle:
    """State machine bound to one rental request.

    Parameters
    ----------
    request : RentalRequest
        Current version of the aggregate.
    store : RentalRequestStore
        Where every confirmed change is written.
    verifier : VerificationClient | None
        Automated document checks; only needed for
        ``run_automated_verification``.
    sink : EventSink | None
        Receives one ``Event`` per persisted change.
    clock : Callable[[], datetime]
        Source of ``updated_at`` and note timestamps.
    outcomes : dict | None
        Advisory verification cache shared across lifecycles of the
        same request.
    topic : str
        Topic lifecycle events are sent to.
    """

    def __init__(
        self,
        request: RentalRequest,
        store: RentalRequestStore,
        verifier: VerificationClient | None = None,
        sink: EventSink | None = None,
        clock: Callable[[], datetime] = datetime.now,
        outcomes: dict[DocumentKind, VerificationOutcome] | None = None,
        topic: str = DEFAULT_TOPIC,
    ) -> None:
        self._request = request
        self._store = store
        self._verifier = verifier
        self._sink = sink
        self._clock = clock
        self._topic = topic
        self._gate = DocumentVerificationGate(request.documents, outcomes)

    @property
    def request(self) -> RentalRequest:
        return self._request

    @property
    def gate(self) -> DocumentVerificationGate:
        return self._gate

    @property
    def financials(self) -> FinancialTerms:
        return self._request.rental_terms.financials

    def balance_due(self) -> int:
        return self.financials.balance_due()

    def refundable_amount(self) -> int:
        return self.financials.refundable_amount(self._request.payment_status)

    def allowed_transitions(self) -> list[RentalStatus]:
        """Statuses reachable right now, gate included."""
        allowed = []
        for status in STATUS_TRANSITIONS[self._request.status]:
            if status == RentalStatus.APPROVED and not self._gate.is_satisfied():
                continue
            allowed.append(status)
        return sorted(allowed, key=list(RentalStatus).index)

    # Status

    def transition_status(
        self, next_status: RentalStatus | str, note: str | None = None
    ) -> OperationResult[RentalRequest]:
        current = self._request.status
        try:
            next_status = RentalStatus(next_status)
        except ValueError:
            return self._reject(InvalidTransition(
                f"Request {self._request.id}: unknown status {next_status!r}"
            ))
        if next_status not in STATUS_TRANSITIONS[current]:
            return self._reject(InvalidTransition(
                f"Cannot move request {self._request.id} from {current.value} to {next_status.value}"
            ))
        if next_status == RentalStatus.APPROVED and not self._gate.is_satisfied():
            return self._reject(DocumentsNotVerified(
                f"Request {self._request.id} cannot be approved: "
                + ", ".join(self._gate.missing_requirements())
            ))

        fields: dict[str, Any] = {serialization.STATUS: next_status}
        admin_notes = self._with_note(note, next_status.value)
        if admin_notes is not None:
            fields[serialization.ADMIN_NOTES] = admin_notes
        staged = replace(
            self._request,
            status=next_status,
            admin_notes=self._request.admin_notes if admin_notes is None else admin_notes,
        )
        return self._commit(
            fields,
            staged,
            "rental.status_changed",
            {"from": current.value, "to": next_status.value},
        )

    # Payment

    def record_payment_event(
        self, next_status: PaymentStatus | str, note: str | None = None
    ) -> OperationResult[RentalRequest]:
        current = self._request.payment_status
        try:
            next_status = PaymentStatus(next_status)
        except ValueError:
            return self._reject(InvalidTransition(
                f"Request {self._request.id}: unknown payment status {next_status!r}"
            ))
        if next_status == PaymentStatus.REFUNDED and self._request.status not in REFUND_ELIGIBLE_STATUSES:
            return self._reject(RefundNotEligible(
                f"Request {self._request.id} is {self._request.status.value}; "
                "refunds are only recorded once it is rejected, cancelled or returned"
            ))
        if next_status not in PAYMENT_TRANSITIONS[current]:
            return self._reject(InvalidTransition(
                f"Cannot move payment of request {self._request.id} "
                f"from {current.value} to {next_status.value}"
            ))

        fields: dict[str, Any] = {serialization.PAYMENT_STATUS: next_status}
        admin_notes = self._with_note(note, f"payment {next_status.value}")
        if admin_notes is not None:
            fields[serialization.ADMIN_NOTES] = admin_notes
        staged = replace(
            self._request,
            payment_status=next_status,
            admin_notes=self._request.admin_notes if admin_notes is None else admin_notes,
        )
        return self._commit(
            fields,
            staged,
            "rental.payment_changed",
            {"from": current.value, "to": next_status.value},
        )

    # Documents

    def approve_document(self, kind: DocumentKind) -> OperationResult[RentalRequest]:
        return self._record_manual_decision(kind, approved=True)

    def reject_document(self, kind: DocumentKind) -> OperationResult[RentalRequest]:
        return self._record_manual_decision(kind, approved=False)

    def record_cheque(self, submitted: bool) -> OperationResult[RentalRequest]:
        staged_gate = self._gate.copy()
        if not staged_gate.record_cheque(submitted):
            return OperationResult(value=self._request)
        staged = replace(self._request, documents=staged_gate.documents)
        return self._commit(
            {serialization.CHEQUE_SUBMITTED: submitted},
            staged,
            "rental.cheque_recorded",
            {"cheque_submitted": submitted},
            gate=staged_gate,
        )

    def run_automated_verification(self, kind: DocumentKind) -> OperationResult[VerificationOutcome]:
        """Ask the verification service about one document.

        The outcome is cached in the gate for display only; nothing is
        written to the store and ``manually_verified`` never changes.
        """
        if self._verifier is None:
            return OperationResult(error=ConfigurationError("No verification client configured"))

        number = self._request.documents.get(kind).number
        try:
            outcome = self._verifier.verify(kind, number)
        except InvalidDocumentFormat as exc:
            logger.info("Automated verification of %s for %s skipped: %s", kind.value, self._request.id, exc)
            return OperationResult(error=exc)

        self._gate.record_automated_outcome(kind, outcome)
        error = outcome.to_error()
        if error is None:
            logger.info("Automated verification of %s for %s passed", kind.value, self._request.id)
        elif error.retryable:
            logger.warning("Automated verification of %s for %s unavailable", kind.value, self._request.id)
        else:
            logger.info("Automated verification of %s for %s failed: %s", kind.value, self._request.id, outcome.error)
        return OperationResult(value=outcome, error=error)

    # Terms

    def revise_terms(
        self,
        rent_amount: int | None = None,
        security_deposit: int | None = None,
        advance_payment: int | None = None,
        end_date: date | None = None,
    ) -> OperationResult[RentalRequest]:
        """Edit rent, deposit, advance or end date before approval.

        Duration and total are recomputed and every terms field is written
        together.
        """
        if self._request.status not in TERMS_EDITABLE_STATUSES:
            return self._reject(TermsLocked(
                f"Terms of request {self._request.id} are locked once it is {self._request.status.value}"
            ))

        terms = self._request.rental_terms
        new_end = end_date or terms.end_date
        try:
            financials = self.financials.revise(rent_amount, security_deposit, advance_payment)
            revised = RentalTerms(
                start_date=terms.start_date,
                end_date=new_end,
                duration_days=(new_end - terms.start_date).days,
                rent_amount=financials.rent_amount,
                security_deposit=financials.security_deposit,
                advance_payment=financials.advance_payment,
                total_amount=financials.total_amount,
            )
        except (InvalidFinancialTerms, InvalidRentalTerms) as exc:
            return self._reject(exc)

        if revised == terms:
            return OperationResult(value=self._request)
        staged = replace(self._request, rental_terms=revised)
        return self._commit(
            serialization.rental_terms_fields(revised),
            staged,
            "rental.terms_revised",
            {"total_amount": revised.total_amount, "duration_days": revised.duration_days},
        )

    # Internals

    def _record_manual_decision(self, kind: DocumentKind, approved: bool) -> OperationResult[RentalRequest]:
        staged_gate = self._gate.copy()
        if not staged_gate.record_manual_decision(kind, approved):
            return OperationResult(value=self._request)
        staged = replace(self._request, documents=staged_gate.documents)
        return self._commit(
            {serialization.manually_verified_path(kind): approved},
            staged,
            "rental.document_reviewed",
            {"document": kind.value, "approved": approved},
            gate=staged_gate,
        )

    def _with_note(self, note: str | None, label: str) -> str | None:
        if not note or not note.strip():
            return None
        line = f"[{self._clock():%Y-%m-%d %H:%M}] {label}: {note.strip()}"
        existing = self._request.admin_notes
        return f"{existing}\n{line}" if existing else line

    def _reject(self, error: RentalEngineError) -> OperationResult[RentalRequest]:
        logger.info("Rejected command on %s: %s", self._request.id, error)
        return OperationResult(value=self._request, error=error)

    def _commit(
        self,
        fields: dict[str, Any],
        staged: RentalRequest,
        event_type: str,
        event_data: dict[str, Any],
        gate: DocumentVerificationGate | None = None,
    ) -> OperationResult[RentalRequest]:
        now = self._clock()
        fields[serialization.UPDATED_AT] = now
        try:
            self._store.apply_partial_update(self._request.id, fields)
        except (PersistenceError, RequestNotFound) as exc:
            logger.warning("Write for %s (%s) failed: %s", self._request.id, event_type, exc)
            return OperationResult(value=self._request, error=exc)

        self._request = replace(staged, updated_at=now)
        if gate is not None:
            self._gate = gate
        logger.info(
            "Applied %s to %s",
            event_type,
            self._request.id,
            extra={"extra": {"request_id": self._request.id, "event_type": event_type}},
        )
        self._publish(event_type, event_data, now)
        return OperationResult(value=self._request)

    def _publish(self, event_type: str, data: dict[str, Any], now: datetime) -> None:
        if self._sink is None:
            return
        event = Event(
            event_id=uuid.uuid4().hex,
            event_type=event_type,
            event_time=now,
            source=EVENT_SOURCE,
            subject=self._request.id,
            data=data,
        )
        try:
            self._sink.send(self._topic, event, key=self._request.id)
        except SinkError:
            # Already persisted; a lost event does not roll the change back
            logger.exception("Could not publish %s for %s", event_type, self._request.id)
