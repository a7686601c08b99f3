"""Admin-facing service: every lifecycle command addressed by request id."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Callable

from rental_engine.config import (
    EVENT_SINKS,
    STORE_BACKENDS,
    VERIFICATION_MODES,
    EngineConfig,
)
from rental_engine.exceptions import (
    ConfigurationError,
    IncompleteSubmission,
    InvalidDocumentFormat,
    InvalidFinancialTerms,
    InvalidRentalTerms,
    PersistenceError,
    RequestNotFound,
    SinkError,
)
from rental_engine.lifecycle.machine import (
    DEFAULT_TOPIC,
    EVENT_SOURCE,
    STATUS_TRANSITIONS,
    EventSink,
    OperationResult,
    RentalLifecycle,
)
from rental_engine.lifecycle.submission import RentalSubmission, submit_request
from rental_engine.models.base import Event
from rental_engine.models.rental import (
    DocumentKind,
    PaymentStatus,
    RentalRequest,
    RentalStatus,
    VerificationOutcome,
)
from rental_engine.reporting import awaiting_documents, filter_by_status, status_counts
from rental_engine.store.base import RentalRequestStore
from rental_engine.verification.client import (
    GovernmentVerificationClient,
    OfflineVerificationClient,
    VerificationClient,
)

logger = logging.getLogger(__name__)


class RentalAdminService:
    """Entry point for an administrative front end.

    Loads the current version of a request for every command, so each
    command sees the latest stored state. Advisory verification outcomes
    are remembered per request id for display until the request reaches a
    terminal status.
    """

    def __init__(
        self,
        store: RentalRequestStore,
        verifier: VerificationClient | None = None,
        sink: EventSink | None = None,
        clock: Callable[[], datetime] = datetime.now,
        topic: str = DEFAULT_TOPIC,
    ) -> None:
        self.store = store
        self.verifier = verifier
        self.sink = sink
        self.clock = clock
        self.topic = topic
        self._outcomes: dict[str, dict[DocumentKind, VerificationOutcome]] = {}

    @classmethod
    def from_config(cls, config: EngineConfig) -> RentalAdminService:
        """Wire store, verifier and event sink from configuration."""
        return cls(
            store=build_store(config),
            verifier=build_verifier(config),
            sink=build_sink(config),
            topic=config.kafka.topic,
        )

    # Reads

    def list_requests(self, status: RentalStatus | None = None) -> list[RentalRequest]:
        return filter_by_status(self.store.list_all(), status)

    def statistics(self) -> dict[str, int]:
        requests = self.store.list_all()
        counts = status_counts(requests)
        counts["total"] = len(requests)
        counts["awaiting_documents"] = len(awaiting_documents(requests))
        return counts

    def open(self, request_id: str) -> RentalLifecycle:
        """Load a request and bind a lifecycle to it.

        Raises
        ------
        RequestNotFound
            If the id is unknown.
        PersistenceError
            If the store cannot be read.
        """
        request = self.store.load_one(request_id)
        return RentalLifecycle(
            request,
            self.store,
            verifier=self.verifier,
            sink=self.sink,
            clock=self.clock,
            outcomes=self._outcomes_for(request),
            topic=self.topic,
        )

    def last_automated_outcome(self, request_id: str, kind: DocumentKind) -> VerificationOutcome | None:
        return self._outcomes.get(request_id, {}).get(kind)

    # Commands

    def submit(self, submission: RentalSubmission) -> OperationResult[RentalRequest]:
        try:
            request = submit_request(self.store, submission, self.clock)
        except (
            IncompleteSubmission,
            InvalidDocumentFormat,
            InvalidFinancialTerms,
            InvalidRentalTerms,
            PersistenceError,
        ) as exc:
            logger.info("Submission for product %s refused: %s", submission.product_id, exc)
            return OperationResult(error=exc)
        self._publish_submitted(request)
        return OperationResult(value=request)

    def transition_status(
        self, request_id: str, next_status: RentalStatus, note: str | None = None
    ) -> OperationResult[RentalRequest]:
        return self._run(request_id, lambda lc: lc.transition_status(next_status, note))

    def record_payment_event(
        self, request_id: str, next_status: PaymentStatus, note: str | None = None
    ) -> OperationResult[RentalRequest]:
        return self._run(request_id, lambda lc: lc.record_payment_event(next_status, note))

    def approve_document(self, request_id: str, kind: DocumentKind) -> OperationResult[RentalRequest]:
        return self._run(request_id, lambda lc: lc.approve_document(kind))

    def reject_document(self, request_id: str, kind: DocumentKind) -> OperationResult[RentalRequest]:
        return self._run(request_id, lambda lc: lc.reject_document(kind))

    def record_cheque(self, request_id: str, submitted: bool) -> OperationResult[RentalRequest]:
        return self._run(request_id, lambda lc: lc.record_cheque(submitted))

    def revise_terms(
        self,
        request_id: str,
        rent_amount: int | None = None,
        security_deposit: int | None = None,
        advance_payment: int | None = None,
        end_date: date | None = None,
    ) -> OperationResult[RentalRequest]:
        return self._run(
            request_id,
            lambda lc: lc.revise_terms(rent_amount, security_deposit, advance_payment, end_date),
        )

    def run_automated_verification(
        self, request_id: str, kind: DocumentKind
    ) -> OperationResult[VerificationOutcome]:
        return self._run(request_id, lambda lc: lc.run_automated_verification(kind))

    def _run(self, request_id: str, command: Callable[[RentalLifecycle], OperationResult]) -> OperationResult:
        try:
            lifecycle = self.open(request_id)
        except (RequestNotFound, PersistenceError) as exc:
            logger.warning("Cannot load rental request %s: %s", request_id, exc)
            return OperationResult(error=exc)
        result = command(lifecycle)
        if not STATUS_TRANSITIONS[lifecycle.request.status]:
            self._outcomes.pop(request_id, None)
        return result

    def _outcomes_for(self, request: RentalRequest) -> dict[DocumentKind, VerificationOutcome]:
        # Nothing can change once a request is terminal
        if not STATUS_TRANSITIONS[request.status]:
            self._outcomes.pop(request.id, None)
            return {}
        return self._outcomes.setdefault(request.id, {})

    def _publish_submitted(self, request: RentalRequest) -> None:
        if self.sink is None:
            return
        event = Event(
            event_id=uuid.uuid4().hex,
            event_type="rental.submitted",
            event_time=request.created_at,
            source=EVENT_SOURCE,
            subject=request.id,
            data={
                "product_id": request.product_id,
                "total_amount": request.rental_terms.total_amount,
            },
        )
        try:
            self.sink.send(self.topic, event, key=request.id)
        except SinkError:
            logger.exception("Could not publish rental.submitted for %s", request.id)


def build_store(config: EngineConfig) -> RentalRequestStore:
    """Create the configured store backend."""
    backend = config.store.backend
    if backend == "memory":
        from rental_engine.store.memory import InMemoryRentalStore

        return InMemoryRentalStore()
    if backend == "json":
        from rental_engine.store.json_file import JsonFileRentalStore

        return JsonFileRentalStore(config.store.json_path)
    if backend == "postgres":
        from rental_engine.store.postgres import PostgresRentalStore

        return PostgresRentalStore(config.postgres.connection_string)
    raise ConfigurationError(f"Unknown store backend {backend!r}; expected one of {STORE_BACKENDS}")


def build_verifier(config: EngineConfig) -> VerificationClient:
    """Create the configured verification client."""
    mode = config.verification.mode
    if mode == "offline":
        return OfflineVerificationClient()
    if mode == "http":
        return GovernmentVerificationClient.from_config(config.verification)
    raise ConfigurationError(f"Unknown verification mode {mode!r}; expected one of {VERIFICATION_MODES}")


def build_sink(config: EngineConfig) -> EventSink | None:
    """Create the configured event sink, or ``None``."""
    sink = config.events_sink
    if sink == "none":
        return None
    if sink == "console":
        from rental_engine.sinks.console import ConsoleSink

        return ConsoleSink(pretty=False)
    if sink == "kafka":
        from rental_engine.sinks.kafka import KafkaSink

        return KafkaSink(config.kafka)
    raise ConfigurationError(f"Unknown events sink {sink!r}; expected one of {EVENT_SINKS}")
