"""Rental lifecycle: admission gate, state machine and submission."""

from rental_engine.lifecycle.gate import DocumentVerificationGate
from rental_engine.lifecycle.machine import (
    PAYMENT_TRANSITIONS,
    STATUS_TRANSITIONS,
    OperationResult,
    RentalLifecycle,
)
from rental_engine.lifecycle.submission import (
    RentalSubmission,
    build_request,
    default_advance,
    submit_request,
)

__all__ = [
    "DocumentVerificationGate",
    "OperationResult",
    "PAYMENT_TRANSITIONS",
    "RentalLifecycle",
    "RentalSubmission",
    "STATUS_TRANSITIONS",
    "build_request",
    "default_advance",
    "submit_request",
]
