"""Rental domain models."""

from rental_engine.models.rental.enums import DocumentKind, PaymentStatus, RentalStatus
from rental_engine.models.rental.financial import FinancialTerms
from rental_engine.models.rental.request import (
    DocumentRecord,
    Documents,
    RentalRequest,
    RentalTerms,
)
from rental_engine.models.rental.verification import VerificationOutcome

__all__ = [
    "DocumentKind",
    "DocumentRecord",
    "Documents",
    "FinancialTerms",
    "PaymentStatus",
    "RentalRequest",
    "RentalStatus",
    "RentalTerms",
    "VerificationOutcome",
]
