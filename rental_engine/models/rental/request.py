"""Rental request aggregate and its parts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from rental_engine.exceptions import InvalidRentalTerms
from rental_engine.models.base import CustomerDetails
from rental_engine.models.rental.enums import DocumentKind, PaymentStatus, RentalStatus
from rental_engine.models.rental.financial import FinancialTerms


@dataclass
class DocumentRecord:
    """Identity document submitted with a request."""

    kind: DocumentKind
    number: str
    image_ref: str | None = None
    manually_verified: bool = False  # Authoritative trust flag, admin-set only


@dataclass
class Documents:
    """Both identity documents plus the bank-cheque requirement."""

    national_id: DocumentRecord
    tax_id: DocumentRecord
    cheque_submitted: bool = False
    cheque_image_ref: str | None = None

    def get(self, kind: DocumentKind) -> DocumentRecord:
        """Return the record for a document kind."""
        if kind == DocumentKind.NATIONAL_ID:
            return self.national_id
        if kind == DocumentKind.TAX_ID:
            return self.tax_id
        raise ValueError(f"Unknown document kind: {kind!r}")


@dataclass(frozen=True)
class RentalTerms:
    """Rental period and money, validated on construction.

    Raises
    ------
    InvalidRentalTerms
        If ``end_date`` is not after ``start_date`` or ``duration_days``
        does not match the dates.
    InvalidFinancialTerms
        If the amounts break the financial invariants.
    """

    start_date: date
    end_date: date
    duration_days: int
    rent_amount: int
    security_deposit: int
    advance_payment: int
    total_amount: int

    def __post_init__(self) -> None:
        if self.end_date <= self.start_date:
            raise InvalidRentalTerms(
                f"end_date {self.end_date} must be after start_date {self.start_date}"
            )
        expected = (self.end_date - self.start_date).days
        if self.duration_days != expected:
            raise InvalidRentalTerms(
                f"duration_days {self.duration_days} does not match dates ({expected} days)"
            )
        FinancialTerms.from_rental_terms(self)

    @classmethod
    def build(
        cls,
        start_date: date,
        duration_days: int,
        rent_amount: int,
        security_deposit: int,
        advance_payment: int,
    ) -> RentalTerms:
        """Derive end date and total from a start date and duration."""
        if duration_days < 1:
            raise InvalidRentalTerms(f"duration_days must be at least 1, got {duration_days}")
        financials = FinancialTerms(rent_amount, security_deposit, advance_payment)
        return cls(
            start_date=start_date,
            end_date=start_date + timedelta(days=duration_days),
            duration_days=duration_days,
            rent_amount=financials.rent_amount,
            security_deposit=financials.security_deposit,
            advance_payment=financials.advance_payment,
            total_amount=financials.total_amount,
        )

    @property
    def financials(self) -> FinancialTerms:
        """Financial model for these terms."""
        return FinancialTerms(self.rent_amount, self.security_deposit, self.advance_payment)


@dataclass
class RentalRequest:
    """Aggregate root: one customer's request to rent one item."""

    id: str
    user_id: str
    product_id: str
    customer_details: CustomerDetails
    documents: Documents
    rental_terms: RentalTerms
    status: RentalStatus
    payment_status: PaymentStatus
    created_at: datetime
    updated_at: datetime
    admin_notes: str = ""
    product_name: str | None = None  # Display copy, not authoritative
