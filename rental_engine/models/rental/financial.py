"""Financial terms of a rental: rent, refundable deposit and advance."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rental_engine.exceptions import InvalidFinancialTerms
from rental_engine.models.rental.enums import PaymentStatus

if TYPE_CHECKING:
    from rental_engine.models.rental.request import RentalTerms


def _check_amount(name: str, value: object) -> None:
    # bool is an int subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFinancialTerms(f"{name} must be an integer amount in minor units, got {value!r}")
    if value < 0:
        raise InvalidFinancialTerms(f"{name} must not be negative, got {value}")


@dataclass(frozen=True)
class FinancialTerms:
    """Pure value object over the monetary terms of one rental.

    ``total_amount`` is always ``rent_amount + security_deposit``; the
    advance counts toward it and can never exceed it. All amounts are
    integers in minor currency units.

    Parameters
    ----------
    rent_amount : int
        Rent for the whole rental period.
    security_deposit : int
        Refundable deposit held against damage or non-return.
    advance_payment : int
        Upfront payment collected before delivery.

    Raises
    ------
    InvalidFinancialTerms
        If any amount is negative or not an integer, or the advance
        exceeds the total.
    """

    rent_amount: int
    security_deposit: int
    advance_payment: int
    total_amount: int = field(init=False)

    def __post_init__(self) -> None:
        _check_amount("rent_amount", self.rent_amount)
        _check_amount("security_deposit", self.security_deposit)
        _check_amount("advance_payment", self.advance_payment)

        total = self.rent_amount + self.security_deposit
        if self.advance_payment > total:
            raise InvalidFinancialTerms(
                f"advance_payment {self.advance_payment} exceeds total_amount {total}"
            )
        object.__setattr__(self, "total_amount", total)

    @classmethod
    def from_rental_terms(cls, terms: RentalTerms) -> FinancialTerms:
        """Rebuild the model from stored terms, checking the stored total."""
        financials = cls(
            rent_amount=terms.rent_amount,
            security_deposit=terms.security_deposit,
            advance_payment=terms.advance_payment,
        )
        if terms.total_amount != financials.total_amount:
            raise InvalidFinancialTerms(
                f"total_amount {terms.total_amount} does not equal rent + deposit "
                f"({financials.total_amount})"
            )
        return financials

    def balance_due(self) -> int:
        """Amount still owed after the advance."""
        return self.total_amount - self.advance_payment

    def refundable_amount(self, payment_status: PaymentStatus) -> int:
        """Deposit still held for the customer; zero once refunded."""
        if payment_status == PaymentStatus.REFUNDED:
            return 0
        return self.security_deposit

    def revise(
        self,
        rent_amount: int | None = None,
        security_deposit: int | None = None,
        advance_payment: int | None = None,
    ) -> FinancialTerms:
        """Return new terms with the given amounts replaced and re-validated."""
        return FinancialTerms(
            rent_amount=self.rent_amount if rent_amount is None else rent_amount,
            security_deposit=self.security_deposit if security_deposit is None else security_deposit,
            advance_payment=self.advance_payment if advance_payment is None else advance_payment,
        )
