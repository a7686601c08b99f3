"""Customer submission of a new rental request."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable

from rental_engine.exceptions import IncompleteSubmission
from rental_engine.models.base import CustomerDetails
from rental_engine.models.rental import (
    DocumentKind,
    DocumentRecord,
    Documents,
    PaymentStatus,
    RentalRequest,
    RentalStatus,
    RentalTerms,
)
from rental_engine.store.base import RentalRequestStore
from rental_engine.verification.formats import normalize_number

logger = logging.getLogger(__name__)

ADVANCE_RATE_PERCENT = 30
MINIMUM_ADVANCE = 1000


@dataclass
class RentalSubmission:
    """What the customer fills in on the rental request form.

    Amounts come from the product catalog; this engine only checks that
    they are consistent.
    """

    user_id: str
    product_id: str
    customer_details: CustomerDetails
    national_id_number: str
    tax_id_number: str
    start_date: date
    duration_days: int
    rent_amount: int
    security_deposit: int
    advance_payment: int | None = None  # None: use default_advance()
    cheque_image_ref: str | None = None
    national_id_image_ref: str | None = None
    tax_id_image_ref: str | None = None
    product_name: str | None = None


def default_advance(rent_amount: int, total_amount: int) -> int:
    """30% of the rent with a floor of ``MINIMUM_ADVANCE``, capped at the total."""
    advance = max(rent_amount * ADVANCE_RATE_PERCENT // 100, MINIMUM_ADVANCE)
    return min(advance, total_amount)


def build_request(
    submission: RentalSubmission,
    clock: Callable[[], datetime] = datetime.now,
) -> RentalRequest:
    """Validate a submission and turn it into a new, unsaved request.

    Raises
    ------
    IncompleteSubmission
        If required contact details, document numbers or the cheque
        image are missing.
    InvalidDocumentFormat
        If a document number is malformed.
    InvalidRentalTerms, InvalidFinancialTerms
        If the dates or amounts are inconsistent.
    """
    missing = _missing_fields(submission)
    if missing:
        raise IncompleteSubmission(f"Missing required fields: {', '.join(missing)}")

    national_id = normalize_number(DocumentKind.NATIONAL_ID, submission.national_id_number)
    tax_id = normalize_number(DocumentKind.TAX_ID, submission.tax_id_number)

    advance = submission.advance_payment
    if advance is None:
        advance = default_advance(
            submission.rent_amount, submission.rent_amount + submission.security_deposit
        )
    terms = RentalTerms.build(
        start_date=submission.start_date,
        duration_days=submission.duration_days,
        rent_amount=submission.rent_amount,
        security_deposit=submission.security_deposit,
        advance_payment=advance,
    )

    now = clock()
    return RentalRequest(
        id="",
        user_id=submission.user_id,
        product_id=submission.product_id,
        product_name=submission.product_name,
        customer_details=submission.customer_details,
        documents=Documents(
            national_id=DocumentRecord(
                kind=DocumentKind.NATIONAL_ID,
                number=national_id,
                image_ref=submission.national_id_image_ref,
            ),
            tax_id=DocumentRecord(
                kind=DocumentKind.TAX_ID,
                number=tax_id,
                image_ref=submission.tax_id_image_ref,
            ),
            cheque_submitted=bool(submission.cheque_image_ref),
            cheque_image_ref=submission.cheque_image_ref,
        ),
        rental_terms=terms,
        status=RentalStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
        created_at=now,
        updated_at=now,
    )


def submit_request(
    store: RentalRequestStore,
    submission: RentalSubmission,
    clock: Callable[[], datetime] = datetime.now,
) -> RentalRequest:
    """Validate a submission and add it to the store."""
    request = build_request(submission, clock)
    stored = store.add(request)
    logger.info("Submitted rental request %s for product %s", stored.id, stored.product_id)
    return stored


def _missing_fields(submission: RentalSubmission) -> list[str]:
    details = submission.customer_details
    required = {
        "full_name": details.full_name,
        "phone": details.phone,
        "address": details.address,
        "national_id_number": submission.national_id_number,
        "tax_id_number": submission.tax_id_number,
        "cheque_image_ref": submission.cheque_image_ref,
    }
    return [name for name, value in required.items() if not (value or "").strip()]
