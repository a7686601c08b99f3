"""Sample rental request generator for demos and local stores."""

from __future__ import annotations

import random
import uuid
from datetime import datetime, timedelta
from typing import Iterator

from rental_engine.generators.base import BaseGenerator
from rental_engine.lifecycle.submission import default_advance
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
from rental_engine.verification.formats import TAX_ID_HOLDER_TYPES


class RentalRequestGenerator(BaseGenerator):
    """Generate rental requests that are consistent with the lifecycle rules.

    Requests past document review always carry both manual approvals and
    the cheque; payment progress follows the status.
    """

    STATUSES = list(RentalStatus)
    STATUS_WEIGHTS = [0.30, 0.20, 0.15, 0.15, 0.10, 0.05, 0.05]

    # Payment status a request at each status is expected to have
    PAYMENT_FOR_STATUS = {
        RentalStatus.PENDING: PaymentStatus.PENDING,
        RentalStatus.DOCUMENT_VERIFICATION: PaymentStatus.PENDING,
        RentalStatus.APPROVED: PaymentStatus.ADVANCE_PAID,
        RentalStatus.DELIVERED: PaymentStatus.FULLY_PAID,
        RentalStatus.RETURNED: PaymentStatus.REFUNDED,
        RentalStatus.REJECTED: PaymentStatus.PENDING,
        RentalStatus.CANCELLED: PaymentStatus.PENDING,
    }

    PRODUCTS = [
        ("Canon EOS R6 Camera", 1500, 20000),
        ("DJI Mavic 3 Drone", 2500, 40000),
        ("Sony A7 IV Camera", 1800, 25000),
        ("GoPro Hero 12", 600, 8000),
        ("MacBook Pro 14", 2000, 50000),
        ("Camping Tent (4 person)", 300, 3000),
    ]

    REVIEWED_STATUSES = frozenset(
        {RentalStatus.APPROVED, RentalStatus.DELIVERED, RentalStatus.RETURNED}
    )

    def generate(self) -> RentalRequest:
        """Generate a single rental request.

        Returns
        -------
        RentalRequest
            Generated request with valid document numbers.
        """
        return self._generate_one()

    def generate_batch(self, count: int) -> Iterator[RentalRequest]:
        """Generate multiple rental requests.

        Parameters
        ----------
        count : int
            Number of requests to generate.

        Yields
        ------
        RentalRequest
            Generated requests.
        """
        for _ in range(count):
            yield self._generate_one()

    def national_id_number(self) -> str:
        """12 digits whose digit sum is even."""
        digits = [random.randint(0, 9) for _ in range(12)]
        if sum(digits) % 2:
            digits[-1] = (digits[-1] + 1) % 10
        return "".join(str(d) for d in digits)

    def tax_id_number(self) -> str:
        """Tax id with a recognised holder type in the 4th position."""
        letters = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
        series = "".join(random.choices(letters, k=3))
        holder = random.choice(list(TAX_ID_HOLDER_TYPES))
        surname = random.choice(letters)
        digits = f"{random.randint(0, 9999):04d}"
        return f"{series}{holder}{surname}{digits}{random.choice(letters)}"

    def _generate_one(self) -> RentalRequest:
        """Generate a single request."""
        status = random.choices(self.STATUSES, weights=self.STATUS_WEIGHTS, k=1)[0]
        product_index = random.randrange(len(self.PRODUCTS))
        product_name, daily_rate, deposit = self.PRODUCTS[product_index]
        duration = random.randint(1, 30)
        rent = daily_rate * duration

        created_at = self.fake.date_time_between(start_date="-180d", end_date="now")
        start = (created_at + timedelta(days=random.randint(1, 14))).date()
        terms = RentalTerms.build(
            start_date=start,
            duration_days=duration,
            rent_amount=rent,
            security_deposit=deposit,
            advance_payment=default_advance(rent, rent + deposit),
        )

        reviewed = status in self.REVIEWED_STATUSES
        in_review = status == RentalStatus.DOCUMENT_VERIFICATION
        documents = Documents(
            national_id=DocumentRecord(
                kind=DocumentKind.NATIONAL_ID,
                number=self.national_id_number(),
                image_ref=f"uploads/{uuid.uuid4().hex}.jpg",
                manually_verified=reviewed or (in_review and random.random() < 0.5),
            ),
            tax_id=DocumentRecord(
                kind=DocumentKind.TAX_ID,
                number=self.tax_id_number(),
                image_ref=f"uploads/{uuid.uuid4().hex}.jpg",
                manually_verified=reviewed or (in_review and random.random() < 0.5),
            ),
            cheque_submitted=True,
            cheque_image_ref=f"uploads/{uuid.uuid4().hex}.jpg",
        )

        customer = CustomerDetails(
            full_name=self.fake.name(),
            email=self.fake.email(),
            phone=self.fake.phone_number(),
            address=self.fake.street_address(),
            city=self.fake.city(),
            state=self.fake.state(),
            pincode=self.fake.postcode(),
        )

        updated_at = min(
            created_at + timedelta(hours=random.randint(0, 72)),
            datetime.now(),
        )
        return RentalRequest(
            id=uuid.uuid4().hex,
            user_id=f"user-{uuid.uuid4().hex[:12]}",
            product_id=f"prod-{product_index + 1:03d}",
            product_name=product_name,
            customer_details=customer,
            documents=documents,
            rental_terms=terms,
            status=status,
            payment_status=self.PAYMENT_FOR_STATUS[status],
            created_at=created_at,
            updated_at=updated_at,
        )
