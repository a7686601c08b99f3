"""Pytest configuration and fixtures."""

from datetime import date, datetime
from typing import Callable

import pytest

from rental_engine.lifecycle.submission import RentalSubmission
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
from rental_engine.store.memory import InMemoryRentalStore

# Digit sum 50 (even) passes the offline check; the 4th character P is a known holder type
VALID_NATIONAL_ID = "234567890123"
VALID_TAX_ID = "ABCPE1234F"


class FixedClock:
    """Clock returning a settable instant."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to 2024-06-01 10:30."""
    return FixedClock(datetime(2024, 6, 1, 10, 30))


@pytest.fixture
def sample_customer() -> CustomerDetails:
    """Sample customer details."""
    return CustomerDetails(
        full_name="Asha Verma",
        email="asha@example.com",
        phone="+91 98765 43210",
        address="12 MG Road",
        city="Pune",
        state="Maharashtra",
        pincode="411001",
    )


@pytest.fixture
def sample_terms() -> RentalTerms:
    """Seven days at 3500 rent with a 10000 deposit."""
    return RentalTerms.build(
        start_date=date(2024, 6, 10),
        duration_days=7,
        rent_amount=3500,
        security_deposit=10000,
        advance_payment=1050,
    )


@pytest.fixture
def make_request(
    sample_customer: CustomerDetails, sample_terms: RentalTerms
) -> Callable[..., RentalRequest]:
    """Factory for rental requests with overridable state."""

    def _make(
        request_id: str = "req-test-001",
        status: RentalStatus = RentalStatus.PENDING,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        national_id_verified: bool = False,
        tax_id_verified: bool = False,
        cheque_submitted: bool = True,
        admin_notes: str = "",
        created_at: datetime = datetime(2024, 6, 1, 9, 0),
    ) -> RentalRequest:
        return RentalRequest(
            id=request_id,
            user_id="user-test-001",
            product_id="prod-test-001",
            product_name="Canon EOS R6 Camera",
            customer_details=sample_customer,
            documents=Documents(
                national_id=DocumentRecord(
                    kind=DocumentKind.NATIONAL_ID,
                    number=VALID_NATIONAL_ID,
                    manually_verified=national_id_verified,
                ),
                tax_id=DocumentRecord(
                    kind=DocumentKind.TAX_ID,
                    number=VALID_TAX_ID,
                    manually_verified=tax_id_verified,
                ),
                cheque_submitted=cheque_submitted,
                cheque_image_ref="uploads/cheque.jpg" if cheque_submitted else None,
            ),
            rental_terms=sample_terms,
            status=status,
            payment_status=payment_status,
            created_at=created_at,
            updated_at=created_at,
            admin_notes=admin_notes,
        )

    return _make


@pytest.fixture
def sample_request(make_request: Callable[..., RentalRequest]) -> RentalRequest:
    """Pending request with nothing verified yet."""
    return make_request()


@pytest.fixture
def memory_store(sample_request: RentalRequest) -> InMemoryRentalStore:
    """In-memory store holding ``sample_request``."""
    store = InMemoryRentalStore()
    store.add(sample_request)
    return store


@pytest.fixture
def sample_submission(sample_customer: CustomerDetails) -> RentalSubmission:
    """Complete customer submission."""
    return RentalSubmission(
        user_id="user-test-001",
        product_id="prod-test-001",
        customer_details=sample_customer,
        national_id_number="2345 6789 0123",
        tax_id_number="abcpe1234f",
        start_date=date(2024, 6, 10),
        duration_days=7,
        rent_amount=3500,
        security_deposit=10000,
        cheque_image_ref="uploads/cheque.jpg",
        product_name="Canon EOS R6 Camera",
    )
