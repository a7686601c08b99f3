"""Tests for customer rental submissions."""

from dataclasses import replace
from datetime import date

import pytest

from rental_engine.exceptions import (
    IncompleteSubmission,
    InvalidDocumentFormat,
    InvalidFinancialTerms,
    InvalidRentalTerms,
)
from rental_engine.lifecycle.submission import (
    RentalSubmission,
    build_request,
    default_advance,
    submit_request,
)
from rental_engine.models.rental import PaymentStatus, RentalStatus
from rental_engine.store.memory import InMemoryRentalStore


class TestDefaultAdvance:
    """Tests for default_advance."""

    def test_thirty_percent_of_rent(self) -> None:
        assert default_advance(10000, 30000) == 3000

    def test_minimum_applies(self) -> None:
        assert default_advance(500, 2500) == 1000

    def test_capped_at_total(self) -> None:
        assert default_advance(300, 600) == 600


class TestBuildRequest:
    """Tests for build_request."""

    def test_new_request(self, sample_submission: RentalSubmission, clock) -> None:
        request = build_request(sample_submission, clock)

        assert request.status == RentalStatus.PENDING
        assert request.payment_status == PaymentStatus.PENDING
        assert request.created_at == request.updated_at == clock.now
        assert request.rental_terms.end_date == date(2024, 6, 17)
        assert request.rental_terms.total_amount == 13500
        assert request.rental_terms.advance_payment == 1050
        assert request.documents.national_id.number == "234567890123"
        assert request.documents.tax_id.number == "ABCPE1234F"
        assert request.documents.cheque_submitted is True
        assert not request.documents.national_id.manually_verified
        assert not request.documents.tax_id.manually_verified

    def test_explicit_advance(self, sample_submission: RentalSubmission) -> None:
        request = build_request(replace(sample_submission, advance_payment=5000))

        assert request.rental_terms.advance_payment == 5000

    @pytest.mark.parametrize("field", ["national_id_number", "tax_id_number", "cheque_image_ref"])
    def test_missing_field(self, sample_submission: RentalSubmission, field: str) -> None:
        with pytest.raises(IncompleteSubmission, match=field):
            build_request(replace(sample_submission, **{field: " "}))

    def test_missing_contact_details(self, sample_submission: RentalSubmission) -> None:
        details = replace(sample_submission.customer_details, full_name="", phone="")

        with pytest.raises(IncompleteSubmission, match="full_name, phone"):
            build_request(replace(sample_submission, customer_details=details))

    def test_malformed_document(self, sample_submission: RentalSubmission) -> None:
        with pytest.raises(InvalidDocumentFormat):
            build_request(replace(sample_submission, tax_id_number="ABCDE12345"))

    def test_invalid_duration(self, sample_submission: RentalSubmission) -> None:
        with pytest.raises(InvalidRentalTerms):
            build_request(replace(sample_submission, duration_days=0))

    def test_advance_above_total(self, sample_submission: RentalSubmission) -> None:
        with pytest.raises(InvalidFinancialTerms):
            build_request(replace(sample_submission, advance_payment=20000))


class TestSubmitRequest:
    """Tests for submit_request."""

    def test_stored_with_id(self, sample_submission: RentalSubmission, clock) -> None:
        store = InMemoryRentalStore()

        stored = submit_request(store, sample_submission, clock)

        assert stored.id
        assert store.load_one(stored.id) == stored
