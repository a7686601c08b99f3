"""Tests for sample data generators."""

from rental_engine.generators import RentalRequestGenerator
from rental_engine.lifecycle.gate import DocumentVerificationGate
from rental_engine.lifecycle.machine import PAYMENT_TRANSITIONS
from rental_engine.models.rental import DocumentKind, RentalRequest, RentalStatus
from rental_engine.store.serialization import from_record, to_json_record
from rental_engine.verification.client import OfflineVerificationClient


class TestRentalRequestGenerator:
    """Tests for RentalRequestGenerator."""

    def test_generate_single(self, seed: int) -> None:
        request = RentalRequestGenerator(seed=seed).generate()

        assert isinstance(request, RentalRequest)
        assert request.id
        assert request.customer_details.full_name
        assert request.rental_terms.duration_days >= 1
        assert request.updated_at >= request.created_at

    def test_generate_batch(self, seed: int) -> None:
        requests = list(RentalRequestGenerator(seed=seed).generate_batch(20))

        assert len(requests) == 20
        assert len({r.id for r in requests}) == 20

    def test_reproducible(self, seed: int) -> None:
        first = RentalRequestGenerator(seed=seed).generate()
        second = RentalRequestGenerator(seed=seed).generate()

        assert first.customer_details == second.customer_details
        assert first.rental_terms == second.rental_terms

    def test_document_numbers_pass_offline_checks(self, seed: int) -> None:
        verifier = OfflineVerificationClient()

        for request in RentalRequestGenerator(seed=seed).generate_batch(20):
            assert verifier.verify(DocumentKind.NATIONAL_ID, request.documents.national_id.number).is_valid
            assert verifier.verify(DocumentKind.TAX_ID, request.documents.tax_id.number).is_valid

    def test_reviewed_requests_pass_the_gate(self, seed: int) -> None:
        reviewed = {RentalStatus.APPROVED, RentalStatus.DELIVERED, RentalStatus.RETURNED}

        for request in RentalRequestGenerator(seed=seed).generate_batch(50):
            if request.status in reviewed:
                assert DocumentVerificationGate(request.documents).is_satisfied()

    def test_payment_status_known(self, seed: int) -> None:
        for request in RentalRequestGenerator(seed=seed).generate_batch(20):
            assert request.payment_status in PAYMENT_TRANSITIONS

    def test_survives_record_round_trip(self, seed: int) -> None:
        request = RentalRequestGenerator(seed=seed).generate()

        assert from_record(to_json_record(request)) == request
