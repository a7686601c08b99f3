"""Tests for reporting helpers."""

from rental_engine.models.rental import RentalStatus
from rental_engine.reporting import awaiting_documents, filter_by_status, status_counts


class TestReporting:
    """Tests for dashboard read helpers."""

    def test_filter_by_status(self, make_request) -> None:
        requests = [
            make_request(request_id="a"),
            make_request(request_id="b", status=RentalStatus.APPROVED),
        ]

        assert [r.id for r in filter_by_status(requests, RentalStatus.APPROVED)] == ["b"]
        assert len(filter_by_status(requests)) == 2

    def test_status_counts_include_every_status(self, make_request) -> None:
        counts = status_counts([make_request(), make_request(status=RentalStatus.PENDING)])

        assert counts["pending"] == 2
        assert counts["cancelled"] == 0
        assert set(counts) == {status.value for status in RentalStatus}

    def test_awaiting_documents(self, make_request) -> None:
        requests = [
            make_request(request_id="open", status=RentalStatus.DOCUMENT_VERIFICATION),
            make_request(
                request_id="ready",
                status=RentalStatus.DOCUMENT_VERIFICATION,
                national_id_verified=True,
                tax_id_verified=True,
            ),
            make_request(request_id="new"),
        ]

        assert [r.id for r in awaiting_documents(requests)] == ["open"]
