"""Tests for custom exception hierarchy."""

import pytest

from rental_engine.exceptions import (
    ConfigurationError,
    DocumentsNotVerified,
    IncompleteSubmission,
    InvalidDocumentFormat,
    InvalidFinancialTerms,
    InvalidRentalTerms,
    InvalidTransition,
    LifecycleError,
    PersistenceError,
    RefundNotEligible,
    RentalEngineError,
    RequestNotFound,
    SinkError,
    TermsLocked,
    VerificationError,
    VerificationRejected,
    VerificationUnavailable,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_rental_engine_error_is_exception(self) -> None:
        assert isinstance(RentalEngineError("test"), Exception)

    @pytest.mark.parametrize(
        "error_type",
        [InvalidTransition, DocumentsNotVerified, RefundNotEligible, TermsLocked],
    )
    def test_guard_errors_are_lifecycle_errors(self, error_type: type) -> None:
        err = error_type("test")
        assert isinstance(err, LifecycleError)
        assert isinstance(err, RentalEngineError)

    def test_verification_errors(self) -> None:
        assert isinstance(VerificationUnavailable("test"), VerificationError)
        assert isinstance(VerificationRejected("test"), VerificationError)

    @pytest.mark.parametrize(
        "error_type",
        [
            InvalidFinancialTerms,
            InvalidRentalTerms,
            InvalidDocumentFormat,
            IncompleteSubmission,
            RequestNotFound,
            ConfigurationError,
            SinkError,
        ],
    )
    def test_other_errors_are_rental_engine_errors(self, error_type: type) -> None:
        assert isinstance(error_type("test"), RentalEngineError)


class TestRetryable:
    """Test the retryable flag."""

    def test_transient_errors_retryable(self) -> None:
        assert VerificationUnavailable("down").retryable is True
        assert PersistenceError("timeout").retryable is True

    @pytest.mark.parametrize(
        "error_type",
        [InvalidTransition, DocumentsNotVerified, VerificationRejected, RequestNotFound, InvalidDocumentFormat],
    )
    def test_permanent_errors_not_retryable(self, error_type: type) -> None:
        assert error_type("test").retryable is False

    def test_exception_message(self) -> None:
        err = RequestNotFound("Rental request req-001 not found")
        assert str(err) == "Rental request req-001 not found"
