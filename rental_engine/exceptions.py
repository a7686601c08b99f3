"""Custom exception hierarchy for rental-engine.

Every error carries a ``retryable`` flag so callers can tell "try again"
apart from "this is not allowed".
"""


class RentalEngineError(Exception):
    """Base exception for all rental-engine errors."""

    retryable = False


class InvalidFinancialTerms(RentalEngineError):
    """Raised when rent, deposit and advance do not form valid terms."""


class InvalidRentalTerms(RentalEngineError):
    """Raised when rental dates or duration are inconsistent."""


class InvalidDocumentFormat(RentalEngineError):
    """Raised when a document number does not match its kind's format."""


class IncompleteSubmission(RentalEngineError):
    """Raised when a rental submission is missing required fields."""


class LifecycleError(RentalEngineError):
    """Base class for state machine guard violations."""


class InvalidTransition(LifecycleError):
    """Raised when a status or payment transition is not allowed."""


class DocumentsNotVerified(LifecycleError):
    """Raised when approval is attempted before the document gate is satisfied."""


class RefundNotEligible(LifecycleError):
    """Raised when a refund is recorded while the rental is still active."""


class TermsLocked(LifecycleError):
    """Raised when rental terms are revised after approval."""


class VerificationError(RentalEngineError):
    """Base class for automated verification failures."""


class VerificationUnavailable(VerificationError):
    """Raised when the verification service could not be reached or answered badly."""

    retryable = True


class VerificationRejected(VerificationError):
    """Raised when the verification service reports the document as invalid."""


class PersistenceError(RentalEngineError):
    """Raised when the record store fails to read or write."""

    retryable = True


class RequestNotFound(RentalEngineError):
    """Raised when a rental request id does not exist in the store."""


class ConfigurationError(RentalEngineError):
    """Raised when configuration is invalid or missing."""


class SinkError(RentalEngineError):
    """Raised when a sink operation fails."""
