"""Admission gate for approving a rental request."""

from __future__ import annotations

import copy

from rental_engine.models.rental import DocumentKind, Documents, VerificationOutcome


class DocumentVerificationGate:
    """Per-request document state: manual decisions plus advisory checks.

    The gate is satisfied only when both identity documents carry a manual
    approval and the bank cheque has been submitted. Automated outcomes
    are cached for display and never consulted by ``is_satisfied``.

    Parameters
    ----------
    documents : Documents
        The request's documents. The gate works on its own copy.
    outcomes : dict[DocumentKind, VerificationOutcome] | None
        Advisory cache to share with other gates for the same request.
    """

    def __init__(
        self,
        documents: Documents,
        outcomes: dict[DocumentKind, VerificationOutcome] | None = None,
    ) -> None:
        self._documents = copy.deepcopy(documents)
        self._outcomes = outcomes if outcomes is not None else {}

    @property
    def documents(self) -> Documents:
        return copy.deepcopy(self._documents)

    def record_manual_decision(self, kind: DocumentKind, approved: bool) -> bool:
        """Set the manual flag for one document.

        Returns
        -------
        bool
            ``False`` when the flag already had this value.
        """
        record = self._documents.get(kind)
        if record.manually_verified == approved:
            return False
        record.manually_verified = approved
        return True

    def record_cheque(self, submitted: bool) -> bool:
        """Set the cheque flag; returns ``False`` when nothing changed."""
        if self._documents.cheque_submitted == submitted:
            return False
        self._documents.cheque_submitted = submitted
        return True

    def is_satisfied(self) -> bool:
        return (
            self._documents.national_id.manually_verified
            and self._documents.tax_id.manually_verified
            and self._documents.cheque_submitted
        )

    def missing_requirements(self) -> list[str]:
        """Human-readable list of what still blocks approval."""
        missing = []
        if not self._documents.national_id.manually_verified:
            missing.append("national ID not verified")
        if not self._documents.tax_id.manually_verified:
            missing.append("tax ID not verified")
        if not self._documents.cheque_submitted:
            missing.append("bank cheque not submitted")
        return missing

    def record_automated_outcome(self, kind: DocumentKind, outcome: VerificationOutcome) -> None:
        self._outcomes[kind] = outcome

    def last_automated_outcome(self, kind: DocumentKind) -> VerificationOutcome | None:
        return self._outcomes.get(kind)

    def copy(self) -> DocumentVerificationGate:
        """Independent copy of the documents sharing the advisory cache."""
        return DocumentVerificationGate(self._documents, self._outcomes)
