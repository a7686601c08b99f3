"""Clients for the government identity-verification service.

Both clients validate the number locally first and raise
``InvalidDocumentFormat`` without any outbound call. Everything that goes
wrong after that point is folded into a ``VerificationOutcome``:
upstream rejections become ``is_valid=False`` with the upstream reason,
transport trouble becomes the distinct "service unavailable" outcome.
"""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from typing import Any

from rental_engine.config import VerificationConfig
from rental_engine.models.rental.enums import DocumentKind
from rental_engine.models.rental.verification import VerificationOutcome
from rental_engine.verification.formats import TAX_ID_HOLDER_TYPES, normalize_number

logger = logging.getLogger(__name__)

KIND_PATHS = {
    DocumentKind.NATIONAL_ID: "national-id",
    DocumentKind.TAX_ID: "tax-id",
}

# Upstream answered, and the answer is "no such document"
REJECTION_STATUS_CODES = frozenset({404, 422})


class VerificationClient(ABC):
    """Request/response collaborator that owns no persistent state."""

    @abstractmethod
    def verify(self, kind: DocumentKind, number: str) -> VerificationOutcome:
        """Check one document number.

        Raises
        ------
        InvalidDocumentFormat
            If ``number`` is malformed for ``kind``.
        """
        ...


class GovernmentVerificationClient(VerificationClient):
    """HTTP client for the verification API.

    Sends ``POST {base_url}/{kind-path}/verify`` with ``{"number": ...}``
    and expects ``{"valid": bool, "name": str?, "reason": str?}``.

    Parameters
    ----------
    base_url : str
        API root, without trailing slash.
    api_key : str | None
        Sent as ``X-Api-Key`` when set.
    timeout_seconds : float
        Upper bound for one call, connect and read included.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_config(cls, config: VerificationConfig) -> GovernmentVerificationClient:
        return cls(
            base_url=config.base_url,
            api_key=config.api_key,
            timeout_seconds=config.timeout_seconds,
        )

    def verify(self, kind: DocumentKind, number: str) -> VerificationOutcome:
        normalized = normalize_number(kind, number)
        try:
            payload = self._post(kind, normalized)
        except urllib.error.HTTPError as exc:
            if exc.code in REJECTION_STATUS_CODES:
                reason = _read_reason(exc) or "document not found"
                logger.info("Verification rejected %s (HTTP %d): %s", kind.value, exc.code, reason)
                return VerificationOutcome.rejected(reason)
            logger.warning("Verification API HTTP error for %s: %d", kind.value, exc.code)
            return VerificationOutcome.service_unavailable()
        except urllib.error.URLError as exc:
            logger.warning("Verification API connection error for %s: %s", kind.value, exc.reason)
            return VerificationOutcome.service_unavailable()
        except (TimeoutError, OSError, http.client.HTTPException) as exc:
            logger.warning("Verification API transport error for %s: %s", kind.value, exc)
            return VerificationOutcome.service_unavailable()
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Verification API returned invalid JSON for %s", kind.value)
            return VerificationOutcome.service_unavailable()

        return self._to_outcome(kind, payload)

    def _post(self, kind: DocumentKind, number: str) -> Any:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.api_key:
            headers["X-Api-Key"] = self.api_key
        request = urllib.request.Request(
            url=f"{self.base_url}/{KIND_PATHS[kind]}/verify",
            data=json.dumps({"number": number}).encode("utf-8"),
            headers=headers,
            method="POST",
        )
        with urllib.request.urlopen(request, timeout=self.timeout_seconds) as response:
            return json.loads(response.read().decode("utf-8"))

    def _to_outcome(self, kind: DocumentKind, payload: Any) -> VerificationOutcome:
        if not isinstance(payload, dict) or not isinstance(payload.get("valid"), bool):
            logger.warning("Verification API payload malformed for %s", kind.value)
            return VerificationOutcome.service_unavailable()

        if payload["valid"]:
            name = payload.get("name")
            return VerificationOutcome.valid(matched_name=name if isinstance(name, str) else None)

        reason = payload.get("reason")
        if not isinstance(reason, str) or not reason.strip():
            reason = f"{kind.value} verification failed, please check the number"
        return VerificationOutcome.rejected(reason)


def _read_reason(exc: urllib.error.HTTPError) -> str | None:
    try:
        body = json.loads(exc.read().decode("utf-8"))
    except (OSError, ValueError, http.client.HTTPException):
        return None
    if isinstance(body, dict) and isinstance(body.get("reason"), str):
        return body["reason"]
    return None


class OfflineVerificationClient(VerificationClient):
    """Structural checks only, for development without the government API.

    A national id passes when its digit sum is even; a tax id passes when
    its holder-type character is a known code.
    """

    def verify(self, kind: DocumentKind, number: str) -> VerificationOutcome:
        normalized = normalize_number(kind, number)

        if kind == DocumentKind.NATIONAL_ID:
            if sum(int(digit) for digit in normalized) % 2 == 0:
                return VerificationOutcome.valid()
            return VerificationOutcome.rejected(
                "National ID verification failed. Please check the number and try again."
            )

        if normalized[3] in TAX_ID_HOLDER_TYPES:
            return VerificationOutcome.valid()
        return VerificationOutcome.rejected(
            "Tax ID verification failed. Please check the number and try again."
        )
