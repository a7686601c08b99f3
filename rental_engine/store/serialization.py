"""Record shape of a persisted rental request.

Field names here are the serialization contract other collaborators
(e.g., a reporting view) depend on. Partial updates address fields by
dotted path, e.g. ``documents.nationalId.manuallyVerified``.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any

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

STATUS = "status"
PAYMENT_STATUS = "paymentStatus"
ADMIN_NOTES = "adminNotes"
UPDATED_AT = "updatedAt"
CHEQUE_SUBMITTED = "documents.chequeSubmitted"

RENTAL_TERMS_FIELDS = (
    "startDate",
    "endDate",
    "durationDays",
    "rentAmount",
    "securityDeposit",
    "advancePayment",
    "totalAmount",
)


_DOCUMENT_LAYOUT = {"number": None, "imageRef": None, "manuallyVerified": None}

# Every addressable field of a record; None marks a leaf
RECORD_LAYOUT: dict[str, Any] = {
    "id": None,
    "userId": None,
    "productId": None,
    "productName": None,
    "customerDetails": dict.fromkeys(
        ("fullName", "email", "phone", "address", "city", "state", "pincode")
    ),
    "documents": {
        DocumentKind.NATIONAL_ID.value: _DOCUMENT_LAYOUT,
        DocumentKind.TAX_ID.value: _DOCUMENT_LAYOUT,
        "chequeSubmitted": None,
        "chequeImageRef": None,
    },
    "rentalTerms": dict.fromkeys(RENTAL_TERMS_FIELDS),
    "status": None,
    "paymentStatus": None,
    "adminNotes": None,
    "createdAt": None,
    "updatedAt": None,
}


def check_paths(fields: Mapping[str, Any]) -> None:
    """Ensure every dotted path names a leaf field of the record layout.

    Raises
    ------
    KeyError
        With the first unknown or non-leaf path.
    """
    for path in fields:
        node: Any = RECORD_LAYOUT
        for name in path.split("."):
            if not isinstance(node, dict) or name not in node:
                raise KeyError(path)
            node = node[name]
        if node is not None:
            raise KeyError(path)


def manually_verified_path(kind: DocumentKind) -> str:
    """Dotted path of a document's manual verification flag."""
    return f"documents.{kind.value}.manuallyVerified"


def rental_terms_fields(terms: RentalTerms) -> dict[str, Any]:
    """Dotted-path updates covering every rental terms field."""
    record = _terms_to_record(terms)
    return {f"rentalTerms.{name}": record[name] for name in RENTAL_TERMS_FIELDS}


def to_record(request: RentalRequest) -> dict[str, Any]:
    """Convert a request to its record shape, keeping native date types."""
    details = request.customer_details
    docs = request.documents
    return {
        "id": request.id,
        "userId": request.user_id,
        "productId": request.product_id,
        "productName": request.product_name,
        "customerDetails": {
            "fullName": details.full_name,
            "email": details.email,
            "phone": details.phone,
            "address": details.address,
            "city": details.city,
            "state": details.state,
            "pincode": details.pincode,
        },
        "documents": {
            DocumentKind.NATIONAL_ID.value: _document_to_record(docs.national_id),
            DocumentKind.TAX_ID.value: _document_to_record(docs.tax_id),
            "chequeSubmitted": docs.cheque_submitted,
            "chequeImageRef": docs.cheque_image_ref,
        },
        "rentalTerms": _terms_to_record(request.rental_terms),
        "status": request.status,
        "paymentStatus": request.payment_status,
        "adminNotes": request.admin_notes,
        "createdAt": request.created_at,
        "updatedAt": request.updated_at,
    }


def to_json_record(request: RentalRequest) -> dict[str, Any]:
    """Record shape with every value JSON-serializable."""
    return serialize_value(to_record(request))


def from_record(record: Mapping[str, Any]) -> RentalRequest:
    """Build a request from its record shape.

    Accepts native ``date``/``datetime`` values or ISO-8601 strings.

    Raises
    ------
    KeyError
        If a required field is missing.
    InvalidRentalTerms, InvalidFinancialTerms
        If the stored terms break their invariants.
    """
    details = record["customerDetails"]
    docs = record["documents"]
    terms = record["rentalTerms"]
    return RentalRequest(
        id=record["id"],
        user_id=record["userId"],
        product_id=record["productId"],
        product_name=record.get("productName"),
        customer_details=CustomerDetails(
            full_name=details["fullName"],
            email=details["email"],
            phone=details["phone"],
            address=details["address"],
            city=details["city"],
            state=details["state"],
            pincode=details["pincode"],
        ),
        documents=Documents(
            national_id=_document_from_record(DocumentKind.NATIONAL_ID, docs),
            tax_id=_document_from_record(DocumentKind.TAX_ID, docs),
            cheque_submitted=bool(docs.get("chequeSubmitted", False)),
            cheque_image_ref=docs.get("chequeImageRef"),
        ),
        rental_terms=RentalTerms(
            start_date=_parse_date(terms["startDate"]),
            end_date=_parse_date(terms["endDate"]),
            duration_days=int(terms["durationDays"]),
            rent_amount=terms["rentAmount"],
            security_deposit=terms["securityDeposit"],
            advance_payment=terms["advancePayment"],
            total_amount=terms["totalAmount"],
        ),
        status=RentalStatus(record["status"]),
        payment_status=PaymentStatus(record["paymentStatus"]),
        admin_notes=record.get("adminNotes") or "",
        created_at=_parse_datetime(record["createdAt"]),
        updated_at=_parse_datetime(record["updatedAt"]),
    )


def apply_field_updates(record: Mapping[str, Any], fields: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``record`` with every dotted-path field replaced.

    Only existing paths may be written.

    Raises
    ------
    KeyError
        If a path does not exist in the record.
    """
    check_paths(fields)
    updated = copy.deepcopy(dict(record))
    for path, value in fields.items():
        *parents, leaf = path.split(".")
        node = updated
        for name in parents:
            child = node.get(name) if isinstance(node, dict) else None
            if not isinstance(child, dict):
                raise KeyError(path)
            node = child
        if leaf not in node:
            raise KeyError(path)
        node[leaf] = value
    return updated


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def _document_to_record(document: DocumentRecord) -> dict[str, Any]:
    return {
        "number": document.number,
        "imageRef": document.image_ref,
        "manuallyVerified": document.manually_verified,
    }


def _document_from_record(kind: DocumentKind, docs: Mapping[str, Any]) -> DocumentRecord:
    data = docs[kind.value]
    return DocumentRecord(
        kind=kind,
        number=data["number"],
        image_ref=data.get("imageRef"),
        manually_verified=bool(data.get("manuallyVerified", False)),
    )


def _terms_to_record(terms: RentalTerms) -> dict[str, Any]:
    return {
        "startDate": terms.start_date,
        "endDate": terms.end_date,
        "durationDays": terms.duration_days,
        "rentAmount": terms.rent_amount,
        "securityDeposit": terms.security_deposit,
        "advancePayment": terms.advance_payment,
        "totalAmount": terms.total_amount,
    }


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value))
