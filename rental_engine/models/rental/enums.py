"""Enumeration types for rental domain entities.

Values are the persisted wire form of each state.
"""

from enum import Enum


class RentalStatus(str, Enum):
    PENDING = "pending"
    DOCUMENT_VERIFICATION = "document_verification"
    APPROVED = "approved"
    DELIVERED = "delivered"
    RETURNED = "returned"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    ADVANCE_PAID = "advance_paid"
    FULLY_PAID = "full_paid"
    REFUNDED = "refunded"


class DocumentKind(str, Enum):
    NATIONAL_ID = "nationalId"
    TAX_ID = "taxId"
