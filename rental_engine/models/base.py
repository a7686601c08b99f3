"""Base models shared across the engine."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class CustomerDetails:
    """Contact and delivery details captured with a rental request.

    Plain value data; only an admin correction changes it after submission.
    """

    full_name: str
    email: str
    phone: str
    address: str
    city: str
    state: str
    pincode: str

    @property
    def delivery_address(self) -> str:
        """Single-line delivery address."""
        return f"{self.address}, {self.city}, {self.state} - {self.pincode}"


@dataclass
class Event:
    """Standard event envelope for lifecycle notifications."""

    event_id: str
    event_type: str  # entity.action (e.g., rental.status_changed)
    event_time: datetime
    source: str  # Service/system that generated
    subject: str  # Entity ID affected
    data: dict
    metadata: dict = field(default_factory=dict)
