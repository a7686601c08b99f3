"""Document number formats and the automated verification clients."""

from rental_engine.verification.client import (
    GovernmentVerificationClient,
    OfflineVerificationClient,
    VerificationClient,
)
from rental_engine.verification.formats import (
    format_national_id,
    is_well_formed,
    mask_national_id,
    normalize_number,
    tax_id_holder_type,
)

__all__ = [
    "GovernmentVerificationClient",
    "OfflineVerificationClient",
    "VerificationClient",
    "format_national_id",
    "is_well_formed",
    "mask_national_id",
    "normalize_number",
    "tax_id_holder_type",
]
