"""Document number formats and display helpers.

National ID numbers are 12 digits, optionally written in three groups of
four separated by the same single space or hyphen. Tax ID numbers are
five letters, four digits and a final letter; lower-case input is
accepted and upper-cased.
"""

import re

from rental_engine.exceptions import InvalidDocumentFormat
from rental_engine.models.rental.enums import DocumentKind

NATIONAL_ID_PATTERN = re.compile(r"^[0-9]{4}([ -]?)[0-9]{4}\1[0-9]{4}$")
TAX_ID_PATTERN = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")

# 4th character of a tax id encodes the holder type
TAX_ID_HOLDER_TYPES = {
    "P": "Individual",
    "F": "Firm/LLP",
    "A": "Association of Persons",
    "T": "Trust",
    "B": "Body of Individuals",
    "C": "Company",
    "G": "Government",
    "H": "HUF",
    "L": "Local Authority",
    "J": "Artificial Juridical Person",
}

FORMAT_HINTS = {
    DocumentKind.NATIONAL_ID: "a 12-digit number, optionally grouped as 1234 5678 9012",
    DocumentKind.TAX_ID: "5 letters, 4 digits and 1 letter (e.g., ABCDE1234F)",
}


def is_well_formed(kind: DocumentKind, number: str) -> bool:
    """Check a document number against its kind's format."""
    value = (number or "").strip()
    # str.upper() can turn one non-ASCII letter into two ASCII ones
    if not value.isascii():
        return False
    if kind == DocumentKind.NATIONAL_ID:
        return bool(NATIONAL_ID_PATTERN.match(value))
    if kind == DocumentKind.TAX_ID:
        return bool(TAX_ID_PATTERN.match(value.upper()))
    return False


def normalize_number(kind: DocumentKind, number: str) -> str:
    """Return the canonical form of a document number.

    Raises
    ------
    InvalidDocumentFormat
        If the number does not match the format for ``kind``.
    """
    if not is_well_formed(kind, number):
        raise InvalidDocumentFormat(
            f"Invalid {kind.value} number {number!r}: expected {FORMAT_HINTS[kind]}"
        )
    value = number.strip()
    if kind == DocumentKind.NATIONAL_ID:
        return re.sub(r"[ -]", "", value)
    return value.upper()


def format_national_id(number: str) -> str:
    """Group a national id for display: ``1234 5678 9012``."""
    digits = normalize_number(DocumentKind.NATIONAL_ID, number)
    return f"{digits[:4]} {digits[4:8]} {digits[8:]}"


def mask_national_id(number: str) -> str:
    """Hide all but the last four digits: ``XXXX XXXX 9012``."""
    digits = normalize_number(DocumentKind.NATIONAL_ID, number)
    return f"XXXX XXXX {digits[8:]}"


def tax_id_holder_type(number: str) -> dict[str, str]:
    """Decode the holder type and series from a tax id."""
    value = normalize_number(DocumentKind.TAX_ID, number)
    return {
        "holder_type": TAX_ID_HOLDER_TYPES.get(value[3], "Unknown"),
        "series": value[:3],
    }
