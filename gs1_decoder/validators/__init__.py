"""
Validation modules for the GS1 decoder.
"""

from .validators import (
    DEFAULT_CENTURY_PIVOT,
    DecodedDate,
    calculate_check_digit_mod10,
    validate_gtin_checksum,
    decode_gs1_date,
    resolve_year,
    days_until,
    derive_ndc,
)

__all__ = [
    "DEFAULT_CENTURY_PIVOT",
    "DecodedDate",
    "calculate_check_digit_mod10",
    "validate_gtin_checksum",
    "decode_gs1_date",
    "resolve_year",
    "days_until",
    "derive_ndc",
]
