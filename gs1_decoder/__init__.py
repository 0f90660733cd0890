"""
GS1 Pharmaceutical Barcode Decoder

Decodes scanned GS1 element strings (GS1 DataMatrix, GS1-128) and linear
EAN-13 / UPC-A codes into a validated record of a pharmaceutical product unit:
GTIN, batch/lot, serial number, expiry date, a derived NDC and a list of
data quality warnings.

Based on GS1 General Specifications.
"""

from .ai_rules import (
    AI_RULES,
    AIRule,
    FixedLength,
    VariableLength,
    SemanticType,
    get_rule,
)
from .core.decoder import decode, Decoder, DecodeOptions
from .core.results import (
    BarcodeType,
    DecodedElement,
    DecodeIssue,
    DecodeResult,
    IssueCode,
)
from .validators.validators import (
    DecodedDate,
    validate_gtin_checksum,
    decode_gs1_date,
    derive_ndc,
)
from .formatters.json_formatter import (
    result_to_dict,
    result_to_json,
    build_simple_json,
)

__version__ = "1.0.0"
__all__ = [
    "AI_RULES",
    "AIRule",
    "FixedLength",
    "VariableLength",
    "SemanticType",
    "get_rule",
    "decode",
    "Decoder",
    "DecodeOptions",
    "BarcodeType",
    "DecodedElement",
    "DecodeIssue",
    "DecodeResult",
    "IssueCode",
    "DecodedDate",
    "validate_gtin_checksum",
    "decode_gs1_date",
    "derive_ndc",
    "result_to_dict",
    "result_to_json",
    "build_simple_json",
]
