"""
Result types produced by the GS1 decoder.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional


class BarcodeType(str, Enum):
    """Logical barcode type inferred from the decoded fields."""
    GS1_DATAMATRIX = "GS1-DataMatrix"
    GS1_128 = "GS1-128"
    EAN_13 = "EAN-13"
    UPC_A = "UPC-A"
    UNKNOWN = "Unknown"


class IssueCode(str, Enum):
    """Warning codes."""
    INVALID_CHECK_DIGIT = "INVALID_CHECK_DIGIT"
    INVALID_DATE = "INVALID_DATE"
    UNPARSED_SEGMENT = "UNPARSED_SEGMENT"
    TRUNCATED_DATA = "TRUNCATED_DATA"
    UNKNOWN_AI = "UNKNOWN_AI"
    EMPTY_PAYLOAD = "EMPTY_PAYLOAD"
    CALLER = "CALLER"


@dataclass(frozen=True)
class DecodeIssue:
    """Structured form of one warning."""
    code: IssueCode
    message: str
    ai: Optional[str] = None
    at_index: Optional[int] = None


@dataclass(frozen=True)
class DecodedElement:
    """
    One AI field found in a scan.

    Attributes:
        ai: Application Identifier code
        label: Human-readable name
        value: Validated value (dates reformatted to ISO)
        raw_value: Value as extracted from the stream
        is_valid: Whether validation passed
    """
    ai: str
    label: str
    value: str
    raw_value: str
    is_valid: bool = True


@dataclass
class DecodeResult:
    """
    Complete result of decoding one scan.

    Attributes:
        raw_data: Original, untouched input
        success: True only if elements were decoded and nothing was warned
        barcode_type: Inferred logical barcode type
        elements: Decoded elements keyed by AI, in stream order
        gtin: Value of AI 01, if present (even when its check digit fails)
        expiry_date: ISO date from AI 17, if it decoded
        batch_number: Value of AI 10
        serial_number: Value of AI 21
        ndc: Display NDC derived from the GTIN
        is_expired: True if AI 17 decoded and lies in the past
        days_to_expiry: Days until expiry, rounded up (negative once expired)
        warnings: Human-readable data quality warnings, in the order raised
        issues: Structured mirror of warnings
    """
    raw_data: str
    success: bool = False
    barcode_type: BarcodeType = BarcodeType.UNKNOWN
    elements: Dict[str, DecodedElement] = field(default_factory=dict)
    gtin: Optional[str] = None
    expiry_date: Optional[str] = None
    batch_number: Optional[str] = None
    serial_number: Optional[str] = None
    ndc: Optional[str] = None
    is_expired: bool = False
    days_to_expiry: Optional[int] = None
    warnings: List[str] = field(default_factory=list)
    issues: List[DecodeIssue] = field(default_factory=list)

    def with_warning(self, message: str) -> "DecodeResult":
        """
        Return a copy carrying one more warning.

        Used by callers that flag conditions the decoder cannot see, such as
        a recent duplicate scan. The copy is never successful.
        """
        return replace(
            self,
            elements=dict(self.elements),
            warnings=self.warnings + [message],
            issues=self.issues + [DecodeIssue(IssueCode.CALLER, message)],
            success=False,
        )

    def lookup_key(self) -> str:
        """Key for a product catalog lookup: the GTIN, else the trimmed input."""
        return self.gtin or self.raw_data.strip()
