"""
GS1 Barcode Decoder

Turns one scanned string into a validated DecodeResult describing a
pharmaceutical product unit (GTIN, batch/lot, serial, expiry, derived NDC).

Pipeline:
- Strip the symbology identifier (]d2, ]C1)
- Linear fast path: 12/13 digit UPC-A/EAN-13 codes with a valid check digit
- Otherwise tokenize the composite stream and validate each field
- Derive convenience fields and classify the barcode type

Nothing is raised for malformed input: every problem ends up as a warning and
``success`` is False.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..ai_rules import SemanticType, get_rule
from ..validators.validators import (
    DEFAULT_CENTURY_PIVOT,
    decode_gs1_date,
    days_until,
    derive_ndc,
    validate_gtin_checksum,
)
from .results import (
    BarcodeType,
    DecodedElement,
    DecodeIssue,
    DecodeResult,
    IssueCode,
)
from .tokenizer import DEFAULT_PREVIEW_LENGTH, StreamTokenizer, strip_symbology

logger = logging.getLogger(__name__)

LINEAR_CODE = re.compile(r'[0-9]{12,13}')

GTIN_AI = "01"
EXPIRY_AI = "17"
BATCH_AI = "10"
SERIAL_AI = "21"


@dataclass
class DecodeOptions:
    """
    Configuration options for decoding.

    Attributes:
        reference_time: Moment expiry is judged against (None = now, read once
                        per decode)
        century_pivot: Two-digit years above this map to 19YY, else 20YY
        preview_length: Characters of an unparsed segment quoted in warnings
    """
    reference_time: Optional[datetime] = None
    century_pivot: int = DEFAULT_CENTURY_PIVOT
    preview_length: int = DEFAULT_PREVIEW_LENGTH


class Decoder:
    """
    Main GS1 decoder class.

    Holds no per-scan state; one instance may decode any number of scans,
    from any number of threads.
    """

    def __init__(self, options: Optional[DecodeOptions] = None):
        self.options = options or DecodeOptions()

    def _now(self) -> datetime:
        if self.options.reference_time is not None:
            return self.options.reference_time
        return datetime.now()

    @staticmethod
    def _warn(result: DecodeResult, issue: DecodeIssue) -> None:
        result.issues.append(issue)
        result.warnings.append(issue.message)

    def _decode_linear(self, payload: str, result: DecodeResult) -> bool:
        """
        Fast path for UPC-A (12 digits) and EAN-13 (13 digits).

        Returns:
            True if the payload was a linear code with a valid check digit
        """
        if not LINEAR_CODE.fullmatch(payload):
            return False

        padded = payload.zfill(14)
        if not validate_gtin_checksum(padded):
            logger.debug("Linear candidate %r failed check digit, parsing as GS1 stream", payload)
            return False

        result.barcode_type = BarcodeType.EAN_13 if len(payload) == 13 else BarcodeType.UPC_A
        result.elements[GTIN_AI] = DecodedElement(
            ai=GTIN_AI,
            label=get_rule(GTIN_AI).label,
            value=padded,
            raw_value=payload,
            is_valid=True,
        )
        result.gtin = padded
        result.ndc = derive_ndc(padded)
        result.success = True
        logger.debug("Decoded %s %s", result.barcode_type.value, padded)
        return True

    def _process_field(self, ai: str, value: str, result: DecodeResult,
                       now: datetime, at_index: Optional[int] = None) -> None:
        """Validate one AI/value pair and store it under its AI."""
        rule = get_rule(ai)
        is_valid = True
        formatted = value

        if rule is None:
            self._warn(result, DecodeIssue(
                IssueCode.UNKNOWN_AI, f"Unknown AI ({ai})", ai=ai, at_index=at_index
            ))
            label = "Unknown AI"
        else:
            label = rule.label

        if ai == GTIN_AI and not validate_gtin_checksum(value):
            is_valid = False
            self._warn(result, DecodeIssue(
                IssueCode.INVALID_CHECK_DIGIT, "Invalid GTIN Check Digit", ai=ai, at_index=at_index
            ))

        if rule is not None and rule.semantic_type == SemanticType.DATE:
            decoded = decode_gs1_date(
                value,
                reference_time=now,
                century_pivot=self.options.century_pivot,
            )
            if decoded is None:
                is_valid = False
                self._warn(result, DecodeIssue(
                    IssueCode.INVALID_DATE, f"Invalid Date for AI ({ai})", ai=ai, at_index=at_index
                ))
            else:
                formatted = decoded.iso

        logger.debug("AI(%s) %r valid=%s", ai, value, is_valid)
        result.elements[ai] = DecodedElement(
            ai=ai,
            label=label,
            value=formatted,
            raw_value=value,
            is_valid=is_valid,
        )

    def _assemble(self, result: DecodeResult, now: datetime) -> None:
        """Derive convenience fields, barcode type and the success flag."""
        elements = result.elements

        gtin_element = elements.get(GTIN_AI)
        if gtin_element is not None:
            result.gtin = gtin_element.value
            result.ndc = derive_ndc(result.gtin)

        expiry_element = elements.get(EXPIRY_AI)
        if expiry_element is not None:
            decoded = decode_gs1_date(
                expiry_element.raw_value,
                reference_time=now,
                century_pivot=self.options.century_pivot,
            )
            if decoded is not None:
                result.expiry_date = decoded.iso
                result.is_expired = decoded.is_expired
                result.days_to_expiry = days_until(decoded.expires_at, now)

        if BATCH_AI in elements:
            result.batch_number = elements[BATCH_AI].value
        if SERIAL_AI in elements:
            result.serial_number = elements[SERIAL_AI].value

        if result.gtin is not None:
            if result.batch_number or result.serial_number or result.expiry_date:
                result.barcode_type = BarcodeType.GS1_DATAMATRIX
            else:
                result.barcode_type = BarcodeType.GS1_128

        result.success = bool(elements) and not result.warnings

    def decode(self, raw_input: str) -> DecodeResult:
        """
        Decode a scanned string.

        Args:
            raw_input: Text produced by the scanner or typed by a user

        Returns:
            DecodeResult; check ``success`` before trusting its data
        """
        result = DecodeResult(raw_data=raw_input)

        text = raw_input.strip()
        if not text:
            return result

        payload, symbology = strip_symbology(text)
        if symbology:
            logger.debug("Stripped %s symbology identifier", symbology)

        if not payload:
            self._warn(result, DecodeIssue(
                IssueCode.EMPTY_PAYLOAD, "No data after symbology identifier"
            ))
            return result

        if self._decode_linear(payload, result):
            return result

        now = self._now()
        tokenizer = StreamTokenizer(payload, self.options.preview_length)
        for token in tokenizer:
            self._process_field(token.ai, token.value, result, now, token.start_index)
        for issue in tokenizer.issues:
            self._warn(result, issue)

        self._assemble(result, now)
        return result


def decode(raw_input: str, *, options: Optional[DecodeOptions] = None) -> DecodeResult:
    """
    Decode a GS1 / EAN / UPC barcode string.

    Main entry point for the decoder.

    Args:
        raw_input: Scanned barcode text
        options: Optional decoding configuration

    Returns:
        DecodeResult with elements, derived fields and warnings

    Examples:
        >>> result = decode("(01)00036141456789(17)251231(10)BATCH001")
        >>> result.gtin
        '00036141456789'
        >>> result.barcode_type.value
        'GS1-DataMatrix'
    """
    return Decoder(options).decode(raw_input)
