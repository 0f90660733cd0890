"""
Core decoding modules for the GS1 decoder.
"""

from .decoder import decode, Decoder, DecodeOptions
from .results import (
    BarcodeType,
    DecodedElement,
    DecodeIssue,
    DecodeResult,
    IssueCode,
)
from .tokenizer import StreamTokenizer, Token, strip_symbology

__all__ = [
    "decode",
    "Decoder",
    "DecodeOptions",
    "BarcodeType",
    "DecodedElement",
    "DecodeIssue",
    "DecodeResult",
    "IssueCode",
    "StreamTokenizer",
    "Token",
    "strip_symbology",
]
