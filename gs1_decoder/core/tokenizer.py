"""
GS1 Stream Tokenizer

Splits a composite GS1 element string into (AI, value) pairs.

Two input conventions are recognised:
- Bracketed human-readable text, e.g. "(01)00036141456789(17)251231"
- Raw scanner output, where fixed-length AIs run back to back and
  variable-length AIs are terminated by FNC1, transmitted as <GS> (ASCII 29)

Raw streams are walked left to right with longest-prefix AI matching. The
walk stops at the first position no supported AI matches; it does not try to
resynchronise further along the stream.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from ..ai_rules import FixedLength, find_longest_match
from .results import DecodeIssue, IssueCode

logger = logging.getLogger(__name__)

GS = '\x1d'

# Symbology identifier prefixes (ISO/IEC 15424)
SYMBOLOGY_PATTERNS = [
    (r'^\]d2', 'GS1 DataMatrix'),   # ]d2
    (r'^\]C1', 'GS1-128'),          # ]C1
]

SYMBOLOGY_REGEX = [(re.compile(p), name) for p, name in SYMBOLOGY_PATTERNS]

BRACKETED_AI = re.compile(r'\(([0-9]+)\)([^(]+)')

DEFAULT_PREVIEW_LENGTH = 10


def strip_symbology(text: str) -> Tuple[str, Optional[str]]:
    """
    Strip a symbology identifier prefix if present.

    Returns:
        (stripped_text, symbology_name or None)
    """
    for pattern, name in SYMBOLOGY_REGEX:
        match = pattern.match(text)
        if match:
            return text[match.end():], name
    return text, None


def is_bracketed(text: str) -> bool:
    """True if the text uses the human-readable "(AI)value" convention."""
    return '(' in text and ')' in text


def unparsed_message(segment: str, preview_length: int = DEFAULT_PREVIEW_LENGTH) -> str:
    return f"Unparsed data segment: {segment[:preview_length]}..."


@dataclass(frozen=True)
class Token:
    """One AI/value pair cut from the stream."""
    ai: str
    value: str
    start_index: int


class StreamTokenizer:
    """
    Iterates the (AI, value) pairs of a composite GS1 payload.

    Conditions that halt the walk are collected in ``issues`` once iteration
    finishes; they are always the last thing the tokenizer reports.
    """

    def __init__(self, payload: str, preview_length: int = DEFAULT_PREVIEW_LENGTH):
        self.payload = payload
        self.preview_length = preview_length
        self.issues: List[DecodeIssue] = []

    def __iter__(self) -> Iterator[Token]:
        if is_bracketed(self.payload):
            return self._tokenize_bracketed()
        return self._tokenize_raw()

    def _halt(self, code: IssueCode, segment: str, at_index: int,
              ai: Optional[str] = None) -> None:
        message = unparsed_message(segment, self.preview_length)
        logger.debug("Tokenizer halted at index %d (%s): %r", at_index, code.value, segment)
        self.issues.append(DecodeIssue(code, message, ai=ai, at_index=at_index))

    def _tokenize_bracketed(self) -> Iterator[Token]:
        matched = False
        for match in BRACKETED_AI.finditer(self.payload):
            matched = True
            yield Token(match.group(1), match.group(2), match.start())

        if not matched:
            self._halt(IssueCode.UNPARSED_SEGMENT, self.payload, 0)

    def _tokenize_raw(self) -> Iterator[Token]:
        stream = self.payload
        pos = 0

        while stream:
            rule, code_len = find_longest_match(stream)

            if rule is None:
                self._halt(IssueCode.UNPARSED_SEGMENT, stream, pos)
                return

            policy = rule.length_policy

            if isinstance(policy, FixedLength):
                data_end = code_len + policy.length
                if len(stream) < data_end:
                    # Not enough characters left for the declared length
                    self._halt(IssueCode.TRUNCATED_DATA, stream, pos, ai=rule.ai)
                    return
                value = stream[code_len:data_end]
                next_stream = stream[data_end:]
                consumed = data_end
            else:
                candidate = stream[code_len:]
                parts = candidate.split(GS)
                value = parts[0]

                if len(parts) > 1:
                    next_stream = GS.join(parts[1:])
                    consumed = code_len + len(value) + 1
                elif len(candidate) > policy.max_length:
                    # No separator: cut at the maximum length and carry on with
                    # the rest. Lossy when the scanner dropped an FNC1 inside
                    # a shorter value.
                    value = candidate[:policy.max_length]
                    next_stream = candidate[policy.max_length:]
                    consumed = code_len + policy.max_length
                else:
                    next_stream = ''
                    consumed = len(stream)

            if not value:
                self._halt(IssueCode.UNPARSED_SEGMENT, stream, pos)
                return

            yield Token(rule.ai, value, pos)
            stream = next_stream
            pos += consumed
