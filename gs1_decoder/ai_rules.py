"""
AI Rule Table for the GS1 decoder

Static description of every supported GS1 Application Identifier: its display
label, how long its data field is, and what kind of value it carries.

Reference: https://ref.gs1.org/ai/
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union


class SemanticType(str, Enum):
    """Kind of value carried by an AI data field."""
    DATE = "date"
    NUMBER = "number"
    STRING = "string"


@dataclass(frozen=True)
class FixedLength:
    """Data field is exactly ``length`` characters; no separator follows it."""
    length: int


@dataclass(frozen=True)
class VariableLength:
    """Data field runs to the next GS separator, at most ``max_length`` characters."""
    max_length: int


LengthPolicy = Union[FixedLength, VariableLength]


@dataclass(frozen=True)
class AIRule:
    """
    Represents a single supported GS1 Application Identifier.

    Attributes:
        ai: The Application Identifier code (2-4 digits)
        label: Human-readable display name
        length_policy: FixedLength(n) or VariableLength(max_length)
        semantic_type: DATE, NUMBER or STRING
    """
    ai: str
    label: str
    length_policy: LengthPolicy
    semantic_type: SemanticType = SemanticType.STRING

    @property
    def is_fixed(self) -> bool:
        return isinstance(self.length_policy, FixedLength)


class TrieNode:
    """Trie node for AI prefix matching."""
    __slots__ = ['children', 'rule']

    def __init__(self):
        self.children: Dict[str, TrieNode] = {}
        self.rule: Optional[AIRule] = None


class AITrie:
    """
    Trie over AI codes for longest-prefix matching (4 -> 3 -> 2 digit AIs).

    A 4-digit code always wins over a shorter code that prefixes the same
    digits, so "7003..." resolves to AI 7003 and never to a 2-digit rule.
    """

    def __init__(self, rules: Mapping[str, AIRule]):
        self.root = TrieNode()
        self._max_len = 0
        for ai, rule in rules.items():
            self.insert(ai, rule)

    def insert(self, ai: str, rule: AIRule) -> None:
        node = self.root
        for char in ai:
            node = node.children.setdefault(char, TrieNode())
        node.rule = rule
        self._max_len = max(self._max_len, len(ai))

    def find_longest_match(self, text: str, start: int = 0) -> Tuple[Optional[AIRule], int]:
        """
        Find the longest AI code that prefixes ``text[start:]``.

        Returns:
            (AIRule, code_length) or (None, 0) if no code matches.
        """
        node = self.root
        last_match: Optional[AIRule] = None
        last_match_len = 0

        for i, char in enumerate(text[start:start + self._max_len]):
            node = node.children.get(char)
            if node is None:
                break
            if node.rule is not None:
                last_match = node.rule
                last_match_len = i + 1

        return last_match, last_match_len


def _fixed(ai: str, label: str, length: int,
           semantic_type: SemanticType = SemanticType.STRING) -> AIRule:
    return AIRule(ai, label, FixedLength(length), semantic_type)


def _variable(ai: str, label: str, max_length: int,
              semantic_type: SemanticType = SemanticType.STRING) -> AIRule:
    return AIRule(ai, label, VariableLength(max_length), semantic_type)


_DATE = SemanticType.DATE
_NUMBER = SemanticType.NUMBER

_RULES = (
    # Identification
    _fixed("00", "SSCC", 18),
    _fixed("01", "GTIN", 14),
    _fixed("02", "GTIN of Content", 14),
    # Traceability
    _variable("10", "Batch/Lot", 20),
    _variable("21", "Serial No", 20),
    _variable("22", "Consumer Product Variant", 20),
    _fixed("20", "Variant", 2),
    # Dates (YYMMDD)
    _fixed("11", "Prod. Date", 6, _DATE),
    _fixed("12", "Due Date", 6, _DATE),
    _fixed("13", "Pack Date", 6, _DATE),
    _fixed("15", "Best Before", 6, _DATE),
    _fixed("16", "Sell By", 6, _DATE),
    _fixed("17", "Expiration", 6, _DATE),
    _fixed("703", "Proc. Date", 10, _DATE),
    _fixed("7003", "Expiry Time", 10, _DATE),
    # Quantities
    _variable("30", "Count", 8, _NUMBER),
    _variable("37", "Count", 8, _NUMBER),
    # Additional product identification
    _variable("240", "Addl. Prod ID", 30),
    _variable("241", "Cust. Part No", 30),
    _variable("250", "Secondary Serial", 30),
    # Logistics
    _variable("400", "Customer PO", 30),
    _fixed("410", "Ship to GLN", 13),
    _variable("420", "Ship to Post", 20),
    _variable("8003", "GRAI", 30),
    # National healthcare reimbursement numbers
    _variable("710", "NHRN PZN", 20),
    _variable("711", "NHRN CIP", 20),
    _variable("712", "NHRN CN", 20),
    _variable("713", "NHRN DRN", 20),
    _variable("714", "NHRN AIM", 20),
    _variable("715", "NHRN NDC", 20),
)

AI_RULES: Mapping[str, AIRule] = MappingProxyType({rule.ai: rule for rule in _RULES})

AI_TRIE = AITrie(AI_RULES)


def get_rule(ai: str) -> Optional[AIRule]:
    """Get the rule for an exact AI code, or None if unsupported."""
    return AI_RULES.get(ai)


def find_longest_match(text: str, start: int = 0) -> Tuple[Optional[AIRule], int]:
    """Longest supported AI code prefixing ``text[start:]``."""
    return AI_TRIE.find_longest_match(text, start)
