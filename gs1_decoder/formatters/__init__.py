"""
Output formatters for the GS1 decoder.
"""

from .json_formatter import (
    FIELD_NAMES,
    result_to_dict,
    result_to_json,
    build_simple_json,
)

__all__ = [
    "FIELD_NAMES",
    "result_to_dict",
    "result_to_json",
    "build_simple_json",
]
