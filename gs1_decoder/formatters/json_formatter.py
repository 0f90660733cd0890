"""
JSON Formatter for GS1 decode results

Provides:
- A full, stable dictionary form of a DecodeResult
- A simple name -> value form with human-readable field names
"""

from __future__ import annotations

import json
from typing import Any, Dict

from ..core.results import DecodeResult


# Derived field to human-readable name mapping
FIELD_NAMES = {
    "gtin": "GTIN Code",
    "expiry_date": "Expiry Date",
    "batch_number": "Batch/Lot Number",
    "serial_number": "Serial Number",
    "ndc": "NDC",
}


def result_to_dict(result: DecodeResult) -> Dict[str, Any]:
    """Convert a DecodeResult to a JSON-ready dictionary."""
    return {
        'success': result.success,
        'barcode_type': result.barcode_type.value,
        'gtin': result.gtin,
        'expiry_date': result.expiry_date,
        'batch_number': result.batch_number,
        'serial_number': result.serial_number,
        'ndc': result.ndc,
        'is_expired': result.is_expired,
        'days_to_expiry': result.days_to_expiry,
        'elements': [
            {
                'ai': e.ai,
                'label': e.label,
                'value': e.value,
                'raw_value': e.raw_value,
                'is_valid': e.is_valid,
            }
            for e in result.elements.values()
        ],
        'warnings': list(result.warnings),
        'issues': [
            {
                'code': i.code.value,
                'message': i.message,
                'ai': i.ai,
                'at_index': i.at_index,
            }
            for i in result.issues
        ],
        'raw_data': result.raw_data,
    }


def result_to_json(result: DecodeResult, indent: int = 2) -> str:
    """Serialize a DecodeResult as JSON."""
    return json.dumps(result_to_dict(result), ensure_ascii=False, indent=indent)


def build_simple_json(result: DecodeResult) -> Dict[str, Any]:
    """
    Build a simple name -> value dict of the derived fields.

    Fields the scan did not carry are left out. Elements other than the
    well-known ones are added under their label.

    Example:
        >>> build_simple_json(decode("(01)00036141456789(17)251231(10)BATCH001"))
        {'GTIN Code': '00036141456789', 'Expiry Date': '2025-12-31',
         'Batch/Lot Number': 'BATCH001', 'NDC': '03614-1456-78'}
    """
    output: Dict[str, Any] = {}
    for attr, name in FIELD_NAMES.items():
        value = getattr(result, attr)
        if value is not None:
            output[name] = value

    for ai, element in result.elements.items():
        if ai in ("01", "17", "10", "21"):
            continue
        output.setdefault(element.label, element.value)

    return output
