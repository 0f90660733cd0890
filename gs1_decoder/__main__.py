"""
CLI interface for the GS1 decoder.

Usage:
    python -m gs1_decoder "<barcode text>" [options]

Options:
    --json                Output the full result as JSON
    --simple              Output human-readable field names and values as JSON
    --reference-time      Judge expiry against this ISO datetime instead of now
    --century-pivot       Two-digit years above this map to the 1900s
    -v, --verbose         Log decoding steps to stderr
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from typing import Optional

from .core.decoder import decode, DecodeOptions
from .core.results import DecodeResult
from .formatters.json_formatter import build_simple_json, result_to_json
from .validators.validators import DEFAULT_CENTURY_PIVOT


def format_result(result: DecodeResult) -> str:
    """Format a decode result for display."""
    lines = [
        "=" * 60,
        "GS1 Decode Result",
        "=" * 60,
        f"Raw Input: {result.raw_data!r}",
        f"Barcode Type: {result.barcode_type.value}",
        f"Success: {result.success}",
    ]

    for label, value in (
        ("GTIN", result.gtin),
        ("NDC", result.ndc),
        ("Batch/Lot", result.batch_number),
        ("Serial", result.serial_number),
        ("Expiry", result.expiry_date),
    ):
        if value is not None:
            lines.append(f"{label}: {value}")

    if result.days_to_expiry is not None:
        status = "EXPIRED" if result.is_expired else "valid"
        lines.append(f"Days to Expiry: {result.days_to_expiry} ({status})")

    lines.extend([
        "",
        "Elements:",
        "-" * 40,
    ])
    for element in result.elements.values():
        lines.append(f"  AI({element.ai}): {element.label}")
        lines.append(f"    Value: {element.value!r}")
        if element.raw_value != element.value:
            lines.append(f"    Raw: {element.raw_value!r}")
        lines.append(f"    Valid: {element.is_valid}")

    if result.warnings:
        lines.extend([
            "",
            "Warnings:",
            "-" * 40,
        ])
        for issue in result.issues:
            lines.append(f"  [{issue.code.value}] {issue.message}")

    return '\n'.join(lines)


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='gs1_decoder',
        description='Decode GS1 / EAN / UPC barcode strings'
    )

    parser.add_argument(
        'barcode',
        help='Barcode data to decode'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Output the full result as JSON'
    )

    parser.add_argument(
        '--simple',
        action='store_true',
        help='Output human-readable field names and values as JSON'
    )

    parser.add_argument(
        '--reference-time',
        type=datetime.fromisoformat,
        default=None,
        help='ISO datetime expiry is judged against (defaults to now)'
    )

    parser.add_argument(
        '--century-pivot',
        type=int,
        default=DEFAULT_CENTURY_PIVOT,
        help='Two-digit years above this value map to 19YY'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log decoding steps to stderr'
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    options = DecodeOptions(
        reference_time=args.reference_time,
        century_pivot=args.century_pivot,
    )

    result = decode(args.barcode, options=options)

    if args.simple:
        print(json.dumps(build_simple_json(result), indent=2, ensure_ascii=False))
    elif args.json:
        print(result_to_json(result))
    else:
        print(format_result(result))

    return 0 if result.success else 1


if __name__ == '__main__':
    sys.exit(main())
