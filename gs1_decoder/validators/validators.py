"""
GS1 Validation Functions

Field-level checks used while decoding a scan:
- Mod10 check digit for GTIN-14
- GS1 six-digit dates (YYMMDD, with DD=00 meaning end of month)
- NDC-style display code derived from a GTIN

Based on GS1 General Specifications.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta


# Two-digit years above the pivot belong to the 1900s
DEFAULT_CENTURY_PIVOT = 70

_GTIN14 = re.compile(r'[0-9]{14}')
_YYMMDD = re.compile(r'^[0-9]{6}')

_SECONDS_PER_DAY = 24 * 3600


def calculate_check_digit_mod10(digits: str) -> int:
    """
    Calculate GS1 Mod10 check digit.

    Algorithm (GS1 General Specifications):
    1. From right to left, alternate multipliers 3 and 1
    2. Sum all products
    3. Check digit = nearest multiple of ten at or above the sum, minus the sum

    Args:
        digits: Numeric string without check digit

    Returns:
        Calculated check digit (0-9)
    """
    if not digits or not digits.isdigit():
        raise ValueError("Input must be a non-empty numeric string")

    total = 0
    for i, digit in enumerate(reversed(digits)):
        multiplier = 3 if i % 2 == 0 else 1
        total += int(digit) * multiplier

    nearest_ten = math.ceil(total / 10) * 10
    return nearest_ten - total


def validate_gtin_checksum(value: str) -> bool:
    """
    Validate a GTIN-14 (AI 01) against its trailing check digit.

    Anything other than exactly 14 ASCII digits is simply invalid.
    """
    if not value or not _GTIN14.fullmatch(value):
        return False
    return calculate_check_digit_mod10(value[:-1]) == int(value[-1])


@dataclass(frozen=True)
class DecodedDate:
    """
    A decoded GS1 date.

    Attributes:
        expires_at: Last instant of the calendar day (23:59:59.999)
        iso: ISO formatted calendar date (YYYY-MM-DD)
        is_expired: True if expires_at lies before the reference time
    """
    expires_at: datetime
    iso: str
    is_expired: bool


def resolve_year(yy: int, century_pivot: int = DEFAULT_CENTURY_PIVOT) -> int:
    """Map a two-digit year onto a full year using the century pivot."""
    return 1900 + yy if yy > century_pivot else 2000 + yy


def decode_gs1_date(
    value: str,
    *,
    reference_time: Optional[datetime] = None,
    century_pivot: int = DEFAULT_CENTURY_PIVOT,
) -> Optional[DecodedDate]:
    """
    Decode a GS1 YYMMDD date.

    Only the first six characters are read, so the YYMMDD head of longer date
    fields (e.g. YYMMDDHHMM) decodes the same way.

    DD=00 resolves to the last day of the month. Out-of-range months and days
    are normalized by calendar arithmetic (month 13 is January of the next
    year) instead of being rejected.

    Args:
        value: Date string, at least 6 digits
        reference_time: Moment the expiry verdict is taken against
                        (defaults to now)
        century_pivot: YY above this value maps to 19YY, otherwise 20YY

    Returns:
        DecodedDate, or None if the value is too short or not numeric
    """
    if not value or not _YYMMDD.match(value):
        return None

    yy = int(value[0:2])
    mm = int(value[2:4])
    dd = int(value[4:6])

    start_of_year = datetime(resolve_year(yy, century_pivot), 1, 1)
    if dd == 0:
        day = start_of_year + relativedelta(months=mm, days=-1)
    else:
        day = start_of_year + relativedelta(months=mm - 1, days=dd - 1)

    now = reference_time if reference_time is not None else datetime.now()
    # End of day in the reference clock's zone
    expires_at = day.replace(hour=23, minute=59, second=59, microsecond=999000,
                             tzinfo=now.tzinfo)

    return DecodedDate(
        expires_at=expires_at,
        iso=expires_at.date().isoformat(),
        is_expired=expires_at < now,
    )


def days_until(moment: datetime, reference_time: Optional[datetime] = None) -> int:
    """Whole days from reference_time to moment, rounded up (negative once past)."""
    now = reference_time if reference_time is not None else datetime.now()
    delta: timedelta = moment - now
    return math.ceil(delta.total_seconds() / _SECONDS_PER_DAY)


def derive_ndc(gtin: Optional[str]) -> Optional[str]:
    """
    Derive a display NDC from a GTIN-14.

    Naive heuristic: drop the indicator/leading zero and the check digit and
    group the remaining 11 digits as 5-4-2. This is not a registry lookup.
    """
    if not gtin:
        return None
    core = gtin[2:13]
    if len(core) != 11:
        return None
    return f"{core[0:5]}-{core[5:9]}-{core[9:]}"
