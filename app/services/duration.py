"""
Duration parser: free-text task durations -> whole minutes.

Accepted notations (case-insensitive, first match wins)
-------------------------------------------------------
  1. "<number> h|hr|hour|hours"   -> number * 60
  2. "<number> m|min|mins"        -> number
  3. "<number>" (no unit)         -> hours if it has a decimal point and is <= 6
                                     ("1.5" -> 90), minutes otherwise ("45" -> 45)
  4. anything else                -> 0

The bare-number rule is a heuristic: "2" is read as 2 minutes, not 2 hours.
Parsing never raises; unreadable input is worth 0 minutes.
"""
from __future__ import annotations

import logging
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

logger = logging.getLogger(__name__)

_HOUR_RE = re.compile(r"([\d.]+)\s*h(?:ou)?r?")
_MINUTE_RE = re.compile(r"([\d.]+)\s*m(?:in)?")
_LEADING_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")
# Bare numbers also accept an exponent ("1e3" -> 1000 minutes).
_BARE_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:e[+-]?\d+)?")

# Bare decimals up to this value are read as hours.
BARE_DECIMAL_HOURS_MAX = Decimal("6")


def round_half_up(value: Union[Decimal, int, float]) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _leading_number(token: str, pattern: re.Pattern = _LEADING_NUMBER_RE) -> Optional[Decimal]:
    match = pattern.match(token)
    if match is None:
        return None
    return Decimal(match.group(0))


def _minutes(s: str) -> int:
    hour_match = _HOUR_RE.search(s)
    if hour_match:
        value = _leading_number(hour_match.group(1))
        if value is not None:
            return round_half_up(value * 60)

    minute_match = _MINUTE_RE.search(s)
    if minute_match:
        value = _leading_number(minute_match.group(1))
        if value is not None:
            return round_half_up(value)

    value = _leading_number(s, _BARE_NUMBER_RE)
    if value is None:
        return 0
    if "." in s and value <= BARE_DECIMAL_HOURS_MAX:
        return round_half_up(value * 60)
    return round_half_up(value)


def parse_duration_minutes(text: Optional[str]) -> int:
    """Convert a free-text duration such as "1.5h" or "30 min" to minutes."""
    if not text:
        return 0
    s = str(text).strip().lower()
    if not s:
        return 0
    try:
        return max(0, _minutes(s))
    except ArithmeticError:
        # Numbers too large for decimal precision (e.g. 30 digits, "1e400").
        logger.debug("Unreadable duration %r counted as 0 minutes", text)
        return 0
