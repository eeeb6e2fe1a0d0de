"""
app/mappers/value_types.py

Runtime type inference and numeric/date coercion for raw record values.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

ISO_DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")

DATE_FORMATS: tuple[str, ...] = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)


def coerce_number(value: Any) -> float | None:
    """
    Return a finite float for numeric values or fully numeric strings.

    Booleans are not numbers here even though they subclass int.
    """

    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None
    if not isinstance(value, str):
        return None

    raw = value.strip()
    if not raw or "_" in raw:
        return None
    try:
        parsed = Decimal(raw)
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    number = float(parsed)
    return number if math.isfinite(number) else None


def parse_iso_date(value: str) -> date | None:
    """
    Parse a strict `YYYY-MM-DD` calendar date.
    """

    if not ISO_DATE_PATTERN.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def looks_like_date(value: str) -> bool:
    """
    Return True for ISO-shaped strings or strings parseable as a date/time.
    """

    raw = value.strip()
    if not raw:
        return False
    if ISO_DATE_PATTERN.match(raw):
        return True

    normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        datetime.fromisoformat(normalized)
        return True
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            datetime.strptime(raw, fmt)
            return True
        except ValueError:
            continue
    return False


def infer_value_type(value: Any) -> str:
    """
    Infer the GETS type of a sample value.
    """

    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        if coerce_number(value) is not None:
            return "number"
        if looks_like_date(value):
            return "date"
    return "string"


def is_type_compatible(expected_type: str, inferred_type: str) -> bool:
    """
    Exact matches are compatible; number and date fields also accept raw text.
    """

    if expected_type == inferred_type:
        return True
    return expected_type in {"number", "date"} and inferred_type == "string"
