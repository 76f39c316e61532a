"""
Amount and date normalization shared by every statement layout.

Amounts use the Moroccan print format: digit groups separated by a single
space (regular, no-break or narrow no-break), a decimal comma and exactly two
fractional digits, e.g. ``1 200,00``.
"""
import calendar
import re
from decimal import Decimal, InvalidOperation

from dirham.common.models import Direction
from .exceptions import InvalidDateComponent

# Never starts on a standalone year: a date printed right before the amount stays in the label
AMOUNT_PATTERN = r"(?!20\d{2}\s)\d+(?:[ \u00a0\u202f]\d{3})*,\d{2}"

AMOUNT_RE = re.compile(rf"^{AMOUNT_PATTERN}$")

# A standalone year token, unless it is the integer part of an amount ("2024,00")
_YEAR_RE = re.compile(r"\b20\d{2}\b(?!,)")

_EMBEDDED_DATE_RES = [
    re.compile(r"\d{2}/\d{2}/\d{4}"),
    re.compile(r"\d{2}/\d{2}/\d{2}"),
    re.compile(r"\d{2}\s+\d{2}\s+\d{4}"),
    re.compile(r"\b20\d{2}\b"),
]

_WHITESPACE_RE = re.compile(r"\s+")

MIN_YEAR = 2000
MAX_YEAR = 2030


def parse_amount(amount_text) -> Decimal:
    """
    Parse a printed amount to a Decimal.

    Year-looking tokens and whitespace are dropped and the decimal comma becomes
    a point. Unparseable input yields ``Decimal(0)``; callers treat zero as invalid.

    Examples:
        "1 200,00"        -> Decimal("1200.00")
        "2024 100,00"     -> Decimal("100.00")
        "abc"             -> Decimal("0")
    """
    if not amount_text or not isinstance(amount_text, str):
        return Decimal(0)

    cleaned = _YEAR_RE.sub("", amount_text)
    cleaned = _WHITESPACE_RE.sub("", cleaned).replace(",", ".", 1)
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return Decimal(0)
    if not value.is_finite():
        return Decimal(0)
    return value


def apply_sign(magnitude: Decimal, direction: Direction) -> Decimal:
    """Signed amount recomputed from the direction, ignoring any printed sign."""
    if direction is Direction.CREDIT:
        return abs(magnitude)
    return -abs(magnitude)


def format_iso_date(year: int, month: int, day: int) -> str:
    return f"{year:04d}-{month:02d}-{day:02d}"


def _to_int(value, name: str) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidDateComponent(f"Invalid {name}: {value!r}")


def build_date_iso(day, month, year, min_year: int = MIN_YEAR, max_year: int = MAX_YEAR) -> str:
    """
    Build a ``YYYY-MM-DD`` date from loose components.

    A day past the end of the month is clamped to the month's last day
    (31/02/2024 -> 2024-02-29). Any other out-of-range component raises
    ``InvalidDateComponent``.
    """
    if day in (None, "") or month in (None, "") or year in (None, ""):
        raise InvalidDateComponent(f"Invalid date components: day={day}, month={month}, year={year}")

    day_num = _to_int(day, "day")
    month_num = _to_int(month, "month")
    year_num = _to_int(year, "year")

    if not 1 <= day_num <= 31:
        raise InvalidDateComponent(f"Invalid day: {day_num}")
    if not 1 <= month_num <= 12:
        raise InvalidDateComponent(f"Invalid month: {month_num}")
    if not min_year <= year_num <= max_year:
        raise InvalidDateComponent(f"Invalid year: {year_num}")

    last_day = calendar.monthrange(year_num, month_num)[1]
    return format_iso_date(year_num, month_num, min(day_num, last_day))


def clean_description(text: str) -> str:
    """Drop embedded dates and year tokens, collapse whitespace."""
    if not text:
        return ""
    for pattern in _EMBEDDED_DATE_RES:
        text = pattern.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()

