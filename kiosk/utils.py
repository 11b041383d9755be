"""Money, id and date helpers."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from uuid import uuid4

from kiosk.constant import MONTH_ABBREVIATIONS, MONTH_NAMES, WEEKDAY_NAMES

CENT = Decimal("0.01")


def generate_id() -> str:
    return uuid4().hex


def to_decimal(value: object, default: Decimal | None = None) -> Decimal:
    """Coerce numbers and numeric strings to Decimal.

    Floats go through ``str`` so 0.1 stays 0.1. ``default`` is returned for
    empty or unparseable input; without one a ValueError is raised.
    """
    if isinstance(value, Decimal):
        return value
    if value is None or value == "" or isinstance(value, bool):
        if default is not None:
            return default
        raise ValueError(f"Not a number: {value!r}")
    try:
        result = Decimal(str(value).strip().replace(",", "."))
    except InvalidOperation:
        if default is not None:
            return default
        raise ValueError(f"Not a number: {value!r}") from None
    if not result.is_finite():
        if default is not None:
            return default
        raise ValueError(f"Not a number: {value!r}")
    return result


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(value: Decimal | int | float) -> str:
    """Format as Brazilian reais, e.g. ``R$ 1.234,56``."""
    amount = quantize_money(to_decimal(value))
    sign = "-" if amount < 0 else ""
    whole, cents = f"{abs(amount):.2f}".split(".")
    groups = []
    while len(whole) > 3:
        groups.insert(0, whole[-3:])
        whole = whole[:-3]
    groups.insert(0, whole)
    return f"R$ {sign}{'.'.join(groups)},{cents}"


def local_date_string(today: date | None = None) -> str:
    """Local calendar date as YYYY-MM-DD."""
    return (today or date.today()).isoformat()


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_iso(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_date_display(date_str: str) -> str:
    """Render a stored YYYY-MM-DD date as ``DD de mmm``."""
    if not date_str:
        return ""
    _, month, day = date_str.split("-")
    return f"{int(day):02d} de {MONTH_ABBREVIATIONS[int(month) - 1]}"


def current_date_extended(today: date | None = None) -> str:
    """Long form date for the header, e.g. ``sábado, 17 de outubro``."""
    today = today or date.today()
    return f"{WEEKDAY_NAMES[today.weekday()]}, {today.day} de {MONTH_NAMES[today.month - 1].lower()}"


def date_from_day(day: int, month_index: int, year: int) -> str:
    """Build YYYY-MM-DD from a zero-based month index."""
    return f"{year}-{month_index + 1:02d}-{day:02d}"
