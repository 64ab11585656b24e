"""Normalizers for amounts, dates and times found in statement text."""

import re
from datetime import date
from decimal import Decimal, InvalidOperation

from statement_parser.errors import MalformedAmount, UnparseableDate

CURRENCY_GLYPHS = "₽$€£¥"

_CURRENCY_RE = re.compile(rf"[{CURRENCY_GLYPHS}]|руб\.?", re.IGNORECASE)
_NUMERIC_PREFIX_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)")

# (pattern, is_day_first)
_DATE_FORMATS = (
    (re.compile(r"(\d{2})\.(\d{2})\.(\d{4})"), True),
    (re.compile(r"(\d{2})/(\d{2})/(\d{4})"), True),
    (re.compile(r"(\d{4})-(\d{2})-(\d{2})"), False),
)

_TIME_RE = re.compile(r"(?<!\d)(\d{2}):(\d{2})(?::\d{2})?(?!\d)")


def parse_amount(raw: str) -> Decimal:
    """Convert a locale-formatted amount into a Decimal.

    Whitespace is removed, every comma becomes a dot and currency glyphs
    are stripped before the leading numeric part is read, so
    ``"1 500,50 ₽"`` gives ``Decimal("1500.50")``. The sign is kept as
    written; debit/credit policy belongs to the caller.

    Raises:
        MalformedAmount: if no number can be read.
    """
    if raw is None:
        raise MalformedAmount("")

    cleaned = re.sub(r"\s", "", raw)
    cleaned = cleaned.replace(",", ".")
    cleaned = _CURRENCY_RE.sub("", cleaned)

    match = _NUMERIC_PREFIX_RE.match(cleaned)
    if not match:
        raise MalformedAmount(raw)

    number = match.group(0)
    if number.endswith("."):
        number = number[:-1]
    try:
        return Decimal(number)
    except InvalidOperation as exc:
        raise MalformedAmount(raw) from exc


def parse_date(raw: str) -> str:
    """Return ``YYYY-MM-DD`` for ``DD.MM.YYYY``, ``DD/MM/YYYY`` or ``YYYY-MM-DD``.

    Raises:
        UnparseableDate: for any other shape or an impossible calendar date.
    """
    if raw:
        for pattern, day_first in _DATE_FORMATS:
            match = pattern.search(raw)
            if not match:
                continue
            if day_first:
                day, month, year = match.groups()
            else:
                year, month, day = match.groups()
            try:
                date(int(year), int(month), int(day))
            except ValueError as exc:
                raise UnparseableDate(raw) from exc
            return f"{year}-{month}-{day}"
    raise UnparseableDate(raw)


def parse_time(raw: str | None) -> str | None:
    """Return ``HH:MM`` (seconds dropped) or None when there is no time."""
    if not raw:
        return None
    match = _TIME_RE.search(raw)
    if not match:
        return None
    hours, minutes = match.groups()
    if int(hours) > 23 or int(minutes) > 59:
        return None
    return f"{hours}:{minutes}"
