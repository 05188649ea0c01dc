"""
Normalization of matched invoice values.

Turns raw substrings found by the pattern matcher into canonical values:
- net amounts in the reference currency, two fractional digits
- gross amounts from a net amount and a detected or default tax rate
- dates in DD.MM.YYYY form
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from dateutil import parser as date_parser

from .config import (
    CANONICAL_DATE_FORMAT,
    DEFAULT_TAX_RATE,
    GERMAN_MONTH_NAMES,
    REFERENCE_CURRENCY,
    USD_TO_EUR_RATE,
)
from .exceptions import InvalidDateFormatError
from .schemas import CANONICAL_DATE_PATTERN


CENT = Decimal("0.01")


# ============================================================================
# Amounts
# ============================================================================

def parse_number(value: str) -> Decimal:
    """
    Parse a numeric amount written with either decimal separator.

    The last separator is the fractional one when exactly two digits follow
    it; every other separator is a thousands separator:
    - "150,00" -> 150.00
    - "1.234,56" -> 1234.56
    - "1,234.56" -> 1234.56
    - "1,234" -> 1234

    Raises:
        ValueError: If the value is not a number
    """
    value_str = re.sub(r"[\$€\s]", "", value)

    last_sep = max(value_str.rfind(","), value_str.rfind("."))
    if last_sep != -1 and len(value_str) - last_sep - 1 == 2:
        integer_part = re.sub(r"[.,]", "", value_str[:last_sep])
        value_str = f"{integer_part}.{value_str[last_sep + 1:]}"
    else:
        value_str = re.sub(r"[.,]", "", value_str)

    try:
        return Decimal(value_str)
    except InvalidOperation as e:
        raise ValueError(f"Not a number: {value!r}") from e


def round_amount(amount: Decimal) -> Decimal:
    """Round to two fractional digits, halves away from zero."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def convert_to_reference_currency(amount: Decimal, currency: Optional[str]) -> Decimal:
    """Convert dollar amounts at the fixed rate; anything else passes through."""
    if currency == "$":
        return round_amount(amount * Decimal(USD_TO_EUR_RATE))
    return amount


def normalize_net_amount(raw_amount: str, currency: Optional[str]) -> Decimal:
    """
    Turn a matched amount substring into the net amount in the reference currency.

    Args:
        raw_amount: Numeric substring as matched in the document
        currency: Currency symbol detected in the document, or None

    Returns:
        Net amount rounded to two fractional digits
    """
    net = round_amount(parse_number(raw_amount))
    return convert_to_reference_currency(net, currency)


def resolve_tax_rate(tax_rate: Optional[str], currency: Optional[str]) -> Decimal:
    """
    Pick the tax rate percentage to apply.

    A rate found in the document always wins. Without one, documents in the
    reference currency get the default rate and all others get none.
    """
    if tax_rate is not None:
        return parse_number(tax_rate)
    if currency == REFERENCE_CURRENCY:
        return Decimal(DEFAULT_TAX_RATE)
    return Decimal(0)


def calculate_gross_amount(net: Decimal, tax_rate: Optional[str], currency: Optional[str]) -> Decimal:
    """Apply the tax rate to the net amount; a zero rate returns the net amount unchanged."""
    rate = resolve_tax_rate(tax_rate, currency)
    if rate == 0:
        return net
    return round_amount(net * (1 + rate / 100))


def format_amount(amount: Decimal) -> str:
    """Render an amount the way it is reported, e.g. ``178.50€``."""
    return f"{amount:.2f}{REFERENCE_CURRENCY}"


# ============================================================================
# Dates
# ============================================================================

class InvoiceParserInfo(date_parser.parserinfo):
    """dateutil parser info that knows German month names besides English ones."""
    MONTHS = [
        english + german
        for english, german in zip(date_parser.parserinfo.MONTHS, GERMAN_MONTH_NAMES)
    ]


_PARSER_INFO = InvoiceParserInfo()

# Alternate layouts, tried in order after the canonical check
ALTERNATE_DATE_LAYOUTS: list[tuple[str, re.Pattern]] = [
    ("MMMM D, YYYY", re.compile(r"^(?P<month>[^\W\d_]+) (?P<day>\d{1,2}), (?P<year>\d{4})$")),
    ("M/D/YYYY", re.compile(r"^(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<year>\d{4})$")),
    ("D. MMMM YYYY", re.compile(r"^(?P<day>\d{1,2})\. (?P<month>[^\W\d_]+) (?P<year>\d{4})$")),
]


def is_canonical_date(date_str: str) -> bool:
    """Check the DD.MM.YYYY shape only; 31.04.2024 passes."""
    return re.match(CANONICAL_DATE_PATTERN, date_str) is not None


def _month_number(month: str) -> Optional[int]:
    if month.isdigit():
        return int(month)
    return _PARSER_INFO.month(month)


def parse_alternate_date(date_str: str) -> Optional[date]:
    """
    Parse a date written in one of the alternate layouts.

    Returns:
        The date from the first layout that yields a valid calendar date,
        or None if no layout does
    """
    for _, pattern in ALTERNATE_DATE_LAYOUTS:
        match = pattern.match(date_str)
        if not match:
            continue
        month = _month_number(match.group("month"))
        if month is None:
            continue
        try:
            return date(int(match.group("year")), month, int(match.group("day")))
        except ValueError:
            continue
    return None


def normalize_date(date_str: str) -> str:
    """
    Bring a matched date into DD.MM.YYYY form.

    Raises:
        InvalidDateFormatError: If the string fits no known layout
    """
    date_str = date_str.strip()

    if is_canonical_date(date_str):
        return date_str

    parsed = parse_alternate_date(date_str)
    if parsed is None:
        raise InvalidDateFormatError(date_str)
    return parsed.strftime(CANONICAL_DATE_FORMAT)
