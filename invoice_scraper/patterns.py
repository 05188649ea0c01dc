"""
Pattern matching over raw invoice text.

Each label (invoice number, invoice date, amount block, tax rate, currency)
has an ordered list of compiled patterns. Patterns are tried in order and the
first one that matches wins, except for the amount block, where the layout
that starts earliest in the text wins. Matching never interprets the values
it finds; that is left to the normalizer.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .config import (
    INVOICE_DATE_LABELS,
    INVOICE_NUMBER_LABELS,
    NET_AMOUNT_LABELS,
    NET_SUM_LABELS,
    logger,
)


# ============================================================================
# Match Results
# ============================================================================

@dataclass(frozen=True)
class TextMatch:
    """A matched substring and where it starts in the document."""
    value: str
    start: int


@dataclass(frozen=True)
class LabeledTotalMatch:
    """
    Amount block of the form ``Total: €150,00``.

    Attributes:
        amount: Raw numeric substring, separators untouched
        currency: Symbol written right before the amount, if any
            (informational; conversion uses the document-wide currency)
        start: Offset of the label in the document
    """
    amount: str
    currency: Optional[str]
    start: int

    @classmethod
    def from_match(cls, match: re.Match) -> "LabeledTotalMatch":
        return cls(
            amount=match.group("amount"),
            currency=match.group("currency") or None,
            start=match.start(),
        )


@dataclass(frozen=True)
class NetSumMatch:
    """
    Amount block of the form ``Nettosumme 19,00 % 150,00 €``.

    Attributes:
        rate: Percentage written between the label and the amount
            (informational; the tax rate comes from the document-wide scan)
        amount: Raw numeric substring of the net amount
        currency: Symbol following the amount (informational, as above)
        start: Offset of the label in the document
    """
    rate: str
    amount: str
    currency: str
    start: int

    @classmethod
    def from_match(cls, match: re.Match) -> "NetSumMatch":
        return cls(
            rate=match.group("rate"),
            amount=match.group("amount"),
            currency=match.group("currency"),
            start=match.start(),
        )


AmountMatch = Union[LabeledTotalMatch, NetSumMatch]


@dataclass(frozen=True)
class DocumentMatches:
    """Per-label results of scanning one document; ``None`` means no match."""
    invoice_number: Optional[TextMatch]
    invoice_date: Optional[TextMatch]
    amount: Optional[AmountMatch]
    tax_rate: Optional[TextMatch]
    currency: Optional[TextMatch]


# ============================================================================
# Patterns
# ============================================================================

def _label_alternation(labels: list[str]) -> str:
    """Build a regex alternation from keyword labels, allowing flexible whitespace."""
    return "|".join(re.escape(label).replace(r"\ ", r"\s*") for label in labels)


# Numeric amount: grouped or plain integer part, optional two fractional digits
_AMOUNT = r"(?:\d{1,3}(?:[.,]\d{3})+|\d+)(?:[.,]\d{2})?"

# Invoice number alternatives, in order of precedence
INVOICE_NUMBER_PATTERNS: list[tuple[str, re.Pattern]] = [
    (
        "keyword",
        re.compile(
            r"(?:" + _label_alternation(INVOICE_NUMBER_LABELS) + r")\b\s*[:.#\s]*"
            r"(?P<value>[A-Za-z0-9\s]+?)(?=\s*(?:\r|\n|$|[^A-Za-z0-9\s]))",
            re.IGNORECASE,
        ),
    ),
    (
        "payment_id",
        re.compile(r"\b(?P<value>pi_[A-Za-z0-9]{23})", re.IGNORECASE),
    ),
    (
        "four_digit_line",
        re.compile(r"^(?P<value>\d{4})[ \t]*\r?$", re.MULTILINE),
    ),
]

INVOICE_DATE_PATTERN = re.compile(
    r"(?:" + _label_alternation(INVOICE_DATE_LABELS) + r")?\s*[:\s]*"
    r"(?<!\d)(?P<value>"
    r"\d{2}\.\d{2}\.\d{4}"              # 05.03.2024
    r"|[^\W\d_]+ \d{1,2}, \d{4}"        # March 5, 2024
    r"|\d{1,2}/\d{1,2}/\d{4}"           # 3/5/2024
    r"|\d{1,2}\. [^\W\d_]+ \d{4}"       # 5. März 2024
    r")(?!\d)",
    re.IGNORECASE,
)

# Amount block layouts; the leftmost match in the text wins, ties go to the earlier layout
AMOUNT_PATTERNS: list[tuple[re.Pattern, Callable[[re.Match], AmountMatch]]] = [
    (
        re.compile(
            r"(?:" + _label_alternation(NET_AMOUNT_LABELS) + r")"
            r"(?:\s*[:,]?\s*)?(?P<currency>[€$]?)\s*(?P<amount>" + _AMOUNT + r")",
            re.IGNORECASE,
        ),
        LabeledTotalMatch.from_match,
    ),
    (
        re.compile(
            r"\b(?:" + _label_alternation(NET_SUM_LABELS) + r")[^\d]*"
            r"(?P<rate>\d{1,3}[.,]\d{2})\s*%?\s*"
            r"(?P<amount>" + _AMOUNT + r")\s*(?P<currency>[€$])",
            re.IGNORECASE,
        ),
        NetSumMatch.from_match,
    ),
]

TAX_RATE_PATTERN = re.compile(r"(?<!\d)(?P<value>\d{1,2})%")

CURRENCY_PATTERN = re.compile(r"(?P<value>[$€])")


# ============================================================================
# Matchers
# ============================================================================

def _first_text_match(pattern: re.Pattern, text: str) -> Optional[TextMatch]:
    match = pattern.search(text)
    if match is None:
        return None
    return TextMatch(value=match.group("value"), start=match.start("value"))


def match_invoice_number(text: str) -> Optional[TextMatch]:
    """
    Find the invoice number.

    A value following an explicit keyword is preferred; otherwise a payment
    identifier (``pi_...``) is used, and finally a four-digit number standing
    alone on its own line.
    """
    for name, pattern in INVOICE_NUMBER_PATTERNS:
        match = pattern.search(text)
        if match is None:
            continue
        value = match.group("value").strip()
        if not value:
            continue
        logger.debug(f"Invoice number matched via {name}: {value!r}")
        return TextMatch(value=value, start=match.start("value"))
    return None


def match_invoice_date(text: str) -> Optional[TextMatch]:
    """Find the first substring shaped like one of the known date layouts."""
    return _first_text_match(INVOICE_DATE_PATTERN, text)


def match_amount_block(text: str) -> Optional[AmountMatch]:
    """
    Find the amount block.

    Both layouts are searched and the one that starts earliest in the text
    is returned, as a LabeledTotalMatch or a NetSumMatch, so callers read
    the net amount from the right capture.
    """
    candidates = []
    for pattern, build in AMOUNT_PATTERNS:
        match = pattern.search(text)
        if match:
            candidates.append(build(match))

    if not candidates:
        return None
    # min() keeps the first of equal starts, i.e. the earlier layout
    return min(candidates, key=lambda candidate: candidate.start)


def match_tax_rate(text: str) -> Optional[TextMatch]:
    """Find the first one- or two-digit percentage anywhere in the document."""
    return _first_text_match(TAX_RATE_PATTERN, text)


def match_currency(text: str) -> Optional[TextMatch]:
    """Find the first dollar or euro sign anywhere in the document."""
    return _first_text_match(CURRENCY_PATTERN, text)


def match_document(text: str) -> DocumentMatches:
    """Run every label matcher over the document text."""
    matches = DocumentMatches(
        invoice_number=match_invoice_number(text),
        invoice_date=match_invoice_date(text),
        amount=match_amount_block(text),
        tax_rate=match_tax_rate(text),
        currency=match_currency(text),
    )
    logger.debug(f"Document matches: {matches}")
    return matches
