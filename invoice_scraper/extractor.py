"""
Invoice field extraction from document text.

This module ties the pattern matcher and the normalizers together:
- Scan the text for every label
- Normalize the net amount and compute the gross amount
- Bring the invoice date into canonical form
- Return an InvoiceRecord, never raising past this boundary
"""

from typing import Optional

from .config import logger
from .exceptions import InvalidDateFormatError
from .normalizer import (
    calculate_gross_amount,
    format_amount,
    normalize_date,
    normalize_net_amount,
)
from .patterns import DocumentMatches, match_document
from .schemas import InvoiceRecord


def extract_amounts(matches: DocumentMatches) -> tuple[Optional[str], Optional[str]]:
    """
    Compute the net and gross amounts from the matched amount block.

    Returns:
        Tuple of (net_amount, gross_amount) as formatted strings; both None
        when no amount block was found
    """
    if matches.amount is None:
        return None, None

    raw_amount = matches.amount.amount
    if not raw_amount:
        logger.warning("Amount block matched without a numeric value")
        return None, None

    currency = matches.currency.value if matches.currency else None
    tax_rate = matches.tax_rate.value if matches.tax_rate else None

    net = normalize_net_amount(raw_amount, currency)
    gross = calculate_gross_amount(net, tax_rate, currency)

    return format_amount(net), format_amount(gross)


def extract_invoice_data(text: str) -> InvoiceRecord:
    """
    Extract invoice number, date, net and gross amount from document text.

    Args:
        text: Full text content of one document

    Returns:
        InvoiceRecord with the fields that could be found. If the date cannot
        be normalized or anything else goes wrong, every field is None.
    """
    try:
        matches = match_document(text)

        net_amount, gross_amount = extract_amounts(matches)

        invoice_date = None
        if matches.invoice_date is not None:
            invoice_date = normalize_date(matches.invoice_date.value)

        record = InvoiceRecord(
            invoice_number=matches.invoice_number.value if matches.invoice_number else None,
            invoice_date=invoice_date,
            gross_amount=gross_amount,
            net_amount=net_amount,
        )
    except InvalidDateFormatError as e:
        logger.warning(f"Error extracting data: {e}")
        return InvoiceRecord.empty()
    except Exception as e:
        logger.exception(f"Error extracting data: {e}")
        return InvoiceRecord.empty()

    logger.info(f"Extracted invoice: {record.invoice_number}")
    return record
