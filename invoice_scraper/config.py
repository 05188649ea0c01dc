"""
Configuration constants for the Invoice Scraper.
"""

import logging
import os
from typing import Final

# ============================================================================
# Currencies
# ============================================================================

# Every output amount is expressed in and tagged with this symbol
REFERENCE_CURRENCY: Final[str] = "€"

# Fixed conversion rate: reference-currency units per US dollar
USD_TO_EUR_RATE: Final[str] = os.getenv("USD_TO_EUR_RATE", "0.93")

# ============================================================================
# Tax
# ============================================================================

# Applied when no percentage is found and the document is in the reference currency
DEFAULT_TAX_RATE: Final[str] = os.getenv("DEFAULT_TAX_RATE", "19")

# ============================================================================
# Date Formats
# ============================================================================

# Output format for every invoice date
CANONICAL_DATE_FORMAT: Final[str] = "%d.%m.%Y"

# German month names accepted next to the English ones
GERMAN_MONTH_NAMES: Final[list[tuple[str, ...]]] = [
    ("Januar", "Jän"),
    ("Februar",),
    ("März", "Maerz", "Mär"),
    ("April",),
    ("Mai",),
    ("Juni",),
    ("Juli",),
    ("August",),
    ("September",),
    ("Oktober", "Okt"),
    ("November",),
    ("Dezember", "Dez"),
]

# ============================================================================
# Extraction Labels
# ============================================================================

# Keywords that introduce the invoice number
INVOICE_NUMBER_LABELS: Final[list[str]] = [
    "rechnungsnummer",
    "invoice number",
    "invoice no",
]

# Keywords that may precede the invoice date
INVOICE_DATE_LABELS: Final[list[str]] = [
    "rechnungsdatum",
    "lieferdatum",
    "date due",
    "datum",
]

# Keywords that introduce the net amount (single-amount layout)
NET_AMOUNT_LABELS: Final[list[str]] = [
    "total paid",
    "total",
    "warenwert netto",
    "gesamtbetrag",
]

# Keywords that introduce the "net sum, percentage, amount" layout
NET_SUM_LABELS: Final[list[str]] = [
    "nettosumme",
]

# ============================================================================
# Documents
# ============================================================================

SUPPORTED_FILE_TYPES: Final[set[str]] = {"txt", "pdf"}

SEARCH_ROOT: Final[str] = os.getenv("SEARCH_ROOT", ".")
OUTPUT_FILE: Final[str] = os.getenv("OUTPUT_FILE", "Rechnungsdaten.json")

# ============================================================================
# API Configuration
# ============================================================================

API_HOST: Final[str] = os.getenv("API_HOST", "0.0.0.0")
API_PORT: Final[int] = int(os.getenv("API_PORT", "8000"))
MAX_UPLOAD_SIZE_MB: Final[int] = int(os.getenv("MAX_UPLOAD_SIZE_MB", "10"))

# ============================================================================
# Logging Configuration
# ============================================================================

LOG_LEVEL: Final[str] = os.getenv("LOG_LEVEL", "INFO")

def setup_logging() -> logging.Logger:
    """Configure and return the application logger."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("invoice_scraper")


logger = setup_logging()
