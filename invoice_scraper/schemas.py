"""
Pydantic models for extracted invoice data.

This module defines the data structures handed out by the Invoice Scraper:
- InvoiceRecord, the single output of the extraction pipeline
- ExtractTextRequest, the request body of the text extraction endpoint
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator


# Canonical DD.MM.YYYY shape (not calendar-checked)
CANONICAL_DATE_PATTERN = r"^([0-2][0-9]|3[01])\.(0[1-9]|1[0-2])\.\d{4}$"

# Two fractional digits followed by the reference currency symbol
AMOUNT_PATTERN = r"^-?\d+\.\d{2}€$"


class InvoiceRecord(BaseModel):
    """
    Invoice fields extracted from one document.

    Every field is optional; ``None`` marks a field that could not be found.
    The serialization aliases are the keys of the persisted JSON file.
    """
    invoice_number: Optional[str] = Field(
        None,
        alias="rechnungs_nr",
        description="Invoice identifier as it appears in the document"
    )
    invoice_date: Optional[str] = Field(
        None,
        alias="rechnungs_datum",
        pattern=CANONICAL_DATE_PATTERN,
        description="Invoice date in DD.MM.YYYY form"
    )
    gross_amount: Optional[str] = Field(
        None,
        alias="gesamt_betrag_brutto",
        pattern=AMOUNT_PATTERN,
        description="Net amount plus tax, in the reference currency"
    )
    net_amount: Optional[str] = Field(
        None,
        alias="gesamt_betrag_netto",
        pattern=AMOUNT_PATTERN,
        description="Amount before tax, in the reference currency"
    )

    @model_validator(mode="after")
    def check_amounts_paired(self) -> "InvoiceRecord":
        """Gross and net amounts derive from the same match: both or neither."""
        if (self.gross_amount is None) != (self.net_amount is None):
            raise ValueError("gross_amount and net_amount must both be present or both be absent")
        return self

    @classmethod
    def empty(cls) -> "InvoiceRecord":
        """Return the record with every field absent."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "invoice_number": "RE2024042",
                    "invoice_date": "05.03.2024",
                    "gross_amount": "178.50€",
                    "net_amount": "150.00€"
                }
            ]
        }
    }


# ============================================================================
# API Request Models
# ============================================================================

class ExtractTextRequest(BaseModel):
    """Request body for the /extract-text endpoint."""
    text: str = Field(
        ...,
        description="Full text content of one invoice document"
    )
