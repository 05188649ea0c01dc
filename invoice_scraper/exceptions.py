"""Exceptions raised by the Invoice Scraper."""

from typing import Optional


class InvoiceScraperError(Exception):
    """Base exception for all invoice scraper errors."""

    pass


class InvalidDateFormatError(InvoiceScraperError, ValueError):
    """Raised when a date string matches none of the known layouts."""

    def __init__(self, date_str: str) -> None:
        super().__init__(f"Invalid date format: {date_str!r}")
        self.date_str = date_str


class UnsupportedFileTypeError(InvoiceScraperError, ValueError):
    """Raised when a document is neither plain text nor PDF."""

    def __init__(self, file_type: str) -> None:
        super().__init__(f"This file type is not supported: {file_type!r}")
        self.file_type = file_type


class DocumentReadError(InvoiceScraperError):
    """Raised when a document cannot be read or its text cannot be extracted."""

    def __init__(self, message: str, last_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.last_error = last_error
