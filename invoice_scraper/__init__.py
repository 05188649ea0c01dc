"""
Invoice Scraper

A Python tool for extracting invoice number, invoice date, net amount and
gross amount from unstructured invoice text (plain-text or PDF documents).
"""

__version__ = "0.1.0"
__author__ = "Invoice Scraper Team"

from .schemas import InvoiceRecord
from .extractor import extract_invoice_data
from .documents import extract_invoice_from_file, find_file, load_document_text, write_record

__all__ = [
    "InvoiceRecord",
    "extract_invoice_data",
    "extract_invoice_from_file",
    "find_file",
    "load_document_text",
    "write_record",
]
