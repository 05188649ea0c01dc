"""
Document access around the extraction pipeline.

This module provides functionality to:
- Locate an invoice file by (partial) name below a directory
- Read the text of plain-text and PDF documents using pdfplumber
- Write extracted records to JSON and read them back
"""

import io
import json
from pathlib import Path
from typing import BinaryIO, Optional, Union

import pdfplumber

from .config import SUPPORTED_FILE_TYPES, logger
from .exceptions import DocumentReadError, UnsupportedFileTypeError
from .extractor import extract_invoice_data
from .schemas import InvoiceRecord


# ============================================================================
# Text Loading
# ============================================================================

def extract_text_from_pdf(source: Union[Path, BinaryIO]) -> str:
    """
    Extract all text content from a PDF.

    Args:
        source: Path to the PDF file or a binary file object

    Returns:
        Concatenated text from all pages

    Raises:
        DocumentReadError: If the PDF cannot be opened or parsed
    """
    text_parts = []

    try:
        with pdfplumber.open(source) as pdf:
            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    text_parts.append(page_text)
    except Exception as e:
        logger.error(f"Error extracting text from {source}: {e}")
        raise DocumentReadError(f"Could not extract text from PDF: {source}", last_error=e) from e

    return "\n".join(text_parts)


def resolve_file_type(path: Path, file_type: Optional[str] = None) -> str:
    """Return the declared file type, falling back to the file suffix."""
    resolved = (file_type or path.suffix.lstrip(".")).lower()
    if resolved not in SUPPORTED_FILE_TYPES:
        raise UnsupportedFileTypeError(resolved)
    return resolved


def load_document_text(path: Path, file_type: Optional[str] = None) -> str:
    """
    Read the text content of a document.

    Args:
        path: Path to the document
        file_type: "txt" or "pdf"; taken from the suffix when omitted

    Raises:
        UnsupportedFileTypeError: For anything but txt and pdf
        DocumentReadError: If the file cannot be read
    """
    file_type = resolve_file_type(path, file_type)

    if file_type == "pdf":
        return extract_text_from_pdf(path)

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error while processing TXT file {path}: {e}")
        raise DocumentReadError(f"Could not read text file: {path}", last_error=e) from e


def decode_document_bytes(content: bytes, file_type: str) -> str:
    """Text of an uploaded document held in memory."""
    if file_type not in SUPPORTED_FILE_TYPES:
        raise UnsupportedFileTypeError(file_type)

    if file_type == "pdf":
        return extract_text_from_pdf(io.BytesIO(content))

    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DocumentReadError("Uploaded text file is not valid UTF-8", last_error=e) from e


# ============================================================================
# File Search
# ============================================================================

def find_file(root: Path, partial_name: str) -> Optional[Path]:
    """
    Search depth-first below root for a file whose name contains partial_name.

    Entries are visited in name order and subdirectories are descended into
    as they are encountered, so the first hit in that order is returned.

    Raises:
        FileNotFoundError: If root is not a directory
    """
    if not root.is_dir():
        raise FileNotFoundError(f"Directory not found: {root}")

    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except PermissionError as e:
        logger.warning(f"Skipping unreadable directory {root}: {e}")
        return None

    for entry in entries:
        if entry.is_dir():
            found = find_file(entry, partial_name)
            if found is not None:
                return found
        elif partial_name in entry.name:
            return entry

    return None


# ============================================================================
# Records
# ============================================================================

def write_record(record: InvoiceRecord, output_path: Path) -> Path:
    """
    Write an extracted record to a JSON file.

    Absent fields are written as null. Raises OSError if the file cannot be written.
    """
    output_data = record.model_dump(mode="json", by_alias=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(output_data, f, indent=2, ensure_ascii=False)

    logger.info(f"Wrote invoice record to: {output_path}")
    return output_path


def read_record(input_path: Path) -> InvoiceRecord:
    """Load a record previously written by write_record."""
    with open(input_path, "r", encoding="utf-8") as f:
        return InvoiceRecord.model_validate(json.load(f))


# ============================================================================
# Main Extraction Function
# ============================================================================

def extract_invoice_from_file(path: Path, file_type: Optional[str] = None) -> InvoiceRecord:
    """
    Load a txt or pdf document and extract its invoice fields.

    Raises:
        UnsupportedFileTypeError: For anything but txt and pdf
        DocumentReadError: If the document cannot be read
    """
    logger.info(f"Extracting invoice from: {path.name}")
    text = load_document_text(path, file_type)
    return extract_invoice_data(text)
