"""
Command-line interface for the Invoice Scraper.

Provides two main commands:
- extract: Find an invoice file by name, extract it and save the record as JSON
- parse: Extract a given file and print the record
"""

import json
from pathlib import Path
from typing import Optional

import typer

from .config import OUTPUT_FILE, SEARCH_ROOT, logger
from .documents import extract_invoice_from_file, find_file, write_record
from .exceptions import DocumentReadError, UnsupportedFileTypeError
from .schemas import InvoiceRecord


# Create Typer app
app = typer.Typer(
    name="invoice-scraper",
    help="Invoice Scraper CLI",
    add_completion=False,
)


def render_record(record: InvoiceRecord) -> str:
    """Format a record the way it is written to disk."""
    return json.dumps(record.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)


def _extract_or_exit(file_path: Path, file_type: Optional[str] = None) -> InvoiceRecord:
    try:
        return extract_invoice_from_file(file_path, file_type)
    except UnsupportedFileTypeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except DocumentReadError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def extract(
    name: Optional[str] = typer.Argument(
        None,
        help="Full or partial name of the invoice file (prompted for when omitted)",
    ),
    root: Path = typer.Option(
        SEARCH_ROOT,
        "--root",
        "-r",
        help="Directory to search for the invoice file",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
    output: Path = typer.Option(
        OUTPUT_FILE,
        "--output",
        "-o",
        help="Output JSON file path",
    ),
) -> None:
    """
    Extract invoice data from a file and save it as JSON.

    Searches the root directory and its subdirectories for the first file
    whose name contains NAME, extracts the invoice fields from it and
    writes them to the output file.
    """
    if not name:
        name = typer.prompt("Enter the name of the file to be read")

    file_path = find_file(root, name)
    if file_path is None:
        typer.echo("File not found!", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Reading: {file_path}")
    record = _extract_or_exit(file_path)

    if record.is_empty:
        typer.echo("Warning: no invoice fields could be extracted.", err=True)

    typer.echo("Extracted data:")
    typer.echo(render_record(record))

    try:
        write_record(record, output)
    except OSError as e:
        typer.echo(f"Error writing file: {e}", err=True)
        logger.exception("Writing record failed")
        raise typer.Exit(code=1)

    typer.echo(f"\n[OK] JSON file has been created successfully: {output}")


@app.command()
def parse(
    file: Path = typer.Argument(
        ...,
        help="Invoice file to extract",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
    file_type: Optional[str] = typer.Option(
        None,
        "--type",
        "-t",
        help="Document type (txt or pdf); defaults to the file suffix",
    ),
) -> None:
    """Extract invoice data from FILE and print it without saving."""
    record = _extract_or_exit(file, file_type)
    typer.echo(render_record(record))


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__
    typer.echo(f"Invoice Scraper v{__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
