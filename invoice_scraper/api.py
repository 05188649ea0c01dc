"""
FastAPI application for the Invoice Scraper.

Provides REST API endpoints for:
- Health check
- Extraction from raw text
- Extraction from uploaded txt/pdf files
"""

from pathlib import Path

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .config import logger, API_HOST, API_PORT, MAX_UPLOAD_SIZE_MB, SUPPORTED_FILE_TYPES
from .documents import decode_document_bytes
from .exceptions import DocumentReadError
from .extractor import extract_invoice_data
from .schemas import ExtractTextRequest, InvoiceRecord


# ============================================================================
# FastAPI App Configuration
# ============================================================================

app = FastAPI(
    title="Invoice Scraper API",
    description="""
    Invoice Scraper API.

    Extracts invoice number, invoice date, net amount and gross amount
    from invoice documents whose layout is not known in advance.

    ## Features

    - **Extract Text**: Submit already extracted document text
    - **Extract File**: Upload a txt or PDF invoice
    """,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


# ============================================================================
# API Endpoints
# ============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check() -> HealthResponse:
    """Return the service status and version information."""
    from . import __version__
    return HealthResponse(status="ok", version=__version__)


@app.post(
    "/extract-text",
    response_model=InvoiceRecord,
    response_model_by_alias=False,
    tags=["Extraction"],
    summary="Extract invoice fields from text",
)
async def extract_text(request: ExtractTextRequest) -> InvoiceRecord:
    """
    Extract invoice fields from document text.

    Fields that cannot be found are returned as null. If the invoice date
    cannot be interpreted, every field is null.
    """
    logger.info(f"Received text extraction request ({len(request.text)} characters)")
    return extract_invoice_data(request.text)


@app.post(
    "/extract-file",
    response_model=InvoiceRecord,
    response_model_by_alias=False,
    tags=["Extraction"],
    summary="Extract invoice fields from an uploaded file",
)
async def extract_file(
    file: UploadFile = File(..., description="Invoice document (.txt or .pdf)")
) -> InvoiceRecord:
    """
    Extract invoice fields from an uploaded txt or PDF document.

    **Limitations:**
    - Maximum file size: MAX_UPLOAD_SIZE_MB (10MB by default)
    - Supported formats: txt and PDF
    """
    file_type = Path(file.filename or "").suffix.lstrip(".").lower()
    if file_type not in SUPPORTED_FILE_TYPES:
        raise HTTPException(status_code=415, detail=f"{file.filename}: This file type is not supported")

    content = await file.read()

    if len(content) > MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise HTTPException(status_code=413, detail=f"{file.filename}: File too large (max {MAX_UPLOAD_SIZE_MB}MB)")

    try:
        text = decode_document_bytes(content, file_type)
    except DocumentReadError as e:
        logger.error(f"Failed to read {file.filename}: {e}")
        raise HTTPException(status_code=422, detail=f"{file.filename}: {e}")

    return extract_invoice_data(text)


# ============================================================================
# Error Handlers
# ============================================================================

@app.exception_handler(Exception)
async def generic_exception_handler(request, exc):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# ============================================================================
# Startup/Shutdown Events
# ============================================================================

@app.on_event("startup")
async def startup_event():
    """Log startup information."""
    logger.info(f"Invoice Scraper API starting on {API_HOST}:{API_PORT}")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Invoice Scraper API shutting down")


# ============================================================================
# Main Entry Point
# ============================================================================

def run_server():
    """Run the API server using uvicorn."""
    import uvicorn
    uvicorn.run(app, host=API_HOST, port=API_PORT)


if __name__ == "__main__":
    run_server()
