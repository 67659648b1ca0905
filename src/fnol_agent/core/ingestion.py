"""Decode uploaded ``.txt`` / ``.pdf`` files into plain text."""

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path

from loguru import logger
from PyPDF2 import PdfReader
from PyPDF2.errors import PyPdfError

from fnol_agent.core.errors import DecodeFailure, InputUnavailable, UnsupportedFormat

SUPPORTED_EXTENSIONS = (".txt", ".pdf")


@dataclass(frozen=True)
class DecodedDocument:
    """Plain text of a document plus where it came from."""

    text: str
    source: str
    converted: bool = False


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def decode_bytes(data: bytes, filename: str) -> DecodedDocument:
    """Decode the raw bytes of an uploaded file named *filename*.

    Raises
    ------
    UnsupportedFormat
        If the extension is neither ``.txt`` nor ``.pdf``.
    DecodeFailure
        If the PDF cannot be read.
    """
    ext = Path(filename).suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormat(f"Unsupported file type '{ext or filename}'")

    if ext == ".txt":
        return DecodedDocument(text=data.decode("utf-8", errors="replace"), source=filename)

    try:
        text = _extract_pdf_text(io.BytesIO(data))
    except (PyPdfError, ValueError, KeyError, TypeError) as exc:
        logger.warning("PDF parsing failed for {name}: {err}", name=filename, err=exc)
        raise DecodeFailure(f"PDF parsing failed: {exc}") from exc

    return DecodedDocument(text=text, source=filename, converted=True)


def decode_document(path: str | Path) -> DecodedDocument:
    """Read and decode the file at *path*."""
    file = Path(path)
    if not file.is_file():
        raise InputUnavailable(f"Document not found: {path}")
    return decode_bytes(file.read_bytes(), file.name)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _extract_pdf_text(stream: io.BytesIO) -> str:
    """Read all pages from a PDF and return concatenated text."""
    reader = PdfReader(stream)
    pages: list[str] = []
    for i, page in enumerate(reader.pages):
        text = page.extract_text() or ""
        if text.strip():
            pages.append(text)
            logger.debug("Page {i}: extracted {n} chars", i=i + 1, n=len(text))
    return "\n\n".join(pages)
