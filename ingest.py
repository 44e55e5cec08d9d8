import io
import logging
from pathlib import Path
from typing import Dict, NamedTuple, Optional

import pdfplumber
from pdfminer.pdfparser import PDFSyntaxError
from pdfplumber.utils.exceptions import MalformedPDFException, PdfminerException

from settings import settings

log = logging.getLogger("lexbaux.ingest")

PAGE_BREAK = "\f"  # keep page boundaries in the text


class ExtractedText(NamedTuple):
    text: str
    pages: int


class PdfExtractionError(Exception):
    """The upload could not be parsed as a PDF."""


def _extract(source, label: str) -> ExtractedText:
    try:
        pages = []
        with pdfplumber.open(source) as pdf:
            for page in pdf.pages:
                text = page.extract_text() or ""  # avoid None
                pages.append(text.strip())
    except (PdfminerException, MalformedPDFException, PDFSyntaxError) as e:
        raise PdfExtractionError(f"Impossible de lire le PDF {label}: {e}") from e

    full_text = PAGE_BREAK.join(pages).replace("\x00", "").strip()
    log.debug("Extracted %d chars over %d page(s) from %s", len(full_text), len(pages), label)
    return ExtractedText(text=full_text, pages=len(pages))


def ingest_bytes_to_text(data: bytes, filename: Optional[str] = None) -> ExtractedText:
    """
    Extract the text of an uploaded PDF held in memory.

    Pages are joined with form feeds, NUL characters dropped, and the page
    count is the real one from the document.
    """
    return _extract(io.BytesIO(data), filename or "<upload>")


def ingest_file(path: Path) -> ExtractedText:
    return _extract(str(path), path.name)


def ingest_folder(pdf_folder: Optional[Path] = None) -> Dict[str, ExtractedText]:
    pdf_folder = Path(pdf_folder or settings.DATA_DIR)
    text_store: Dict[str, ExtractedText] = {}
    for pdf_path in sorted(pdf_folder.glob("*.pdf")):
        log.info("Reading %s...", pdf_path.name)
        text_store[pdf_path.name] = ingest_file(pdf_path)
    return text_store


def is_usable_text(text: Optional[str]) -> bool:
    """False for empty/short extractions, typically a scan without OCR."""
    return settings.is_usable_length(text)
