# main.py: local runner, every PDF of a folder -> report.json + report.md
from __future__ import annotations

import hashlib
import logging
import re
import sys
from pathlib import Path
from typing import Optional

from evaluator import make_report, save_json, save_markdown
from extractor_factory import load_extractor
from info_extractor import GeneralInfoExtractor
from ingest import PdfExtractionError, ingest_file, is_usable_text
from settings import settings
from telemetry import go_quiet

log = logging.getLogger("lexbaux.main")


# ------------------------------
# Path & write guards
# ------------------------------
def safe_out_dir(outputs_dir: Path, raw_name: str) -> Path:
    stem = re.sub(r"[^A-Za-z0-9._-]+", "_", raw_name)[:50]
    h = hashlib.sha1(raw_name.encode("utf-8")).hexdigest()[:8]
    return outputs_dir / f"{stem}-{h}"


def write_error(out_dir: Path, message: str):
    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / "_error.txt").write_text(message, encoding="utf-8")


def process_document(
    pdf_path: Path, outputs_dir: Path, extractor: Optional[GeneralInfoExtractor] = None
) -> Optional[Path]:
    """
    Extract, analyse and save one PDF. Returns the output folder, or None when
    the document could not be analysed (an _error.txt is written instead).
    """
    out_dir = safe_out_dir(outputs_dir, pdf_path.name)
    try:
        extracted = ingest_file(pdf_path)
    except PdfExtractionError as e:
        log.error("%s: %s", pdf_path.name, e)
        write_error(out_dir, str(e))
        return None

    if not is_usable_text(extracted.text):
        log.warning("%s: no usable text (scan without OCR?)", pdf_path.name)
        write_error(out_dir, "Le PDF ne contient pas de texte exploitable. S’agit-il d’un scan sans OCR ?")
        return None

    report = make_report(extracted.text, filename=pdf_path.name, pages=extracted.pages, extractor=extractor)
    save_json(report, out_dir)
    save_markdown(report, out_dir)
    log.info("Artifacts for %s → %s (risk %s)", pdf_path.name, out_dir, report.summary.risk_level)
    return out_dir


def main(pdf_folder: Optional[Path] = None, outputs_dir: Optional[Path] = None) -> int:
    pdf_folder = Path(pdf_folder or settings.DATA_DIR)
    outputs_dir = Path(outputs_dir or settings.OUTPUT_DIR)
    outputs_dir.mkdir(parents=True, exist_ok=True)

    pdfs = sorted(pdf_folder.glob("*.pdf"))
    if not pdfs:
        log.warning("No PDF found in %s", pdf_folder)
        return 0

    extractor = load_extractor()
    done = 0
    for pdf_path in pdfs:
        if process_document(pdf_path, outputs_dir, extractor) is not None:
            done += 1

    log.info("=== Done: %d/%d PDF(s) analysed ===", done, len(pdfs))
    return done


if __name__ == "__main__":
    go_quiet(settings.LOG_LEVEL)
    main(Path(sys.argv[1]) if len(sys.argv) > 1 else None)
