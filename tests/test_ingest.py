"""Tests for PDF text extraction."""
from __future__ import annotations

import pytest

from clause_rules import classify
from ingest import PAGE_BREAK, PdfExtractionError, ingest_bytes_to_text, ingest_file, ingest_folder, is_usable_text
from tests.pdf_factory import create_pdf, pdf_bytes, scenario_pages, wrapped_clause_pages


def test_ingest_file_keeps_page_count_and_breaks(tmp_path):
    path = create_pdf(tmp_path, "two-pages.pdf", [["BAIL COMMERCIAL", "Indexation : ILC annuel."], ["Page deux"]])
    extracted = ingest_file(path)
    assert extracted.pages == 2
    assert PAGE_BREAK in extracted.text
    assert "ILC" in extracted.text
    assert extracted.text.endswith("Page deux")


def test_ingest_bytes_matches_file(tmp_path):
    data = pdf_bytes(tmp_path, scenario_pages())
    extracted = ingest_bytes_to_text(data, filename="bail.pdf")
    assert extracted.pages == 1
    assert "article 606" in extracted.text
    assert "\x00" not in extracted.text


def test_blank_pdf_is_not_usable(tmp_path):
    extracted = ingest_bytes_to_text(pdf_bytes(tmp_path, [[]]))
    assert extracted.text == ""
    assert extracted.pages == 1
    assert not is_usable_text(extracted.text)


def test_invalid_bytes_raise():
    with pytest.raises(PdfExtractionError):
        ingest_bytes_to_text(b"ceci n'est pas un PDF", filename="faux.pdf")


def test_ingest_folder(tmp_path):
    create_pdf(tmp_path, "b.pdf", [["Bail B"]])
    create_pdf(tmp_path, "a.pdf", [["Bail A"]])
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
    texts = ingest_folder(tmp_path)
    assert list(texts) == ["a.pdf", "b.pdf"]
    assert texts["a.pdf"].text == "Bail A"


@pytest.mark.parametrize("text, usable", [("x" * 39, False), ("x" * 40, True), ("  " + "x" * 39 + "  ", False), (None, False)])
def test_length_gate(text, usable):
    assert is_usable_text(text) is usable


def test_wrapped_pdf_clauses_reach_detectors(tmp_path):
    extracted = ingest_bytes_to_text(pdf_bytes(tmp_path, wrapped_clause_pages()))
    assert extracted.text.count("\n") >= 4
    findings, _, _ = classify(extracted.text)
    ids = [f.id for f in findings]
    assert "deposit" in ids
    assert "assignment" in ids
