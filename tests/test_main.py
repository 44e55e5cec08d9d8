"""Tests for the local folder runner."""
from __future__ import annotations

import json

import main as main_module
from info_extractor import SegmentInfoExtractor
from main import main, process_document, safe_out_dir
from tests.pdf_factory import create_pdf, scenario_pages


def test_safe_out_dir_is_stable_and_sanitized(tmp_path):
    first = safe_out_dir(tmp_path, "Bail Lyon (v2).pdf")
    assert first == safe_out_dir(tmp_path, "Bail Lyon (v2).pdf")
    assert first.name.startswith("Bail_Lyon_v2_.pdf-")
    assert first != safe_out_dir(tmp_path, "Bail Lyon [v2].pdf")


def test_process_document_writes_reports(tmp_path):
    pdf = create_pdf(tmp_path, "bail.pdf", scenario_pages())
    out_dir = process_document(pdf, tmp_path / "outputs")
    assert out_dir is not None
    data = json.loads((out_dir / "report.json").read_text(encoding="utf-8"))
    assert data["meta"]["filename"] == "bail.pdf"
    assert data["summary"]["riskLevel"] == "élevé"
    assert (out_dir / "report.md").exists()


def test_unusable_document_gets_error_file(tmp_path):
    pdf = create_pdf(tmp_path, "scan.pdf", [[]])
    assert process_document(pdf, tmp_path / "outputs") is None
    out_dir = safe_out_dir(tmp_path / "outputs", "scan.pdf")
    assert "scan sans OCR" in (out_dir / "_error.txt").read_text(encoding="utf-8")


def test_main_over_folder(tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    create_pdf(data_dir, "bail.pdf", scenario_pages())
    create_pdf(data_dir, "scan.pdf", [[]])
    assert main(data_dir, tmp_path / "outputs") == 1
    assert main(tmp_path / "empty", tmp_path / "outputs") == 0


def test_main_resolves_extractor_once(tmp_path, monkeypatch):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    create_pdf(data_dir, "a.pdf", scenario_pages())
    create_pdf(data_dir, "b.pdf", scenario_pages())
    calls = []

    def counting_loader(name=None, config_path=None):
        calls.append(name)
        return SegmentInfoExtractor()

    monkeypatch.setattr(main_module, "load_extractor", counting_loader)
    assert main(data_dir, tmp_path / "outputs") == 2
    assert calls == [None]
