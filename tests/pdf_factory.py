"""Helpers for building PDF fixtures on the fly without storing binaries."""
from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

LEFT_MARGIN = 72
TOP_MARGIN = 72
LINE_HEIGHT = 16

SCENARIO_LINES = [
    "BAIL COMMERCIAL",
    "Duree du bail : 9 ans.",
    "Indexation : ILC annuel.",
    "Les grosses reparations de l'article 606 sont a la charge du preneur.",
    "La taxe fonciere est remboursee par le preneur au bailleur.",
    "Clause resolutoire : defaut de paiement des loyers.",
]


def create_pdf(tmp_path: Path, name: str, pages: Sequence[Sequence[str]]) -> Path:
    """One page per entry of ``pages``; an empty entry gives a blank page."""
    path = tmp_path / name
    c = canvas.Canvas(str(path), pagesize=A4)
    _, height = A4
    for lines in pages:
        y = height - TOP_MARGIN
        for line in lines:
            c.drawString(LEFT_MARGIN, y, line)
            y -= LINE_HEIGHT
        c.showPage()
    c.save()
    return path


def pdf_bytes(tmp_path: Path, pages: Sequence[Sequence[str]], name: str = "bail.pdf") -> bytes:
    return create_pdf(tmp_path, name, pages).read_bytes()


def scenario_pages() -> List[List[str]]:
    return [list(SCENARIO_LINES)]


def wrapped_clause_pages() -> List[List[str]]:
    """Clauses broken over two lines, the way a narrow text column wraps them."""
    return [[
        "BAIL COMMERCIAL",
        "Le depot de garantie est fixe a la somme de",
        "7 200 euros pour toute la duree du bail.",
        "Toute cession du present bail sera",
        "soumise a l'agrement prealable du bailleur.",
    ]]
