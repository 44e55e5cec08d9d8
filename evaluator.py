# evaluator.py
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import List, Optional

from checklist import build_checklist
from clause_rules import classify
from extractor_factory import load_extractor
from info_extractor import GeneralInfoExtractor, SegmentInfoExtractor, Source
from risk_scorer import summarize
from schemas import SEVERITY_ORDER, AnalysisReport, Finding

log = logging.getLogger("lexbaux.evaluator")

NOT_FOUND = "Non trouvé"

SEVERITY_LABELS = {
    "info": "Information",
    "warn": "À surveiller",
    "high": "Risque élevé",
}


def analyze_text(
    text: str,
    *,
    extractor: Optional[GeneralInfoExtractor] = None,
    info_source: Source = None,
) -> AnalysisReport:
    """
    Classify ``text``, score it, build the checklist and extract general info.

    ``info_source`` lets the structured strategy read an upstream analysis
    object; by default the general info is read from ``text`` itself.
    """
    findings, meta, signals = classify(text)
    extractor = extractor or SegmentInfoExtractor()
    return AnalysisReport(
        meta=meta,
        findings=findings,
        summary=summarize(signals),
        checklist=build_checklist(findings),
        general_info=extractor.extract(info_source if info_source is not None else text),
    )


def make_report(
    text: str,
    *,
    filename: Optional[str] = None,
    pages: Optional[int] = None,
    strategy: Optional[str] = None,
    extractor: Optional[GeneralInfoExtractor] = None,
) -> AnalysisReport:
    """
    Full analysis of one document, with the true page count and original
    filename overlaid on the heuristic meta.

    Args:
        text: Extracted document text
        filename: Name of the uploaded file
        pages: Page count reported by the PDF parser
        strategy: General-info strategy override (None = configured default)
        extractor: Already resolved general-info extractor, wins over strategy

    Returns:
        AnalysisReport ready for JSON serialization
    """
    report = analyze_text(text, extractor=extractor or load_extractor(strategy))
    overlay = {"filename": filename}
    if pages is not None:
        overlay["pages"] = pages
    report = report.model_copy(update={"meta": report.meta.model_copy(update=overlay)})

    log.info(
        "Analysed %s: %d finding(s), risk=%.2f (%s)",
        filename or "<text>", len(report.findings), report.summary.risk_score, report.summary.risk_level,
    )
    return report


def sort_by_severity(findings: List[Finding]) -> List[Finding]:
    """high -> warn -> info, keeping detector order within a level."""
    return sorted(findings, key=lambda f: -SEVERITY_ORDER[f.severity])


# ---- Markdown utilities (used by main.py and /api/analyze.md) ----
def render_markdown(report: AnalysisReport) -> str:
    meta, summary = report.meta, report.summary
    lines = []
    lines.append(f"# Rapport d’analyse : {meta.filename or meta.title}")
    lines.append("")
    lines.append(f"- **Titre :** {meta.title}")
    lines.append(f"- **Pages :** {meta.pages}")
    lines.append(f"- **Indexation :** {meta.indexation or 'non détectée'}")
    lines.append(f"- **Plafonnement :** {'Oui' if meta.plafonnement else 'Non'}")
    lines.append(f"- **Niveau de risque :** {summary.risk_level} ({round(summary.risk_score * 100)} %)")
    if summary.highlights:
        lines.append(f"- **Points clés :** {' · '.join(summary.highlights)}")
    lines.append("")

    lines.append("## Informations générales")
    lines.append("")
    for label, value in report.general_info.rows():
        lines.append(f"- **{label} :** {value.strip() if value and value.strip() else f'_{NOT_FOUND}_'}")
    lines.append("")

    lines.append("## Conformité & alertes")
    lines.append("")
    for f in sort_by_severity(report.findings):
        lines.append(f"### [{SEVERITY_LABELS[f.severity]}] {f.title}")
        lines.append(f"- {f.detail}")
        if f.advice:
            lines.append(f"- **Conseil :** {f.advice}")
        if f.keywords:
            lines.append(f"- **Mots-clés :** {', '.join(f.keywords)}")
        lines.append("")

    lines.append("## Check-list de négociation")
    lines.append("")
    for i, p in enumerate(report.checklist.priorites, start=1):
        lines.append(f"{i}. {p}")
    if report.checklist.formulations:
        lines.append("")
        lines.append("### Formulations suggérées")
        lines.append("")
        for w in report.checklist.formulations:
            lines.append(f"- {w}")
    lines.append("")

    lines.append("---")
    lines.append("")
    lines.append("_Analyse automatique par motifs : elle ne remplace pas l’avis d’un conseil._")
    lines.append("")

    return "\n".join(lines)


def save_markdown(report: AnalysisReport, out_dir: Path):
    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / "report.md").write_text(render_markdown(report), encoding="utf-8")


def save_json(report: AnalysisReport, out_dir: Path):
    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / "report.json").write_text(
        json.dumps(report.to_json_dict(), ensure_ascii=False, indent=2), encoding="utf-8"
    )
