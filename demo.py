# demo.py
"""Canned report shown on the demo page, identical on every call."""
from __future__ import annotations
import copy
from typing import Optional

from checklist import load_checklist_config
from info_extractor import SegmentInfoExtractor
from schemas import AnalysisReport

DEFAULT_DEMO_FILENAME = "bail.pdf"

DEMO_RAW_TEXT = """
BAIL COMMERCIAL
Bailleur : Société IMMOBAIL SARL immatriculée au RCS de Lyon sous le n° 512 345 678, siège social 12 rue de la République, 69001 Lyon, représentée par son gérant M. Jean Dupont.
Preneur : Société RESTAURA SAS immatriculée au RCS de Lyon sous le n° 789 654 321, siège social 45 av. des Frères Lumière, 69008 Lyon, représentée par sa Présidente Mme Claire Martin.
Bien loué : Local commercial 15 rue Victor Hugo, 69002 Lyon (120 m²).
Destination des locaux : Activité de restauration rapide (hors cuisson avec extraction).
Loyer : 2 400 € HT par mois, payable trimestriellement d’avance.
Dépôt de garantie : 7 200 € (3 mois de loyer HT).
Durée du bail : 9 ans.
Indexation : ILC annuel.
Clause résolutoire : Défaut de paiement/obligations contractuelles.
""".strip()

DEMO_REPORT = {
    "meta": {
        "title": "BAIL COMMERCIAL",
        "pages": 27,
        "indexation": "ILC",
        "plafonnement": True,
        "filename": DEFAULT_DEMO_FILENAME,
    },
    "summary": {
        "riskScore": 0.71,
        "riskLevel": "élevé",
        "highlights": [
            "Indexation: ILC (cap)",
            "606 potentiellement à la charge du locataire",
            "Taxe foncière récupérée",
            "Clause résolutoire",
            "Solidarité du cédant",
        ],
    },
    "rawText": DEMO_RAW_TEXT,
    "findings": [
        {
            "id": "charges",
            "title": "Charges récupérables",
            "severity": "high",
            "detail": "Mention d’« article 606 » ou « grosses réparations » : semble à la charge du locataire.",
            "advice": "Lister précisément les charges récupérables, exclure les grosses réparations (art. 606) "
                      "et encadrer la taxe foncière.",
            "tags": ["charges", "606", "taxe foncière", "régularisation"],
        },
        {
            "id": "mise_conformite",
            "title": "Mise en conformité / travaux",
            "severity": "warn",
            "detail": "Mentions de mise en conformité (accessibilité, amiante, etc.).",
            "advice": "Clarifier la répartition des travaux et des coûts de mise en conformité.",
            "tags": ["travaux", "conformité", "amiante", "accessibilité"],
        },
        {
            "id": "deposit",
            "title": "Dépôt de garantie",
            "severity": "info",
            "detail": "Montant repéré : 7 200 € (à confirmer).",
            "advice": "Vérifier le montant (souvent 1–3 mois de loyer HT/HC) et les conditions de restitution.",
            "tags": ["dépôt", "garantie"],
        },
        {
            "id": "cession",
            "title": "Cession / sous-location",
            "severity": "warn",
            "detail": "Des restrictions à la cession/sous-location semblent présentes.",
            "advice": "Prévoir une autorisation non abusive, des délais de réponse, et limiter les garanties du cédant.",
            "tags": ["cession", "sous-location", "agrément"],
        },
        {
            "id": "exclusivite",
            "title": "Exclusivité / non-concurrence",
            "severity": "warn",
            "detail": "Clause d’exclusivité ou de non-concurrence détectée.",
            "advice": "Encadrer le périmètre, la durée et le secteur géographique.",
            "tags": ["exclusivité", "non-concurrence"],
        },
        {
            "id": "resolutoire",
            "title": "Clause résolutoire",
            "severity": "warn",
            "detail": "Résiliation de plein droit en cas d’impayé ou de manquement.",
            "advice": "Prévoir mise en demeure préalable, délai de remède et cas précisément listés.",
            "tags": ["résiliation", "mise en demeure"],
        },
    ],
}


def demo_report(filename: Optional[str] = None) -> AnalysisReport:
    """
    The demo report with ``filename`` overlaid on its meta.

    General info is extracted from the demo raw text, checklist is the
    generic baseline.
    """
    data = copy.deepcopy(DEMO_REPORT)
    data["meta"]["filename"] = filename or DEFAULT_DEMO_FILENAME
    data["checklist"] = load_checklist_config().get("baseline", {})
    report = AnalysisReport.model_validate(data)
    return report.model_copy(update={"general_info": SegmentInfoExtractor().extract(data)})
