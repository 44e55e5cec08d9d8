# risk_scorer.py
"""
Linear, explainable risk score: each true signal adds a fixed weight, the sum
is clamped to 1.0. Every point of risk maps back to one detector.
"""
from __future__ import annotations
from typing import Callable, Dict, List, Tuple

from clause_rules import LeaseSignals
from schemas import ReportSummary

MODERATE_BELOW = 0.33
HIGH_FROM = 0.66

# (signal name, weight, predicate)
RISK_WEIGHTS: List[Tuple[str, float, Callable[[LeaseSignals], bool]]] = [
    ("index_icc", 0.25, lambda s: s.index_label == "ICC"),
    ("index_uncapped", 0.15, lambda s: s.index_uncapped),
    ("index_one_way", 0.25, lambda s: s.index_one_way),
    ("capital_repairs", 0.25, lambda s: s.capital_repairs),
    ("tax_recharged", 0.15, lambda s: s.property_tax or s.waste_tax),
    ("resolutory_clause", 0.15, lambda s: s.resolutory_clause),
    ("assignor_liability_unlimited", 0.15, lambda s: s.assignor_liability_unlimited),
]


def active_weights(signals: LeaseSignals) -> Dict[str, float]:
    """Weights of the signals that are true, keyed by signal name."""
    return {name: weight for name, weight, pred in RISK_WEIGHTS if pred(signals)}


def score_weights(weights: Dict[str, float]) -> float:
    # rounded so that 0.15 + 0.25 + ... compares cleanly against the thresholds
    return round(min(1.0, max(0.0, sum(weights.values()))), 2)


def score(signals: LeaseSignals) -> float:
    return score_weights(active_weights(signals))


def risk_level(score_value: float) -> str:
    if score_value >= HIGH_FROM:
        return "élevé"
    if score_value >= MODERATE_BELOW:
        return "moyen"
    return "modéré"


def highlights(signals: LeaseSignals) -> List[str]:
    """Badge strings for the true signals, in a fixed order."""
    if signals.index_label:
        index_badge = f"Indexation: {signals.index_label}{' (cap)' if signals.index_capped else ''}"
    elif signals.expects_index:
        index_badge = "Indexation non détectée"
    else:
        index_badge = None

    if signals.assignor_liability_unlimited:
        solidarity = "Solidarité du cédant potentiellement illimitée"
    elif signals.assignor_joint_liability:
        solidarity = "Solidarité du cédant"
    else:
        solidarity = None

    candidates = [
        index_badge,
        "Indexation à sens unique" if signals.index_one_way else None,
        "606 potentiellement à la charge du locataire" if signals.capital_repairs else None,
        "Taxe foncière récupérée" if signals.property_tax else None,
        "TEOM refacturée" if signals.waste_tax else None,
        "Clause résolutoire" if signals.resolutory_clause else None,
        solidarity,
        "Renonciation au renouvellement" if signals.renewal_waiver else None,
    ]
    return [h for h in candidates if h]


def summarize(signals: LeaseSignals) -> ReportSummary:
    value = score(signals)
    return ReportSummary(
        risk_score=value,
        risk_level=risk_level(value),
        highlights=highlights(signals),
    )
