"""Unit tests for risk scoring and level quantization."""
from __future__ import annotations

import pytest

from clause_rules import detect_signals
from risk_scorer import RISK_WEIGHTS, active_weights, highlights, risk_level, score, score_weights, summarize

SCENARIO = (
    "BAIL COMMERCIAL\n"
    "Durée du bail : 9 ans.\n"
    "Indexation : ILC annuel.\n"
    "Les grosses réparations de l'article 606 sont à la charge du preneur.\n"
    "La taxe foncière est remboursée par le preneur.\n"
    "Une clause résolutoire s'applique en cas de manquement."
)

EMPTY = detect_signals("")

# every flag that carries a weight, switched on one at a time
SIGNAL_TOGGLES = [
    {"index_label": "ICC"},
    {"index_label": "ILC"},
    {"index_one_way": True},
    {"capital_repairs": True},
    {"property_tax": True},
    {"waste_tax": True},
    {"resolutory_clause": True},
    {"assignor_joint_liability": True},
]


@pytest.mark.parametrize(
    "value, expected",
    [(0.0, "modéré"), (0.32, "modéré"), (0.33, "moyen"), (0.65, "moyen"), (0.66, "élevé"), (1.0, "élevé")],
)
def test_risk_level_thresholds(value, expected):
    assert risk_level(value) == expected


def test_scenario_scores_high():
    summary = summarize(detect_signals(SCENARIO))
    assert summary.risk_score == pytest.approx(0.70)
    assert summary.risk_score >= 0.66
    assert summary.risk_level == "élevé"
    assert summary.highlights == [
        "Indexation: ILC",
        "606 potentiellement à la charge du locataire",
        "Taxe foncière récupérée",
        "Clause résolutoire",
    ]


def test_neutral_text_scores_zero():
    signals = detect_signals("Le chat dort sur le canapé toute la journée.")
    assert score(signals) == 0.0
    assert summarize(signals).risk_level == "modéré"
    assert highlights(signals) == []


def test_missing_index_does_not_add_uncapped_weight():
    signals = detect_signals("Le preneur paie un loyer au bailleur.")
    assert "index_uncapped" not in active_weights(signals)
    assert highlights(signals) == ["Indexation non détectée"]


def test_clause_finding_without_lease_words_flags_missing_index():
    signals = detect_signals("Clause résolutoire de plein droit. La taxe foncière est à la charge de l'occupant.")
    assert not signals.lease_vocabulary
    assert highlights(signals) == ["Indexation non détectée", "Taxe foncière récupérée", "Clause résolutoire"]


def test_capped_index_highlight():
    signals = detect_signals("Indexation ILC plafonnée à 2 %.")
    assert highlights(signals) == ["Indexation: ILC (cap)"]
    assert score(signals) == 0.0


def test_score_is_clamped_to_one():
    assert score_weights({"a": 0.5, "b": 0.4, "c": 0.3}) == 1.0
    assert score_weights({}) == 0.0
    everything = EMPTY._replace(
        index_label="ICC", index_one_way=True, capital_repairs=True, property_tax=True,
        resolutory_clause=True, assignor_joint_liability=True,
    )
    assert score(everything) == 1.0


@pytest.mark.parametrize("toggle", SIGNAL_TOGGLES)
def test_score_is_monotone(toggle):
    base = detect_signals(SCENARIO)
    assert score(base._replace(**toggle)) >= score(base)
    assert score(EMPTY._replace(**toggle)) >= score(EMPTY)
    assert 0.0 <= score(base._replace(**toggle)) <= 1.0


def test_assignor_weight_needs_unlimited_solidarity():
    unlimited = EMPTY._replace(assignor_joint_liability=True)
    limited = unlimited._replace(three_year_guarantee=True)
    assert active_weights(unlimited) == {"assignor_liability_unlimited": 0.15}
    assert active_weights(limited) == {}
    assert highlights(unlimited) == ["Indexation non détectée", "Solidarité du cédant potentiellement illimitée"]
    assert highlights(limited) == ["Indexation non détectée", "Solidarité du cédant"]


def test_every_weight_is_positive():
    for name, weight, _ in RISK_WEIGHTS:
        assert 0 < weight <= 1, name
