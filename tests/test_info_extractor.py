"""Unit tests for general-information extraction."""
from __future__ import annotations

import pytest

from demo import DEMO_RAW_TEXT
from extractor_factory import UnknownStrategyError, load_extractor
from info_extractor import (
    SegmentInfoExtractor,
    StructuredInfoExtractor,
    extract_between,
    extract_legal_form,
    extract_registration,
    normalize,
)


@pytest.fixture
def demo_info():
    return SegmentInfoExtractor().extract(DEMO_RAW_TEXT)


def test_parties_from_labelled_segments(demo_info):
    assert "IMMOBAIL" in demo_info.bailleur_nom
    assert "512 345 678" not in demo_info.bailleur_nom
    assert demo_info.bailleur_forme == "SARL"
    assert demo_info.bailleur_rcs == "512 345 678"

    assert "RESTAURA" in demo_info.preneur_nom
    assert demo_info.preneur_forme == "SAS"
    assert demo_info.preneur_rcs == "789 654 321"


def test_signatories_from_both_parties(demo_info):
    assert demo_info.qualite_pouvoirs_signataires == (
        "représentée par son gérant M. Jean Dupont ; représentée par sa Présidente Mme Claire Martin"
    )


def test_premises_destination_and_rent(demo_info):
    assert demo_info.designation_bien == "Local commercial 15 rue Victor Hugo, 69002 Lyon (120 m²)."
    assert demo_info.destination_locaux == "Activité de restauration rapide (hors cuisson avec extraction)."
    assert demo_info.loyer_commercial.startswith("2 400 € HT par mois")
    assert demo_info.missing_fields() == []


def test_no_labels_means_every_field_absent():
    info = SegmentInfoExtractor().extract(
        "Ce document parle du bailleur et du preneur en général, sans aucune rubrique."
    )
    assert info.is_empty()
    assert all(value is None for _, value in info.rows())


def test_empty_source():
    assert SegmentInfoExtractor().extract(None).is_empty()
    assert SegmentInfoExtractor().extract("").is_empty()
    assert SegmentInfoExtractor().extract({"other": 1}).is_empty()


def test_lowercase_possessive_is_not_a_legal_form():
    assert extract_legal_form("représentée par sa gérante") is None
    assert extract_legal_form("la société EXEMPLE SA") == "SA"


def test_registration_variants():
    assert extract_registration("SIREN : 512345678") == "512345678"
    assert extract_registration("immatriculée au RCS de Paris n° 444 555 666") == "444 555 666"
    assert extract_registration("pas de numéro") is None


def test_extract_between_stops_at_next_label():
    text = normalize("Bailleur : ACME\nPreneur : BETA SAS")
    assert text == "Bailleur : ACME Preneur : BETA SAS"
    assert extract_between(text, "Bailleur", ["Preneur"]) == "ACME"
    assert extract_between(text, "Preneur", ["Bailleur"]) == "BETA SAS"
    assert extract_between(text, "Loyer", ["Preneur"]) is None


def test_structured_strategy_reads_parties_and_falls_back():
    analysis = {
        "generalInfo": {
            "bailleur": {"nom": "IMMOBAIL", "forme": "SARL", "siren": 512345678},
            "preneur": {"nom": "RESTAURA", "representant": "Mme Claire Martin"},
        },
        "bien": {"adresse": "15 rue Victor Hugo, 69002 Lyon"},
        "rawText": "Loyer : 2 400 € HT par mois.",
    }
    info = StructuredInfoExtractor().extract(analysis)
    assert info.bailleur_nom == "IMMOBAIL"
    assert info.bailleur_forme == "SARL"
    assert info.bailleur_rcs == "512345678"
    assert info.preneur_nom == "RESTAURA"
    assert info.qualite_pouvoirs_signataires == "Mme Claire Martin"
    assert info.designation_bien == "15 rue Victor Hugo, 69002 Lyon"
    # not in the structured part: taken from the raw text
    assert info.loyer_commercial.startswith("2 400 €")


def test_structured_strategy_reads_flat_general_info():
    info = StructuredInfoExtractor().extract({"generalInfo": {"bailleurNom": "ACME", "preneurRCS": "123 456 789"}})
    assert info.bailleur_nom == "ACME"
    assert info.preneur_rcs == "123 456 789"


def test_structured_strategy_on_plain_text_matches_segments():
    assert StructuredInfoExtractor().extract(DEMO_RAW_TEXT) == SegmentInfoExtractor().extract(DEMO_RAW_TEXT)


def test_general_info_serializes_with_camel_case(demo_info):
    data = demo_info.model_dump(by_alias=True)
    assert data["bailleurRCS"] == "512 345 678"
    assert data["preneurForme"] == "SAS"


def test_factory_strategies(tmp_path, monkeypatch):
    monkeypatch.delenv("LEXBAUX_GENERAL_INFO_STRATEGY", raising=False)
    missing = str(tmp_path / "absent.yaml")
    assert isinstance(load_extractor("segments", config_path=missing), SegmentInfoExtractor)
    assert isinstance(load_extractor(" Structured ", config_path=missing), StructuredInfoExtractor)
    with pytest.raises(UnknownStrategyError, match="llm"):
        load_extractor("llm", config_path=missing)


def test_factory_reads_yaml(tmp_path, monkeypatch):
    monkeypatch.delenv("LEXBAUX_GENERAL_INFO_STRATEGY", raising=False)
    cfg = tmp_path / "lexbaux.yaml"
    cfg.write_text("general_info:\n  strategy: structured\n  labels: [Bailleur, Preneur]\n", encoding="utf-8")
    extractor = load_extractor(config_path=str(cfg))
    assert isinstance(extractor, StructuredInfoExtractor)
    assert extractor.fallback.labels == ["Bailleur", "Preneur"]

    monkeypatch.setenv("LEXBAUX_GENERAL_INFO_STRATEGY", "segments")
    assert isinstance(load_extractor(config_path=str(cfg)), SegmentInfoExtractor)
