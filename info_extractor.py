"""
General-information extraction (parties, premises, rent).

Two interchangeable strategies share the ``GeneralInfoExtractor`` interface:

* ``SegmentInfoExtractor`` slices the text between known labels
  ("Bailleur :", "Preneur :", "Bien loué :", ...) and then looks for a legal
  form and a registration number inside each party segment.
* ``StructuredInfoExtractor`` reads an already structured analysis
  (``generalInfo.bailleur.nom``, ``parties.preneur.siren``, ``bien.adresse``)
  and falls back to the segment strategy over the analysis raw text.

Neither raises on missing data: an absent field is ``None``.
"""
from abc import ABC, abstractmethod
import re
from typing import Any, Dict, List, Mapping, Optional, Union

from schemas import GeneralInfo

Source = Union[str, Mapping[str, Any], None]

# Order as usually found in a lease front page
LABELS = [
    "Bailleur",
    "Preneur",
    "Bien loué",
    "Destination des locaux",
    "Loyer",
    "Dépôt de garantie",
    "Durée du bail",
    "Indexation",
    "Clause résolutoire",
]

LEGAL_FORM_RE = re.compile(r"\b(SASU|SAS|SARL|EURL|SCI|SA|SNC|SCA)\b")
REGISTRATION_RE = re.compile(r"\b(?:RCS|SIREN|SIRET)\b[^0-9]*([0-9][0-9 ]{8,})", re.IGNORECASE)
REGISTRATION_SPAN_RE = re.compile(r"\b(?:RCS|SIREN|SIRET)\b[^0-9]*[0-9][0-9 ]{8,}", re.IGNORECASE)
# "M." / "Mme." initials must not end the sentence
SIGNATORY_RE = re.compile(r"[Rr]eprésenté(?:e|es|s)?\s+par\s+(?:[A-Z][a-z]{0,2}\.\s*|[^.])+")

RAW_TEXT_KEYS = ("rawText", "fullText", "text")
MAX_SIGNATORY_CHARS = 200


def normalize(text: Optional[str]) -> str:
    """Collapse every run of whitespace (including non-breaking spaces) to one space."""
    return re.sub(r"\s+", " ", (text or "").replace("\u00a0", " ")).strip()


def _label_re(label: str) -> str:
    return r"\b" + r"\s+".join(re.escape(word) for word in label.split()) + r"\s*[:\-–]"


def extract_between(text: str, label: str, next_labels: List[str]) -> Optional[str]:
    """Text after ``label:`` up to the next ``other label:`` or the end of text."""
    following = "|".join(_label_re(lbl) for lbl in next_labels)
    rx = re.compile(
        _label_re(label) + r"\s*(.*?)\s*(?=" + (following + "|" if following else "") + r"$)",
        re.IGNORECASE,
    )
    m = rx.search(text)
    if not m:
        return None
    value = m.group(1).strip(" ;,")
    return value or None


def extract_registration(segment: Optional[str]) -> Optional[str]:
    if not segment:
        return None
    m = REGISTRATION_RE.search(segment)
    return re.sub(r"\s+", " ", m.group(1)).strip() if m else None


def extract_legal_form(segment: Optional[str]) -> Optional[str]:
    if not segment:
        return None
    m = LEGAL_FORM_RE.search(segment)
    return m.group(1).upper() if m else None


def clean_name(segment: Optional[str]) -> Optional[str]:
    """Party segment with the registration-number run removed."""
    if not segment:
        return None
    name = REGISTRATION_SPAN_RE.sub("", segment)
    name = re.sub(r"\s+([,.;])", r"\1", re.sub(r"\s{2,}", " ", name)).strip(" ;,")
    return name or None


def extract_signatories(*segments: Optional[str]) -> Optional[str]:
    found = []
    for segment in segments:
        if not segment:
            continue
        m = SIGNATORY_RE.search(segment)
        if m:
            found.append(m.group(0).strip()[:MAX_SIGNATORY_CHARS])
    return " ; ".join(found) or None


def raw_text_of(source: Source) -> str:
    if source is None:
        return ""
    if isinstance(source, str):
        return source
    for key in RAW_TEXT_KEYS:
        value = source.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


class GeneralInfoExtractor(ABC):
    name: str = ""

    @abstractmethod
    def extract(self, source: Source) -> GeneralInfo: ...


class SegmentInfoExtractor(GeneralInfoExtractor):
    name = "segments"

    def __init__(self, labels: Optional[List[str]] = None):
        self.labels = list(labels or LABELS)

    def segment(self, text: str, label: str) -> Optional[str]:
        return extract_between(text, label, [lbl for lbl in self.labels if lbl != label])

    def extract(self, source: Source) -> GeneralInfo:
        t = normalize(raw_text_of(source))
        if not t:
            return GeneralInfo()

        seg_bailleur = self.segment(t, "Bailleur")
        seg_preneur = self.segment(t, "Preneur")

        return GeneralInfo(
            bailleur_nom=clean_name(seg_bailleur),
            bailleur_forme=extract_legal_form(seg_bailleur),
            bailleur_rcs=extract_registration(seg_bailleur),
            preneur_nom=clean_name(seg_preneur),
            preneur_forme=extract_legal_form(seg_preneur),
            preneur_rcs=extract_registration(seg_preneur),
            qualite_pouvoirs_signataires=extract_signatories(seg_bailleur, seg_preneur),
            designation_bien=self.segment(t, "Bien loué"),
            destination_locaux=self.segment(t, "Destination des locaux"),
            loyer_commercial=self.segment(t, "Loyer"),
        )


def _pick(data: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _section(data: Mapping[str, Any], *path: str) -> Mapping[str, Any]:
    node: Any = data
    for key in path:
        if not isinstance(node, Mapping):
            return {}
        node = node.get(key)
    return node if isinstance(node, Mapping) else {}


class StructuredInfoExtractor(GeneralInfoExtractor):
    """Reads ``generalInfo``/``parties`` objects produced by an upstream structuring step."""

    name = "structured"

    def __init__(self, fallback: Optional[GeneralInfoExtractor] = None):
        self.fallback = fallback or SegmentInfoExtractor()

    def _parties(self, data: Mapping[str, Any]) -> Dict[str, Mapping[str, Any]]:
        for root in ("generalInfo", "parties"):
            bailleur = _section(data, root, "bailleur")
            preneur = _section(data, root, "preneur")
            if bailleur or preneur:
                return {"bailleur": bailleur, "preneur": preneur,
                        "bien": _section(data, root, "bien") or _section(data, "bien")}
        return {"bailleur": {}, "preneur": {}, "bien": _section(data, "bien")}

    def extract(self, source: Source) -> GeneralInfo:
        fallback = self.fallback.extract(source)
        if not isinstance(source, Mapping):
            return fallback

        p = self._parties(source)
        bailleur, preneur, bien = p["bailleur"], p["preneur"], p["bien"]
        flat = _section(source, "generalInfo")

        representants = [
            r for r in (_pick(bailleur, "representant", "signataire"),
                        _pick(preneur, "representant", "signataire")) if r
        ]
        structured = {
            "bailleur_nom": _pick(bailleur, "nom", "denomination") or _pick(flat, "bailleurNom"),
            "bailleur_forme": _pick(bailleur, "forme", "formeSociale") or _pick(flat, "bailleurForme"),
            "bailleur_rcs": _pick(bailleur, "siren", "rcs", "siret") or _pick(flat, "bailleurRCS"),
            "preneur_nom": _pick(preneur, "nom", "denomination") or _pick(flat, "preneurNom"),
            "preneur_forme": _pick(preneur, "forme", "formeSociale") or _pick(flat, "preneurForme"),
            "preneur_rcs": _pick(preneur, "siren", "rcs", "siret") or _pick(flat, "preneurRCS"),
            "qualite_pouvoirs_signataires": " ; ".join(representants) or _pick(flat, "qualitePouvoirsSignataires"),
            "designation_bien": _pick(bien, "designation", "adresse") or _pick(flat, "designationBien"),
            "destination_locaux": _pick(bien, "destination") or _pick(flat, "destinationLocaux"),
            "loyer_commercial": _pick(bien, "loyer") or _pick(flat, "loyerCommercial"),
        }
        merged = {
            field: structured[field] if structured[field] is not None else getattr(fallback, field)
            for field in structured
        }
        return GeneralInfo(**merged)
