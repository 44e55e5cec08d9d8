# schemas.py
from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Literal, Optional, Tuple

Severity = Literal["info", "warn", "high"]
RiskLevel = Literal["modéré", "moyen", "élevé"]

# high > warn > info
SEVERITY_ORDER: Dict[str, int] = {"info": 0, "warn": 1, "high": 2}


class _CamelModel(BaseModel):
    # JSON uses the front-end's camelCase keys; Python code uses snake_case
    model_config = ConfigDict(populate_by_name=True, extra="allow")


# ---------- Findings ----------
class Finding(_CamelModel):
    id: str
    title: str
    severity: Severity
    detail: str
    advice: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    # Legacy keyword list still read by older report views
    where: Optional[List[str]] = None

    @property
    def keywords(self) -> List[str]:
        return self.tags or list(self.where or [])


# ---------- Report ----------
class ReportMeta(_CamelModel):
    title: str
    pages: int = 1
    indexation: Optional[str] = None
    plafonnement: bool = False
    filename: Optional[str] = None


class ReportSummary(_CamelModel):
    risk_score: float = Field(0.0, alias="riskScore", ge=0.0, le=1.0)
    risk_level: RiskLevel = Field("modéré", alias="riskLevel")
    highlights: List[str] = Field(default_factory=list)


class Checklist(_CamelModel):
    priorites: List[str] = Field(default_factory=list)
    formulations: List[str] = Field(default_factory=list)


class GeneralInfo(_CamelModel):
    """Best-effort fields; None means "not found"."""
    bailleur_nom: Optional[str] = Field(None, alias="bailleurNom")
    bailleur_forme: Optional[str] = Field(None, alias="bailleurForme")
    bailleur_rcs: Optional[str] = Field(None, alias="bailleurRCS")
    preneur_nom: Optional[str] = Field(None, alias="preneurNom")
    preneur_forme: Optional[str] = Field(None, alias="preneurForme")
    preneur_rcs: Optional[str] = Field(None, alias="preneurRCS")
    qualite_pouvoirs_signataires: Optional[str] = Field(None, alias="qualitePouvoirsSignataires")
    designation_bien: Optional[str] = Field(None, alias="designationBien")
    destination_locaux: Optional[str] = Field(None, alias="destinationLocaux")
    loyer_commercial: Optional[str] = Field(None, alias="loyerCommercial")

    def rows(self) -> List[Tuple[str, Optional[str]]]:
        """(label, value) pairs in display order."""
        return [
            ("Bailleur (nom)", self.bailleur_nom),
            ("Bailleur (forme sociale)", self.bailleur_forme),
            ("Bailleur (RCS / SIREN)", self.bailleur_rcs),
            ("Preneur (nom)", self.preneur_nom),
            ("Preneur (forme sociale)", self.preneur_forme),
            ("Preneur (RCS / SIREN)", self.preneur_rcs),
            ("Qualité et pouvoirs des signataires", self.qualite_pouvoirs_signataires),
            ("Désignation du bien loué", self.designation_bien),
            ("Destination des locaux", self.destination_locaux),
            ("Loyer commercial", self.loyer_commercial),
        ]

    def missing_fields(self) -> List[str]:
        return [
            name
            for name in type(self).model_fields
            if not (getattr(self, name) or "").strip()
        ]

    def is_empty(self) -> bool:
        return len(self.missing_fields()) == len(type(self).model_fields)


class AnalysisReport(_CamelModel):
    meta: ReportMeta
    findings: List[Finding] = Field(default_factory=list)
    summary: ReportSummary = Field(default_factory=ReportSummary)
    checklist: Checklist = Field(default_factory=Checklist)
    general_info: GeneralInfo = Field(default_factory=GeneralInfo, alias="generalInfo")

    def finding_ids(self) -> List[str]:
        return [f.id for f in self.findings]

    def get_finding(self, finding_id: str) -> Optional[Finding]:
        return next((f for f in self.findings if f.id == finding_id), None)

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


# ---------- API payloads ----------
class AnalyzeTextIn(BaseModel):
    text: str
    filename: Optional[str] = None
    strategy: Optional[str] = None


class ErrorOut(BaseModel):
    error: str
