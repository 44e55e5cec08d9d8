# checklist.py
"""Negotiation checklist derived from the findings of one report."""
from __future__ import annotations
import os
from typing import Dict, List, Optional

import yaml

from schemas import Checklist, Finding

# Keyed by finding id. A custom file with the same shape can be supplied via
# LEXBAUX_CHECKLIST_PATH.
CHECKLIST_YAML = """
baseline:
  priorites:
    - "Confirmer l’indexation (ILC/ILAT) et son plafonnement éventuel."
    - "Limiter les charges récupérables (exclure art. 606) et encadrer la taxe foncière."
    - "Clarifier la répartition des travaux (mise en conformité, gros entretien)."
    - "Encadrer la clause résolutoire (mise en demeure, délai de remède)."
    - "Négocier les garanties (dépôt, caution) et leur durée."
    - "Vérifier les restrictions de cession/sous-location."
items:
  duration:
    priorite: "Vérifier la durée du bail et les facultés de sortie triennale."
  index:
    priorite: "Fixer l’index (ILC/ILAT) avec cap annuel et date anniversaire."
    formulation: "Index — « Index de base ILC T-4 [année] ; révision annuelle à date anniversaire ; cap de +[X]%/an ; pas de rétroactivité. »"
  index-missing:
    priorite: "Obtenir une clause d’indexation claire (ILC/ILAT) ou confirmer l’absence d’indexation."
  index-one-way:
    priorite: "Rendre l’indexation bilatérale (hausse et baisse) pour éviter la nullité."
    formulation: "Index — « L’indexation jouera à la hausse comme à la baisse, sans plancher. »"
  charges:
    priorite: "Exclure expressément l’art. 606 et les travaux structurels."
    formulation: "Charges — « Sont exclues les grosses réparations de l’art. 606 C. civ. et les travaux structurels (ravalement, étanchéité, gros œuvre). »"
  charges-regularisation:
    priorite: "Exiger une régularisation annuelle des charges avec décompte et justificatifs."
  travaux-conformite:
    priorite: "Clarifier les mises en conformité et plafonner les travaux preneur."
    formulation: "Travaux — « Les mises en conformité légales incombent au bailleur ; les travaux privatifs du preneur sont plafonnés à [X] € HT/an. »"
  deposit:
    priorite: "Vérifier dépôt de garantie (montant, restitution, intérêts)."
  penalties:
    priorite: "Encadrer pénalités de retard et délais de grâce."
  assignment:
    priorite: "Vérifier les restrictions de cession/sous-location (agrément non abusif, délai de réponse)."
    formulation: "Cession — « Critères d’agrément objectifs ; délai de réponse du bailleur de 15 jours, silence valant accord. »"
  cession-solidarite:
    priorite: "Limiter la solidarité du cédant à 3 ans maximum."
    formulation: "Cession — « Solidarité du cédant limitée à trois (3) ans ; critères d’agrément objectifs ; délai de réponse 15 jours. »"
  garantie-3-ans:
    priorite: "Vérifier le périmètre de la garantie triennale (L145-16-1)."
  renouvellement-renonciation:
    priorite: "Faire valider toute renonciation au renouvellement par un conseil."
  indem-eviction:
    priorite: "Vérifier les cas d’exclusion et le calcul de l’indemnité d’éviction."
  destination:
    priorite: "Définir précisément la destination et interdire ICPE/ERP sans accord."
    formulation: "Destination — « Activités autorisées : … ; ICPE/ERP interdit sauf accord écrit préalable du bailleur. »"
  exclusivite:
    priorite: "Encadrer l’exclusivité / non-concurrence (périmètre, durée, secteur)."
  resolutory:
    priorite: "Encadrer la clause résolutoire : mise en demeure RAR, délai 30 jours, liste limitative."
    formulation: "Résolutoire — « Activation après mise en demeure RAR, délai de remède 30 jours, pour les seuls cas listés ci-après. »"
  notice:
    priorite: "Négocier un préavis raisonnable et symétrique."
  franchise:
    priorite: "Préciser la durée de la franchise, son étalement et son impact sur l’indexation."
"""


def load_checklist_config(path: Optional[str] = None) -> Dict:
    path = path or os.getenv("LEXBAUX_CHECKLIST_PATH")
    if path:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    return yaml.safe_load(CHECKLIST_YAML)


_DEFAULT_CONFIG = load_checklist_config()


def build_checklist(findings: List[Finding], config: Optional[Dict] = None) -> Checklist:
    """
    Priorities and suggested wordings for the fired findings, in finding order.

    Falls back to the generic baseline when no finding has a checklist entry.
    """
    cfg = config or _DEFAULT_CONFIG
    items = cfg.get("items", {}) or {}

    priorites: List[str] = []
    formulations: List[str] = []
    for f in findings:
        entry = items.get(f.id) or {}
        p = entry.get("priorite")
        w = entry.get("formulation")
        if p and p not in priorites:
            priorites.append(p)
        if w and w not in formulations:
            formulations.append(w)

    # the unconditional duration item alone is not worth a checklist
    if not priorites or priorites == [(items.get("duration") or {}).get("priorite")]:
        baseline = cfg.get("baseline", {}) or {}
        priorites = list(baseline.get("priorites", []) or [])
        formulations = list(baseline.get("formulations", []) or [])

    return Checklist(priorites=priorites, formulations=formulations)
