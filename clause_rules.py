# clause_rules.py
"""
Regex heuristics over the extracted text of a French commercial lease.

Every detector is independent: it reads the pre-computed ``LeaseSignals`` and
returns zero or one ``Finding``. Nothing here raises on odd input; a pattern
that does not match simply suppresses its finding.
"""
from __future__ import annotations

import re
from typing import Callable, List, NamedTuple, Optional, Tuple

from doc_type import guess_page_count, guess_title, looks_like_lease
from schemas import Finding, ReportMeta

# ---------- Regex patterns ----------
# Patterns tagged (raw) run on the original text, (lower) on a lower-cased copy.
DURATION_9_RE = re.compile(r"(?<!\d)9\s*(?:ans|ann[ée]es)\b", re.IGNORECASE)          # raw
DURATION_12_RE = re.compile(r"(?<!\d)12\s*(?:ans|ann[ée]es)\b", re.IGNORECASE)        # raw
DURATION_ANY_RE = re.compile(r"(?<!\d)(\d{1,2})\s*(?:ans|ann[ée]es)\b", re.IGNORECASE)  # raw

# Index names, checked in precedence order ILC > ILAT > ICC (lower)
INDEX_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ("ILC", re.compile(r"\bilc\b|indice\s+des\s+loyers\s+commerciaux")),
    ("ILAT", re.compile(r"\bilat\b|indice\s+des\s+loyers\s+des\s+activit[ée]s\s+tertiaires")),
    ("ICC", re.compile(r"\bicc\b|indice\s+du\s+co[uû]t\s+de\s+la\s+construction")),
]
INDEX_CAP_RE = re.compile(r"\bplafon(?:d|n)\w*|\bcap(?:ping)?\b", re.IGNORECASE)        # raw
INDEX_PERIOD_RE = re.compile(r"\b(annuelle|annuel|trimestrielle|semestrielle)\b", re.IGNORECASE)  # raw
INDEX_ONE_WAY_RES = [                                                                   # lower
    re.compile(r"indexation[^.\n]+(?:seulement|uniquement)[^.\n]+(?:hausse|augmentation)"),
    re.compile(r"(?:indexation|r[ée]vision)[^.\n]*ne\s+(?:pourra|saurait)[^.\n]*(?:baisse|diminution)"),
]

CAPITAL_REPAIRS_RE = re.compile(r"grosses?\s+r[ée]parations|art(?:icle|\.)?\s*606", re.IGNORECASE)  # raw
PROPERTY_TAX_RE = re.compile(r"taxe\s*fonci[eè]re", re.IGNORECASE)                      # raw
WASTE_TAX_RE = re.compile(r"\bteom\b|taxe\s+d['’]\s*enl[eè]vement\s+des\s+ordures")       # lower
COMPLIANCE_RE = re.compile(r"mise\s+en\s+conformit[ée]|accessibilit[ée]|amiante|d[ée]samiantage")  # lower
CHARGES_RECON_RE = re.compile(r"r[ée]gularisation.{0,20}(?:annuelle|trimestrielle|mensuelle)")  # lower

DEPOSIT_AMOUNT_RE = re.compile(                                                         # raw
    r"d[ée]p[oô]t\s+de\s+garantie[^0-9\n]{0,80}?"
    r"(\d{1,3}(?:[ \u00a0\u202f.]\d{3})+(?:,\d+)?|\d+(?:[.,]\d+)?)(?![\d.,]|\s*mois)"
    r"(\s*(?:€|euros?\b|eur\b))?",
    re.IGNORECASE,
)
DEPOSIT_MONTHS_RE = re.compile(                                                         # lower
    r"\b(\d+|un|deux|trois|quatre|cinq|six)\s*mois\s+de\s+loyers?"
)
PENALTY_RATE_RE = re.compile(                                                           # lower
    r"\d+(?:[.,]\d+)?\s*%\s*(?:par\s*(?:an|mois)|l['’]an|annuel|mensuel)"
)
PENALTIES_RE = re.compile(r"p[ée]nalit[ée]s?|int[ée]r[eê]ts\s+de\s+retard")            # lower

ASSIGNMENT_RE = re.compile(                                                             # lower
    r"(?:cession|sous-?location).*(?:interdit|soumis|autorisation|agr[ée]ment)"
)
ASSIGNOR_JOINT_RES = [                                                                  # lower
    re.compile(r"(?:garantie|obligation)s?.{0,40}solidaire.{0,40}c[ée]dant"),
    re.compile(r"c[ée]dant.{0,60}(?:garant|solidaire(?:ment)?)\b"),
]
THREE_YEAR_RE = re.compile(r"l\.?\s*145-16-1|garanti.{0,10}(?:3|trois)\s*ans")          # lower
RENEWAL_WAIVER_RE = re.compile(r"renon(?:ciation|ce|cer)\w*.{0,20}renouvellement")       # lower
EVICTION_RE = re.compile(r"indemnit[ée]\s+d['’]\s*[ée]?viction")                         # lower

DESTINATION_RE = re.compile(                                                            # raw
    r"(?:destination(?:\s+des\s+(?:locaux|lieux))?|usage)\s*[:\-–]\s*([^\n]+)",
    re.IGNORECASE,
)
EXCLUSIVITY_RE = re.compile(r"exclusivit[ée]|non[-\s]?concurrence")                      # lower
RESOLUTORY_RE = re.compile(r"clause\s+r[ée]solutoire|r[ée]siliation\s+de\s+plein\s+droit")  # lower
NOTICE_MONTHS_RE = re.compile(r"pr[ée]avis.{0,20}?\b(\d{1,2})\s*mois")                   # lower
NOTICE_WORDS_RE = re.compile(                                                           # lower
    r"pr[ée]avis.{0,20}?(?:un\s+an|une\s+ann[ée]e|(?:six|sept|huit|neuf|dix|douze|dix-huit)\s+mois)"
)
FRANCHISE_RE = re.compile(r"franchise[^.\n]*?(\d+)\s*mois")                              # lower
FREE_RENT_RE = re.compile(r"\bloyers?\s+gratuits?\b")                                    # lower

# newline inside a page plus the blanks around it; \f is not matched
WRAPPED_LINE_RE = re.compile(r"[ \t\r]*\n[ \t\r]*")

LONG_NOTICE_MONTHS = 6
MAX_DESTINATION_CHARS = 160

_WORD_NUMBERS = {"un": "1", "deux": "2", "trois": "3", "quatre": "4", "cinq": "5", "six": "6"}


# ---------- Helpers ----------
def first_match(rx: re.Pattern, s: str) -> Optional[str]:
    """First capture group if the pattern has one, else the whole match."""
    m = rx.search(s)
    if not m:
        return None
    return m.group(1) if rx.groups and m.group(1) is not None else m.group(0)


def _any(patterns: List[re.Pattern], s: str) -> bool:
    return any(rx.search(s) for rx in patterns)


def _squash(s: str) -> str:
    return re.sub(r"\s+", " ", s.replace("\u00a0", " ")).strip()


def _clip_destination(value: str) -> str:
    value = _squash(value)
    cut = re.search(r"\.(?:\s|$)", value)
    if cut:
        value = value[: cut.start()]
    if len(value) > MAX_DESTINATION_CHARS:
        value = value[:MAX_DESTINATION_CHARS].rstrip() + "…"
    return value.strip(" ;,")


class LeaseSignals(NamedTuple):
    """Every boolean/categorical signal read from one lease text."""
    duration_years: Optional[str]
    duration_9: bool
    duration_12: bool
    index_label: Optional[str]
    index_capped: bool
    index_period: Optional[str]
    index_one_way: bool
    capital_repairs: bool
    property_tax: bool
    waste_tax: bool
    compliance_works: bool
    charges_reconciliation: bool
    deposit_amount: Optional[str]
    deposit_months: Optional[str]
    penalties: bool
    penalty_rate: Optional[str]
    assignment_restricted: bool
    assignor_joint_liability: bool
    three_year_guarantee: bool
    renewal_waiver: bool
    eviction_indemnity: bool
    destination: Optional[str]
    exclusivity: bool
    resolutory_clause: bool
    long_notice: bool
    notice_months: Optional[str]
    rent_free: Optional[str]
    lease_vocabulary: bool

    @property
    def index_uncapped(self) -> bool:
        return self.index_label is not None and not self.index_capped

    @property
    def assignor_liability_unlimited(self) -> bool:
        # solidarity with no reference to the L. 145-16-1 three-year cap
        return self.assignor_joint_liability and not self.three_year_guarantee

    @property
    def has_clause_signals(self) -> bool:
        """True when any detector other than duration and indexation fired."""
        return any((
            self.capital_repairs, self.property_tax, self.waste_tax, self.compliance_works,
            self.charges_reconciliation, self.deposit_amount, self.deposit_months, self.penalties,
            self.assignment_restricted, self.assignor_joint_liability, self.three_year_guarantee,
            self.renewal_waiver, self.eviction_indemnity, self.destination, self.exclusivity,
            self.resolutory_clause, self.long_notice, self.rent_free,
        ))

    @property
    def expects_index(self) -> bool:
        # lease wording or any clause finding
        return self.lease_vocabulary or self.has_clause_signals


def _index_label(lower: str) -> Optional[str]:
    for label, rx in INDEX_PATTERNS:
        if rx.search(lower):
            return label
    return None


def _deposit_amount(raw: str) -> Optional[str]:
    m = DEPOSIT_AMOUNT_RE.search(raw)
    if not m:
        return None
    amount = m.group(1).replace("\u00a0", " ")
    if m.group(2):
        amount = f"{amount} {m.group(2).strip()}"
    return amount


def _long_notice(lower: str) -> Tuple[bool, Optional[str]]:
    for m in NOTICE_MONTHS_RE.finditer(lower):
        if int(m.group(1)) >= LONG_NOTICE_MONTHS:
            return True, m.group(1)
    return bool(NOTICE_WORDS_RE.search(lower)), None


def unwrap_lines(raw: str) -> str:
    """Join visually wrapped lines; form feeds (page breaks) are kept."""
    return WRAPPED_LINE_RE.sub(" ", raw)


def detect_signals(raw: str) -> LeaseSignals:
    raw = unwrap_lines(raw or "")
    text = raw.lower()

    months = first_match(DEPOSIT_MONTHS_RE, text)
    if months is not None:
        months = _WORD_NUMBERS.get(months, months)

    destination = first_match(DESTINATION_RE, raw)
    if destination is not None:
        destination = _clip_destination(destination) or None

    franchise = first_match(FRANCHISE_RE, text)
    if franchise is None and FREE_RENT_RE.search(text):
        franchise = "oui"

    long_notice, notice_months = _long_notice(text)

    return LeaseSignals(
        duration_years=first_match(DURATION_ANY_RE, raw),
        duration_9=bool(DURATION_9_RE.search(raw)),
        duration_12=bool(DURATION_12_RE.search(raw)),
        index_label=_index_label(text),
        index_capped=bool(INDEX_CAP_RE.search(raw)),
        index_period=(first_match(INDEX_PERIOD_RE, raw) or "").lower() or None,
        index_one_way=_any(INDEX_ONE_WAY_RES, text),
        capital_repairs=bool(CAPITAL_REPAIRS_RE.search(raw)),
        property_tax=bool(PROPERTY_TAX_RE.search(raw)),
        waste_tax=bool(WASTE_TAX_RE.search(text)),
        compliance_works=bool(COMPLIANCE_RE.search(text)),
        charges_reconciliation=bool(CHARGES_RECON_RE.search(text)),
        deposit_amount=_deposit_amount(raw),
        deposit_months=months,
        penalties=bool(PENALTIES_RE.search(text)),
        penalty_rate=first_match(PENALTY_RATE_RE, text),
        assignment_restricted=bool(ASSIGNMENT_RE.search(text)),
        assignor_joint_liability=_any(ASSIGNOR_JOINT_RES, text),
        three_year_guarantee=bool(THREE_YEAR_RE.search(text)),
        renewal_waiver=bool(RENEWAL_WAIVER_RE.search(text)),
        eviction_indemnity=bool(EVICTION_RE.search(text)),
        destination=destination,
        exclusivity=bool(EXCLUSIVITY_RE.search(text)),
        resolutory_clause=bool(RESOLUTORY_RE.search(text)),
        long_notice=long_notice,
        notice_months=notice_months,
        rent_free=franchise,
        lease_vocabulary=looks_like_lease(raw),
    )


# ---------- Rule checks ----------
def check_duration(s: LeaseSignals) -> List[Finding]:
    if s.duration_9:
        detail = "Durée 9 ans détectée (classique)."
        advice = "Durée légale standard : vérifiez la faculté de sortie triennale et les conditions de renouvellement."
    elif s.duration_12:
        detail = "Durée 12 ans détectée (attention aux sorties)."
        advice = "Bail long : vérifiez si la faculté de résiliation triennale est supprimée et négociez des sorties anticipées."
    elif s.duration_years:
        detail = f"Durée {s.duration_years} ans détectée."
        advice = "Vérifiez que la durée est cohérente avec votre projet (minimum légal de 9 ans, sorties anticipées, renouvellement)."
    else:
        detail = "Durée non trouvée."
        advice = "Vérifiez que la durée est cohérente avec votre projet (sorties anticipées, renouvellement)."
    return [Finding(
        id="duration",
        title="Durée du bail",
        severity="info",
        detail=detail,
        advice=advice,
        tags=["durée", "9 ans", "12 ans"],
    )]


def check_indexation(s: LeaseSignals) -> List[Finding]:
    out: List[Finding] = []
    if s.index_label:
        period = f" ({s.index_period})" if s.index_period else ""
        capped = " ; plafonné" if s.index_capped else ""
        if s.index_one_way:
            advice = "La clause semble à sens unique (hausse seulement) : à corriger (risque de nullité)."
        elif s.index_label == "ICC":
            advice = "Privilégiez ILC/ILAT. Encadrez la mécanique (périodicité, index de base, plafonnement)."
        else:
            advice = "Vérifiez l’index de référence, la périodicité et un éventuel plafonnement."
        out.append(Finding(
            id="index",
            title="Indexation du loyer",
            severity="warn" if s.index_label == "ICC" else "info",
            detail=f"Index repéré : {s.index_label}{period}{capped}.",
            advice=advice,
            tags=["index", "révision", "ILC", "ILAT", "ICC"],
        ))
    elif s.expects_index:
        out.append(Finding(
            id="index-missing",
            title="Indexation non détectée",
            severity="warn",
            detail="Aucune clause d’indexation claire détectée (à vérifier).",
            advice="Ajoutez une clause d’indexation claire (souvent ILC/ILAT) ou confirmez l’absence d’indexation.",
            tags=["indexation absente"],
        ))

    if s.index_one_way:
        out.append(Finding(
            id="index-one-way",
            title="Indexation à la hausse uniquement",
            severity="high",
            detail="La clause semble ne prévoir qu’une hausse (clause « cliquet »).",
            advice="Rendre la clause bilatérale (hausse ET baisse) pour éviter la nullité.",
            tags=["indexation", "clause cliquet"],
        ))
    return out


def check_charges(s: LeaseSignals) -> List[Finding]:
    if not (s.capital_repairs or s.property_tax or s.waste_tax or s.compliance_works):
        return []
    if s.capital_repairs:
        severity = "high"
        detail = "Mention d’« article 606 » ou « grosses réparations » : semble à la charge du locataire."
        advice = ("Listez précisément les charges récupérables, excluez les grosses réparations (art. 606) "
                  "et encadrez la taxe foncière.")
    else:
        severity = "warn" if (s.property_tax or s.waste_tax) else "info"
        if s.property_tax:
            detail = "La taxe foncière semble récupérée sur le locataire."
        elif s.waste_tax:
            detail = "TEOM mentionnée comme refacturée."
        else:
            detail = "Charges mentionnées (détail à vérifier)."
        advice = "Précisez la liste des charges, modalités de régularisation et justificatifs."
    return [Finding(
        id="charges",
        title="Charges récupérables",
        severity=severity,
        detail=detail,
        advice=advice,
        where=["charges", "réparations", "606", "taxe foncière", "TEOM"],
        tags=["charges", "606", "taxe foncière", "TEOM", "régularisation"],
    )]


def check_charges_reconciliation(s: LeaseSignals) -> List[Finding]:
    if not s.charges_reconciliation:
        return []
    return [Finding(
        id="charges-regularisation",
        title="Régularisation des charges",
        severity="info",
        detail="Régularisation périodique des charges mentionnée.",
        advice="Exiger une régularisation annuelle, un décompte détaillé et les justificatifs.",
        tags=["régularisation", "décompte"],
    )]


def check_compliance_works(s: LeaseSignals) -> List[Finding]:
    if not s.compliance_works:
        return []
    return [Finding(
        id="travaux-conformite",
        title="Mise en conformité / travaux",
        severity="warn",
        detail="Mentions de mise en conformité (accessibilité, amiante, etc.).",
        advice="Clarifiez la répartition des travaux et des coûts de mise en conformité.",
        tags=["travaux", "conformité", "amiante", "accessibilité"],
    )]


def check_deposit(s: LeaseSignals) -> List[Finding]:
    if not (s.deposit_amount or s.deposit_months):
        return []
    if s.deposit_amount:
        detail = f"Montant repéré : {s.deposit_amount} (à confirmer)."
    else:
        detail = f"Mention de {s.deposit_months} mois de loyer (à confirmer)."
    return [Finding(
        id="deposit",
        title="Dépôt de garantie",
        severity="info",
        detail=detail,
        advice="Vérifiez le montant (souvent 1–3 mois de loyer HT/HC) et les conditions de restitution.",
        where=["dépôt de garantie"],
        tags=["dépôt", "garantie", "mois de loyer"],
    )]


def check_penalties(s: LeaseSignals) -> List[Finding]:
    if not s.penalties:
        return []
    detail = (f"Taux repéré : {s.penalty_rate}." if s.penalty_rate
              else "Clause de pénalités repérée (taux/conditions à vérifier).")
    return [Finding(
        id="penalties",
        title="Pénalités de retard / intérêts",
        severity="warn",
        detail=detail,
        advice="Encadrez le taux (raisonnable), les délais de grâce et les modalités de mise en demeure.",
        where=["pénalités", "intérêts de retard"],
        tags=["pénalités", "intérêts", "taux"],
    )]


def check_assignment(s: LeaseSignals) -> List[Finding]:
    out: List[Finding] = []
    if s.assignment_restricted:
        out.append(Finding(
            id="assignment",
            title="Cession / sous-location",
            severity="warn",
            detail="Des restrictions à la cession/sous-location semblent présentes.",
            advice="Prévoir une autorisation non abusive, des délais de réponse, et limiter les garanties du cédant.",
            where=["cession", "sous-location", "autorisation"],
            tags=["cession", "sous-location", "agrément"],
        ))
    if s.assignor_joint_liability:
        detail = ("Garantie/solidarité du cédant détectée, sans limitation à 3 ans apparente."
                  if s.assignor_liability_unlimited
                  else "Garantie/solidarité du cédant détectée.")
        out.append(Finding(
            id="cession-solidarite",
            title="Garantie solidaire du cédant",
            severity="warn",
            detail=detail,
            advice="Limiter la solidarité (ex. maximum 3 ans, art. L145-16-1) et la cantonner aux obligations essentielles.",
            tags=["solidarité", "cédant", "L145-16-1"],
        ))
    if s.three_year_guarantee:
        out.append(Finding(
            id="garantie-3-ans",
            title="Garantie du repreneur (3 ans)",
            severity="info",
            detail="Référence à la garantie triennale (L145-16-1).",
            advice="Vérifier le périmètre exact des obligations couvertes et la notification au bailleur.",
            tags=["garantie 3 ans", "L145-16-1"],
        ))
    return out


def check_renewal(s: LeaseSignals) -> List[Finding]:
    out: List[Finding] = []
    if s.renewal_waiver:
        out.append(Finding(
            id="renouvellement-renonciation",
            title="Renonciation au renouvellement",
            severity="high",
            detail="Mention d’une renonciation au droit au renouvellement.",
            advice="Point sensible : faites valider par un conseil. Vérifier l’indemnité d’éviction.",
            tags=["renouvellement", "indemnité d’éviction"],
        ))
    if s.eviction_indemnity:
        out.append(Finding(
            id="indem-eviction",
            title="Indemnité d’éviction",
            severity="info",
            detail="Indemnité d’éviction mentionnée.",
            advice="Vérifier les cas d’exclusion, la méthode de calcul et les délais.",
            tags=["éviction"],
        ))
    return out


def check_destination(s: LeaseSignals) -> List[Finding]:
    out: List[Finding] = []
    if s.destination:
        out.append(Finding(
            id="destination",
            title="Destination des locaux",
            severity="info",
            detail=f"Destination indiquée : {s.destination}.",
            advice="Vérifier l’adéquation avec l’activité projetée et les règles d’urbanisme.",
            where=["destination", "usage"],
            tags=["destination", "usage", "exclusivité"],
        ))
    if s.exclusivity:
        out.append(Finding(
            id="exclusivite",
            title="Exclusivité / non-concurrence",
            severity="warn",
            detail="Clause d’exclusivité ou de non-concurrence détectée.",
            advice="Encadrer le périmètre, la durée et le secteur géographique.",
            tags=["exclusivité", "non-concurrence"],
        ))
    return out


def check_termination(s: LeaseSignals) -> List[Finding]:
    out: List[Finding] = []
    if s.resolutory_clause:
        out.append(Finding(
            id="resolutory",
            title="Clause résolutoire",
            severity="warn",
            detail="Résiliation de plein droit en cas de manquement.",
            advice="Encadrer la mise en demeure, le délai de remède et les cas visés.",
            tags=["résolutoire", "mise en demeure"],
        ))
    if s.long_notice:
        detail = (f"Préavis long détecté ({s.notice_months} mois)." if s.notice_months
                  else "Préavis long détecté (≥ 6 mois).")
        out.append(Finding(
            id="notice",
            title="Préavis inhabituel",
            severity="warn",
            detail=detail,
            advice="Négocier un préavis raisonnable et symétrique.",
            tags=["préavis"],
        ))
    return out


def check_rent_free(s: LeaseSignals) -> List[Finding]:
    if not s.rent_free:
        return []
    detail = (f"Franchise repérée : {s.rent_free} mois." if s.rent_free != "oui"
              else "Mention d’une franchise/loyers gratuits.")
    return [Finding(
        id="franchise",
        title="Franchise de loyer",
        severity="info",
        detail=detail,
        advice="Préciser la durée, l’étalement et l’impact sur l’indexation.",
        tags=["franchise"],
    )]


Check = Callable[[LeaseSignals], List[Finding]]

# Report order is this order
CHECKS: List[Check] = [
    check_duration,
    check_indexation,
    check_charges,
    check_charges_reconciliation,
    check_compliance_works,
    check_deposit,
    check_penalties,
    check_assignment,
    check_renewal,
    check_destination,
    check_termination,
    check_rent_free,
]


def run_checks(signals: LeaseSignals) -> List[Finding]:
    findings: List[Finding] = []
    for check in CHECKS:
        findings.extend(check(signals))
    return findings


def classify(text: str) -> Tuple[List[Finding], ReportMeta, LeaseSignals]:
    """
    Run every detector over ``text``.

    Returns the ordered findings, the heuristic report meta (title, guessed page
    count, index label, cap flag) and the signals the risk scorer reads.
    """
    signals = detect_signals(text)
    meta = ReportMeta(
        title=guess_title(text),
        pages=guess_page_count(text),
        indexation=signals.index_label,
        plafonnement=signals.index_capped,
    )
    return run_checks(signals), meta, signals
