# doc_type.py
import re
from typing import Optional

TITLE_FALLBACK = "Bail (titre non détecté)"

# Order matters: the first hint found anywhere in the text wins
TITLE_HINTS = [
    re.compile(r"bail\s+commercial", re.IGNORECASE),
    re.compile(r"contrat\s+de\s+bail", re.IGNORECASE),
    re.compile(r"bail[^\n]{0,60}?locatif", re.IGNORECASE),
]

LEASE_VOCABULARY_RE = re.compile(
    r"\b(bail|baux|loyers?|preneur|bailleur|locataire|indexation|indice|r[ée]vision)\b",
    re.IGNORECASE,
)


def guess_title(text: str) -> str:
    """First lease-title phrase as written in the document, else a placeholder."""
    best: Optional[re.Match] = None
    for rx in TITLE_HINTS:
        m = rx.search(text or "")
        if m and (best is None or m.start() < best.start()):
            best = m
    return best.group(0) if best else TITLE_FALLBACK


def looks_like_lease(text: str) -> bool:
    return bool(LEASE_VOCABULARY_RE.search(text or ""))


def guess_page_count(text: str) -> int:
    """Rough page guess from form feeds and blank-line density."""
    blocks = re.split(r"\f|\n\s*\n", text or "")
    # half-up rounding of blocks / 2
    return max(1, (len(blocks) + 1) // 2)
