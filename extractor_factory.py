import os
from typing import Optional

import yaml

from info_extractor import GeneralInfoExtractor, SegmentInfoExtractor, StructuredInfoExtractor
from settings import settings

STRATEGIES = ("segments", "structured")


class UnknownStrategyError(ValueError):
    """Requested general-info strategy is not one of STRATEGIES."""


def _read_config(config_path: str) -> dict:
    if not os.path.exists(config_path):
        return {}
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_extractor(name: Optional[str] = None, config_path: Optional[str] = None) -> GeneralInfoExtractor:
    """Strategy from the argument, else LEXBAUX_GENERAL_INFO_STRATEGY, else lexbaux.yaml."""
    cfg = _read_config(config_path or settings.CONFIG_PATH)
    section = cfg.get("general_info", {}) or {}

    kind = settings.get_strategy(
        name or os.getenv("LEXBAUX_GENERAL_INFO_STRATEGY") or section.get("strategy")
    )

    labels = section.get("labels") or None
    if kind == "segments":
        return SegmentInfoExtractor(labels=labels)
    if kind == "structured":
        return StructuredInfoExtractor(fallback=SegmentInfoExtractor(labels=labels))
    raise UnknownStrategyError(f"Unknown general-info strategy: {kind} (expected one of {', '.join(STRATEGIES)})")
