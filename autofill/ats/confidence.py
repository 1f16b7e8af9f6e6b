"""Confidence tiers and lookup tables shared by every adapter.

All tables here are read-only after import.
"""
import math
from enum import Enum
from types import MappingProxyType
from typing import Literal, Mapping

ConfidenceCategory = Literal["high", "medium", "low"]


class ConfidenceLevel(float, Enum):
    """Ordered confidence tiers for mapping strategies."""
    MAXIMUM = 0.98
    VERY_HIGH = 0.95
    HIGH = 0.9
    MEDIUM = 0.85
    STANDARD = 0.8
    LOW = 0.7
    MINIMUM = 0.6
    FILTER_THRESHOLD = 0.4
    DEVELOPMENT = 0.3


VENDOR_CONFIDENCE: Mapping[str, Mapping[str, float]] = MappingProxyType({
    "WORKDAY": MappingProxyType({
        "AUTOMATION_ID": ConfidenceLevel.MAXIMUM.value,
        "NAME_ATTRIBUTE": ConfidenceLevel.MEDIUM.value,
        "FILE_UPLOAD": ConfidenceLevel.HIGH.value,
        "LOCATION_DROPDOWN": ConfidenceLevel.MEDIUM.value,
        "ENHANCED_LABELS": ConfidenceLevel.STANDARD.value,
        "FILTER": ConfidenceLevel.DEVELOPMENT.value,
    }),
    "GREENHOUSE": MappingProxyType({
        "ARIA_LABEL": ConfidenceLevel.VERY_HIGH.value,
        "NAME_ATTRIBUTE": ConfidenceLevel.HIGH.value,
        "FILE_UPLOAD": ConfidenceLevel.HIGH.value,
        "URL_FIELD": ConfidenceLevel.HIGH.value,
        "PORTFOLIO_URL": ConfidenceLevel.MEDIUM.value,
        "TEXTAREA": ConfidenceLevel.MEDIUM.value,
        "FILTER": ConfidenceLevel.FILTER_THRESHOLD.value,
    }),
    "LEVER": MappingProxyType({
        "NAME_ATTRIBUTE": ConfidenceLevel.VERY_HIGH.value,
        "ENHANCED_LABELS": ConfidenceLevel.STANDARD.value,
        "FILE_UPLOAD": ConfidenceLevel.HIGH.value,
        "TEXTAREA": ConfidenceLevel.MEDIUM.value,
        "FILTER": ConfidenceLevel.FILTER_THRESHOLD.value,
    }),
})

# Defaults when no vendor-specific value applies
STRATEGY_CONFIDENCE: Mapping[str, float] = MappingProxyType({
    "VENDOR_ATTRIBUTE": ConfidenceLevel.VERY_HIGH.value,
    "GENERIC_ATTRIBUTE": ConfidenceLevel.HIGH.value,
    "LABEL_MATCHING": ConfidenceLevel.STANDARD.value,
    "SELECTOR_MATCHING": ConfidenceLevel.MEDIUM.value,
    "CUSTOM_LOGIC": ConfidenceLevel.MEDIUM.value,
    "PLACEHOLDER": ConfidenceLevel.LOW.value,
})

CONFIDENCE_THRESHOLDS: Mapping[str, float] = MappingProxyType({
    "HIGH": 0.8,
    "MEDIUM": 0.5,
    "LOW": 0.0,
})


def categorize_confidence(confidence: float) -> ConfidenceCategory:
    """Bucket a score into high (>= .8), medium (>= .5) or low."""
    if confidence >= CONFIDENCE_THRESHOLDS["HIGH"]:
        return "high"
    if confidence >= CONFIDENCE_THRESHOLDS["MEDIUM"]:
        return "medium"
    return "low"


def validate_confidence(confidence: float) -> bool:
    """True when the score is a finite number in [0, 1]."""
    try:
        value = float(confidence)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and 0.0 <= value <= 1.0


def clamp_confidence(confidence: float) -> float:
    """Clamp to [0, 1]. NaN becomes 0; infinities saturate."""
    value = float(confidence)
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


def adjust_confidence(base: float, multiplier: float) -> float:
    return clamp_confidence(base * multiplier)


def get_vendor_confidence(vendor: str, strategy: str) -> float:
    """Vendor-tuned confidence for a strategy, or the generic attribute default."""
    vendor_table = VENDOR_CONFIDENCE.get(vendor.upper(), {})
    return vendor_table.get(strategy.upper(), STRATEGY_CONFIDENCE["GENERIC_ATTRIBUTE"])
