"""Vendor detection and vendor-specific field mapping."""
from .base_handler import BaseAdapter, MappingBuilder
from .confidence import (
    ConfidenceLevel,
    adjust_confidence,
    categorize_confidence,
    clamp_confidence,
    get_vendor_confidence,
    validate_confidence,
)
from .detector import ATSDetector, ATSType, DomainPattern, find_best_vendor_match
from .handlers import GreenhouseAdapter, LeverAdapter, WorkdayAdapter
from .registry import VENDOR_ADAPTERS, get_all_compatible_adapters, select_adapter

__all__ = [
    "ATSDetector",
    "ATSType",
    "BaseAdapter",
    "ConfidenceLevel",
    "DomainPattern",
    "GreenhouseAdapter",
    "LeverAdapter",
    "MappingBuilder",
    "VENDOR_ADAPTERS",
    "WorkdayAdapter",
    "adjust_confidence",
    "categorize_confidence",
    "clamp_confidence",
    "find_best_vendor_match",
    "get_all_compatible_adapters",
    "get_vendor_confidence",
    "select_adapter",
    "validate_confidence",
]
