"""Tier orchestration."""
from .engine import MappingEngine
from .tiers import MappingTier

__all__ = ["MappingEngine", "MappingTier"]
