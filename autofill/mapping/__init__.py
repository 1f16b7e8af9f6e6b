"""Mapping models and the heuristic mapping tier."""
from .heuristic import FALLBACK_REASON, HeuristicMapper
from .matcher import MatchCandidate, ProfileMatcher, RepeatableSections
from .models import (
    FieldAction,
    FieldMapping,
    MappingResult,
    MappingSource,
    deduplicate_mappings,
    determine_action,
    unmapped_indices,
)
from .scorer import HeuristicScorer, ScoreBreakdown

__all__ = [
    "FALLBACK_REASON",
    "FieldAction",
    "FieldMapping",
    "HeuristicMapper",
    "HeuristicScorer",
    "MappingResult",
    "MappingSource",
    "MatchCandidate",
    "ProfileMatcher",
    "RepeatableSections",
    "ScoreBreakdown",
    "deduplicate_mappings",
    "determine_action",
    "unmapped_indices",
]
