"""Mapping output models shared by every tier."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..extractor.models import FormFieldSchema


class MappingSource(str, Enum):
    """Tier that produced a mapping or result."""
    VENDOR = "vendor"
    HEURISTIC = "heuristic"
    LLM = "llm"
    HYBRID = "hybrid"


class FieldAction(str, Enum):
    """DOM operation the form filler should perform."""
    SET_VALUE = "setValue"
    SELECT_BY_TEXT = "selectByText"
    SELECT_BY_VALUE = "selectByValue"


@dataclass
class FieldMapping:
    """Assignment of one form field to one profile key."""
    form_field_idx: int
    profile_key: str
    confidence: float
    source: MappingSource
    action: FieldAction = FieldAction.SET_VALUE
    reasoning: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "formFieldIdx": self.form_field_idx,
            "profileKey": self.profile_key,
            "confidence": self.confidence,
            "source": MappingSource(self.source).value,
            "action": FieldAction(self.action).value,
            "reasoning": self.reasoning,
        }


@dataclass
class MappingResult:
    """Mappings for a form plus the indices left unmapped."""
    mappings: list[FieldMapping]
    unmapped_fields: list[int]
    processing_time: float
    source: MappingSource
    metadata: dict[str, Any] = field(default_factory=dict)

    def success_rate(self, total_fields: int) -> float:
        """Fraction of the form's fields that received a mapping."""
        if total_fields <= 0:
            return 0.0
        return len(self.mappings) / total_fields

    def to_dict(self) -> dict[str, Any]:
        return {
            "mappings": [m.to_dict() for m in self.mappings],
            "unmappedFields": list(self.unmapped_fields),
            "processingTime": self.processing_time,
            "source": MappingSource(self.source).value,
            "metadata": dict(self.metadata),
        }


def determine_action(field: FormFieldSchema) -> FieldAction:
    """Select elements and option-bearing inputs are filled by option text."""
    if field.element_type == "select":
        return FieldAction.SELECT_BY_TEXT
    if field.options:
        return FieldAction.SELECT_BY_TEXT
    return FieldAction.SET_VALUE


def deduplicate_mappings(mappings: list[FieldMapping]) -> list[FieldMapping]:
    """Keep one mapping per field index, the highest-confidence one.

    Ties keep the mapping seen first.
    """
    best: dict[int, FieldMapping] = {}
    for mapping in mappings:
        existing = best.get(mapping.form_field_idx)
        if existing is None or mapping.confidence > existing.confidence:
            best[mapping.form_field_idx] = mapping
    return list(best.values())


def unmapped_indices(total_fields: int, mappings: list[FieldMapping]) -> list[int]:
    """Field indices in ``range(total_fields)`` that no mapping claims."""
    mapped = {m.form_field_idx for m in mappings}
    return [idx for idx in range(total_fields) if idx not in mapped]
