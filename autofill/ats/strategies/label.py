"""Label-pattern strategy with synonym fallback."""
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ...mapping.models import FieldMapping
from ...profile.manager import find_canonical_profile_key
from ..confidence import ConfidenceLevel, validate_confidence
from .base import (
    StrategyContext,
    StrategyResult,
    create_field_mapping,
    normalize_text,
    run_strategy,
    validate_identity,
)

logger = logging.getLogger(__name__)

SYNONYM_CONFIDENCE_FACTOR = 0.9


@dataclass
class LabelPattern:
    """Substrings that identify one profile key in a field label."""
    patterns: list[str]
    profile_key: str
    confidence: Optional[float] = None


@dataclass
class LabelStrategyConfig:
    patterns: list[LabelPattern]
    default_confidence: float = ConfidenceLevel.STANDARD.value
    use_synonyms: bool = True


@dataclass
class LabelStrategy:
    """Maps fields by substring search over their normalized label."""
    config: LabelStrategyConfig
    id: str = "label-patterns"
    name: str = "Label Pattern Strategy"
    kind: str = field(default="label", init=False)

    def execute(self, context: StrategyContext) -> StrategyResult:
        return run_strategy(self, self.match, context)

    def match(self, context: StrategyContext) -> list[FieldMapping]:
        config = self.config
        available = set(context.profile_keys)
        profile_keys = list(context.profile_keys)
        synonym_confidence = config.default_confidence * SYNONYM_CONFIDENCE_FACTOR

        mappings: list[FieldMapping] = []
        for i, form_field in enumerate(context.form_schema.fields):
            if i in context.claimed:
                continue
            label = normalize_text(form_field.label)
            if not label:
                continue

            mapping = None
            for group in config.patterns:
                if group.profile_key not in available:
                    continue
                hit = next((p for p in group.patterns if normalize_text(p) in label), None)
                if hit is None:
                    continue
                confidence = (
                    group.confidence if group.confidence is not None
                    else config.default_confidence
                )
                mapping = create_field_mapping(
                    form_field, i, group.profile_key, confidence,
                    f"{self.name}: label contains \"{hit}\"",
                )
                break

            if mapping is None and config.use_synonyms:
                canonical = find_canonical_profile_key(form_field.label, profile_keys)
                if canonical:
                    mapping = create_field_mapping(
                        form_field, i, canonical, synonym_confidence,
                        f"{self.name}: synonym match for {canonical}",
                    )

            if mapping is not None:
                mappings.append(mapping)

        logger.debug(f"{self.id}: {len(mappings)} label mappings")
        return mappings

    def validate(self) -> list[str]:
        errors = validate_identity(self.id, self.name)
        if not self.config.patterns:
            errors.append("At least one label pattern is required")
        for position, group in enumerate(self.config.patterns):
            if not group.profile_key:
                errors.append(f"Pattern {position}: profile key is required")
            if not group.patterns:
                errors.append(f"Pattern {position}: at least one pattern is required")
            if group.confidence is not None and not validate_confidence(group.confidence):
                errors.append(f"Pattern {position}: confidence must be between 0 and 1")
        if not validate_confidence(self.config.default_confidence):
            errors.append("Default confidence must be between 0 and 1")
        return errors

    def describe(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.kind,
            "pattern_count": len(self.config.patterns),
            "default_confidence": self.config.default_confidence,
            "use_synonyms": self.config.use_synonyms,
        }


def create_label_strategy(
    patterns: list[LabelPattern],
    default_confidence: float = ConfidenceLevel.STANDARD.value,
    use_synonyms: bool = True,
    strategy_id: str = "label-patterns",
) -> LabelStrategy:
    return LabelStrategy(
        LabelStrategyConfig(list(patterns), default_confidence, use_synonyms),
        id=strategy_id,
    )
