"""Custom strategy wrapping a mapping function, plus common custom factories."""
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping, Optional

from ...extractor.models import ExtractedFormSchema
from ...mapping.models import FieldMapping
from ..confidence import ConfidenceLevel, validate_confidence
from .base import (
    StrategyContext,
    StrategyResult,
    create_field_mapping,
    run_strategy,
    validate_identity,
)

logger = logging.getLogger(__name__)

# (form_schema, profile_keys, claimed, params) -> mappings
CustomMappingFunction = Callable[
    [ExtractedFormSchema, list[str], frozenset[int], Mapping[str, Any]],
    list[FieldMapping],
]


@dataclass
class CustomStrategyConfig:
    name: str
    mapping_function: CustomMappingFunction
    base_confidence: float = ConfidenceLevel.MEDIUM.value
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class CustomStrategy:
    """Runs a caller-supplied mapping function inside the strategy boundary.

    Mappings without a confidence get ``base_confidence`` and every
    reasoning is prefixed with the strategy name.
    """
    config: CustomStrategyConfig
    id: str = ""
    name: str = ""
    kind: str = field(default="custom", init=False)

    def __post_init__(self):
        if not self.id:
            self.id = f"custom-{self.config.name.lower().replace(' ', '-')}"
        if not self.name:
            self.name = f"Custom Strategy: {self.config.name}"

    def execute(self, context: StrategyContext) -> StrategyResult:
        return run_strategy(self, self.match, context)

    def match(self, context: StrategyContext) -> list[FieldMapping]:
        params = {**self.config.params, **context.params}
        raw = self.config.mapping_function(
            context.form_schema, list(context.profile_keys), context.claimed, params
        )
        mappings = []
        for mapping in raw or []:
            confidence = mapping.confidence or self.config.base_confidence
            mappings.append(replace(
                mapping,
                confidence=confidence,
                reasoning=f"{self.name}: {mapping.reasoning}",
            ))
        return mappings

    def validate(self) -> list[str]:
        errors = validate_identity(self.id, self.name)
        if not self.config.name:
            errors.append("Custom strategy name is required")
        if not callable(self.config.mapping_function):
            errors.append("Mapping function must be callable")
        if not validate_confidence(self.config.base_confidence):
            errors.append("Base confidence must be between 0 and 1")
        return errors

    def describe(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.kind,
            "base_confidence": self.config.base_confidence,
            "params": sorted(self.config.params),
        }


def create_custom_strategy(
    name: str,
    mapping_function: CustomMappingFunction,
    base_confidence: float = ConfidenceLevel.MEDIUM.value,
    params: Optional[dict[str, Any]] = None,
) -> CustomStrategy:
    return CustomStrategy(CustomStrategyConfig(
        name=name,
        mapping_function=mapping_function,
        base_confidence=base_confidence,
        params=dict(params or {}),
    ))


def create_file_upload_strategy(
    profile_key: str = "Resume", confidence: float = 0.9
) -> CustomStrategy:
    """Map the first unclaimed file input to a document profile key."""

    def map_file_upload(schema, profile_keys, claimed, params):
        if profile_key not in profile_keys:
            return []
        for i, form_field in enumerate(schema.fields):
            if i in claimed or form_field.attributes.type != "file":
                continue
            return [create_field_mapping(
                form_field, i, profile_key, confidence, "file upload field"
            )]
        return []

    return create_custom_strategy("File Upload", map_file_upload, confidence)


def create_dropdown_strategy(
    option_keywords: dict[str, list[str]], confidence: float = 0.85
) -> CustomStrategy:
    """Map select fields whose option texts mention a profile key's keywords."""

    def map_dropdowns(schema, profile_keys, claimed, params):
        mappings = []
        for i, form_field in enumerate(schema.fields):
            if i in claimed or form_field.element_type != "select" or not form_field.options:
                continue
            texts = " ".join(o.text.lower() for o in form_field.options)
            for profile_key, keywords in option_keywords.items():
                if profile_key in profile_keys and any(k.lower() in texts for k in keywords):
                    mappings.append(create_field_mapping(
                        form_field, i, profile_key, confidence,
                        f"dropdown options suggest {profile_key}",
                    ))
                    break
        return mappings

    return create_custom_strategy("Dropdown Analysis", map_dropdowns, confidence)


def create_css_class_strategy(
    class_mappings: dict[str, str], confidence: float = 0.8
) -> CustomStrategy:
    """Map fields whose selector carries a known CSS class."""

    def map_css_classes(schema, profile_keys, claimed, params):
        mappings = []
        for i, form_field in enumerate(schema.fields):
            if i in claimed:
                continue
            for css_class, profile_key in class_mappings.items():
                if profile_key in profile_keys and f".{css_class}" in form_field.selector:
                    mappings.append(create_field_mapping(
                        form_field, i, profile_key, confidence, f"CSS class .{css_class}"
                    ))
                    break
        return mappings

    return create_custom_strategy("CSS Class Matching", map_css_classes, confidence)


def create_textarea_strategy(
    profile_key: str = "Cover Letter", confidence: float = 0.85
) -> CustomStrategy:
    """Map a textarea mentioning a cover letter by label or selector."""

    def map_textarea(schema, profile_keys, claimed, params):
        if profile_key not in profile_keys:
            return []
        for i, form_field in enumerate(schema.fields):
            if i in claimed or form_field.element_type != "textarea":
                continue
            haystack = f"{form_field.label} {form_field.selector}".lower()
            if "cover" in haystack or "letter" in haystack:
                return [create_field_mapping(
                    form_field, i, profile_key, confidence, "cover letter textarea"
                )]
        return []

    return create_custom_strategy("Textarea Cover Letter", map_textarea, confidence)
