"""Attribute-table strategy: match a field attribute's value to profile keys."""
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from ...mapping.models import FieldMapping
from ..confidence import ConfidenceLevel, validate_confidence
from .base import (
    MatchType,
    StrategyContext,
    StrategyResult,
    create_field_mapping,
    normalize_text,
    run_strategy,
    validate_identity,
)

logger = logging.getLogger(__name__)

TOKEN_SPLIT = re.compile(r"[-_\s]+")
MIN_TOKEN_LENGTH = 3


@dataclass
class AttributeStrategyConfig:
    attribute: str
    mappings: dict[str, str]
    confidence: float = ConfidenceLevel.HIGH.value
    match_type: MatchType = "contains"
    normalize: bool = True


def build_attribute_index(
    context: StrategyContext, attribute: str, match_type: MatchType, normalize: bool
) -> dict[str, list[int]]:
    """Index unclaimed fields by attribute value.

    In contains mode every token of at least three characters is indexed
    too, so ``applicant-email-field`` is found under ``email``.
    """
    index: dict[str, list[int]] = {}
    for i, form_field in enumerate(context.form_schema.fields):
        if i in context.claimed:
            continue
        value = form_field.attributes.get(attribute)
        if not value:
            continue

        key = normalize_text(value) if normalize else value
        entries = {key}
        if match_type == "contains":
            entries.update(t for t in TOKEN_SPLIT.split(key) if len(t) >= MIN_TOKEN_LENGTH)

        for entry in entries:
            if entry:
                index.setdefault(entry, []).append(i)
    return index


@dataclass
class AttributeStrategy:
    """Maps fields whose attribute value appears in a lookup table."""
    config: AttributeStrategyConfig
    id: str = ""
    name: str = ""
    kind: str = field(default="attribute", init=False)

    def __post_init__(self):
        if not self.id:
            self.id = f"attribute-{self.config.attribute}"
        if not self.name:
            self.name = f"{self.config.attribute} Attribute Strategy"

    def execute(self, context: StrategyContext) -> StrategyResult:
        return run_strategy(self, self.match, context)

    def match(self, context: StrategyContext) -> list[FieldMapping]:
        config = self.config
        index = build_attribute_index(
            context, config.attribute, config.match_type, config.normalize
        )
        available = set(context.profile_keys)
        fields = context.form_schema.fields

        mappings: list[FieldMapping] = []
        emitted: set[int] = set()
        for attr_value, profile_key in config.mappings.items():
            if profile_key not in available:
                continue
            lookup = normalize_text(attr_value) if config.normalize else attr_value
            for idx in index.get(lookup, []):
                if idx in emitted:
                    continue
                mappings.append(create_field_mapping(
                    fields[idx],
                    idx,
                    profile_key,
                    config.confidence,
                    f"{self.name}: {config.attribute}=\"{attr_value}\" -> {profile_key}",
                ))
                emitted.add(idx)

        logger.debug(f"{self.id}: {len(mappings)} mappings from {len(index)} indexed values")
        return mappings

    def validate(self) -> list[str]:
        errors = validate_identity(self.id, self.name)
        if not self.config.attribute:
            errors.append("Attribute name is required")
        if not self.config.mappings:
            errors.append("At least one mapping is required")
        if not validate_confidence(self.config.confidence):
            errors.append("Confidence must be between 0 and 1")
        if self.config.match_type not in ("exact", "contains"):
            errors.append("Match type must be 'exact' or 'contains'")
        return errors

    def describe(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.kind,
            "attribute": self.config.attribute,
            "mapping_count": len(self.config.mappings),
            "confidence": self.config.confidence,
            "match_type": self.config.match_type,
            "normalize": self.config.normalize,
        }


def _attribute_strategy(
    attribute: str, mappings: dict[str, str], confidence: float, match_type: MatchType,
    normalize: bool = True,
) -> AttributeStrategy:
    return AttributeStrategy(AttributeStrategyConfig(
        attribute=attribute,
        mappings=dict(mappings),
        confidence=confidence,
        match_type=match_type,
        normalize=normalize,
    ))


def create_name_strategy(mappings: dict[str, str], confidence: float = 0.9) -> AttributeStrategy:
    return _attribute_strategy("name", mappings, confidence, "contains")


def create_id_strategy(mappings: dict[str, str], confidence: float = 0.85) -> AttributeStrategy:
    return _attribute_strategy("id", mappings, confidence, "contains")


def create_aria_label_strategy(
    mappings: dict[str, str], confidence: float = 0.95
) -> AttributeStrategy:
    return _attribute_strategy("aria-label", mappings, confidence, "exact")


def create_automation_id_strategy(
    mappings: dict[str, str], confidence: float = 0.98
) -> AttributeStrategy:
    return _attribute_strategy("data-automation-id", mappings, confidence, "contains")


def create_placeholder_strategy(
    mappings: dict[str, str], confidence: float = 0.7
) -> AttributeStrategy:
    return _attribute_strategy("placeholder", mappings, confidence, "contains")


def create_autocomplete_strategy(
    mappings: dict[str, str], confidence: float = 0.9
) -> AttributeStrategy:
    # Autocomplete tokens are standardized, compare them verbatim
    return _attribute_strategy("autocomplete", mappings, confidence, "exact", normalize=False)


COMMON_NAME_MAPPINGS: dict[str, str] = {
    "firstname": "First Name",
    "first_name": "First Name",
    "fname": "First Name",
    "lastname": "Last Name",
    "last_name": "Last Name",
    "lname": "Last Name",
    "email": "Email",
    "phone": "Phone",
    "address": "Address",
    "city": "City",
    "state": "State",
    "zip": "Zip Code",
    "zipcode": "Zip Code",
    "country": "Country",
}

COMMON_AUTOCOMPLETE_MAPPINGS: dict[str, str] = {
    "given-name": "First Name",
    "family-name": "Last Name",
    "email": "Email",
    "tel": "Phone",
    "street-address": "Address",
    "address-level2": "City",
    "address-level1": "State",
    "postal-code": "Zip Code",
    "country": "Country",
}
