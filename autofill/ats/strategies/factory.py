"""Build strategies from declarative YAML/dict specs.

A spec looks like::

    id: workday-automation-id
    type: attribute
    order: 1
    config:
      attribute: data-automation-id
      mappings: {firstName: First Name}
      confidence: 0.98
      match_type: contains

Keys are accepted in snake_case or camelCase.
"""
import logging
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from ..confidence import ConfidenceLevel
from .attribute import AttributeStrategy, AttributeStrategyConfig
from .base import MatchType
from .label import LabelPattern, LabelStrategy, LabelStrategyConfig

logger = logging.getLogger(__name__)

BuiltStrategy = Union[AttributeStrategy, LabelStrategy]


class _SpecModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AttributeSpecConfig(_SpecModel):
    attribute: str
    mappings: dict[str, str]
    confidence: float = ConfidenceLevel.HIGH.value
    match_type: MatchType = "contains"
    normalize: bool = True


class LabelPatternSpec(_SpecModel):
    patterns: list[str]
    profile_key: str
    confidence: Optional[float] = None


class LabelSpecConfig(_SpecModel):
    patterns: list[LabelPatternSpec]
    default_confidence: float = ConfidenceLevel.STANDARD.value
    use_synonyms: bool = True


class CustomSpecConfig(_SpecModel):
    name: str
    base_confidence: float = ConfidenceLevel.MEDIUM.value
    params: dict[str, Any] = {}


class StrategySpec(_SpecModel):
    """Declarative description of one strategy."""

    id: str
    type: Literal["attribute", "label", "custom"]
    order: int = 1
    enabled: bool = True
    name: str = ""
    config: dict[str, Any] = {}


_CONFIG_MODELS: dict[str, type[_SpecModel]] = {
    "attribute": AttributeSpecConfig,
    "label": LabelSpecConfig,
    "custom": CustomSpecConfig,
}


def _format_errors(e: ValidationError, prefix: str = "") -> list[str]:
    errors = []
    for err in e.errors():
        location = ".".join(str(p) for p in (prefix, *err["loc"]) if p != "")
        errors.append(f"{location}: {err['msg']}")
    return errors


def validate_strategy_spec(spec: dict[str, Any]) -> list[str]:
    """Return every problem with a spec; empty when it is well-formed."""
    try:
        parsed = StrategySpec.model_validate(spec)
    except ValidationError as e:
        return _format_errors(e)

    errors = []
    if not parsed.id.strip():
        errors.append("Strategy ID is required")
    if parsed.order < 0:
        errors.append("Strategy order must be non-negative")

    try:
        config = _CONFIG_MODELS[parsed.type].model_validate(parsed.config)
    except ValidationError as e:
        return errors + _format_errors(e, "config")

    if parsed.type != "custom":
        errors.extend(e for e in _build(parsed, config).validate() if e not in errors)
    elif not 0.0 <= config.base_confidence <= 1.0:
        errors.append("Base confidence must be between 0 and 1")
    return errors


def build_strategy(spec: dict[str, Any]) -> BuiltStrategy:
    """Materialize an attribute or label spec.

    Raises:
        ValueError: If the spec is invalid or describes a custom strategy,
            which needs a mapping function and cannot be built from data.
    """
    errors = validate_strategy_spec(spec)
    if errors:
        raise ValueError(f"Invalid strategy spec: {'; '.join(errors)}")
    parsed = StrategySpec.model_validate(spec)
    if parsed.type == "custom":
        raise ValueError(f"Custom strategy {parsed.id} requires a mapping function")

    strategy = _build(parsed, _CONFIG_MODELS[parsed.type].model_validate(parsed.config))
    logger.debug(f"Built {parsed.type} strategy {strategy.id}")
    return strategy


def build_strategies(specs: list[dict[str, Any]]) -> list[BuiltStrategy]:
    """Build the enabled specs in ascending ``order``."""
    parsed = sorted(
        (StrategySpec.model_validate(s) for s in specs), key=lambda s: s.order
    )
    return [
        build_strategy(s.model_dump(by_alias=False)) for s in parsed if s.enabled
    ]


def _build(spec: StrategySpec, config: _SpecModel) -> BuiltStrategy:
    if isinstance(config, AttributeSpecConfig):
        return AttributeStrategy(
            AttributeStrategyConfig(
                attribute=config.attribute,
                mappings=dict(config.mappings),
                confidence=config.confidence,
                match_type=config.match_type,
                normalize=config.normalize,
            ),
            id=spec.id,
            name=spec.name,
        )
    return LabelStrategy(
        LabelStrategyConfig(
            patterns=[
                LabelPattern(p.patterns, p.profile_key, p.confidence) for p in config.patterns
            ],
            default_confidence=config.default_confidence,
            use_synonyms=config.use_synonyms,
        ),
        id=spec.id,
        name=spec.name or "Label Pattern Strategy",
    )
