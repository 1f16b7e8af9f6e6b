"""Tests for building strategies from declarative specs."""
import pytest

from autofill.ats.strategies import (
    AttributeStrategy,
    LabelStrategy,
    build_strategies,
    build_strategy,
    validate_strategy_spec,
)

ATTRIBUTE_SPEC = {
    "id": "workday-automation-id",
    "type": "attribute",
    "order": 2,
    "config": {
        "attribute": "data-automation-id",
        "mappings": {"firstName": "First Name"},
        "confidence": 0.98,
        "matchType": "contains",
    },
}

LABEL_SPEC = {
    "id": "contact-labels",
    "type": "label",
    "order": 1,
    "config": {
        "patterns": [{"patterns": ["email"], "profile_key": "Email"}],
        "default_confidence": 0.75,
    },
}


class TestValidateStrategySpec:
    def test_valid_specs(self) -> None:
        assert validate_strategy_spec(ATTRIBUTE_SPEC) == []
        assert validate_strategy_spec(LABEL_SPEC) == []

    def test_unknown_type(self) -> None:
        errors = validate_strategy_spec({"id": "x", "type": "magic"})
        assert errors
        assert errors[0].startswith("type")

    def test_missing_config_fields(self) -> None:
        errors = validate_strategy_spec({"id": "x", "type": "attribute", "config": {}})
        assert any(e.startswith("config.attribute") for e in errors)
        assert any(e.startswith("config.mappings") for e in errors)

    def test_semantic_problems(self) -> None:
        spec = {
            "id": " ",
            "type": "attribute",
            "order": -1,
            "config": {"attribute": "name", "mappings": {}, "confidence": 1.2},
        }
        errors = validate_strategy_spec(spec)
        assert "Strategy ID is required" in errors
        assert "Strategy order must be non-negative" in errors
        assert "At least one mapping is required" in errors
        assert "Confidence must be between 0 and 1" in errors

    def test_custom_spec_checks_base_confidence(self) -> None:
        spec = {"id": "c", "type": "custom", "config": {"name": "C", "baseConfidence": 2}}
        assert validate_strategy_spec(spec) == ["Base confidence must be between 0 and 1"]


class TestBuildStrategy:
    def test_attribute(self) -> None:
        strategy = build_strategy(ATTRIBUTE_SPEC)
        assert isinstance(strategy, AttributeStrategy)
        assert strategy.id == "workday-automation-id"
        assert strategy.config.attribute == "data-automation-id"
        assert strategy.config.confidence == 0.98

    def test_label(self) -> None:
        strategy = build_strategy(LABEL_SPEC)
        assert isinstance(strategy, LabelStrategy)
        assert strategy.config.patterns[0].profile_key == "Email"
        assert strategy.config.default_confidence == 0.75

    def test_invalid_spec_raises(self) -> None:
        with pytest.raises(ValueError, match="Invalid strategy spec"):
            build_strategy({"id": "x", "type": "attribute", "config": {}})

    def test_custom_spec_needs_a_function(self) -> None:
        with pytest.raises(ValueError, match="requires a mapping function"):
            build_strategy({"id": "c", "type": "custom", "config": {"name": "C"}})


class TestBuildStrategies:
    def test_orders_and_skips_disabled(self) -> None:
        disabled = {**LABEL_SPEC, "id": "off", "order": 0, "enabled": False}
        strategies = build_strategies([ATTRIBUTE_SPEC, LABEL_SPEC, disabled])
        assert [s.id for s in strategies] == ["contact-labels", "workday-automation-id"]
