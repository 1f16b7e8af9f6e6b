"""Tests for custom strategies and the common custom factories."""
from unittest.mock import MagicMock

from autofill.ats.strategies import (
    StrategyContext,
    create_css_class_strategy,
    create_custom_strategy,
    create_dropdown_strategy,
    create_field_mapping,
    create_file_upload_strategy,
    create_textarea_strategy,
)
from conftest import build_field, build_schema

KEYS = ("Resume", "Cover Letter", "Country", "Email")


def _context(fields, claimed=frozenset(), params=None) -> StrategyContext:
    return StrategyContext(build_schema(fields), KEYS, frozenset(claimed), params or {})


class TestCustomStrategy:
    def test_identity(self) -> None:
        strategy = create_custom_strategy("My Fields", MagicMock(return_value=[]))
        assert strategy.id == "custom-my-fields"
        assert strategy.name == "Custom Strategy: My Fields"
        assert strategy.kind == "custom"

    def test_function_receives_context_and_merged_params(self) -> None:
        mapping_function = MagicMock(return_value=[])
        strategy = create_custom_strategy("Probe", mapping_function, params={"a": 1, "b": 1})
        context = _context([build_field(0)], claimed={0}, params={"b": 2})

        strategy.execute(context)

        schema, keys, claimed, params = mapping_function.call_args.args
        assert schema is context.form_schema
        assert keys == list(KEYS)
        assert claimed == frozenset({0})
        assert params == {"a": 1, "b": 2}

    def test_zero_confidence_gets_base_and_reasoning_is_prefixed(self) -> None:
        def mapping_function(schema, keys, claimed, params):
            return [create_field_mapping(schema.fields[0], 0, "Email", 0.0, "probe")]

        strategy = create_custom_strategy("Probe", mapping_function, base_confidence=0.7)
        result = strategy.execute(_context([build_field(0)]))
        assert result.mappings[0].confidence == 0.7
        assert result.mappings[0].reasoning == "Custom Strategy: Probe: probe"

    def test_failure_becomes_error_note(self) -> None:
        strategy = create_custom_strategy("Boom", MagicMock(side_effect=RuntimeError("kaput")))
        result = strategy.execute(_context([build_field(0)]))
        assert result.mappings == []
        assert result.metadata["error"] == "kaput"
        assert result.metadata["strategy_id"] == "custom-boom"

    def test_invalid_mappings_are_dropped(self) -> None:
        def mapping_function(schema, keys, claimed, params):
            field = schema.fields[0]
            return [
                create_field_mapping(field, 5, "Email", 0.9, "out of range"),
                create_field_mapping(field, 0, "", 0.9, "empty key"),
                create_field_mapping(field, 1, "Email", 0.9, "claimed"),
                create_field_mapping(field, 0, "Email", 0.9, "fine"),
            ]

        strategy = create_custom_strategy("Filter", mapping_function)
        result = strategy.execute(_context([build_field(0), build_field(1)], claimed={1}))
        assert [(m.form_field_idx, m.profile_key) for m in result.mappings] == [(0, "Email")]

    def test_validate(self) -> None:
        strategy = create_custom_strategy("Bad", "not callable", base_confidence=1.5)  # type: ignore[arg-type]
        errors = strategy.validate()
        assert "Mapping function must be callable" in errors
        assert "Base confidence must be between 0 and 1" in errors


class TestCommonCustomStrategies:
    def test_file_upload_maps_first_unclaimed_file_input(self) -> None:
        result = create_file_upload_strategy().execute(_context(
            [build_field(0, type="file"), build_field(1, type="file")], claimed={0}
        ))
        assert [(m.form_field_idx, m.profile_key) for m in result.mappings] == [(1, "Resume")]
        assert result.mappings[0].confidence == 0.9

    def test_dropdown_options(self) -> None:
        strategy = create_dropdown_strategy({"Country": ["united states", "canada"]})
        result = strategy.execute(_context([
            build_field(0, element_type="select", options=["Canada", "Mexico"]),
            build_field(1, element_type="select", options=["Yes", "No"]),
        ]))
        assert [(m.form_field_idx, m.profile_key) for m in result.mappings] == [(0, "Country")]

    def test_css_class(self) -> None:
        strategy = create_css_class_strategy({"email-input": "Email"})
        result = strategy.execute(_context([build_field(0, selector="div > input.email-input")]))
        assert result.mappings[0].profile_key == "Email"
        assert result.mappings[0].confidence == 0.8

    def test_textarea_cover_letter(self) -> None:
        result = create_textarea_strategy().execute(_context([
            build_field(0, label="Comments", element_type="textarea"),
            build_field(1, label="Cover Letter", element_type="textarea"),
        ]))
        assert [(m.form_field_idx, m.profile_key) for m in result.mappings] == [(1, "Cover Letter")]
