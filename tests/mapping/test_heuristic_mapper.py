"""Tests for the heuristic mapper."""
import pytest

from autofill.core.config import HeuristicMapperConfig
from autofill.mapping.heuristic import FALLBACK_REASON, HeuristicMapper
from autofill.mapping.models import MappingSource
from autofill.profile.manager import ProfileField, UserProfile
from conftest import build_field, build_schema


@pytest.fixture
def mapper() -> HeuristicMapper:
    return HeuristicMapper()


class TestMapFields:
    def test_maps_contact_form(self, mapper: HeuristicMapper, profile: UserProfile) -> None:
        schema = build_schema([
            build_field(0, label="Email Address", autocomplete="email"),
            build_field(1, label="First Name", name="first_name"),
            build_field(2, label="Favourite colour"),
        ])

        result = mapper.map_fields(schema, profile)

        keys = {m.form_field_idx: m.profile_key for m in result.mappings}
        assert keys == {0: "Email", 1: "First Name"}
        assert result.unmapped_fields == [2]
        assert result.source == MappingSource.HEURISTIC
        email = next(m for m in result.mappings if m.form_field_idx == 0)
        assert email.confidence >= 0.8
        assert email.reasoning.startswith("Heuristic mapping: ")

    def test_metadata(self, mapper: HeuristicMapper, profile: UserProfile) -> None:
        schema = build_schema([build_field(0, label="City"), build_field(1, label="Zzz")])
        result = mapper.map_fields(schema, profile)
        stats = result.metadata["heuristic_stats"]
        assert result.metadata["fallback_reason"] == FALLBACK_REASON
        assert stats["total_fields"] == 2
        assert stats["high_confidence_matches"] == 1
        assert stats["average_confidence"] == 1.0

    def test_mappings_and_unmapped_partition_fields(self, mapper: HeuristicMapper, profile: UserProfile) -> None:
        schema = build_schema([
            build_field(0, label="Phone", type="tel"),
            build_field(1, label="Street"),
            build_field(2, label="Postal code"),
            build_field(3, label="Tell us a story"),
        ])
        result = mapper.map_fields(schema, profile)
        mapped = [m.form_field_idx for m in result.mappings]
        assert len(mapped) == len(set(mapped))
        assert sorted(mapped + result.unmapped_fields) == [0, 1, 2, 3]

    def test_sensitive_keys_never_mapped(self, mapper: HeuristicMapper, profile: UserProfile) -> None:
        result = mapper.map_fields(build_schema([build_field(0, label="Gender")]), profile)
        assert result.mappings == []

    def test_empty_form(self, mapper: HeuristicMapper, profile: UserProfile) -> None:
        result = mapper.map_fields(build_schema([]), profile)
        assert result.mappings == []
        assert result.unmapped_fields == []
        assert result.metadata["heuristic_stats"]["average_confidence"] == 0.0

    def test_work_experience_pass(self, mapper: HeuristicMapper, work_profile: UserProfile) -> None:
        result = mapper.map_fields(build_schema([build_field(0, label="Employer")]), work_profile)
        assert [m.profile_key for m in result.mappings] == ["Work Experience.company"]

    def test_work_experience_pass_can_be_disabled(self, work_profile: UserProfile) -> None:
        mapper = HeuristicMapper(HeuristicMapperConfig(enable_work_experience=False))
        result = mapper.map_fields(build_schema([build_field(0, label="Employer")]), work_profile)
        assert result.mappings == []


class TestRepeatableSections:
    def test_indexed_keys(self) -> None:
        profile = UserProfile(fields=[ProfileField(label="Company", value="Acme")])
        mapper = HeuristicMapper(HeuristicMapperConfig(enable_repeatable_sections=True))
        schema = build_schema([
            build_field(0, label="Company", name="company_1"),
            build_field(1, label="Company", name="company_2"),
        ])

        result = mapper.map_fields(schema, profile)

        # Plain matches outrank the discounted section matches
        assert [m.profile_key for m in result.mappings] == ["Company", "Company"]

        sections = mapper._map_repeatable_sections(schema, profile)
        assert [m.profile_key for m in sections] == ["Company[0]", "Company[1]"]
        assert sections[0].confidence == pytest.approx(result.mappings[0].confidence * 0.9)


class TestConfigUpdates:
    def test_update_config(self, mapper: HeuristicMapper) -> None:
        mapper.update_config(min_confidence=0.6)
        assert mapper.config.min_confidence == 0.6

    def test_update_config_validates(self, mapper: HeuristicMapper) -> None:
        with pytest.raises(ValueError):
            mapper.update_config(min_confidence=2)

    def test_raising_min_confidence_drops_weak_matches(self, profile: UserProfile) -> None:
        schema = build_schema([build_field(0, label="Email Address")])
        mapper = HeuristicMapper(HeuristicMapperConfig(min_confidence=0.9))
        assert mapper.map_fields(schema, profile).mappings == []

    def test_update_scoring_weights(self, mapper: HeuristicMapper) -> None:
        mapper.update_scoring_weights(type_bonus=0.4)
        assert mapper.matcher.weights.type_bonus == 0.4
