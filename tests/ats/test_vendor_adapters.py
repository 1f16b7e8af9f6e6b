"""Tests for vendor adapters, the mapping builder and the adapter registry."""
import pytest

from autofill.ats.base_handler import BaseAdapter, MappingBuilder
from autofill.ats.handlers import GreenhouseAdapter, LeverAdapter, WorkdayAdapter
from autofill.ats.registry import VENDOR_ADAPTERS, get_all_compatible_adapters, select_adapter
from autofill.ats.strategies import LabelPattern
from autofill.mapping.models import MappingSource
from conftest import (
    GENERIC_URL,
    GREENHOUSE_URL,
    LEVER_URL,
    WORKDAY_URL,
    build_field,
    build_schema,
)

KEYS = [
    "First Name", "Last Name", "Full Name", "Email", "Phone", "Resume",
    "Cover Letter", "LinkedIn", "Portfolio", "Current Location", "Current Company",
]


class TestMappingBuilder:
    @pytest.fixture
    def builder(self) -> MappingBuilder:
        schema = build_schema([
            build_field(0, label="Email", name="email"),
            build_field(1, label="Phone", name="phone"),
            build_field(2, label="Favourite colour"),
        ])
        return MappingBuilder(schema, KEYS)

    def test_earlier_steps_win(self, builder: MappingBuilder) -> None:
        mappings = (
            builder
            .match_by_attribute("name", {"email": "Email"}, 0.9)
            .match_by_label([LabelPattern(["email"], "Email"), LabelPattern(["phone"], "Phone")], 0.8)
            .get_mappings()
        )
        assert [(m.form_field_idx, m.confidence) for m in mappings] == [(0, 0.9), (1, 0.8)]
        assert builder.unmapped_indices() == [2]

    def test_filtered_mappings_stay_claimed(self, builder: MappingBuilder) -> None:
        builder.match_by_attribute("name", {"email": "Email"}, 0.2).filter_by_confidence(0.5)
        assert builder.get_mappings() == []
        assert builder.mapped_indices() == {0}

    def test_selector_match(self) -> None:
        schema = build_schema([build_field(0, selector="#candidate_email")])
        mappings = MappingBuilder(schema, KEYS).match_by_selector({"email": "Email"}).get_mappings()
        assert mappings[0].profile_key == "Email"
        assert mappings[0].confidence == 0.95

    def test_sort_limit_and_stats(self, builder: MappingBuilder) -> None:
        builder.match_by_attribute("name", {"phone": "Phone"}, 0.6)
        builder.match_by_attribute("name", {"email": "Email"}, 0.9)
        builder.sort_by_confidence()
        assert [m.confidence for m in builder.get_mappings()] == [0.9, 0.6]

        stats = builder.stats()
        assert stats["total_mappings"] == 2
        assert stats["high_confidence_count"] == 1
        assert stats["medium_confidence_count"] == 1
        assert stats["average_confidence"] == pytest.approx(0.75)

        assert builder.progress()["mapped"] == 2
        assert builder.limit_to(1).get_mappings()[0].confidence == 0.9

    def test_results_record_each_step(self, builder: MappingBuilder) -> None:
        builder.match_by_attribute("name", {"email": "Email"}).match_by_label()
        assert [r.metadata["strategy_type"] for r in builder.results] == ["attribute", "label"]


class TestWorkdayAdapter:
    @pytest.fixture
    def adapter(self) -> WorkdayAdapter:
        return WorkdayAdapter()

    @pytest.mark.parametrize("url", [
        WORKDAY_URL,
        "https://acme-corp.workday.com/x",
        "https://workday.example.com/jobs/1",
    ])
    def test_can_handle(self, adapter: WorkdayAdapter, url: str) -> None:
        assert adapter.can_handle(url)

    def test_rejects_other_hosts(self, adapter: WorkdayAdapter) -> None:
        assert not adapter.can_handle(GREENHOUSE_URL)
        assert not adapter.can_handle("not a url")

    def test_automation_ids_map_at_maximum_confidence(self, adapter: WorkdayAdapter) -> None:
        schema = build_schema([
            build_field(0, label="First Name", data_automation_id="firstName"),
            build_field(1, label="Email Address", data_automation_id="email"),
        ], WORKDAY_URL)

        result = adapter.map_fields(schema, KEYS)

        by_idx = {m.form_field_idx: m for m in result.mappings}
        assert by_idx[0].profile_key == "First Name"
        assert by_idx[1].profile_key == "Email"
        assert all(m.confidence == 0.98 for m in result.mappings)
        assert result.source == MappingSource.VENDOR
        assert result.unmapped_fields == []
        assert result.metadata["vendor_adapter"] == "Workday"

    def test_widget_fields(self, adapter: WorkdayAdapter) -> None:
        schema = build_schema([
            build_field(0, selector=".wd-input input", type="file"),
            build_field(1, selector=".wd-select select", element_type="select",
                        options=["United States", "Canada"]),
            build_field(2, label="Family Name"),
            build_field(3, label="Anything else?"),
        ], WORKDAY_URL)

        result = adapter.map_fields(schema, KEYS)

        keys = {m.form_field_idx: (m.profile_key, m.confidence) for m in result.mappings}
        assert keys[0] == ("Resume", 0.9)
        assert keys[1] == ("Current Location", 0.85)
        assert keys[2] == ("Last Name", 0.8)
        assert result.unmapped_fields == [3]

    def test_mappings_are_sorted_by_confidence(self, adapter: WorkdayAdapter) -> None:
        schema = build_schema([
            build_field(0, label="Given Name"),
            build_field(1, data_automation_id="email"),
        ], WORKDAY_URL)
        result = adapter.map_fields(schema, KEYS)
        assert [m.form_field_idx for m in result.mappings] == [1, 0]


class TestGreenhouseAdapter:
    @pytest.fixture
    def adapter(self) -> GreenhouseAdapter:
        return GreenhouseAdapter()

    def test_can_handle(self, adapter: GreenhouseAdapter) -> None:
        assert adapter.can_handle(GREENHOUSE_URL)
        assert adapter.can_handle("https://greenhouse-mirror.example.com/jobs/1")
        assert not adapter.can_handle(LEVER_URL)

    def test_maps_greenhouse_form(self, adapter: GreenhouseAdapter) -> None:
        schema = build_schema([
            build_field(0, aria_label="First Name"),
            build_field(1, name="last_name"),
            build_field(2, label="Cover Letter", element_type="textarea"),
            build_field(3, type="file"),
            build_field(4, label="LinkedIn Profile", type="url"),
            build_field(5, label="Personal website", type="url"),
        ], GREENHOUSE_URL)

        result = adapter.map_fields(schema, KEYS)

        keys = {m.form_field_idx: (m.profile_key, m.confidence) for m in result.mappings}
        assert keys == {
            0: ("First Name", 0.95),
            1: ("Last Name", 0.9),
            2: ("Cover Letter", 0.85),
            3: ("Resume", 0.9),
            4: ("LinkedIn", 0.9),
            5: ("Portfolio", 0.85),
        }


class TestLeverAdapter:
    @pytest.fixture
    def adapter(self) -> LeverAdapter:
        return LeverAdapter()

    def test_can_handle(self, adapter: LeverAdapter) -> None:
        assert adapter.can_handle(LEVER_URL)
        assert adapter.can_handle("https://acme.jobs.lever.co/123")
        assert not adapter.can_handle(GENERIC_URL)

    def test_maps_lever_form(self, adapter: LeverAdapter) -> None:
        schema = build_schema([
            build_field(0, label="Full name", name="name"),
            build_field(1, label="Email", name="email"),
            build_field(2, label="LinkedIn URL", name="urls[LinkedIn]"),
            build_field(3, label="Phone number"),
            build_field(4, label="Additional information", name="comments", element_type="textarea"),
            build_field(5, label="Resume/CV", type="file", name="resume"),
        ], LEVER_URL)

        result = adapter.map_fields(schema, KEYS)

        keys = {m.form_field_idx: (m.profile_key, m.confidence) for m in result.mappings}
        assert keys[0] == ("Full Name", 0.95)
        assert keys[1] == ("Email", 0.95)
        assert keys[2] == ("LinkedIn", 0.95)
        assert keys[3] == ("Phone", 0.8)
        assert keys[4] == ("Cover Letter", 0.95)
        assert keys[5] == ("Resume", 0.95)


class TestAdapterContract:
    @pytest.mark.parametrize("adapter", VENDOR_ADAPTERS, ids=lambda a: a.ATS_NAME)
    def test_builtin_adapters_are_valid(self, adapter: BaseAdapter) -> None:
        assert adapter.validate() == []
        assert adapter.describe()["name"] == adapter.ATS_NAME

    def test_empty_form(self) -> None:
        result = WorkdayAdapter().map_fields(build_schema([], WORKDAY_URL), KEYS)
        assert result.mappings == []
        assert result.unmapped_fields == []

    def test_incomplete_adapter_fails_validation(self) -> None:
        class Incomplete(BaseAdapter):
            ATS_NAME = " "
            PRIORITY = -1
            MIN_CONFIDENCE = 2.0

            def compose(self, builder: MappingBuilder) -> MappingBuilder:
                return builder

        assert len(Incomplete().validate()) == 4


class TestRegistry:
    def test_adapters_sorted_by_priority(self) -> None:
        priorities = [a.PRIORITY for a in VENDOR_ADAPTERS]
        assert priorities == sorted(priorities, reverse=True)

    @pytest.mark.parametrize("url,name", [
        (WORKDAY_URL, "Workday"),
        (GREENHOUSE_URL, "Greenhouse"),
        (LEVER_URL, "Lever"),
    ])
    def test_select_adapter(self, url: str, name: str) -> None:
        assert select_adapter(url).ATS_NAME == name

    def test_no_adapter_for_generic_url(self) -> None:
        assert select_adapter(GENERIC_URL) is None
        assert get_all_compatible_adapters(GENERIC_URL) == []

    def test_explicit_adapter_list(self) -> None:
        assert select_adapter(WORKDAY_URL, []) is None
