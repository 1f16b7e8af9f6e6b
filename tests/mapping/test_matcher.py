"""Tests for profile matching and compound field detection."""
import pytest

from autofill.mapping.matcher import ProfileMatcher, generate_reasoning
from autofill.mapping.models import MappingSource
from autofill.mapping.scorer import ScoreBreakdown
from autofill.profile.manager import ProfileField, UserProfile, WorkExperience
from conftest import build_field


@pytest.fixture
def matcher() -> ProfileMatcher:
    return ProfileMatcher()


class TestFindMatches:
    def test_best_candidate_first(self, matcher: ProfileMatcher, profile: UserProfile) -> None:
        field = build_field(0, label="Email Address", autocomplete="email", type="email")
        matches = matcher.find_matches(field, profile)
        assert matches[0].profile_key == "Email"
        assert matches[0].confidence >= 0.8
        assert len(matches) <= 3
        confidences = [m.confidence for m in matches]
        assert confidences == sorted(confidences, reverse=True)

    def test_sensitive_keys_excluded_by_default(self, matcher: ProfileMatcher, profile: UserProfile) -> None:
        field = build_field(0, label="Gender")
        assert matcher.find_best_match(field, profile) is None

        match = matcher.find_best_match(field, profile, include_sensitive=True)
        assert match.profile_key == "Gender"
        assert match.is_sensitive is True

    def test_min_confidence_filters(self, matcher: ProfileMatcher, profile: UserProfile) -> None:
        field = build_field(0, label="Email Address")
        assert matcher.find_matches(field, profile, min_confidence=0.95) == []

    def test_reasoning_mentions_signals(self, matcher: ProfileMatcher, profile: UserProfile) -> None:
        match = matcher.find_best_match(build_field(0, label="Surname"), profile)
        assert match.profile_key == "Last Name"
        assert "synonym match" in match.reasoning


class TestWorkExperience:
    def test_maps_sub_fields(self, matcher: ProfileMatcher, work_profile: UserProfile) -> None:
        fields = [
            build_field(0, label="Employer"),
            build_field(1, label="Job Title"),
            build_field(2, label="Start Date"),
            build_field(3, label="Phone"),
        ]
        mappings = matcher.map_work_experience_fields(fields, work_profile)
        keys = {m.form_field_idx: m.profile_key for m in mappings}
        assert keys == {
            0: "Work Experience.company",
            1: "Work Experience.title",
            2: "Work Experience.startDate",
        }
        assert all(m.confidence == 0.8 and m.source == MappingSource.HEURISTIC for m in mappings)

    def test_to_does_not_match_inside_words(self, matcher: ProfileMatcher, work_profile: UserProfile) -> None:
        fields = [build_field(0, label="Photo upload"), build_field(1, label="Date to")]
        keys = [m.profile_key for m in matcher.map_work_experience_fields(fields, work_profile)]
        assert keys == ["Work Experience.endDate"]

    def test_requires_work_experience_field(self, matcher: ProfileMatcher, profile: UserProfile) -> None:
        assert matcher.map_work_experience_fields([build_field(0, label="Employer")], profile) == []

    def test_sensitive_work_history_stays_hidden(self, matcher: ProfileMatcher) -> None:
        profile = UserProfile(fields=[
            ProfileField(label="Work Experience", type="workExperience", is_sensitive=True, value=[
                WorkExperience(title="Engineer", company="Acme"),
            ]),
        ])
        field = build_field(0, label="Work Experience Company")

        assert matcher.find_matches(field, profile) == []
        assert matcher.map_work_experience_fields([field], profile) == []
        keys = [m.profile_key for m in matcher.find_matches(field, profile, include_sensitive=True)]
        assert "Work Experience.company" in keys

    def test_min_confidence_above_compound_confidence(
        self, matcher: ProfileMatcher, work_profile: UserProfile
    ) -> None:
        fields = [build_field(0, label="Employer")]
        assert matcher.map_work_experience_fields(fields, work_profile, min_confidence=0.9) == []


class TestAddress:
    def test_maps_components(self, matcher: ProfileMatcher) -> None:
        profile = UserProfile(fields=[
            ProfileField(label=key)
            for key in ("Address", "Address Line 2", "City", "State", "Zip Code", "Country")
        ])
        fields = [
            build_field(0, label="Address Line 2"),
            build_field(1, label="Street"),
            build_field(2, label="Town"),
            build_field(3, label="Postal code"),
            build_field(4, label="Telephone"),
        ]
        keys = {m.form_field_idx: m.profile_key for m in matcher.map_address_fields(fields, profile)}
        assert keys == {0: "Address Line 2", 1: "Address", 2: "City", 3: "Zip Code"}

    def test_skips_keys_missing_from_profile(self, matcher: ProfileMatcher) -> None:
        profile = UserProfile(fields=[ProfileField(label="City")])
        fields = [build_field(0, label="State"), build_field(1, label="City")]
        keys = [m.profile_key for m in matcher.map_address_fields(fields, profile)]
        assert keys == ["City"]


class TestRepeatableSections:
    def test_groups_by_numeric_suffix(self, matcher: ProfileMatcher) -> None:
        fields = [
            build_field(0, label="Company", name="company-2"),
            build_field(1, label="Company", name="company-1"),
            build_field(2, label="Job title", name="title_1"),
            build_field(3, label="Email", name="email"),
        ]
        detected = matcher.detect_repeatable_sections(fields)
        assert detected.sections == [[1, 2], [0]]
        assert detected.section_type == "workExperience"

    def test_no_numbered_fields(self, matcher: ProfileMatcher) -> None:
        detected = matcher.detect_repeatable_sections([build_field(0, name="email")])
        assert detected.sections == []
        assert detected.section_type == "unknown"

    def test_education_section(self, matcher: ProfileMatcher) -> None:
        fields = [build_field(0, label="School", name="school_1")]
        assert matcher.detect_repeatable_sections(fields).section_type == "education"


class TestGenerateReasoning:
    def test_no_signals(self) -> None:
        assert generate_reasoning(ScoreBreakdown(total_score=0.35)) == "35% confidence: general similarity"

    def test_lists_signals(self) -> None:
        text = generate_reasoning(ScoreBreakdown(exact_match=1.0, type_bonus=1.0, total_score=1.0))
        assert text == "100% confidence: exact label match, input type alignment"


class TestWeights:
    def test_update_scoring_weights(self, matcher: ProfileMatcher) -> None:
        matcher.update_scoring_weights(partial_match=0.3)
        assert matcher.weights.partial_match == 0.3
