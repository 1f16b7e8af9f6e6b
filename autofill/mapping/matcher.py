"""Profile key matching for single fields and compound field groups."""
import logging
import re
from dataclasses import dataclass, field
from typing import Literal, Optional

from ..core.config import HeuristicWeights
from ..extractor.models import FormFieldSchema
from ..profile.manager import UserProfile
from .models import FieldMapping, MappingSource, determine_action
from .scorer import HeuristicScorer, ScoreBreakdown

logger = logging.getLogger(__name__)

SectionType = Literal["workExperience", "education", "reference", "unknown"]

COMPOUND_MATCH_CONFIDENCE = 0.8

# Sub-field key suffixes match the profile's camelCase work experience keys
WORK_EXPERIENCE_PATTERNS: list[tuple[tuple[str, ...], str]] = [
    (("job title", "title", "position"), "title"),
    (("company", "employer", "organization"), "company"),
    (("location", "city", "office"), "location"),
    (("start date", "from", "began"), "startDate"),
    (("end date", "to", "until", "ended"), "endDate"),
    (("description", "responsibilities", "duties"), "description"),
]

ADDRESS_PATTERNS: list[tuple[tuple[str, ...], str]] = [
    (("address line 2", "address2", "apt", "suite"), "Address Line 2"),
    (("street", "address line 1", "address1"), "Address"),
    (("city", "town", "locality"), "City"),
    (("state", "province", "region"), "State"),
    (("zip", "postal", "postcode"), "Zip Code"),
    (("country", "nation"), "Country"),
]

SECTION_TYPE_HINTS: list[tuple[tuple[str, ...], SectionType]] = [
    (("job", "company", "title"), "workExperience"),
    (("school", "degree", "education"), "education"),
    (("reference", "contact"), "reference"),
]

_NUMBERED_NAME = re.compile(r"^(.+?)[-_](\d+)$")


@dataclass
class MatchCandidate:
    profile_key: str
    confidence: float
    reasoning: str
    is_sensitive: bool = False


@dataclass
class RepeatableSections:
    """Field indices grouped by numeric name suffix, in suffix order."""
    sections: list[list[int]] = field(default_factory=list)
    section_type: SectionType = "unknown"


def _word_pattern(phrase: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(phrase)}\b")


def _label_matches(label: str, phrases: tuple[str, ...]) -> bool:
    """Whole-word phrase match, so ``to`` does not fire inside ``phone``."""
    return any(_word_pattern(p).search(label) for p in phrases)


class ProfileMatcher:
    """Finds profile keys for form fields using the heuristic scorer."""

    def __init__(self, scorer: Optional[HeuristicScorer] = None) -> None:
        self._scorer = scorer or HeuristicScorer()

    @property
    def scorer(self) -> HeuristicScorer:
        return self._scorer

    def find_matches(
        self,
        form_field: FormFieldSchema,
        profile: UserProfile,
        max_candidates: int = 3,
        min_confidence: float = 0.3,
        include_sensitive: bool = False,
    ) -> list[MatchCandidate]:
        """Candidates at or above ``min_confidence``, best first."""
        candidates = []
        for profile_key in profile.keys():
            sensitive = profile.is_sensitive(profile_key)
            if sensitive and not include_sensitive:
                continue

            breakdown = self._scorer.calculate_field_score(form_field, profile_key)
            if breakdown.total_score >= min_confidence:
                candidates.append(MatchCandidate(
                    profile_key=profile_key,
                    confidence=breakdown.total_score,
                    reasoning=generate_reasoning(breakdown),
                    is_sensitive=sensitive,
                ))

        candidates.sort(key=lambda c: c.confidence, reverse=True)
        return candidates[:max(0, max_candidates)]

    def find_best_match(
        self,
        form_field: FormFieldSchema,
        profile: UserProfile,
        min_confidence: float = 0.3,
        include_sensitive: bool = False,
    ) -> Optional[MatchCandidate]:
        matches = self.find_matches(
            form_field, profile, 1, min_confidence, include_sensitive
        )
        return matches[0] if matches else None

    def map_work_experience_fields(
        self, fields: list[FormFieldSchema], profile: UserProfile, min_confidence: float = 0.5
    ) -> list[FieldMapping]:
        """Map labels such as "Employer" to ``<work field>.company``."""
        work_field = profile.work_experience_field()
        if work_field is None or work_field.is_sensitive:
            return []
        if COMPOUND_MATCH_CONFIDENCE < min_confidence:
            return []

        mappings = []
        for idx, form_field in enumerate(fields):
            label = form_field.label.lower()
            for phrases, sub_key in WORK_EXPERIENCE_PATTERNS:
                if _label_matches(label, phrases):
                    mappings.append(FieldMapping(
                        form_field_idx=idx,
                        profile_key=f"{work_field.label}.{sub_key}",
                        confidence=COMPOUND_MATCH_CONFIDENCE,
                        source=MappingSource.HEURISTIC,
                        action=determine_action(form_field),
                        reasoning=f"Work experience field detected: {form_field.label} -> {sub_key}",
                    ))
                    break
        return mappings

    def map_address_fields(
        self, fields: list[FormFieldSchema], profile: UserProfile, min_confidence: float = 0.6
    ) -> list[FieldMapping]:
        """Map address component labels to the matching profile keys."""
        if COMPOUND_MATCH_CONFIDENCE < min_confidence:
            return []

        available = set(profile.keys())
        mappings = []
        for idx, form_field in enumerate(fields):
            label = form_field.label.lower()
            for phrases, profile_key in ADDRESS_PATTERNS:
                if profile_key not in available:
                    continue
                if _label_matches(label, phrases):
                    mappings.append(FieldMapping(
                        form_field_idx=idx,
                        profile_key=profile_key,
                        confidence=COMPOUND_MATCH_CONFIDENCE,
                        source=MappingSource.HEURISTIC,
                        action=determine_action(form_field),
                        reasoning=f"Address component detected: {form_field.label} -> {profile_key}",
                    ))
                    break
        return mappings

    def detect_repeatable_sections(self, fields: list[FormFieldSchema]) -> RepeatableSections:
        """Group fields named like ``company-1`` / ``title_1`` by their number."""
        groups: dict[int, list[int]] = {}
        for idx, form_field in enumerate(fields):
            match = _NUMBERED_NAME.match(form_field.attributes.name or "")
            if match:
                groups.setdefault(int(match.group(2)), []).append(idx)

        sections = [groups[number] for number in sorted(groups)]
        if not sections:
            return RepeatableSections()

        labels = " ".join(fields[i].label.lower() for i in sections[0])
        section_type: SectionType = "unknown"
        for hints, candidate in SECTION_TYPE_HINTS:
            if any(h in labels for h in hints):
                section_type = candidate
                break
        return RepeatableSections(sections, section_type)

    def update_scoring_weights(self, **weights: float) -> None:
        self._scorer.update_weights(**weights)

    @property
    def weights(self) -> HeuristicWeights:
        return self._scorer.weights


def generate_reasoning(breakdown: ScoreBreakdown) -> str:
    """Summarize the signals that fired, e.g. "89% confidence: synonym match"."""
    reasons = []
    if breakdown.exact_match > 0:
        reasons.append("exact label match")
    if breakdown.synonym_bonus > 0:
        reasons.append("synonym match")
    if breakdown.autocomplete_match > 0:
        reasons.append("autocomplete attribute")
    if breakdown.name_attribute_match > 0:
        reasons.append("name attribute")
    if breakdown.id_attribute_match > 0:
        reasons.append("id attribute")
    if breakdown.type_bonus > 0:
        reasons.append("input type alignment")
    if breakdown.partial_match > 0:
        reasons.append("partial text match")

    confidence = round(breakdown.total_score * 100)
    return f"{confidence}% confidence: {', '.join(reasons) if reasons else 'general similarity'}"
