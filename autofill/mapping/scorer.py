"""Similarity scoring between a form field and a profile key."""
import logging
import re
from dataclasses import asdict, dataclass
from typing import Optional

from ..core.config import HeuristicWeights
from ..extractor.models import FormFieldSchema
from ..profile.manager import PROFILE_SYNONYMS

logger = logging.getLogger(__name__)

# HTML autocomplete tokens and the profile keys they fill
AUTOCOMPLETE_MAPPINGS: dict[str, list[str]] = {
    "given-name": ["First Name"],
    "family-name": ["Last Name"],
    "name": ["First Name", "Last Name"],
    "email": ["Email"],
    "tel": ["Phone"],
    "street-address": ["Address"],
    "address-line1": ["Address"],
    "address-level2": ["City"],
    "locality": ["City"],
    "address-level1": ["State"],
    "region": ["State"],
    "country": ["Country"],
    "country-name": ["Country"],
    "postal-code": ["Zip Code"],
    "organization": ["Current Company"],
    "organization-title": ["Current Job Title"],
    "url": ["Website", "LinkedIn", "Portfolio"],
}

TYPE_MAPPINGS: dict[str, list[str]] = {
    "email": ["Email"],
    "tel": ["Phone"],
    "url": ["Website", "LinkedIn", "Portfolio"],
    "file": ["Resume"],
    "date": ["Available Start Date", "Birth Date"],
}

NAME_PATTERNS: dict[str, list[str]] = {
    "firstname": ["First Name"],
    "lastname": ["Last Name"],
    "email": ["Email"],
    "phone": ["Phone"],
    "address": ["Address"],
    "city": ["City"],
    "state": ["State"],
    "country": ["Country"],
    "zip": ["Zip Code"],
    "zipcode": ["Zip Code"],
}

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")
_ATTRIBUTE_SEPARATORS = re.compile(r"[-_\s\[\]]+")


@dataclass
class ScoreBreakdown:
    """Per-signal scores (each in [0, 1]) and the weighted total."""
    exact_match: float = 0.0
    partial_match: float = 0.0
    autocomplete_match: float = 0.0
    name_attribute_match: float = 0.0
    id_attribute_match: float = 0.0
    type_bonus: float = 0.0
    synonym_bonus: float = 0.0
    total_score: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def normalize_label(text: str) -> str:
    """Lowercase, trim, drop punctuation, collapse whitespace."""
    text = _PUNCTUATION.sub("", text.lower().strip())
    return _WHITESPACE.sub(" ", text).strip()


def compact_attribute(text: str) -> str:
    """``first_name`` / ``first-name`` / ``urls[First Name]`` -> ``firstname``."""
    return _ATTRIBUTE_SEPARATORS.sub("", text.lower())


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(
                previous[j - 1] + cost,
                current[j - 1] + 1,
                previous[j] + 1,
            ))
        previous = current
    return previous[-1]


class HeuristicScorer:
    """Scores how well a form field matches a profile key.

    The total is a weighted average over the signals that apply to the
    field. Label signals form one group weighted by the strongest label
    weight, so a label scores through whichever of exact, partial or
    synonym matching fits best. Attribute signals (autocomplete, name, id)
    only count when the field carries that attribute, and the type signal
    is a pure bonus counted only when it aligns.
    """

    def __init__(self, weights: Optional[HeuristicWeights] = None) -> None:
        self._weights = weights or HeuristicWeights()

    @property
    def weights(self) -> HeuristicWeights:
        return self._weights.model_copy()

    def update_weights(self, **changes: float) -> None:
        """Replace some weights; unknown names raise ValueError."""
        unknown = set(changes) - set(HeuristicWeights.model_fields)
        if unknown:
            raise ValueError(f"Unknown scoring weights: {', '.join(sorted(unknown))}")
        self._weights = HeuristicWeights(**{**self._weights.model_dump(), **changes})

    def calculate_field_score(self, field: FormFieldSchema, profile_key: str) -> ScoreBreakdown:
        attrs = field.attributes
        breakdown = ScoreBreakdown(
            exact_match=self.exact_match(field.label, profile_key),
            partial_match=self.partial_match(field.label, profile_key),
            autocomplete_match=self.autocomplete_match(attrs.autocomplete, profile_key),
            name_attribute_match=self.name_match(attrs.name, profile_key),
            id_attribute_match=self.id_match(attrs.id, profile_key),
            type_bonus=self.type_bonus(attrs.type, profile_key),
            synonym_bonus=self.synonym_match(field.label, profile_key),
        )
        breakdown.total_score = self._total(breakdown, field)
        return breakdown

    def _total(self, b: ScoreBreakdown, field: FormFieldSchema) -> float:
        w = self._weights
        numerator = max(
            b.exact_match * w.exact_match,
            b.partial_match * w.partial_match,
            b.synonym_bonus * w.synonym_bonus,
        )
        denominator = max(w.exact_match, w.partial_match, w.synonym_bonus)

        attrs = field.attributes
        for present, score, weight in (
            (attrs.autocomplete, b.autocomplete_match, w.autocomplete_match),
            (attrs.name, b.name_attribute_match, w.name_attribute_match),
            (attrs.id, b.id_attribute_match, w.id_attribute_match),
        ):
            if present:
                numerator += score * weight
                denominator += weight

        if b.type_bonus > 0:
            numerator += b.type_bonus * w.type_bonus
            denominator += w.type_bonus

        if denominator <= 0:
            return 0.0
        return max(0.0, min(1.0, numerator / denominator))

    def exact_match(self, label: str, profile_key: str) -> float:
        normalized = normalize_label(label)
        return 1.0 if normalized and normalized == normalize_label(profile_key) else 0.0

    def partial_match(self, label: str, profile_key: str) -> float:
        normalized = normalize_label(label)
        key = normalize_label(profile_key)
        if not normalized or not key or normalized == key:
            return 0.0

        if key in normalized or normalized in key:
            return 0.8

        label_words = normalized.split(" ")
        key_words = key.split(" ")
        common = [w for w in label_words if any(w in k or k in w for k in key_words)]
        if common:
            return min(0.7, len(common) / max(len(label_words), len(key_words)))

        distance = edit_distance(normalized, key)
        max_length = max(len(normalized), len(key))
        if distance / max_length < 0.5:
            return max(0.0, 1 - distance / max_length)
        return 0.0

    def autocomplete_match(self, autocomplete: Optional[str], profile_key: str) -> float:
        """Any autocomplete token (``shipping email``) naming the key scores 1."""
        if not autocomplete:
            return 0.0
        for token in autocomplete.lower().split():
            if profile_key in AUTOCOMPLETE_MAPPINGS.get(token, []):
                return 1.0
        return 0.0

    def name_match(self, name: Optional[str], profile_key: str) -> float:
        if not name:
            return 0.0
        compact_name = compact_attribute(name)
        compact_key = compact_attribute(profile_key)
        if not compact_name:
            return 0.0
        if compact_name == compact_key:
            return 1.0

        for pattern, keys in NAME_PATTERNS.items():
            if pattern in compact_name and profile_key in keys:
                return 0.9

        if compact_key and (compact_key in compact_name or compact_name in compact_key):
            return 0.7
        return 0.0

    def id_match(self, element_id: Optional[str], profile_key: str) -> float:
        return self.name_match(element_id, profile_key) * 0.9

    def type_bonus(self, input_type: Optional[str], profile_key: str) -> float:
        if not input_type:
            return 0.0
        return 1.0 if profile_key in TYPE_MAPPINGS.get(input_type.lower(), []) else 0.0

    def synonym_match(self, label: str, profile_key: str) -> float:
        normalized = normalize_label(label)
        synonyms = PROFILE_SYNONYMS.get(profile_key)
        if not normalized or not synonyms:
            return 0.0

        best = 0.0
        for synonym in synonyms:
            candidate = normalize_label(synonym)
            if normalized == candidate:
                return 1.0
            if candidate and (candidate in normalized or normalized in candidate):
                best = 0.8
        return best
