"""Base class for vendor adapters and the fluent mapping builder."""
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..extractor.models import ExtractedFormSchema
from ..mapping.models import (
    FieldMapping,
    MappingResult,
    MappingSource,
    deduplicate_mappings,
    unmapped_indices,
)
from .confidence import CONFIDENCE_THRESHOLDS, get_vendor_confidence, validate_confidence
from .detector import matches_domain, parse_url
from .strategies import (
    AttributeStrategy,
    AttributeStrategyConfig,
    CustomMappingFunction,
    LabelPattern,
    LabelStrategy,
    LabelStrategyConfig,
    MappingStrategy,
    StrategyContext,
    StrategyResult,
    create_custom_strategy,
    create_field_mapping,
    execute_waterfall,
)
from .strategies.base import MatchType, normalize_text

logger = logging.getLogger(__name__)


class MappingBuilder:
    """Chainable waterfall composer over mapping strategies.

    Each step only sees fields no earlier step claimed, so higher-confidence
    strategies added first always win.
    """

    def __init__(self, form_schema: ExtractedFormSchema, profile_keys: list[str]) -> None:
        self._context = StrategyContext(form_schema, tuple(profile_keys))
        self._mappings: list[FieldMapping] = []
        self._results: list[StrategyResult] = []

    def add_strategy(self, strategy: MappingStrategy) -> "MappingBuilder":
        outcome = execute_waterfall([strategy], self._context)
        self._mappings.extend(outcome.mappings)
        self._results.extend(outcome.results)
        self._context = self._context.with_claims(outcome.claimed)
        return self

    def match_by_attribute(
        self,
        attribute: str,
        mappings: dict[str, str],
        confidence: float = 0.9,
        match_type: MatchType = "contains",
    ) -> "MappingBuilder":
        return self.add_strategy(AttributeStrategy(AttributeStrategyConfig(
            attribute=attribute,
            mappings=mappings,
            confidence=confidence,
            match_type=match_type,
        )))

    def match_by_label(
        self,
        patterns: Optional[list[LabelPattern]] = None,
        confidence: float = 0.8,
        use_synonyms: bool = True,
    ) -> "MappingBuilder":
        """Label patterns, or synonym-only matching when none are given."""
        return self.add_strategy(LabelStrategy(LabelStrategyConfig(
            patterns=list(patterns or []),
            default_confidence=confidence,
            use_synonyms=use_synonyms,
        )))

    def match_by_selector(
        self,
        selectors: dict[str, str],
        confidence: float = 0.95,
        match_type: MatchType = "contains",
    ) -> "MappingBuilder":
        """Match selector fragments (or whole selectors) to profile keys."""

        def map_selectors(schema, profile_keys, claimed, params):
            found = []
            for i, form_field in enumerate(schema.fields):
                if i in claimed:
                    continue
                candidates = [s.lower() for s in [form_field.selector, *form_field.fallback_selectors]]
                for selector, profile_key in selectors.items():
                    if profile_key not in profile_keys:
                        continue
                    wanted = selector.lower()
                    if match_type == "exact":
                        hit = wanted in candidates
                    else:
                        hit = any(wanted in c for c in candidates)
                    if hit:
                        found.append(create_field_mapping(
                            form_field, i, profile_key, confidence,
                            f"selector {selector} ({match_type})",
                        ))
                        break
            return found

        return self.add_custom_mapping(map_selectors, name="Selector Match", base_confidence=confidence)

    def add_custom_mapping(
        self,
        mapping_function: CustomMappingFunction,
        name: str = "Custom Mapping",
        base_confidence: float = 0.85,
    ) -> "MappingBuilder":
        return self.add_strategy(create_custom_strategy(name, mapping_function, base_confidence))

    def filter_by_confidence(self, min_confidence: float) -> "MappingBuilder":
        self._mappings = [m for m in self._mappings if m.confidence >= min_confidence]
        return self

    def sort_by_confidence(self) -> "MappingBuilder":
        self._mappings.sort(key=lambda m: m.confidence, reverse=True)
        return self

    def limit_to(self, max_mappings: int) -> "MappingBuilder":
        self._mappings = self._mappings[:max(0, max_mappings)]
        return self

    def get_mappings(self) -> list[FieldMapping]:
        return list(self._mappings)

    @property
    def results(self) -> list[StrategyResult]:
        return list(self._results)

    def mapped_indices(self) -> set[int]:
        """Indices claimed by any step so far, including filtered ones."""
        return set(self._context.claimed)

    def unmapped_indices(self) -> list[int]:
        total = len(self._context.form_schema.fields)
        return [i for i in range(total) if i not in self._context.claimed]

    def progress(self) -> dict[str, float]:
        mapped = len(self._context.claimed)
        total = len(self._context.form_schema.fields)
        return {
            "mapped": mapped,
            "total": total,
            "percentage": (mapped / total) * 100 if total else 0.0,
        }

    def stats(self) -> dict[str, float]:
        confidences = [m.confidence for m in self._mappings]
        total = len(confidences)
        high = CONFIDENCE_THRESHOLDS["HIGH"]
        medium = CONFIDENCE_THRESHOLDS["MEDIUM"]
        return {
            "total_mappings": total,
            "average_confidence": sum(confidences) / total if total else 0.0,
            "high_confidence_count": sum(1 for c in confidences if c >= high),
            "medium_confidence_count": sum(1 for c in confidences if medium <= c < high),
            "low_confidence_count": sum(1 for c in confidences if c < medium),
        }


class BaseAdapter(ABC):
    """Abstract base class for ATS-specific field mapping adapters."""

    ATS_NAME: str = "base"
    VENDOR: str = ""
    DOMAINS: tuple[str, ...] = ()
    PRIORITY: int = 0
    MIN_CONFIDENCE: float = 0.4

    def can_handle(self, url: str) -> bool:
        """True when the URL host is one of DOMAINS or a subdomain of one."""
        parts = parse_url(url)
        if parts is None:
            return False
        return matches_domain(parts.hostname.lower(), self.DOMAINS)

    def builder(self, form_schema: ExtractedFormSchema, profile_keys: list[str]) -> MappingBuilder:
        return MappingBuilder(form_schema, profile_keys)

    def confidence(self, strategy: str) -> float:
        """Vendor-tuned confidence for a named strategy."""
        return get_vendor_confidence(self.VENDOR or self.ATS_NAME, strategy)

    @abstractmethod
    def compose(self, builder: MappingBuilder) -> MappingBuilder:
        """Add this vendor's strategies to the builder, highest confidence first."""
        pass

    def map_fields(
        self, form_schema: ExtractedFormSchema, profile_keys: list[str]
    ) -> MappingResult:
        """Map form fields to profile keys with this vendor's strategies."""
        start = time.perf_counter()
        logger.debug(f"{self.ATS_NAME}: mapping {len(form_schema.fields)} fields")

        builder = self.compose(self.builder(form_schema, profile_keys))
        mappings = (
            builder
            .filter_by_confidence(self.MIN_CONFIDENCE)
            .sort_by_confidence()
            .get_mappings()
        )

        result = self._create_mapping_result(mappings, form_schema, start, builder.results)
        self._log_mapping_result(result, form_schema)
        return result

    def validate(self) -> list[str]:
        """Configuration problems with this adapter; empty when valid."""
        errors = []
        if not self.ATS_NAME or not self.ATS_NAME.strip():
            errors.append("Adapter name is required")
        if not self.DOMAINS:
            errors.append("At least one domain must be specified")
        if self.PRIORITY < 0:
            errors.append("Priority must be non-negative")
        if not validate_confidence(self.MIN_CONFIDENCE):
            errors.append("Minimum confidence must be between 0 and 1")
        return errors

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.ATS_NAME,
            "vendor": self.VENDOR,
            "domains": list(self.DOMAINS),
            "priority": self.PRIORITY,
            "min_confidence": self.MIN_CONFIDENCE,
        }

    def _create_mapping_result(
        self,
        mappings: list[FieldMapping],
        form_schema: ExtractedFormSchema,
        start: float,
        results: list[StrategyResult],
    ) -> MappingResult:
        deduplicated = deduplicate_mappings(mappings)
        return MappingResult(
            mappings=deduplicated,
            unmapped_fields=unmapped_indices(len(form_schema.fields), deduplicated),
            processing_time=(time.perf_counter() - start) * 1000,
            source=MappingSource.VENDOR,
            metadata={
                "vendor_adapter": self.ATS_NAME,
                "strategies": [r.metadata for r in results],
            },
        )

    def _log_mapping_result(self, result: MappingResult, form_schema: ExtractedFormSchema) -> None:
        total = len(form_schema.fields)
        mapped = len(result.mappings)
        rate = (mapped / total * 100) if total else 0.0
        logger.info(
            f"{self.ATS_NAME}: Mapped {mapped}/{total} fields ({rate:.1f}%) "
            f"in {result.processing_time:.1f}ms"
        )
        for m in result.mappings:
            logger.debug(f"{self.ATS_NAME}: {m.form_field_idx} -> {m.profile_key} ({m.confidence:.2f})")
        if result.unmapped_fields:
            logger.debug(f"{self.ATS_NAME}: Unmapped field indices: {result.unmapped_fields}")


def label_contains(label: str, patterns: list[str]) -> bool:
    normalized = normalize_text(label)
    return any(p in normalized for p in patterns)
