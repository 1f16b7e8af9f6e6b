"""Heuristic (tier 2) mapper for forms no vendor adapter handles."""
import logging
import time
from typing import Any, Optional

from ..core.config import HeuristicMapperConfig
from ..extractor.models import ExtractedFormSchema
from ..profile.manager import UserProfile
from .matcher import ProfileMatcher
from .models import (
    FieldMapping,
    MappingResult,
    MappingSource,
    deduplicate_mappings,
    determine_action,
    unmapped_indices,
)
from .scorer import HeuristicScorer

logger = logging.getLogger(__name__)

FALLBACK_REASON = "No vendor adapter matched - using heuristic mapping"
SECTION_CONFIDENCE_FACTOR = 0.9


class HeuristicMapper:
    """Maps fields by scoring every profile key against every field.

    Runs standard matching, then the optional work experience, address
    and repeatable-section passes, and keeps the best mapping per field.
    """

    def __init__(
        self,
        config: Optional[HeuristicMapperConfig] = None,
        scorer: Optional[HeuristicScorer] = None,
    ) -> None:
        self._config = config or HeuristicMapperConfig()
        self._matcher = ProfileMatcher(scorer or HeuristicScorer())

    @property
    def config(self) -> HeuristicMapperConfig:
        return self._config.model_copy(deep=True)

    @property
    def matcher(self) -> ProfileMatcher:
        return self._matcher

    def map_fields(self, form_schema: ExtractedFormSchema, profile: UserProfile) -> MappingResult:
        start = time.perf_counter()
        config = self._config
        fields = form_schema.fields
        logger.debug(f"Starting heuristic mapping for {len(fields)} fields")

        mappings = self._map_standard_fields(form_schema, profile)
        if config.enable_work_experience:
            mappings.extend(
                self._matcher.map_work_experience_fields(fields, profile, config.min_confidence)
            )
        if config.enable_address_decomposition:
            mappings.extend(
                self._matcher.map_address_fields(fields, profile, config.min_confidence)
            )
        if config.enable_repeatable_sections:
            mappings.extend(self._map_repeatable_sections(form_schema, profile))

        kept = [
            m for m in deduplicate_mappings(mappings) if m.confidence >= config.min_confidence
        ]
        processing_time = (time.perf_counter() - start) * 1000
        result = MappingResult(
            mappings=kept,
            unmapped_fields=unmapped_indices(len(fields), kept),
            processing_time=processing_time,
            source=MappingSource.HEURISTIC,
            metadata={
                "heuristic_stats": self._stats(kept, len(fields), processing_time),
                "fallback_reason": FALLBACK_REASON,
            },
        )
        self._log_mapping_result(result, len(fields))
        return result

    def _map_standard_fields(
        self, form_schema: ExtractedFormSchema, profile: UserProfile
    ) -> list[FieldMapping]:
        mappings = []
        for idx, form_field in enumerate(form_schema.fields):
            candidates = self._matcher.find_matches(
                form_field,
                profile,
                max_candidates=self._config.max_mappings_per_field,
                min_confidence=self._config.min_confidence,
                include_sensitive=False,
            )
            for candidate in candidates:
                mappings.append(FieldMapping(
                    form_field_idx=idx,
                    profile_key=candidate.profile_key,
                    confidence=candidate.confidence,
                    source=MappingSource.HEURISTIC,
                    action=determine_action(form_field),
                    reasoning=f"Heuristic mapping: {candidate.reasoning}",
                ))
        return mappings

    def _map_repeatable_sections(
        self, form_schema: ExtractedFormSchema, profile: UserProfile
    ) -> list[FieldMapping]:
        """Map numbered field groups to indexed keys such as ``Company[1]``."""
        detected = self._matcher.detect_repeatable_sections(form_schema.fields)
        if not detected.sections:
            return []
        logger.debug(
            f"Detected {len(detected.sections)} repeatable sections of type: {detected.section_type}"
        )

        mappings = []
        for section_idx, indices in enumerate(detected.sections):
            for idx in indices:
                form_field = form_schema.fields[idx]
                best = self._matcher.find_best_match(
                    form_field, profile, min_confidence=self._config.min_confidence
                )
                if best is None:
                    continue
                mappings.append(FieldMapping(
                    form_field_idx=idx,
                    profile_key=f"{best.profile_key}[{section_idx}]",
                    confidence=best.confidence * SECTION_CONFIDENCE_FACTOR,
                    source=MappingSource.HEURISTIC,
                    action=determine_action(form_field),
                    reasoning=f"Repeatable section ({detected.section_type}): {best.reasoning}",
                ))
        return mappings

    def _stats(self, mappings: list[FieldMapping], total_fields: int, processing_time: float) -> dict[str, Any]:
        thresholds = self._config.confidence_thresholds
        confidences = [m.confidence for m in mappings]
        return {
            "total_fields": total_fields,
            "high_confidence_matches": sum(1 for c in confidences if c >= thresholds.high),
            "medium_confidence_matches": sum(
                1 for c in confidences if thresholds.medium <= c < thresholds.high
            ),
            "low_confidence_matches": sum(
                1 for c in confidences if thresholds.low <= c < thresholds.medium
            ),
            "average_confidence": sum(confidences) / len(confidences) if confidences else 0.0,
            "processing_time_ms": processing_time,
        }

    def _log_mapping_result(self, result: MappingResult, total_fields: int) -> None:
        stats = result.metadata["heuristic_stats"]
        mapped = len(result.mappings)
        rate = (mapped / total_fields * 100) if total_fields else 0.0
        logger.info(
            f"Heuristic mapping: {mapped}/{total_fields} fields ({rate:.1f}%) "
            f"in {result.processing_time:.1f}ms"
        )
        logger.debug(
            f"Confidence distribution: high={stats['high_confidence_matches']} "
            f"medium={stats['medium_confidence_matches']} low={stats['low_confidence_matches']} "
            f"average={stats['average_confidence']:.3f}"
        )
        if result.unmapped_fields:
            logger.debug(f"Unmapped fields: {result.unmapped_fields}")

    def update_config(self, **changes: Any) -> None:
        """Replace some config values, validating the result."""
        self._config = HeuristicMapperConfig(**{**self._config.model_dump(), **changes})

    def update_scoring_weights(self, **weights: float) -> None:
        self._matcher.update_scoring_weights(**weights)
