"""Three-tier mapping engine: vendor adapters, heuristics, then an optional late tier."""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any, Optional

from ..ats.base_handler import BaseAdapter
from ..ats.registry import VENDOR_ADAPTERS, select_adapter
from ..core.config import MappingEngineConfig
from ..extractor.models import ExtractedFormSchema
from ..mapping.heuristic import HeuristicMapper
from ..mapping.models import (
    FieldMapping,
    MappingResult,
    MappingSource,
    deduplicate_mappings,
    unmapped_indices,
)
from ..mapping.scorer import HeuristicScorer
from ..profile.manager import UserProfile
from .tiers import MappingTier

logger = logging.getLogger(__name__)


class MappingEngine:
    """Maps an extracted form onto a user profile.

    Never raises: any unexpected failure becomes an all-unmapped result
    with a ``fallback_reason``.
    """

    def __init__(
        self,
        config: Optional[MappingEngineConfig] = None,
        adapters: Optional[list[BaseAdapter]] = None,
        llm_tier: Optional[MappingTier] = None,
    ) -> None:
        self._config = config or MappingEngineConfig()
        self._adapters = list(adapters) if adapters is not None else list(VENDOR_ADAPTERS)
        self._llm_tier = llm_tier
        self._heuristic_mapper = self._build_heuristic_mapper(self._config)

    @staticmethod
    def _build_heuristic_mapper(config: MappingEngineConfig) -> HeuristicMapper:
        return HeuristicMapper(config.heuristic, HeuristicScorer(config.weights))

    @property
    def config(self) -> MappingEngineConfig:
        return self._config.model_copy(deep=True)

    def available_adapters(self) -> list[str]:
        return [adapter.ATS_NAME for adapter in self._adapters]

    def update_config(self, **changes: Any) -> None:
        """Replace top-level config sections, validating the result."""
        self._config = MappingEngineConfig(**{**self._config.model_dump(), **changes})
        self._heuristic_mapper = self._build_heuristic_mapper(self._config)

    def map_form_fields(self, form_schema: ExtractedFormSchema, profile: UserProfile) -> MappingResult:
        start = time.monotonic()
        deadline = start + self._config.performance.max_mapping_time / 1000
        logger.info(f"Starting mapping for {len(form_schema.fields)} fields from {form_schema.url}")

        try:
            return self._run(form_schema, profile, start, deadline)
        except Exception as e:
            logger.error(f"Mapping engine error: {e}", exc_info=True)
            return self._empty_result(form_schema, start, f"Mapping error: {e}")

    def _run(
        self, form_schema: ExtractedFormSchema, profile: UserProfile, start: float, deadline: float
    ) -> MappingResult:
        config = self._config
        thresholds = config.thresholds
        total = len(form_schema.fields)

        vendor_result: Optional[MappingResult] = None
        heuristic_result: Optional[MappingResult] = None
        precomputed_heuristic = False

        if (
            config.performance.enable_parallel_tiers
            and config.enable_vendor_adapters
            and config.enable_heuristic_mapping
        ):
            vendor_result, heuristic_result = self._run_tiers_in_parallel(form_schema, profile)
            precomputed_heuristic = True
        elif config.enable_vendor_adapters:
            vendor_result = self._try_vendor_adapter(form_schema, profile)

        if vendor_result is not None:
            if vendor_result.success_rate(total) >= thresholds.vendor_adapter_min_success:
                logger.info(
                    f"Vendor adapter provided sufficient mapping "
                    f"({len(vendor_result.mappings)}/{total} fields)"
                )
                return self._finalize(vendor_result, form_schema, start)
            # Parallel tiers leave no pending work to skip
            if not precomputed_heuristic and self._past_deadline(deadline):
                return self._finalize(vendor_result, form_schema, start, deadline_exceeded=True)
            if vendor_result.mappings:
                logger.debug("Vendor adapter partially succeeded, continuing with hybrid approach")
                hybrid = self._hybrid_mapping(
                    form_schema, profile, vendor_result,
                    heuristic_result if precomputed_heuristic else None,
                )
                return self._finalize(hybrid, form_schema, start)
        elif (
            config.enable_vendor_adapters
            and not precomputed_heuristic
            and self._past_deadline(deadline)
        ):
            return self._empty_result(
                form_schema, start, "Mapping time budget exhausted", deadline_exceeded=True
            )

        if not config.enable_heuristic_mapping:
            return self._empty_result(form_schema, start, "All mapping tiers failed or disabled")

        if not precomputed_heuristic:
            heuristic_result = self._try_heuristic_mapping(form_schema, profile)
        if heuristic_result is None:
            return self._empty_result(form_schema, start, "All mapping tiers failed or disabled")

        if heuristic_result.success_rate(total) >= thresholds.heuristic_min_success:
            logger.info(
                f"Heuristic mapping provided sufficient results "
                f"({len(heuristic_result.mappings)}/{total} fields)"
            )
            return self._finalize(heuristic_result, form_schema, start)

        if not config.enable_llm_fallback:
            return self._finalize(heuristic_result, form_schema, start)
        if self._past_deadline(deadline):
            return self._finalize(heuristic_result, form_schema, start, deadline_exceeded=True)
        return self._finalize(
            self._try_llm_fallback(form_schema, profile, heuristic_result), form_schema, start
        )

    def _past_deadline(self, deadline: float) -> bool:
        if time.monotonic() >= deadline:
            logger.warning("Mapping time budget exceeded, returning best result so far")
            return True
        return False

    def _run_tiers_in_parallel(
        self, form_schema: ExtractedFormSchema, profile: UserProfile
    ) -> tuple[Optional[MappingResult], Optional[MappingResult]]:
        with ThreadPoolExecutor(max_workers=2) as pool:
            vendor = pool.submit(self._try_vendor_adapter, form_schema, profile)
            heuristic = pool.submit(self._try_heuristic_mapping, form_schema, profile)
            return vendor.result(), heuristic.result()

    def _try_vendor_adapter(
        self, form_schema: ExtractedFormSchema, profile: UserProfile
    ) -> Optional[MappingResult]:
        adapter = select_adapter(form_schema.url, self._adapters)
        if adapter is None:
            logger.debug(f"No vendor adapter found for URL: {form_schema.url}")
            return None

        logger.debug(f"Trying vendor adapter: {adapter.ATS_NAME}")
        try:
            result = adapter.map_fields(form_schema, profile.keys())
        except Exception as e:
            logger.error(f"Vendor adapter {adapter.ATS_NAME} failed: {e}")
            return None
        result.metadata["vendor_adapter"] = adapter.ATS_NAME
        return result

    def _try_heuristic_mapping(
        self, form_schema: ExtractedFormSchema, profile: UserProfile
    ) -> Optional[MappingResult]:
        logger.debug("Starting heuristic mapping")
        try:
            return self._heuristic_mapper.map_fields(form_schema, profile)
        except Exception as e:
            logger.error(f"Heuristic mapping failed: {e}")
            return None

    def _try_llm_fallback(
        self, form_schema: ExtractedFormSchema, profile: UserProfile, previous: MappingResult
    ) -> MappingResult:
        if self._llm_tier is None:
            logger.debug("LLM fallback not configured - returning heuristic result")
            return MappingResult(
                mappings=previous.mappings,
                unmapped_fields=previous.unmapped_fields,
                processing_time=previous.processing_time,
                source=previous.source,
                metadata={**previous.metadata, "fallback_reason": "LLM fallback not configured"},
            )

        try:
            llm_result = self._llm_tier.map_fields(form_schema, profile, previous)
        except Exception as e:
            logger.error(f"LLM fallback failed: {e}")
            return MappingResult(
                mappings=previous.mappings,
                unmapped_fields=previous.unmapped_fields,
                processing_time=previous.processing_time,
                source=previous.source,
                metadata={**previous.metadata, "fallback_reason": f"LLM fallback failed: {e}"},
            )

        merged = deduplicate_mappings([*previous.mappings, *llm_result.mappings])
        return MappingResult(
            mappings=merged,
            unmapped_fields=[],
            processing_time=previous.processing_time + llm_result.processing_time,
            source=MappingSource.LLM,
            metadata={
                **previous.metadata,
                **llm_result.metadata,
                "fallback_reason": "Heuristic mapping insufficient - used LLM tier",
            },
        )

    def _hybrid_mapping(
        self,
        form_schema: ExtractedFormSchema,
        profile: UserProfile,
        vendor_result: MappingResult,
        heuristic_result: Optional[MappingResult] = None,
    ) -> MappingResult:
        """Vendor mappings plus heuristic mappings for the fields the vendor left."""
        combined: list[FieldMapping] = list(vendor_result.mappings)
        vendor_mapped = {m.form_field_idx for m in vendor_result.mappings}
        remaining = [i for i in range(len(form_schema.fields)) if i not in vendor_mapped]

        if self._config.enable_heuristic_mapping and remaining:
            if heuristic_result is not None:
                extra = [
                    replace(m, reasoning=f"Hybrid: {m.reasoning}")
                    for m in heuristic_result.mappings
                    if m.form_field_idx not in vendor_mapped
                ]
            else:
                partial = self._try_heuristic_mapping(form_schema.subset(remaining), profile)
                extra = []
                for m in partial.mappings if partial else []:
                    # Sub-schema indices point into ``remaining``
                    if 0 <= m.form_field_idx < len(remaining):
                        extra.append(FieldMapping(
                            form_field_idx=remaining[m.form_field_idx],
                            profile_key=m.profile_key,
                            confidence=m.confidence,
                            source=m.source,
                            action=m.action,
                            reasoning=f"Hybrid: {m.reasoning}",
                        ))
            combined.extend(extra)

        return MappingResult(
            mappings=combined,
            unmapped_fields=[],
            processing_time=vendor_result.processing_time,
            source=MappingSource.HYBRID,
            metadata={
                "vendor_adapter": vendor_result.metadata.get("vendor_adapter"),
                "fallback_reason": "Hybrid: vendor + heuristic mapping",
            },
        )

    def _finalize(
        self,
        result: MappingResult,
        form_schema: ExtractedFormSchema,
        start: float,
        deadline_exceeded: bool = False,
    ) -> MappingResult:
        """Confidence floor, one mapping per field, index order."""
        total = len(form_schema.fields)
        floor = self._config.thresholds.overall_min_confidence
        kept = [
            m for m in result.mappings
            if 0 <= m.form_field_idx < total and m.confidence >= floor
        ]
        mappings = sorted(deduplicate_mappings(kept), key=lambda m: m.form_field_idx)

        metadata = dict(result.metadata)
        if deadline_exceeded:
            metadata["deadline_exceeded"] = True

        final = MappingResult(
            mappings=mappings,
            unmapped_fields=unmapped_indices(total, mappings),
            processing_time=(time.monotonic() - start) * 1000,
            source=result.source,
            metadata=metadata,
        )
        self._log_final_result(final)
        return final

    def _empty_result(
        self,
        form_schema: ExtractedFormSchema,
        start: float,
        reason: str,
        deadline_exceeded: bool = False,
    ) -> MappingResult:
        metadata: dict[str, Any] = {"fallback_reason": reason}
        if deadline_exceeded:
            metadata["deadline_exceeded"] = True
        logger.warning(f"No mappings produced: {reason}")
        return MappingResult(
            mappings=[],
            unmapped_fields=list(range(len(form_schema.fields))),
            processing_time=(time.monotonic() - start) * 1000,
            source=MappingSource.VENDOR,
            metadata=metadata,
        )

    def _log_final_result(self, result: MappingResult) -> None:
        mapped = len(result.mappings)
        total = mapped + len(result.unmapped_fields)
        rate = (mapped / total * 100) if total else 0.0
        logger.info(
            f"Mapping complete: {mapped}/{total} fields ({rate:.1f}%) "
            f"using {MappingSource(result.source).value} in {result.processing_time:.1f}ms"
        )
        if result.mappings:
            average = sum(m.confidence for m in result.mappings) / mapped
            logger.debug(f"Average confidence: {average:.3f}")
        if "fallback_reason" in result.metadata:
            logger.debug(f"Fallback reason: {result.metadata['fallback_reason']}")
