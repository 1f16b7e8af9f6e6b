"""Strategy protocol, timed execution boundary and execution engines.

A strategy never sees mutable shared state: it receives a frozen
StrategyContext whose ``claimed`` snapshot lists field indices owned by
earlier stages, and returns its own mappings. The executors merge each
stage's claims into the snapshot handed to the next stage.
"""
import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Literal, Mapping, Protocol, Sequence

from ...extractor.models import ExtractedFormSchema, FormFieldSchema
from ...mapping.models import FieldMapping, MappingSource, determine_action
from ..confidence import clamp_confidence, validate_confidence

logger = logging.getLogger(__name__)

StrategyKind = Literal["attribute", "label", "custom"]
MatchType = Literal["exact", "contains"]

MAX_PARALLEL_WORKERS = 8


@dataclass(frozen=True)
class StrategyContext:
    """Inputs for one strategy run."""
    form_schema: ExtractedFormSchema
    profile_keys: tuple[str, ...]
    claimed: frozenset[int] = frozenset()
    params: Mapping[str, Any] = field(default_factory=dict)

    def with_claims(self, indices: Iterable[int]) -> "StrategyContext":
        """Copy of this context with extra indices claimed."""
        return replace(self, claimed=self.claimed | frozenset(indices))


@dataclass(frozen=True)
class StrategyResult:
    """Mappings from one strategy run plus timing and notes."""
    mappings: list[FieldMapping]
    processing_time: float
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def claimed(self) -> frozenset[int]:
        return frozenset(m.form_field_idx for m in self.mappings)


class MappingStrategy(Protocol):
    """Capability shared by attribute, label and custom strategies."""
    id: str
    name: str
    kind: StrategyKind

    def execute(self, context: StrategyContext) -> StrategyResult: ...

    def validate(self) -> list[str]: ...

    def describe(self) -> dict[str, Any]: ...


@dataclass
class ExecutionOutcome:
    """Merged output of several strategies."""
    mappings: list[FieldMapping]
    results: list[StrategyResult]
    total_time: float
    claimed: frozenset[int]


def normalize_text(text: str) -> str:
    """Lowercase, trim and collapse whitespace."""
    return re.sub(r"\s+", " ", text.lower().strip())


def create_field_mapping(
    field_schema: FormFieldSchema,
    form_field_idx: int,
    profile_key: str,
    confidence: float,
    reasoning: str,
    source: MappingSource = MappingSource.VENDOR,
) -> FieldMapping:
    """Build a mapping with clamped confidence and the field's DOM action."""
    return FieldMapping(
        form_field_idx=form_field_idx,
        profile_key=profile_key,
        confidence=clamp_confidence(confidence),
        source=source,
        action=determine_action(field_schema),
        reasoning=reasoning,
    )


def validate_identity(strategy_id: str, name: str) -> list[str]:
    errors = []
    if not strategy_id or not strategy_id.strip():
        errors.append("Strategy ID is required")
    if not name or not name.strip():
        errors.append("Strategy name is required")
    return errors


def _accepted_mappings(
    mappings: Sequence[FieldMapping], context: StrategyContext
) -> list[FieldMapping]:
    """Drop mappings that are malformed or touch a claimed index."""
    total = len(context.form_schema.fields)
    accepted = []
    for mapping in mappings:
        if not 0 <= mapping.form_field_idx < total:
            continue
        if mapping.form_field_idx in context.claimed:
            continue
        if not mapping.profile_key or not mapping.profile_key.strip():
            continue
        if not validate_confidence(mapping.confidence):
            continue
        accepted.append(mapping)
    return accepted


def run_strategy(
    strategy: MappingStrategy,
    match: Callable[[StrategyContext], list[FieldMapping]],
    context: StrategyContext,
) -> StrategyResult:
    """Time a strategy body and isolate its failures.

    Never raises. A failing body yields no mappings and an ``error`` note.
    """
    start = time.perf_counter()
    try:
        mappings = match(context)
    except Exception as e:
        elapsed = (time.perf_counter() - start) * 1000
        logger.warning(f"Strategy {strategy.id} failed: {e}")
        return StrategyResult(
            mappings=[],
            processing_time=elapsed,
            metadata={
                "strategy_id": strategy.id,
                "strategy_type": strategy.kind,
                "error": str(e) or type(e).__name__,
            },
        )

    accepted = _accepted_mappings(mappings, context)
    elapsed = (time.perf_counter() - start) * 1000
    return StrategyResult(
        mappings=accepted,
        processing_time=elapsed,
        metadata={
            "strategy_id": strategy.id,
            "strategy_type": strategy.kind,
            "fields_processed": len(context.form_schema.fields),
            "mappings_found": len(accepted),
        },
    )


def execute_waterfall(
    strategies: Sequence[MappingStrategy], context: StrategyContext
) -> ExecutionOutcome:
    """Run strategies in order; each may only claim still-unclaimed indices."""
    start = time.perf_counter()
    snapshot = context
    mappings: list[FieldMapping] = []
    results: list[StrategyResult] = []

    for strategy in strategies:
        result = strategy.execute(snapshot)
        results.append(result)

        claimed_now: set[int] = set()
        for mapping in result.mappings:
            idx = mapping.form_field_idx
            if idx in snapshot.claimed or idx in claimed_now:
                continue
            mappings.append(mapping)
            claimed_now.add(idx)
        snapshot = snapshot.with_claims(claimed_now)

    return ExecutionOutcome(
        mappings=mappings,
        results=results,
        total_time=(time.perf_counter() - start) * 1000,
        claimed=snapshot.claimed,
    )


def execute_parallel(
    strategies: Sequence[MappingStrategy], context: StrategyContext
) -> ExecutionOutcome:
    """Run strategies against the same snapshot; best confidence per index wins.

    Ties go to the strategy listed first.
    """
    start = time.perf_counter()
    results: list[StrategyResult] = []
    if strategies:
        workers = min(len(strategies), MAX_PARALLEL_WORKERS)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda s: s.execute(context), strategies))

    best: dict[int, FieldMapping] = {}
    for result in results:
        for mapping in result.mappings:
            existing = best.get(mapping.form_field_idx)
            if existing is None or mapping.confidence > existing.confidence:
                best[mapping.form_field_idx] = mapping

    return ExecutionOutcome(
        mappings=list(best.values()),
        results=results,
        total_time=(time.perf_counter() - start) * 1000,
        claimed=context.claimed | frozenset(best),
    )
