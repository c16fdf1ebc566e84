"""
Module: asset_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    depreciation engine.  This is the canonical import surface for
    ``asset_modules``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import asset_kernel (exceptions, logging) and sibling engine
    modules.  MUST NOT import asset_modules or asset_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Dates are passed in; the service layer owns the clock.
    - Decimal-only arithmetic: monetary amounts are ``Decimal``; floats
      are rejected at construction.
    - Determinism: identical inputs always produce identical outputs.

Failure modes:
    - DepreciationError subclasses propagated from the engines on invalid
      input, unknown methods or out-of-range queries.

Audit relevance:
    Every public engine call is traced via ``@traced_engine`` (see
    ``asset_engines.tracer``), emitting ASSET_ENGINE_TRACE records with
    engine name, version, input fingerprint and duration.

Usage:
    from asset_engines import DepreciationInput, compute_annual_schedule
    from asset_engines import apply_improvement, splice_schedules
"""

from asset_kernel.logging_config import get_logger

logger = get_logger("engines")

from asset_engines.depreciation import (
    MAX_SCHEDULE_SPAN_YEARS,
    BatchItemOutcome,
    BatchItemStatus,
    BatchScheduleResult,
    CapitalImprovement,
    DepreciationCurve,
    DepreciationInput,
    DepreciationMethod,
    Granularity,
    RebasedSegment,
    SalvagePolicy,
    ScheduleEntry,
    apply_improvement,
    book_value_at,
    compute_annual_schedule,
    compute_batch,
    compute_improved_monthly_schedule,
    compute_monthly_schedule,
    life_year_amounts,
    rebase_for_improvements,
    remaining_life_months,
    roll_up_annual,
    splice_schedules,
    validate_method,
)
from asset_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    # Depreciation
    "DepreciationMethod",
    "validate_method",
    "life_year_amounts",
    "DepreciationInput",
    "CapitalImprovement",
    "ScheduleEntry",
    "SalvagePolicy",
    "MAX_SCHEDULE_SPAN_YEARS",
    "DepreciationCurve",
    "compute_annual_schedule",
    "roll_up_annual",
    "compute_monthly_schedule",
    "book_value_at",
    "remaining_life_months",
    "apply_improvement",
    "splice_schedules",
    "RebasedSegment",
    "rebase_for_improvements",
    "compute_improved_monthly_schedule",
    # Batch
    "Granularity",
    "BatchItemStatus",
    "BatchItemOutcome",
    "BatchScheduleResult",
    "compute_batch",
    # Tracer
    "traced_engine",
    "compute_input_fingerprint",
]
