"""
Depreciation - Schedules, book values and capital-improvement re-basing.

Pure functions over immutable inputs. Annual schedules, monthly schedules
and point lookups all read from one cumulative curve per input, so they
reconcile to the cent.
"""

from asset_kernel.logging_config import get_logger

logger = get_logger("engines.depreciation")

from asset_engines.depreciation.annual import (
    compute_annual_schedule,
    roll_up_annual,
)
from asset_engines.depreciation.batch import (
    BatchItemOutcome,
    BatchItemStatus,
    BatchScheduleResult,
    Granularity,
    compute_batch,
)
from asset_engines.depreciation.curve import DepreciationCurve
from asset_engines.depreciation.improvements import (
    RebasedSegment,
    apply_improvement,
    compute_improved_monthly_schedule,
    rebase_for_improvements,
    splice_schedules,
)
from asset_engines.depreciation.methods import (
    DepreciationMethod,
    life_year_amounts,
    validate_method,
)
from asset_engines.depreciation.monthly import (
    book_value_at,
    compute_monthly_schedule,
    remaining_life_months,
)
from asset_engines.depreciation.types import (
    MAX_SCHEDULE_SPAN_YEARS,
    CapitalImprovement,
    DepreciationInput,
    SalvagePolicy,
    ScheduleEntry,
)

__all__ = [
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
    "Granularity",
    "BatchItemStatus",
    "BatchItemOutcome",
    "BatchScheduleResult",
    "compute_batch",
]
