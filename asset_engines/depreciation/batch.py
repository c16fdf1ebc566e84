"""
asset_engines.depreciation.batch -- Independent schedules for many assets.

Responsibility:
    Fan a set of keyed inputs out to the single-asset engines and collect
    one outcome per key.

Architecture position:
    Engines -- pure calculation layer.  Concurrency is the caller's choice:
    pass any executor with a ``map(fn, iterable)`` method (for example a
    ``concurrent.futures.ThreadPoolExecutor``); the default runs serially.

Invariants enforced:
    - Item isolation: a ``DepreciationError`` for one key is recorded on
      that key's outcome and does not stop the others.
    - Outcomes come back in the iteration order of ``inputs``.
    - Anything that is not a ``DepreciationError`` propagates.
"""

from __future__ import annotations

import time
from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from asset_engines.depreciation.annual import compute_annual_schedule
from asset_engines.depreciation.monthly import compute_monthly_schedule
from asset_engines.depreciation.types import DepreciationInput, ScheduleEntry
from asset_kernel.exceptions import DepreciationError
from asset_kernel.logging_config import get_logger

logger = get_logger("engines.depreciation.batch")


class Granularity(str, Enum):
    """Schedule period size."""

    ANNUAL = "annual"
    MONTHLY = "monthly"


class BatchItemStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class BatchItemOutcome:
    """Result of computing one key's schedule."""

    key: Hashable
    status: BatchItemStatus
    schedule: tuple[ScheduleEntry, ...] = ()
    error_code: str | None = None
    error_message: str | None = None
    duration_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.status is BatchItemStatus.SUCCEEDED


@dataclass(frozen=True)
class BatchScheduleResult:
    """All outcomes of one ``compute_batch`` call, in input order."""

    granularity: Granularity
    outcomes: tuple[BatchItemOutcome, ...] = ()

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.succeeded

    @property
    def schedules(self) -> dict[Hashable, tuple[ScheduleEntry, ...]]:
        """Schedules of the keys that succeeded."""
        return {o.key: o.schedule for o in self.outcomes if o.succeeded}

    @property
    def failures(self) -> dict[Hashable, BatchItemOutcome]:
        return {o.key: o for o in self.outcomes if not o.succeeded}


def compute_batch(
    inputs: Mapping[Hashable, DepreciationInput],
    *,
    granularity: Granularity | str = Granularity.ANNUAL,
    executor: Any = None,
    horizon: date | None = None,
    tail_months: int = 0,
    through_year: int | None = None,
) -> BatchScheduleResult:
    """
    Compute one schedule per key.

    ``horizon`` and ``tail_months`` apply to monthly schedules,
    ``through_year`` to annual ones.

    Postconditions:
        ``len(result.outcomes) == len(inputs)``.
    """
    granularity = Granularity(granularity)

    def run(item: tuple[Hashable, DepreciationInput]) -> BatchItemOutcome:
        key, inp = item
        t0 = time.monotonic()
        try:
            if granularity is Granularity.MONTHLY:
                schedule = compute_monthly_schedule(
                    inp, horizon=horizon, tail_months=tail_months,
                )
            else:
                schedule = compute_annual_schedule(inp, through_year=through_year)
        except DepreciationError as exc:
            logger.warning(
                "batch_item_failed",
                extra={"item_key": str(key), "error_code": exc.code, "error": str(exc)},
            )
            return BatchItemOutcome(
                key=key,
                status=BatchItemStatus.FAILED,
                error_code=exc.code,
                error_message=str(exc),
                duration_ms=round((time.monotonic() - t0) * 1000, 2),
            )
        return BatchItemOutcome(
            key=key,
            status=BatchItemStatus.SUCCEEDED,
            schedule=schedule,
            duration_ms=round((time.monotonic() - t0) * 1000, 2),
        )

    mapper = executor.map if executor is not None else map
    outcomes = tuple(mapper(run, list(inputs.items())))
    result = BatchScheduleResult(granularity=granularity, outcomes=outcomes)

    logger.info(
        "batch_schedules_computed",
        extra={
            "granularity": granularity.value,
            "total_items": len(outcomes),
            "succeeded": result.succeeded,
            "failed": result.failed,
        },
    )
    return result
