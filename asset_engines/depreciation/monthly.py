"""
asset_engines.depreciation.monthly -- Monthly schedules and point-in-time book value.

Responsibility:
    Spread each life-year's depreciation evenly across its months and
    answer "what is this asset worth on date X" without materializing a
    schedule.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Consumed by reporting
    and the capital-improvement workflow through ``asset_modules``.

Invariants enforced:
    - Full-month convention: the in-service month accrues a full month.
    - Reconciliation: the monthly expenses of a calendar year sum to that
      year's entry from ``compute_annual_schedule``; all months of the life
      sum to ``depreciable_cost - salvage_value``.
    - ``book_value_at`` agrees exactly with the monthly schedule: it
      returns the book value at the close of the last month that closed
      before ``as_of``.

Failure modes:
    - InvalidInputError for a negative ``tail_months``.
    - OutOfRangeQueryError for schedules or dates further than
      ``MAX_SCHEDULE_SPAN_YEARS`` past the in-service year.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from asset_engines.depreciation.curve import DepreciationCurve
from asset_engines.depreciation.methods import ZERO
from asset_engines.depreciation.periods import date_ordinal, from_ordinal
from asset_engines.depreciation.types import (
    MAX_SCHEDULE_SPAN_YEARS,
    DepreciationInput,
    ScheduleEntry,
)
from asset_engines.tracer import traced_engine
from asset_kernel.exceptions import InvalidInputError, OutOfRangeQueryError
from asset_kernel.logging_config import get_logger

logger = get_logger("engines.depreciation.monthly")


def _check_span(inp: DepreciationInput, last_ordinal: int, requested: str) -> None:
    limit_year = inp.in_service_date.year + MAX_SCHEDULE_SPAN_YEARS
    if from_ordinal(last_ordinal)[0] > limit_year:
        raise OutOfRangeQueryError(requested=requested, limit=f"year {limit_year}")


@traced_engine(
    "depreciation.monthly", "1.0",
    fingerprint_fields=("inp", "horizon", "tail_months"),
)
def compute_monthly_schedule(
    inp: DepreciationInput,
    *,
    horizon: date | None = None,
    tail_months: int = 0,
) -> tuple[ScheduleEntry, ...]:
    """
    Monthly depreciation schedule for one input.

    Preconditions:
        ``inp`` is a validated ``DepreciationInput``; ``tail_months >= 0``.

    Postconditions:
        - One entry per calendar month from the in-service month through
          the last depreciating month, followed by ``tail_months``
          zero-expense months at salvage value.
        - When ``horizon`` is given, entries stop at the month containing
          it (whichever comes first); a horizon before the in-service
          month yields an empty schedule.

    Raises:
        InvalidInputError: if ``tail_months`` is negative.
        OutOfRangeQueryError: if the schedule would run past the supported span.
    """
    if isinstance(tail_months, bool) or not isinstance(tail_months, int) or tail_months < 0:
        raise InvalidInputError("tail_months", tail_months, "must be a non-negative integer")

    start = inp.start_ordinal
    count = inp.useful_life_months + tail_months
    if horizon is not None:
        count = min(count, date_ordinal(horizon) - start + 1)
    if count <= 0:
        return ()
    _check_span(inp, start + count - 1, f"{count} months from {inp.in_service_date}")

    curve = DepreciationCurve(inp)
    entries: list[ScheduleEntry] = []
    previous = ZERO
    for offset in range(count):
        year, month = from_ordinal(start + offset)
        accumulated = curve.accumulated(offset + 1)
        entries.append(
            ScheduleEntry(
                period_index=offset + 1,
                year=year,
                month=month,
                depreciation_expense=accumulated - previous,
                accumulated_depreciation=accumulated,
                book_value=inp.depreciable_cost - accumulated,
            )
        )
        previous = accumulated

    logger.debug(
        "monthly_schedule_computed",
        extra={
            "method": inp.method.value,
            "in_service_date": inp.in_service_date,
            "entries": len(entries),
        },
    )
    return tuple(entries)


@traced_engine("depreciation.book_value_at", "1.0", fingerprint_fields=("inp", "as_of"))
def book_value_at(inp: DepreciationInput, as_of: date) -> Decimal:
    """
    Book value of ``inp`` as of the start of ``as_of``.

    Postconditions:
        - Depreciable cost until the in-service month has closed (any
          ``as_of`` in or before the in-service month).
        - Otherwise the book value at the close of the month preceding
          ``as_of``'s month, identical to that month's monthly entry.
        - Salvage value on or after ``inp.end_date``.

    Raises:
        OutOfRangeQueryError: if ``as_of`` is beyond the supported span.
    """
    limit_year = inp.in_service_date.year + MAX_SCHEDULE_SPAN_YEARS
    if as_of.year > limit_year:
        raise OutOfRangeQueryError(requested=as_of.isoformat(), limit=f"year {limit_year}")

    months_closed = date_ordinal(as_of) - inp.start_ordinal
    if months_closed <= 0:
        return inp.depreciable_cost
    if months_closed >= inp.useful_life_months:
        return inp.salvage_value
    return DepreciationCurve(inp).book_value(months_closed)


def remaining_life_months(inp: DepreciationInput, as_of: date) -> int:
    """Months of useful life not yet closed as of the start of ``as_of``."""
    months_closed = max(0, date_ordinal(as_of) - inp.start_ordinal)
    return max(0, inp.useful_life_months - months_closed)
