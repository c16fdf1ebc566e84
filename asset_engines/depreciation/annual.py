"""
asset_engines.depreciation.annual -- Annual depreciation schedules.

Responsibility:
    Produce one ``ScheduleEntry`` per calendar year from the in-service
    year through the year the useful life ends, and roll monthly
    schedules (including spliced, multi-basis schedules) up to years.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Idempotence: identical inputs produce identical schedules.
    - A calendar year's annual expense equals the sum of that year's
      monthly expenses from ``compute_monthly_schedule``; partial first
      and last years carry exactly the months they contain.
    - Total expense over the life equals ``depreciable_cost - salvage``.
    - ``book_value`` never drops below salvage value.

Failure modes:
    - OutOfRangeQueryError if ``through_year`` is further than
      ``MAX_SCHEDULE_SPAN_YEARS`` past the in-service year.
    - InvalidInputError from ``roll_up_annual`` for non-monthly entries.
"""

from __future__ import annotations

from collections.abc import Sequence
from itertools import groupby

from asset_engines.depreciation.curve import DepreciationCurve
from asset_engines.depreciation.methods import ZERO
from asset_engines.depreciation.periods import month_ordinal
from asset_engines.depreciation.types import (
    MAX_SCHEDULE_SPAN_YEARS,
    DepreciationInput,
    ScheduleEntry,
)
from asset_engines.tracer import traced_engine
from asset_kernel.exceptions import InvalidInputError, OutOfRangeQueryError
from asset_kernel.logging_config import get_logger

logger = get_logger("engines.depreciation.annual")


@traced_engine("depreciation.annual", "1.0", fingerprint_fields=("inp", "through_year"))
def compute_annual_schedule(
    inp: DepreciationInput,
    *,
    through_year: int | None = None,
) -> tuple[ScheduleEntry, ...]:
    """
    Annual depreciation schedule for one input.

    Preconditions:
        ``inp`` is a validated ``DepreciationInput``.

    Postconditions:
        - One entry per calendar year from ``inp.in_service_date.year``
          through the year of the last depreciating month, inclusive.
        - If ``through_year`` is later, zero-expense entries at salvage
          value continue through it; if earlier, the schedule stops there.

    Raises:
        OutOfRangeQueryError: if ``through_year`` is beyond the supported span.
    """
    first_year = inp.in_service_date.year
    final_year = inp.final_month[0]
    last_year = final_year if through_year is None else through_year
    if last_year - first_year > MAX_SCHEDULE_SPAN_YEARS:
        raise OutOfRangeQueryError(
            requested=f"year {last_year}",
            limit=f"year {first_year + MAX_SCHEDULE_SPAN_YEARS}",
        )

    curve = DepreciationCurve(inp)
    start = inp.start_ordinal
    entries: list[ScheduleEntry] = []
    previous = ZERO
    for index, year in enumerate(range(first_year, last_year + 1), start=1):
        months_elapsed = month_ordinal(year, 12) - start + 1
        accumulated = curve.accumulated(months_elapsed)
        entries.append(
            ScheduleEntry(
                period_index=index,
                year=year,
                month=None,
                depreciation_expense=accumulated - previous,
                accumulated_depreciation=accumulated,
                book_value=inp.depreciable_cost - accumulated,
            )
        )
        previous = accumulated

    logger.debug(
        "annual_schedule_computed",
        extra={
            "method": inp.method.value,
            "first_year": first_year,
            "last_year": last_year,
            "entries": len(entries),
        },
    )
    return tuple(entries)


def roll_up_annual(entries: Sequence[ScheduleEntry]) -> tuple[ScheduleEntry, ...]:
    """
    Group monthly entries into calendar-year entries.

    Each annual entry sums its months' expenses and takes accumulated
    depreciation and book value from the year's last month.  Works on
    spliced schedules, where later months may belong to a re-based input.

    Raises:
        InvalidInputError: if any entry is not monthly or months are out of order.
    """
    ordinals = []
    for entry in entries:
        if not entry.is_monthly:
            raise InvalidInputError(
                "entries", entry.period_label, "roll-up needs monthly entries",
            )
        ordinals.append(month_ordinal(entry.year, entry.month))
    if any(later <= earlier for earlier, later in zip(ordinals, ordinals[1:])):
        raise InvalidInputError("entries", len(entries), "months must be strictly ascending")

    annual: list[ScheduleEntry] = []
    for index, (year, months) in enumerate(
        groupby(entries, key=lambda e: e.year), start=1
    ):
        months = list(months)
        annual.append(
            ScheduleEntry(
                period_index=index,
                year=year,
                month=None,
                depreciation_expense=sum(
                    (m.depreciation_expense for m in months), ZERO
                ),
                accumulated_depreciation=months[-1].accumulated_depreciation,
                book_value=months[-1].book_value,
            )
        )
    return tuple(annual)
