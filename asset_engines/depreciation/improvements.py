"""
asset_engines.depreciation.improvements -- Capital improvement re-basing.

Responsibility:
    Re-base a depreciation input when a capital improvement adds cost,
    and splice the original and re-based schedules without touching the
    history before the improvement.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Never mutates an input;
    every improvement produces a new immutable ``DepreciationInput``.

Invariants enforced:
    - New depreciable cost is exactly ``book value at improvement date +
      improvement cost``.
    - Spliced schedules reuse the original entry objects for every month
      before the improvement month.
    - Salvage handling is explicit (``SalvagePolicy``), never implied.

Failure modes:
    - InvalidInputError if the remaining life is not positive, the
      improvement predates the in-service date, a residual percent is
      required but missing, or a supplied prior schedule does not belong
      to the input.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal

from asset_engines.depreciation.methods import HUNDRED
from asset_engines.depreciation.monthly import (
    book_value_at,
    compute_monthly_schedule,
    remaining_life_months,
)
from asset_engines.depreciation.periods import date_ordinal, month_ordinal
from asset_engines.depreciation.types import (
    CapitalImprovement,
    DepreciationInput,
    SalvagePolicy,
    ScheduleEntry,
    quantize_money,
)
from asset_engines.tracer import traced_engine
from asset_kernel.exceptions import InvalidInputError
from asset_kernel.logging_config import get_logger

logger = get_logger("engines.depreciation.improvements")

RemainingLife = Callable[[DepreciationInput, CapitalImprovement], int]


@dataclass(frozen=True)
class RebasedSegment:
    """One basis in an asset's history and the date it took effect."""

    input: DepreciationInput
    effective_from: date


@traced_engine(
    "depreciation.rebase", "1.0",
    fingerprint_fields=("inp", "improvement", "new_remaining_useful_life_months"),
)
def apply_improvement(
    inp: DepreciationInput,
    prior_schedule: Sequence[ScheduleEntry] | None,
    improvement: CapitalImprovement,
    new_remaining_useful_life_months: int,
    *,
    salvage_policy: SalvagePolicy = SalvagePolicy.CARRY_FORWARD,
) -> DepreciationInput:
    """
    Re-base ``inp`` for a capital improvement.

    Preconditions:
        - ``improvement.improvement_date >= inp.in_service_date``.
        - ``new_remaining_useful_life_months > 0``.
        - ``prior_schedule``, when given, is the monthly schedule currently
          shown for ``inp``; it is checked against the computed basis.

    Postconditions:
        Returns a new input with ``depreciable_cost = book_value_at(inp,
        improvement_date) + improvement.cost``, ``in_service_date =
        improvement_date`` and the new remaining life.  Acquisition cost,
        method and rates carry over; salvage follows ``salvage_policy``.

    Raises:
        InvalidInputError: on any precondition failure.
    """
    months = new_remaining_useful_life_months
    if isinstance(months, bool) or not isinstance(months, int) or months <= 0:
        raise InvalidInputError(
            "new_remaining_useful_life_months", months, "must be greater than zero",
        )
    if improvement.improvement_date < inp.in_service_date:
        raise InvalidInputError(
            "improvement_date", improvement.improvement_date,
            f"precedes in-service date {inp.in_service_date}",
        )

    basis = book_value_at(inp, improvement.improvement_date)
    if prior_schedule is not None:
        _check_prior_schedule(prior_schedule, improvement.improvement_date, basis)

    depreciable_cost = basis + improvement.cost
    salvage_value = _rebased_salvage(inp, depreciable_cost, salvage_policy)

    logger.info(
        "capital_improvement_applied",
        extra={
            "improvement_date": improvement.improvement_date,
            "book_value_at_improvement": basis,
            "improvement_cost": improvement.cost,
            "new_depreciable_cost": depreciable_cost,
            "new_useful_life_months": months,
            "salvage_policy": salvage_policy.value,
        },
    )
    return DepreciationInput(
        acquisition_cost=inp.acquisition_cost,
        in_service_date=improvement.improvement_date,
        useful_life_months=months,
        method=inp.method,
        salvage_value=salvage_value,
        depreciable_cost=depreciable_cost,
        declining_rate=inp.declining_rate,
        residual_percent=inp.residual_percent,
    )


def _rebased_salvage(
    inp: DepreciationInput,
    depreciable_cost: Decimal,
    salvage_policy: SalvagePolicy,
) -> Decimal:
    if salvage_policy is SalvagePolicy.CARRY_FORWARD:
        return inp.salvage_value
    if inp.residual_percent is None:
        raise InvalidInputError(
            "residual_percent", None,
            "required to recompute salvage from the new basis",
        )
    return quantize_money(depreciable_cost * inp.residual_percent / HUNDRED)


def _check_prior_schedule(
    prior_schedule: Sequence[ScheduleEntry],
    improvement_date: date,
    basis: Decimal,
) -> None:
    preceding = date_ordinal(improvement_date) - 1
    for entry in prior_schedule:
        if not entry.is_monthly:
            raise InvalidInputError(
                "prior_schedule", entry.period_label, "must be a monthly schedule",
            )
        if month_ordinal(entry.year, entry.month) == preceding:
            if entry.book_value != basis:
                raise InvalidInputError(
                    "prior_schedule", entry.period_label,
                    f"book value {entry.book_value} does not match basis {basis}",
                )
            return


def splice_schedules(
    original: Sequence[ScheduleEntry],
    rebased: Sequence[ScheduleEntry],
    improvement_date: date,
) -> tuple[ScheduleEntry, ...]:
    """
    Join an original and a re-based monthly schedule at the improvement month.

    Months before the improvement month come from ``original`` as-is.
    Months from the improvement month on come from ``rebased``, with
    ``period_index`` renumbered to continue the sequence.

    Raises:
        InvalidInputError: if either schedule contains annual entries.
    """
    cut = date_ordinal(improvement_date)
    for entry in (*original, *rebased):
        if not entry.is_monthly:
            raise InvalidInputError(
                "schedule", entry.period_label, "splicing needs monthly entries",
            )
    head = tuple(e for e in original if month_ordinal(e.year, e.month) < cut)
    tail = [e for e in rebased if month_ordinal(e.year, e.month) >= cut]
    return head + tuple(
        replace(entry, period_index=len(head) + i)
        for i, entry in enumerate(tail, start=1)
    )


def rebase_for_improvements(
    inp: DepreciationInput,
    improvements: Sequence[CapitalImprovement],
    *,
    remaining_life: RemainingLife | None = None,
    salvage_policy: SalvagePolicy = SalvagePolicy.CARRY_FORWARD,
) -> tuple[RebasedSegment, ...]:
    """
    Apply improvements in date order and return every basis in the chain.

    ``remaining_life`` picks the new life for each improvement; by default
    the improvement keeps whatever life is left on the current basis.

    Postconditions:
        The first segment is ``inp`` effective from its in-service date;
        each later segment is effective from its improvement date.
    """
    choose_life = remaining_life or _life_left_on_basis
    segments = [RebasedSegment(inp, inp.in_service_date)]
    current = inp
    for improvement in sorted(improvements, key=lambda i: i.improvement_date):
        current = apply_improvement(
            current,
            None,
            improvement,
            choose_life(current, improvement),
            salvage_policy=salvage_policy,
        )
        segments.append(RebasedSegment(current, improvement.improvement_date))
    return tuple(segments)


def _life_left_on_basis(inp: DepreciationInput, improvement: CapitalImprovement) -> int:
    return remaining_life_months(inp, improvement.improvement_date)


def compute_improved_monthly_schedule(
    segments: Sequence[RebasedSegment],
    *,
    horizon: date | None = None,
    tail_months: int = 0,
) -> tuple[ScheduleEntry, ...]:
    """
    Monthly schedule across a chain of bases from ``rebase_for_improvements``.

    Every segment but the last is extended at salvage value until the next
    improvement month when the next improvement lands after its life ends,
    so the spliced schedule has no gaps.  ``horizon`` and ``tail_months``
    apply to the final segment.
    """
    if not segments:
        return ()
    schedule: tuple[ScheduleEntry, ...] = ()
    for position, segment in enumerate(segments):
        inp = segment.input
        if position + 1 < len(segments):
            next_cut = date_ordinal(segments[position + 1].effective_from)
            gap = next_cut - (inp.start_ordinal + inp.useful_life_months)
            entries = compute_monthly_schedule(inp, tail_months=max(0, gap))
        else:
            entries = compute_monthly_schedule(
                inp, horizon=horizon, tail_months=tail_months,
            )
        if position == 0:
            schedule = entries
        else:
            schedule = splice_schedules(schedule, entries, segment.effective_from)

    if horizon is not None:
        last = date_ordinal(horizon)
        schedule = tuple(
            e for e in schedule if month_ordinal(e.year, e.month) <= last
        )
    return schedule
