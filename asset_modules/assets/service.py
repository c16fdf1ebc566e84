"""
Asset Depreciation Service (``asset_modules.assets.service``).

Responsibility
--------------
Answers the register's depreciation questions -- schedules for reports,
book value for a month, the depreciated cost shown when recording a
capital improvement -- by turning stored assets into engine inputs and
delegating every calculation to ``asset_engines``.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``AssetDepreciationService`` is the sole
public entry point for depreciation questions about stored assets.  It
holds settings and a clock; it owns no session (callers read DTOs through
``AssetSelector``).

Invariants enforced
-------------------
* The clock is only read here, never in the engines.
* Improvements are applied oldest first; each one re-bases the input in
  effect on its date.
* Every re-basing uses the configured ``SalvagePolicy``.

Failure modes
-------------
* ``DepreciationError`` subclasses from the helpers or engines are logged
  with the asset id and re-raised.
* ``schedules_for_assets`` records failures per asset instead of raising.

Usage::

    service = AssetDepreciationService(get_depreciation_settings())
    schedule = service.monthly_schedule(asset, improvements)
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from uuid import UUID

from asset_config.schema import DepreciationSettings
from asset_engines.depreciation import (
    BatchItemOutcome,
    BatchItemStatus,
    BatchScheduleResult,
    CapitalImprovement,
    DepreciationInput,
    Granularity,
    RebasedSegment,
    ScheduleEntry,
    apply_improvement,
    book_value_at,
    compute_annual_schedule,
    compute_batch,
    compute_improved_monthly_schedule,
    rebase_for_improvements,
    remaining_life_months,
    roll_up_annual,
)
from asset_engines.depreciation.periods import add_months, date_ordinal, month_ordinal
from asset_kernel.domain.clock import Clock, SystemClock
from asset_kernel.exceptions import DepreciationError, InvalidInputError
from asset_kernel.logging_config import LogContext, get_logger
from asset_modules.assets.helpers import build_depreciation_input, parse_money
from asset_modules.assets.models import Asset, CapitalImprovementRecord

logger = get_logger("modules.assets.service")


@dataclass(frozen=True)
class ImprovementOutcome:
    """What recording one capital improvement does to an asset."""

    record: CapitalImprovementRecord  # remaining life resolved
    book_value_at_improvement: Decimal
    rebased_input: DepreciationInput

    @property
    def new_depreciable_cost(self) -> Decimal:
        return self.rebased_input.depreciable_cost


class AssetDepreciationService:
    """
    Depreciation questions about stored assets.

    Contract
    --------
    * Inputs are DTOs (``Asset``, ``CapitalImprovementRecord``); outputs are
      engine ``ScheduleEntry`` tuples, ``Decimal`` values or frozen outcomes.
    * No method mutates its arguments or persists anything.

    Non-goals
    ---------
    * Does NOT write accounting entries or store schedules.
    """

    def __init__(
        self,
        settings: DepreciationSettings,
        clock: Clock | None = None,
    ):
        self._settings = settings
        self._clock = clock or SystemClock()

    @property
    def settings(self) -> DepreciationSettings:
        return self._settings

    # =========================================================================
    # Inputs
    # =========================================================================

    def build_input(self, asset: Asset) -> DepreciationInput:
        """Validated engine input for the asset as originally recorded."""
        with _logged_failure(asset, "build_input"):
            return build_depreciation_input(asset, self._settings)

    def segments(
        self,
        asset: Asset,
        improvements: Sequence[CapitalImprovementRecord] = (),
    ) -> tuple[RebasedSegment, ...]:
        """Every basis of the asset, from in-service through the latest improvement."""
        inp = self.build_input(asset)
        ordered = sorted(improvements, key=lambda r: r.improvement_date)
        with _logged_failure(asset, "rebase"):
            engine_improvements = [_to_engine(r) for r in ordered]
            # rebase_for_improvements applies them in this (date) order,
            # so recorded lives can be consumed in sequence.
            lives = iter([r.remaining_useful_life_months for r in ordered])

            def choose_life(current: DepreciationInput, imp: CapitalImprovement) -> int:
                months = next(lives)
                if months is None:
                    return remaining_life_months(current, imp.improvement_date)
                return months

            return rebase_for_improvements(
                inp,
                engine_improvements,
                remaining_life=choose_life,
                salvage_policy=self._settings.salvage_policy,
            )

    def effective_input(
        self,
        asset: Asset,
        improvements: Sequence[CapitalImprovementRecord] = (),
    ) -> DepreciationInput:
        """The input currently in effect: the last basis in the chain."""
        return self.segments(asset, improvements)[-1].input

    # =========================================================================
    # Schedules
    # =========================================================================

    def monthly_schedule(
        self,
        asset: Asset,
        improvements: Sequence[CapitalImprovementRecord] = (),
        horizon: date | None = None,
    ) -> tuple[ScheduleEntry, ...]:
        """Monthly schedule across all bases, with the configured post-life tail."""
        segments = self.segments(asset, improvements)
        with _logged_failure(asset, "monthly_schedule"):
            return compute_improved_monthly_schedule(
                segments,
                horizon=horizon,
                tail_months=self._settings.post_life_tail_months,
            )

    def annual_schedule(
        self,
        asset: Asset,
        improvements: Sequence[CapitalImprovementRecord] = (),
    ) -> tuple[ScheduleEntry, ...]:
        """
        Annual schedule through the year the last basis is exhausted.

        Without improvements this is ``compute_annual_schedule``; with them
        the spliced monthly schedule is rolled up by calendar year.
        """
        segments = self.segments(asset, improvements)
        with _logged_failure(asset, "annual_schedule"):
            if len(segments) == 1:
                return compute_annual_schedule(segments[0].input)
            return roll_up_annual(compute_improved_monthly_schedule(segments))

    # =========================================================================
    # Point lookups
    # =========================================================================

    def book_value_for_month(
        self,
        asset: Asset,
        improvements: Sequence[CapitalImprovementRecord],
        year: int,
        month: int,
    ) -> Decimal:
        """Book value at the close of ``year``-``month``."""
        if not 1 <= month <= 12:
            raise InvalidInputError("month", month, "must be between 1 and 12")
        segment = _segment_for(self.segments(asset, improvements), month_ordinal(year, month))
        with _logged_failure(asset, "book_value_for_month"):
            return book_value_at(segment.input, add_months(date(year, month, 1), 1))

    def current_depreciated_cost(
        self,
        asset: Asset,
        improvements: Sequence[CapitalImprovementRecord] = (),
        as_of: date | None = None,
    ) -> Decimal:
        """
        Book value as of the start of ``as_of`` (default: today per the clock).

        This is the figure offered as the current value when a capital
        improvement is being recorded.
        """
        as_of = as_of or self._clock.today()
        segment = _segment_on(self.segments(asset, improvements), as_of)
        with _logged_failure(asset, "current_depreciated_cost"):
            return book_value_at(segment.input, as_of)

    # =========================================================================
    # Capital improvements
    # =========================================================================

    def record_improvement(
        self,
        asset: Asset,
        improvements: Sequence[CapitalImprovementRecord],
        improvement: CapitalImprovementRecord,
        remaining_useful_life_months: int | None = None,
    ) -> ImprovementOutcome:
        """
        Re-base the asset for a new capital improvement.

        The basis is the input in effect on the improvement date.  When no
        remaining life is given (here or on the record) the improvement
        keeps the life left on that basis.

        Raises:
            InvalidInputError: if the asset's life has already run out and
                no new remaining life is given, or the improvement predates
                the in-service date.
        """
        with LogContext.bind(asset_id=str(asset.id)):
            logger.info("capital_improvement_started", extra={
                "improvement_id": str(improvement.id),
                "improvement_date": improvement.improvement_date,
                "cost": str(improvement.cost),
            })
            prior = [
                r for r in improvements
                if r.improvement_date <= improvement.improvement_date
                and r.id != improvement.id
            ]
            current = self.effective_input(asset, prior)
            with _logged_failure(asset, "record_improvement"):
                engine_improvement = _to_engine(improvement)
                months = remaining_useful_life_months
                if months is None:
                    months = improvement.remaining_useful_life_months
                if months is None:
                    months = remaining_life_months(current, improvement.improvement_date)
                basis = book_value_at(current, improvement.improvement_date)
                rebased = apply_improvement(
                    current,
                    None,
                    engine_improvement,
                    months,
                    salvage_policy=self._settings.salvage_policy,
                )
            return ImprovementOutcome(
                record=replace(
                    improvement,
                    cost=engine_improvement.cost,
                    remaining_useful_life_months=months,
                ),
                book_value_at_improvement=basis,
                rebased_input=rebased,
            )

    # =========================================================================
    # Reports
    # =========================================================================

    def schedules_for_assets(
        self,
        assets: Sequence[Asset],
        improvements_by_asset: Mapping[UUID, Sequence[CapitalImprovementRecord]] | None = None,
        granularity: Granularity | str = Granularity.ANNUAL,
    ) -> BatchScheduleResult:
        """
        Schedules for many assets, keyed by asset id.

        Assets without improvements go through ``compute_batch``; improved
        assets are spliced individually.  Both run on a thread pool of
        ``settings.max_workers``.  A failing asset is recorded, not raised.
        """
        granularity = Granularity(granularity)
        improvements_by_asset = improvements_by_asset or {}
        outcomes: dict[UUID, BatchItemOutcome] = {}
        plain_inputs: dict[UUID, DepreciationInput] = {}
        improved: list[Asset] = []

        for asset in assets:
            if improvements_by_asset.get(asset.id):
                improved.append(asset)
                continue
            try:
                plain_inputs[asset.id] = self.build_input(asset)
            except DepreciationError as exc:
                outcomes[asset.id] = _failed(asset.id, exc)

        def spliced(asset: Asset) -> BatchItemOutcome:
            records = improvements_by_asset[asset.id]
            try:
                if granularity is Granularity.MONTHLY:
                    schedule = self.monthly_schedule(asset, records)
                else:
                    schedule = self.annual_schedule(asset, records)
            except DepreciationError as exc:
                return _failed(asset.id, exc)
            return BatchItemOutcome(
                key=asset.id, status=BatchItemStatus.SUCCEEDED, schedule=schedule,
            )

        with ThreadPoolExecutor(max_workers=self._settings.max_workers) as pool:
            batch = compute_batch(
                plain_inputs,
                granularity=granularity,
                executor=pool,
                tail_months=self._settings.post_life_tail_months,
            )
            for outcome in batch.outcomes:
                outcomes[outcome.key] = outcome
            for outcome in pool.map(spliced, improved):
                outcomes[outcome.key] = outcome

        result = BatchScheduleResult(
            granularity=granularity,
            outcomes=tuple(outcomes[a.id] for a in assets if a.id in outcomes),
        )
        logger.info("asset_schedules_computed", extra={
            "granularity": granularity.value,
            "asset_count": len(assets),
            "succeeded": result.succeeded,
            "failed": result.failed,
        })
        return result


@contextmanager
def _logged_failure(asset: Asset, operation: str) -> Iterator[None]:
    """Log a ``DepreciationError`` with the asset id, then let it propagate."""
    try:
        yield
    except DepreciationError as exc:
        logger.warning("asset_depreciation_failed", extra={
            "asset_id": str(asset.id),
            "asset_number": asset.asset_number,
            "operation": operation,
            "error_code": exc.code,
            "error": str(exc),
        })
        raise


def _to_engine(record: CapitalImprovementRecord) -> CapitalImprovement:
    return CapitalImprovement(
        improvement_date=record.improvement_date,
        cost=parse_money(record.cost, "cost"),
    )


def _segment_for(segments: Sequence[RebasedSegment], ordinal: int) -> RebasedSegment:
    """The latest segment in effect for the month ``ordinal``."""
    chosen = segments[0]
    for segment in segments[1:]:
        if date_ordinal(segment.effective_from) <= ordinal:
            chosen = segment
    return chosen


def _segment_on(segments: Sequence[RebasedSegment], as_of: date) -> RebasedSegment:
    """The latest segment in effect on ``as_of``; later same-month ones excluded."""
    chosen = segments[0]
    for segment in segments[1:]:
        if segment.effective_from <= as_of:
            chosen = segment
    return chosen


def _failed(key: UUID, exc: DepreciationError) -> BatchItemOutcome:
    return BatchItemOutcome(
        key=key,
        status=BatchItemStatus.FAILED,
        error_code=exc.code,
        error_message=str(exc),
    )
