"""
asset_engines.depreciation.types -- Immutable records for the depreciation engine.

Responsibility:
    Define the validated input record (``DepreciationInput``), the capital
    improvement record, and the emitted ``ScheduleEntry``.

Architecture position:
    Engines -- pure domain types, zero I/O.

Invariants enforced:
    - Validation happens once, in ``__post_init__``; every formula
      downstream may assume a well-formed input.
    - Monetary fields are ``Decimal`` at cent precision (ROUND_HALF_UP).
      Floats are rejected rather than converted.
    - ``0 <= salvage_value < depreciable_cost`` and
      ``useful_life_months > 0``.

Failure modes:
    - InvalidInputError for any out-of-range or malformed field.
    - UnsupportedMethodError for an unknown method string.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any

from asset_engines.depreciation.methods import (
    HUNDRED,
    ZERO,
    DepreciationMethod,
    useful_life_years,
    validate_method,
)
from asset_engines.depreciation.periods import add_months, date_ordinal, from_ordinal
from asset_kernel.exceptions import InvalidInputError

MONEY_QUANTUM = Decimal("0.01")

# Schedules and queries may not reach further than this past the
# in-service year.
MAX_SCHEDULE_SPAN_YEARS = 150


class SalvagePolicy(str, Enum):
    """How salvage value is carried onto a re-based input."""

    CARRY_FORWARD = "carry_forward"  # keep the prior salvage value
    RECOMPUTE_FROM_RESIDUAL = "recompute_from_residual"  # residual % of new basis


def quantize_money(amount: Decimal) -> Decimal:
    """Round a monetary amount to cents (ROUND_HALF_UP)."""
    return amount.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def to_decimal(field: str, value: Any) -> Decimal:
    """
    Convert ``value`` to a finite ``Decimal``.

    Accepts ``Decimal``, ``int`` and numeric strings.  Floats and bools
    are rejected so binary rounding never reaches a calculation.

    Raises:
        InvalidInputError: if ``value`` is not an exact finite number.
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidInputError(field, value, "must be Decimal, int or str, not float")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidInputError(field, value, "not a number") from None
    else:
        raise InvalidInputError(field, value, "must be Decimal, int or str")
    if not result.is_finite():
        raise InvalidInputError(field, value, "must be finite")
    return result


def to_money(field: str, value: Any) -> Decimal:
    """Convert ``value`` with ``to_decimal`` and round it to cents."""
    amount = to_decimal(field, value)
    try:
        return quantize_money(amount)
    except InvalidOperation:
        raise InvalidInputError(field, value, "too large to represent in cents") from None


@dataclass(frozen=True)
class CapitalImprovement:
    """A post-acquisition expenditure added to an asset's depreciable cost."""

    improvement_date: date
    cost: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.improvement_date, date):
            raise InvalidInputError(
                "improvement_date", self.improvement_date, "must be a date",
            )
        if isinstance(self.improvement_date, datetime):
            object.__setattr__(self, "improvement_date", self.improvement_date.date())
        cost = to_money("cost", self.cost)
        if cost <= ZERO:
            raise InvalidInputError("cost", self.cost, "must be greater than zero")
        object.__setattr__(self, "cost", cost)


@dataclass(frozen=True)
class DepreciationInput:
    """
    One asset basis to depreciate.

    ``depreciable_cost`` defaults to ``acquisition_cost``.  The constructor
    only requires it to be positive: callers building an original input own
    keeping it at or above ``acquisition_cost``.  A re-based input
    (after a capital improvement) carries ``book value + improvement cost``
    and starts at the improvement date.

    ``declining_rate`` is an annual percentage overriding the ``1 / L``
    rate of DECLINING_BALANCE.  ``residual_percent`` records that the
    salvage value was derived from a percentage of cost.
    """

    acquisition_cost: Decimal
    in_service_date: date
    useful_life_months: int
    method: DepreciationMethod
    salvage_value: Decimal = ZERO
    depreciable_cost: Decimal | None = None
    declining_rate: Decimal | None = None
    residual_percent: Decimal | None = None

    def __post_init__(self) -> None:
        acquisition_cost = to_money("acquisition_cost", self.acquisition_cost)
        if acquisition_cost <= ZERO:
            raise InvalidInputError(
                "acquisition_cost", self.acquisition_cost, "must be greater than zero",
            )
        object.__setattr__(self, "acquisition_cost", acquisition_cost)

        if self.depreciable_cost is None:
            depreciable_cost = acquisition_cost
        else:
            depreciable_cost = to_money("depreciable_cost", self.depreciable_cost)
            if depreciable_cost <= ZERO:
                raise InvalidInputError(
                    "depreciable_cost", self.depreciable_cost,
                    "must be greater than zero",
                )
        object.__setattr__(self, "depreciable_cost", depreciable_cost)

        if not isinstance(self.in_service_date, date):
            raise InvalidInputError(
                "in_service_date", self.in_service_date, "must be a date",
            )
        if isinstance(self.in_service_date, datetime):
            object.__setattr__(self, "in_service_date", self.in_service_date.date())

        months = self.useful_life_months
        if isinstance(months, bool) or not isinstance(months, int):
            raise InvalidInputError(
                "useful_life_months", months, "must be a whole number of months",
            )
        if months <= 0:
            raise InvalidInputError(
                "useful_life_months", months, "must be greater than zero",
            )
        if months > MAX_SCHEDULE_SPAN_YEARS * 12:
            raise InvalidInputError(
                "useful_life_months", months,
                f"exceeds {MAX_SCHEDULE_SPAN_YEARS} years",
            )

        salvage_value = to_money("salvage_value", self.salvage_value)
        if salvage_value < ZERO:
            raise InvalidInputError(
                "salvage_value", self.salvage_value, "must not be negative",
            )
        if salvage_value >= depreciable_cost:
            raise InvalidInputError(
                "salvage_value", self.salvage_value,
                f"must be less than depreciable cost {depreciable_cost}",
            )
        object.__setattr__(self, "salvage_value", salvage_value)

        method = validate_method(self.method)
        object.__setattr__(self, "method", method)

        if self.declining_rate is not None:
            rate = to_decimal("declining_rate", self.declining_rate)
            if method is not DepreciationMethod.DECLINING_BALANCE:
                raise InvalidInputError(
                    "declining_rate", self.declining_rate,
                    "only applies to DECLINING_BALANCE",
                )
            if rate <= ZERO or rate > HUNDRED:
                raise InvalidInputError(
                    "declining_rate", self.declining_rate,
                    "must be a percentage in (0, 100]",
                )
            object.__setattr__(self, "declining_rate", rate)

        if self.residual_percent is not None:
            percent = to_decimal("residual_percent", self.residual_percent)
            if percent < ZERO or percent >= HUNDRED:
                raise InvalidInputError(
                    "residual_percent", self.residual_percent,
                    "must be a percentage in [0, 100)",
                )
            object.__setattr__(self, "residual_percent", percent)

    @classmethod
    def from_residual_percent(
        cls,
        acquisition_cost: Decimal | int | str,
        in_service_date: date,
        useful_life_months: int,
        method: DepreciationMethod | str,
        residual_percent: Decimal | int | str,
        **kwargs: Any,
    ) -> DepreciationInput:
        """Build an input whose salvage is ``acquisition_cost * residual_percent / 100``."""
        cost = to_decimal("acquisition_cost", acquisition_cost)
        percent = to_decimal("residual_percent", residual_percent)
        return cls(
            acquisition_cost=cost,
            in_service_date=in_service_date,
            useful_life_months=useful_life_months,
            method=method,
            salvage_value=quantize_money(cost * percent / HUNDRED),
            residual_percent=percent,
            **kwargs,
        )

    @property
    def depreciable_amount(self) -> Decimal:
        """Total to depreciate over the life: depreciable cost less salvage."""
        return self.depreciable_cost - self.salvage_value

    @property
    def useful_life_years(self) -> int:
        return useful_life_years(self.useful_life_months)

    @property
    def start_ordinal(self) -> int:
        """Month ordinal of the in-service month (the first depreciating month)."""
        return date_ordinal(self.in_service_date)

    @property
    def final_month(self) -> tuple[int, int]:
        """``(year, month)`` of the last depreciating month."""
        return from_ordinal(self.start_ordinal + self.useful_life_months - 1)

    @property
    def end_date(self) -> date:
        """The date the useful life is exhausted (in-service date + life)."""
        return add_months(self.in_service_date, self.useful_life_months)


@dataclass(frozen=True)
class ScheduleEntry:
    """
    One emitted period of a depreciation schedule.

    ``month`` is ``None`` for annual entries.  ``book_value`` equals the
    basis's depreciable cost less ``accumulated_depreciation`` and never
    falls below salvage value.
    """

    period_index: int
    year: int
    month: int | None
    depreciation_expense: Decimal
    accumulated_depreciation: Decimal
    book_value: Decimal

    @property
    def is_monthly(self) -> bool:
        return self.month is not None

    @property
    def period_label(self) -> str:
        if self.month is None:
            return f"{self.year:04d}"
        return f"{self.year:04d}-{self.month:02d}"
