"""
Asset Register Helpers (``asset_modules.assets.helpers``).

Responsibility
--------------
Convert loosely-typed register values (optional fields, life in months or
years, salvage as amount or percent, currency strings typed into forms)
into a validated ``DepreciationInput``, and shape schedules for charts.

Architecture position
---------------------
**Modules layer** -- pure helper functions.  No I/O, no session, no
clock.  Called by ``AssetDepreciationService`` or from tests.

Invariants enforced
-------------------
* All monetary values become ``Decimal`` -- NEVER ``float``.
* ``build_depreciation_input`` is the single place a stored asset turns
  into engine input; there are no silent defaults beyond the configured
  ones in ``DepreciationSettings``.

Failure modes
-------------
* Missing or malformed values  -> ``InvalidInputError`` naming the field.
* Unknown method  -> ``UnsupportedMethodError``.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from asset_config.schema import DepreciationSettings
from asset_engines.depreciation.methods import HUNDRED, ZERO
from asset_engines.depreciation.types import (
    DepreciationInput,
    ScheduleEntry,
    quantize_money,
    to_decimal,
    to_money,
)
from asset_kernel.exceptions import InvalidInputError
from asset_modules.assets.models import Asset

_CURRENCY_NOISE = re.compile(r"[$,\s]")


def parse_money(value: Any, field: str = "amount") -> Decimal:
    """
    Parse a monetary amount to cents.

    Accepts ``Decimal``, ``int`` and strings such as ``"$1,234.50"``.

    Raises:
        InvalidInputError: for floats, blanks and anything non-numeric.
    """
    if isinstance(value, str):
        cleaned = _CURRENCY_NOISE.sub("", value)
        if not cleaned:
            raise InvalidInputError(field, value, "is blank")
        return to_money(field, cleaned)
    return to_money(field, value)


def normalize_useful_life_months(
    months: int | None,
    years: int | None,
    default_years: int | None = None,
) -> int:
    """
    Useful life in months from whichever of months or years was recorded.

    Months win when both are present.  Falls back to ``default_years``.

    Raises:
        InvalidInputError: if no life is recorded and there is no default,
            or a recorded value is not a positive whole number.
    """
    for field, value, factor in (
        ("useful_life_months", months, 1),
        ("useful_life_years", years, 12),
        ("default_useful_life_years", default_years, 12),
    ):
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInputError(field, value, "must be a whole number")
        if value <= 0:
            raise InvalidInputError(field, value, "must be greater than zero")
        return value * factor
    raise InvalidInputError("useful_life_months", None, "no useful life recorded")


def resolve_salvage_value(
    cost: Decimal,
    salvage: Any = None,
    residual_percent: Any = None,
    default_percent: Decimal | None = None,
) -> tuple[Decimal, Decimal | None]:
    """
    Salvage value and the residual percent it came from, if any.

    An explicit ``salvage`` wins over ``residual_percent``, which wins over
    ``default_percent``.  With none of them recorded, salvage is zero.
    """
    if salvage is not None:
        percent = None
        if residual_percent is not None:
            percent = to_decimal("residual_percent", residual_percent)
        return parse_money(salvage, "salvage_value"), percent
    for value in (residual_percent, default_percent):
        if value is not None:
            percent = to_decimal("residual_percent", value)
            return quantize_money(cost * percent / HUNDRED), percent
    return ZERO, None


def build_depreciation_input(
    asset: Asset,
    settings: DepreciationSettings,
) -> DepreciationInput:
    """
    The single construction point from a stored asset to engine input.

    The in-service date defaults to the purchase date.

    Raises:
        InvalidInputError: on missing or malformed values.
        UnsupportedMethodError: on an unknown or missing method.
    """
    cost = parse_money(asset.acquisition_cost, "acquisition_cost")
    salvage, percent = resolve_salvage_value(
        cost,
        asset.salvage_value,
        asset.residual_percent,
        settings.default_residual_percent,
    )
    return DepreciationInput(
        acquisition_cost=cost,
        in_service_date=asset.in_service_date or asset.purchase_date,
        useful_life_months=normalize_useful_life_months(
            asset.useful_life_months,
            asset.useful_life_years,
            settings.default_useful_life_years,
        ),
        method=asset.depreciation_method,
        salvage_value=salvage,
        declining_rate=asset.declining_rate,
        residual_percent=percent,
    )


def book_value_series(entries: Sequence[ScheduleEntry]) -> list[tuple[str, Decimal]]:
    """``(period label, book value)`` points for a book-value chart."""
    return [(entry.period_label, entry.book_value) for entry in entries]
