"""
asset_engines.depreciation.methods -- Method guard and per-method recurrences.

Responsibility:
    Name the four supported depreciation methods, reject anything else,
    and compute the exact (unrounded) depreciation amount for each
    life-year of an asset under a given method.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Consumed by
    ``asset_engines.depreciation.curve``; knows nothing about calendars.

Invariants enforced:
    - Unknown methods are rejected with ``UnsupportedMethodError``; no
      method is ever defaulted.
    - Life-year amounts are full-precision ``Decimal`` and sum to exactly
      ``depreciable_cost - salvage_value`` (the final life-year absorbs
      the remainder).
    - Declining-balance book value never drops below salvage value.

Failure modes:
    - UnsupportedMethodError from ``validate_method``.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from enum import Enum

from asset_kernel.exceptions import UnsupportedMethodError
from asset_kernel.logging_config import get_logger

logger = get_logger("engines.depreciation.methods")

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class DepreciationMethod(str, Enum):
    """Supported depreciation methods."""

    STRAIGHT_LINE = "STRAIGHT_LINE"
    DECLINING_BALANCE = "DECLINING_BALANCE"
    DOUBLE_DECLINING_BALANCE = "DOUBLE_DECLINING_BALANCE"
    SUM_OF_YEARS_DIGITS = "SUM_OF_YEARS_DIGITS"


# Spellings persisted by older asset records.
_METHOD_ALIASES: dict[str, DepreciationMethod] = {
    "DOUBLE_DECLINING": DepreciationMethod.DOUBLE_DECLINING_BALANCE,
}


def validate_method(method: str | DepreciationMethod | None) -> DepreciationMethod:
    """
    Resolve a method name to a ``DepreciationMethod``.

    Matching ignores case and treats spaces and hyphens as underscores,
    so ``"double-declining balance"`` resolves.  Missing or unknown
    methods are rejected; there is no fallback method.

    Raises:
        UnsupportedMethodError: if ``method`` is not a supported method.
    """
    if isinstance(method, DepreciationMethod):
        return method
    supported = tuple(m.value for m in DepreciationMethod)
    if not isinstance(method, str) or not method.strip():
        logger.warning("depreciation_method_missing", extra={"method": repr(method)})
        raise UnsupportedMethodError(method, supported)

    key = "_".join(method.strip().upper().replace("-", " ").split())
    if key in _METHOD_ALIASES:
        return _METHOD_ALIASES[key]
    try:
        return DepreciationMethod(key)
    except ValueError:
        logger.warning("depreciation_method_rejected", extra={"method": method})
        raise UnsupportedMethodError(method, supported) from None


def useful_life_years(useful_life_months: int) -> int:
    """Number of (possibly partial) life-years: ceil(months / 12)."""
    return -(-useful_life_months // 12)


# ---------------------------------------------------------------------------
# Recurrences
# ---------------------------------------------------------------------------


def straight_line(
    depreciable_cost: Decimal,
    salvage_value: Decimal,
    useful_life_months: int,
    declining_rate: Decimal | None = None,
) -> tuple[Decimal, ...]:
    """
    Straight-line life-year amounts.

    Each full life-year carries ``D * 12 / N`` (``D / L`` when the life is
    a whole number of years).  The final life-year takes whatever is left
    so the total never exceeds ``D``.
    """
    depreciable_amount = depreciable_cost - salvage_value
    years = useful_life_years(useful_life_months)
    amounts: list[Decimal] = []
    for _ in range(years - 1):
        amounts.append(depreciable_amount * 12 / useful_life_months)
    amounts.append(depreciable_amount - sum(amounts, ZERO))
    return tuple(amounts)


def declining_balance(
    depreciable_cost: Decimal,
    salvage_value: Decimal,
    useful_life_months: int,
    declining_rate: Decimal | None = None,
) -> tuple[Decimal, ...]:
    """
    Single declining-balance life-year amounts.

    Rate is ``1 / L`` unless ``declining_rate`` (a percentage) is given.
    Applied to the prior life-year's book value, floored at salvage; the
    final life-year is trued up to salvage.
    """
    years = useful_life_years(useful_life_months)
    if declining_rate is not None:
        rate = declining_rate / HUNDRED
    else:
        rate = Decimal(1) / Decimal(years)
    return _declining(depreciable_cost, salvage_value, years, rate)


def double_declining_balance(
    depreciable_cost: Decimal,
    salvage_value: Decimal,
    useful_life_months: int,
    declining_rate: Decimal | None = None,
) -> tuple[Decimal, ...]:
    """Double declining-balance life-year amounts (rate ``2 / L``)."""
    years = useful_life_years(useful_life_months)
    rate = Decimal(2) / Decimal(years)
    return _declining(depreciable_cost, salvage_value, years, rate)


def _declining(
    depreciable_cost: Decimal,
    salvage_value: Decimal,
    years: int,
    rate: Decimal,
) -> tuple[Decimal, ...]:
    book_value = depreciable_cost
    amounts: list[Decimal] = []
    for year in range(1, years + 1):
        headroom = book_value - salvage_value
        if year == years:
            expense = headroom
        else:
            expense = min(book_value * rate, headroom)
        amounts.append(expense)
        book_value -= expense
    return tuple(amounts)


def sum_of_years_digits(
    depreciable_cost: Decimal,
    salvage_value: Decimal,
    useful_life_months: int,
    declining_rate: Decimal | None = None,
) -> tuple[Decimal, ...]:
    """
    Sum-of-years'-digits life-year amounts.

    Year ``y`` (1-based) carries ``D * (L - y + 1) / (L * (L + 1) / 2)``.
    """
    depreciable_amount = depreciable_cost - salvage_value
    years = useful_life_years(useful_life_months)
    digits = Decimal(years * (years + 1) // 2)
    amounts = [
        depreciable_amount * (years - year + 1) / digits
        for year in range(1, years)
    ]
    amounts.append(depreciable_amount - sum(amounts, ZERO))
    return tuple(amounts)


_RECURRENCES: dict[DepreciationMethod, Callable[..., tuple[Decimal, ...]]] = {
    DepreciationMethod.STRAIGHT_LINE: straight_line,
    DepreciationMethod.DECLINING_BALANCE: declining_balance,
    DepreciationMethod.DOUBLE_DECLINING_BALANCE: double_declining_balance,
    DepreciationMethod.SUM_OF_YEARS_DIGITS: sum_of_years_digits,
}


def life_year_amounts(
    method: DepreciationMethod,
    depreciable_cost: Decimal,
    salvage_value: Decimal,
    useful_life_months: int,
    declining_rate: Decimal | None = None,
) -> tuple[Decimal, ...]:
    """
    Exact depreciation per life-year for ``method``.

    Postconditions:
        - ``len(result) == ceil(useful_life_months / 12)``.
        - ``sum(result) == depreciable_cost - salvage_value``.
        - Every amount is ``>= 0``.
    """
    return _RECURRENCES[method](
        depreciable_cost, salvage_value, useful_life_months, declining_rate,
    )
