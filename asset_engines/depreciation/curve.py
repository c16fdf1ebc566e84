"""
asset_engines.depreciation.curve -- Cumulative depreciation by elapsed month.

Responsibility:
    Turn a ``DepreciationInput`` into a function from "months elapsed since
    the in-service month" to accumulated depreciation.  Annual schedules,
    monthly schedules and point lookups all read from the same curve, which
    is what keeps them reconciled.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Each life-year's amount is spread evenly over the months of that
      life-year (12, or fewer for a short final life-year).
    - Exact (unrounded) values are non-decreasing and reach
      ``depreciable_amount`` exactly at ``useful_life_months``.
    - Rounding to cents is applied to the cumulative value only, so
      emitted period expenses telescope to the rounded total.
"""

from __future__ import annotations

from decimal import Decimal

from asset_engines.depreciation.methods import ZERO, life_year_amounts
from asset_engines.depreciation.types import DepreciationInput, quantize_money


class DepreciationCurve:
    """Accumulated depreciation of one input as a function of elapsed months."""

    def __init__(self, inp: DepreciationInput):
        self._inp = inp
        self._months = inp.useful_life_months
        self._amounts = life_year_amounts(
            inp.method,
            inp.depreciable_cost,
            inp.salvage_value,
            inp.useful_life_months,
            inp.declining_rate,
        )
        cumulative = [ZERO]
        for amount in self._amounts:
            cumulative.append(cumulative[-1] + amount)
        self._cumulative = tuple(cumulative)

    def exact_accumulated(self, months_elapsed: int) -> Decimal:
        """Unrounded accumulated depreciation after ``months_elapsed`` months."""
        if months_elapsed <= 0:
            return ZERO
        if months_elapsed >= self._months:
            return self._inp.depreciable_amount
        life_year, offset = divmod(months_elapsed, 12)
        base = self._cumulative[life_year]
        if offset == 0:
            return base
        months_in_year = min(12, self._months - 12 * life_year)
        return base + self._amounts[life_year] * offset / months_in_year

    def accumulated(self, months_elapsed: int) -> Decimal:
        """Accumulated depreciation rounded to cents."""
        return quantize_money(self.exact_accumulated(months_elapsed))

    def book_value(self, months_elapsed: int) -> Decimal:
        """Depreciable cost less rounded accumulated depreciation."""
        return self._inp.depreciable_cost - self.accumulated(months_elapsed)
