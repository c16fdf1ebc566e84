"""
Tests for asset register boundary helpers.

Covers:
- Money parsing from form strings
- Useful life normalization
- Salvage resolution
- DepreciationInput construction from stored assets
- Chart series
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from asset_config.schema import DepreciationSettings
from asset_engines.depreciation import DepreciationMethod, compute_annual_schedule
from asset_kernel.exceptions import InvalidInputError, UnsupportedMethodError
from asset_modules.assets.helpers import (
    book_value_series,
    build_depreciation_input,
    normalize_useful_life_months,
    parse_money,
    resolve_salvage_value,
)


class TestParseMoney:
    """Tests for parse_money."""

    @pytest.mark.parametrize("raw,expected", [
        ("$1,234.50", Decimal("1234.50")),
        ("  980 ", Decimal("980.00")),
        (Decimal("10.005"), Decimal("10.01")),
        (42, Decimal("42.00")),
    ])
    def test_accepted(self, raw, expected):
        assert parse_money(raw) == expected

    @pytest.mark.parametrize("raw", ["", "$", "twelve", 12.5, None])
    def test_rejected(self, raw):
        with pytest.raises(InvalidInputError) as exc_info:
            parse_money(raw, "cost")
        assert exc_info.value.field == "cost"


class TestNormalizeUsefulLife:
    """Tests for normalize_useful_life_months."""

    def test_months_win(self):
        assert normalize_useful_life_months(18, 5) == 18

    def test_years_converted(self):
        assert normalize_useful_life_months(None, 5) == 60

    def test_default_years(self):
        assert normalize_useful_life_months(None, None, default_years=7) == 84

    def test_missing_life_rejected(self):
        with pytest.raises(InvalidInputError):
            normalize_useful_life_months(None, None)

    @pytest.mark.parametrize("months,years", [(0, None), (None, -2), ("12", None)])
    def test_bad_life_rejected(self, months, years):
        with pytest.raises(InvalidInputError):
            normalize_useful_life_months(months, years)


class TestResolveSalvage:
    """Tests for resolve_salvage_value."""

    def test_explicit_salvage_wins(self):
        salvage, percent = resolve_salvage_value(
            Decimal("10000"), "$500", Decimal("10"),
        )
        assert salvage == Decimal("500.00")
        assert percent == Decimal("10")

    def test_from_residual_percent(self):
        salvage, percent = resolve_salvage_value(Decimal("25000"), None, Decimal("8"))
        assert salvage == Decimal("2000.00")
        assert percent == Decimal("8")

    def test_default_percent(self):
        salvage, _ = resolve_salvage_value(
            Decimal("999.99"), None, None, default_percent=Decimal("12"),
        )
        assert salvage == Decimal("120.00")

    def test_nothing_recorded(self):
        assert resolve_salvage_value(Decimal("100")) == (Decimal("0"), None)


class TestBuildDepreciationInput:
    """Tests for build_depreciation_input."""

    def test_stored_asset(self, make_asset, settings):
        asset = make_asset(
            in_service_date=date(2024, 3, 1),
            useful_life_months=None,
            useful_life_years=5,
            salvage_value=None,
            residual_percent=Decimal("10"),
            depreciation_method="double declining",
        )
        inp = build_depreciation_input(asset, settings)

        assert inp.in_service_date == date(2024, 3, 1)
        assert inp.useful_life_months == 60
        assert inp.salvage_value == Decimal("1200.00")
        assert inp.residual_percent == Decimal("10")
        assert inp.method is DepreciationMethod.DOUBLE_DECLINING_BALANCE

    def test_purchase_date_is_default_in_service_date(self, make_asset, settings):
        inp = build_depreciation_input(make_asset(), settings)
        assert inp.in_service_date == date(2024, 1, 15)

    def test_settings_defaults_fill_gaps(self, make_asset):
        settings = replace(
            DepreciationSettings(),
            default_residual_percent=Decimal("5"),
            default_useful_life_years=10,
        )
        asset = make_asset(useful_life_months=None, salvage_value=None)
        inp = build_depreciation_input(asset, settings)

        assert inp.useful_life_months == 120
        assert inp.salvage_value == Decimal("600.00")

    def test_missing_method_rejected(self, make_asset, settings):
        with pytest.raises(UnsupportedMethodError):
            build_depreciation_input(make_asset(depreciation_method=None), settings)

    def test_string_cost_accepted(self, make_asset, settings):
        inp = build_depreciation_input(make_asset(acquisition_cost="$12,000.00"), settings)
        assert inp.acquisition_cost == Decimal("12000.00")


class TestBookValueSeries:
    """Tests for chart points."""

    def test_labels_and_values(self, straight_line_input):
        points = book_value_series(compute_annual_schedule(straight_line_input))
        assert points[0] == ("2024", Decimal("10800"))
        assert points[-1] == ("2033", Decimal("0"))
        assert len(points) == 10
