"""
Tests for AssetDepreciationService.

Covers:
- Schedules for stored assets (post-life tail, roll-up with improvements)
- Book value for a month and current depreciated cost
- Recording capital improvements
- Salvage policy from settings
- Multi-asset schedules with per-asset failure isolation
"""

from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from asset_engines.depreciation import (
    BatchItemStatus,
    Granularity,
    SalvagePolicy,
    compute_annual_schedule,
)
from asset_kernel.exceptions import InvalidInputError, UnsupportedMethodError
from asset_modules.assets import AssetDepreciationService, CapitalImprovementRecord


def _improvement(asset, improvement_date, cost="3000.00", months=None):
    return CapitalImprovementRecord(
        id=uuid4(),
        asset_id=asset.id,
        description="Mast replacement",
        improvement_date=improvement_date,
        cost=cost,
        remaining_useful_life_months=months,
    )


@pytest.fixture
def service(settings, deterministic_clock):
    return AssetDepreciationService(settings, clock=deterministic_clock)


class TestSchedules:
    """Schedules for stored assets."""

    def test_monthly_includes_post_life_tail(self, service, make_asset):
        """The configured 36 months after the life show book value at salvage."""
        schedule = service.monthly_schedule(make_asset())

        assert len(schedule) == 120 + 36
        assert schedule[0].period_label == "2024-01"
        assert schedule[-1].period_label == "2036-12"
        assert all(e.depreciation_expense == Decimal("0") for e in schedule[120:])

    def test_monthly_without_tail(self, settings, make_asset):
        service = AssetDepreciationService(replace(settings, post_life_tail_months=0))
        assert len(service.monthly_schedule(make_asset())) == 120

    def test_monthly_horizon(self, service, make_asset):
        schedule = service.monthly_schedule(make_asset(), horizon=date(2024, 12, 31))
        assert len(schedule) == 12

    def test_annual_matches_engine(self, service, make_asset):
        asset = make_asset()
        assert service.annual_schedule(asset) == compute_annual_schedule(
            service.build_input(asset),
        )

    def test_annual_with_improvement(self, service, make_asset):
        asset = make_asset()
        annual = service.annual_schedule(asset, [_improvement(asset, date(2026, 1, 10))])

        assert [e.depreciation_expense for e in annual[:3]] == [
            Decimal("1200"), Decimal("1200"), Decimal("1575"),
        ]
        assert annual[-1].year == 2033
        assert annual[-1].book_value == Decimal("0")

    def test_recorded_life_is_used(self, service, make_asset):
        asset = make_asset()
        improvement = _improvement(asset, date(2026, 1, 10), months=60)
        schedule = service.monthly_schedule(asset, [improvement])

        assert len(schedule) == 24 + 60 + 36
        assert service.effective_input(asset, [improvement]).useful_life_months == 60

    def test_unknown_method_logged_and_raised(self, service, make_asset, captured_logs):
        asset = make_asset(depreciation_method="MACRS")
        with pytest.raises(UnsupportedMethodError):
            service.monthly_schedule(asset)

        failures = [
            r for r in captured_logs() if r["message"] == "asset_depreciation_failed"
        ]
        assert failures[0]["asset_id"] == str(asset.id)
        assert failures[0]["operation"] == "build_input"
        assert failures[0]["error_code"] == "UNSUPPORTED_METHOD"


class TestPointLookups:
    """Book value for a month and current depreciated cost."""

    def test_book_value_for_month(self, service, make_asset):
        """December 2025 closes the 24th month: 12,000 - 2,400."""
        assert service.book_value_for_month(make_asset(), (), 2025, 12) == Decimal("9600")

    def test_book_value_for_month_after_improvement(self, service, make_asset):
        asset = make_asset()
        improvements = [_improvement(asset, date(2026, 1, 10))]

        assert service.book_value_for_month(asset, improvements, 2025, 12) == Decimal("9600")
        assert service.book_value_for_month(asset, improvements, 2026, 1) == (
            Decimal("12468.75")
        )

    @pytest.mark.parametrize("month", [0, 13])
    def test_month_out_of_range(self, service, make_asset, month):
        with pytest.raises(InvalidInputError) as exc_info:
            service.book_value_for_month(make_asset(), (), 2025, month)
        assert exc_info.value.field == "month"

    def test_current_depreciated_cost_uses_clock(self, service, make_asset):
        """On 2026-03-15, 26 months have closed."""
        assert service.current_depreciated_cost(make_asset()) == Decimal("9400")

    def test_current_depreciated_cost_as_of(self, service, make_asset):
        assert service.current_depreciated_cost(
            make_asset(), as_of=date(2024, 1, 31),
        ) == Decimal("12000")

    def test_current_depreciated_cost_after_improvement(self, service, make_asset):
        """12,600 over 96 months with two months closed."""
        asset = make_asset()
        improvements = [_improvement(asset, date(2026, 1, 10))]
        assert service.current_depreciated_cost(asset, improvements) == Decimal("12337.50")

    def test_current_depreciated_cost_before_same_month_improvement(
        self, service, make_asset,
    ):
        """An improvement later in the month is not yet in the value."""
        asset = make_asset()
        improvements = [_improvement(asset, date(2026, 1, 20))]
        as_of = date(2026, 1, 5)

        assert service.current_depreciated_cost(asset, improvements, as_of) == (
            service.current_depreciated_cost(asset, (), as_of)
        )
        assert service.current_depreciated_cost(asset, improvements, as_of) == (
            Decimal("9600")
        )

    def test_current_depreciated_cost_on_improvement_date(self, service, make_asset):
        """On its own date the improvement is in effect, with no months closed."""
        asset = make_asset()
        improvements = [_improvement(asset, date(2026, 1, 20))]
        assert service.current_depreciated_cost(
            asset, improvements, date(2026, 1, 20),
        ) == Decimal("12600")


class TestRecordImprovement:
    """Tests for record_improvement."""

    def test_rebases_on_book_value(self, service, make_asset):
        asset = make_asset()
        outcome = service.record_improvement(
            asset, [], _improvement(asset, date(2026, 1, 10), cost="$3,000.00"),
        )

        assert outcome.book_value_at_improvement == Decimal("9600")
        assert outcome.new_depreciable_cost == Decimal("12600")
        assert outcome.record.cost == Decimal("3000.00")
        assert outcome.record.remaining_useful_life_months == 96
        assert outcome.rebased_input.in_service_date == date(2026, 1, 10)

    def test_explicit_life_wins(self, service, make_asset):
        asset = make_asset()
        outcome = service.record_improvement(
            asset, [], _improvement(asset, date(2026, 1, 10), months=72), 48,
        )
        assert outcome.record.remaining_useful_life_months == 48
        assert outcome.rebased_input.useful_life_months == 48

    def test_later_improvements_ignored(self, service, make_asset):
        """Only improvements on or before the new date shape its basis."""
        asset = make_asset()
        existing = [_improvement(asset, date(2027, 1, 1), cost="1000")]
        outcome = service.record_improvement(
            asset, existing, _improvement(asset, date(2026, 1, 10)),
        )
        assert outcome.book_value_at_improvement == Decimal("9600")

    def test_earlier_improvement_forms_basis(self, service, make_asset):
        asset = make_asset()
        existing = [_improvement(asset, date(2026, 1, 10))]
        outcome = service.record_improvement(
            asset, existing, _improvement(asset, date(2027, 1, 1), cost="1000"),
        )
        assert outcome.book_value_at_improvement == Decimal("11025")
        assert outcome.new_depreciable_cost == Decimal("12025")
        assert outcome.record.remaining_useful_life_months == 84

    def test_after_life_requires_new_life(self, service, make_asset, captured_logs):
        asset = make_asset()
        late = _improvement(asset, date(2035, 6, 1), cost="500")
        with pytest.raises(InvalidInputError):
            service.record_improvement(asset, [], late)

        logs = captured_logs()
        assert any(
            r["message"] == "asset_depreciation_failed"
            and r["operation"] == "record_improvement"
            for r in logs
        )
        outcome = service.record_improvement(asset, [], late, 24)
        assert outcome.new_depreciable_cost == Decimal("500")

    def test_logs_carry_asset_id(self, service, make_asset, captured_logs):
        asset = make_asset()
        service.record_improvement(asset, [], _improvement(asset, date(2026, 1, 10)))

        started = [
            r for r in captured_logs() if r["message"] == "capital_improvement_started"
        ]
        assert started[0]["asset_id"] == str(asset.id)
        assert started[0]["improvement_date"] == "2026-01-10"


class TestSalvagePolicy:
    """Settings choose how salvage follows a re-basing."""

    def _asset(self, make_asset):
        return make_asset(salvage_value=None, residual_percent=Decimal("10"))

    def test_carry_forward(self, service, make_asset):
        """10% of 12,000 stays 1,200 after the improvement."""
        asset = self._asset(make_asset)
        outcome = service.record_improvement(asset, [], _improvement(asset, date(2026, 1, 10)))

        assert outcome.book_value_at_improvement == Decimal("9840")
        assert outcome.rebased_input.salvage_value == Decimal("1200")

    def test_recompute_from_residual(self, settings, make_asset):
        service = AssetDepreciationService(
            replace(settings, salvage_policy=SalvagePolicy.RECOMPUTE_FROM_RESIDUAL),
        )
        asset = self._asset(make_asset)
        outcome = service.record_improvement(asset, [], _improvement(asset, date(2026, 1, 10)))

        assert outcome.new_depreciable_cost == Decimal("12840")
        assert outcome.rebased_input.salvage_value == Decimal("1284.00")


class TestSchedulesForAssets:
    """Tests for schedules_for_assets."""

    def test_mixed_register(self, service, make_asset, captured_logs):
        plain = make_asset()
        broken = make_asset(depreciation_method="MACRS")
        improved = make_asset()
        improvements = {improved.id: [_improvement(improved, date(2026, 1, 10))]}

        result = service.schedules_for_assets(
            [plain, broken, improved], improvements,
        )

        assert [o.key for o in result.outcomes] == [plain.id, broken.id, improved.id]
        assert result.succeeded == 2
        assert result.failures[broken.id].status is BatchItemStatus.FAILED
        assert result.failures[broken.id].error_code == "UNSUPPORTED_METHOD"
        assert result.schedules[plain.id] == service.annual_schedule(plain)
        assert result.schedules[improved.id][2].depreciation_expense == Decimal("1575")
        summary = [
            r for r in captured_logs() if r["message"] == "asset_schedules_computed"
        ]
        assert summary[0]["failed"] == 1

    def test_monthly_granularity_applies_tail(self, service, make_asset):
        plain = make_asset()
        improved = make_asset()
        improvements = {improved.id: [_improvement(improved, date(2026, 1, 10))]}

        result = service.schedules_for_assets(
            [plain, improved], improvements, granularity="monthly",
        )

        assert result.granularity is Granularity.MONTHLY
        assert len(result.schedules[plain.id]) == 156
        assert result.schedules[improved.id] == service.monthly_schedule(
            improved, improvements[improved.id],
        )

    def test_improved_asset_failure_recorded(self, service, make_asset):
        improved = make_asset()
        bad = _improvement(improved, date(2023, 1, 1))
        result = service.schedules_for_assets([improved], {improved.id: [bad]})

        assert result.failed == 1
        assert result.failures[improved.id].error_code == "INVALID_INPUT"

    def test_empty_register(self, service):
        result = service.schedules_for_assets([])
        assert result.outcomes == ()


class TestClock:
    """The service reads today's date only from its clock."""

    def test_moving_clock_moves_current_cost(self, service, make_asset, deterministic_clock):
        asset = make_asset()
        before = service.current_depreciated_cost(asset)

        deterministic_clock.set_time(datetime(2027, 3, 15, tzinfo=timezone.utc))
        after = service.current_depreciated_cost(asset)

        assert before - after == Decimal("1200")

    def test_advance_within_day_changes_nothing(self, service, make_asset, deterministic_clock):
        asset = make_asset()
        before = service.current_depreciated_cost(asset)
        deterministic_clock.advance(3600)
        assert service.current_depreciated_cost(asset) == before
