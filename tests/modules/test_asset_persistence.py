"""
Tests for asset register persistence.

Covers:
- DTO -> ORM -> DTO round trip for assets and improvements
- Selector ordering and grouping
- Transactional session scope
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from asset_kernel.db.engine import get_session, reset_engine, session_scope
from asset_kernel.selectors.base import BaseSelector
from asset_modules.assets.models import AssetStatus, CapitalImprovementRecord
from asset_modules.assets.orm import AssetModel, CapitalImprovementModel
from asset_modules.assets.selector import AssetSelector

from tests.conftest import TEST_ACTOR_ID


def _improvement(asset_id, improvement_date, cost="1000.00", months=None):
    return CapitalImprovementRecord(
        id=uuid4(),
        asset_id=asset_id,
        description="Engine rebuild",
        improvement_date=improvement_date,
        cost=Decimal(cost),
        remaining_useful_life_months=months,
    )


class TestAssetRoundTrip:
    """ORM models restore the DTOs they were built from."""

    def test_asset_round_trip(self, db_session, make_asset):
        asset = make_asset(
            useful_life_months=None,
            useful_life_years=7,
            salvage_value=None,
            residual_percent=Decimal("10"),
            status=AssetStatus.IN_MAINTENANCE,
            location="Dock 4",
        )
        db_session.add(AssetModel.from_dto(asset, TEST_ACTOR_ID))
        db_session.flush()
        db_session.expire_all()

        loaded = AssetSelector(db_session).get_asset(asset.id)

        assert loaded == asset
        assert loaded.status is AssetStatus.IN_MAINTENANCE

    def test_missing_asset(self, db_session):
        assert AssetSelector(db_session).get_asset(uuid4()) is None

    def test_created_by_recorded(self, db_session, make_asset):
        asset = make_asset()
        db_session.add(AssetModel.from_dto(asset, TEST_ACTOR_ID))
        db_session.flush()

        model = db_session.get(AssetModel, asset.id)
        assert model.created_by_id == TEST_ACTOR_ID

    def test_improvement_round_trip(self, db_session, make_asset):
        asset = make_asset()
        record = _improvement(asset.id, date(2026, 1, 10), "3000.00", 96)
        db_session.add(AssetModel.from_dto(asset, TEST_ACTOR_ID))
        db_session.add(CapitalImprovementModel.from_dto(record, TEST_ACTOR_ID))
        db_session.flush()
        db_session.expire_all()

        assert AssetSelector(db_session).improvements_for(asset.id) == [record]
        model = db_session.get(AssetModel, asset.id)
        assert [i.id for i in model.improvements] == [record.id]


class TestAssetSelector:
    """Tests for AssetSelector queries."""

    def test_is_a_selector(self, db_session):
        assert isinstance(AssetSelector(db_session), BaseSelector)

    def test_list_assets_by_number(self, db_session, make_asset):
        for number in ("AST-003", "AST-001", "AST-002"):
            db_session.add(AssetModel.from_dto(make_asset(asset_number=number), TEST_ACTOR_ID))
        db_session.flush()

        numbers = [a.asset_number for a in AssetSelector(db_session).list_assets()]
        assert numbers == ["AST-001", "AST-002", "AST-003"]

    def test_improvements_oldest_first(self, db_session, make_asset):
        asset = make_asset()
        db_session.add(AssetModel.from_dto(asset, TEST_ACTOR_ID))
        dates = [date(2027, 5, 1), date(2025, 2, 1), date(2026, 8, 1)]
        for d in dates:
            db_session.add(
                CapitalImprovementModel.from_dto(_improvement(asset.id, d), TEST_ACTOR_ID)
            )
        db_session.flush()

        loaded = AssetSelector(db_session).improvements_for(asset.id)
        assert [r.improvement_date for r in loaded] == sorted(dates)

    def test_improvements_by_asset(self, db_session, make_asset):
        first, second, bare = make_asset(), make_asset(), make_asset()
        for asset in (first, second, bare):
            db_session.add(AssetModel.from_dto(asset, TEST_ACTOR_ID))
        records = [
            _improvement(first.id, date(2026, 1, 1)),
            _improvement(second.id, date(2025, 6, 1)),
            _improvement(first.id, date(2025, 3, 1)),
        ]
        for record in records:
            db_session.add(CapitalImprovementModel.from_dto(record, TEST_ACTOR_ID))
        db_session.flush()

        grouped = AssetSelector(db_session).improvements_by_asset(
            [first.id, second.id, bare.id],
        )

        assert [r.improvement_date for r in grouped[first.id]] == [
            date(2025, 3, 1), date(2026, 1, 1),
        ]
        assert [r.id for r in grouped[second.id]] == [records[1].id]
        assert grouped[bare.id] == []

    def test_improvements_by_asset_empty(self, db_session):
        assert AssetSelector(db_session).improvements_by_asset([]) == {}


class TestSessionScope:
    """Transactional scope from asset_kernel.db.engine."""

    def test_commits_on_success(self, db_session, make_asset):
        asset = make_asset()
        with session_scope() as session:
            session.add(AssetModel.from_dto(asset, TEST_ACTOR_ID))

        with session_scope() as session:
            assert AssetSelector(session).get_asset(asset.id) == asset

    def test_rolls_back_on_error(self, db_session, make_asset, captured_logs):
        asset = make_asset()
        with pytest.raises(RuntimeError):
            with session_scope() as session:
                session.add(AssetModel.from_dto(asset, TEST_ACTOR_ID))
                session.flush()
                raise RuntimeError("abort")

        with session_scope() as session:
            assert AssetSelector(session).get_asset(asset.id) is None
        assert any(r["message"] == "transaction_rolled_back" for r in captured_logs())

    def test_session_requires_engine(self):
        reset_engine()
        with pytest.raises(RuntimeError):
            get_session()
