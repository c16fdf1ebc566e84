"""
Asset register query selector.

Read-only access to assets and their capital improvements, returned as
frozen DTOs.  Uses the caller's session; never commits.
"""

from uuid import UUID

from sqlalchemy import select

from asset_kernel.selectors.base import BaseSelector
from asset_modules.assets.models import Asset, CapitalImprovementRecord
from asset_modules.assets.orm import AssetModel, CapitalImprovementModel


class AssetSelector(BaseSelector[AssetModel]):
    """Queries over ``assets_assets`` and ``assets_capital_improvements``."""

    def get_asset(self, asset_id: UUID) -> Asset | None:
        model = self.session.get(AssetModel, asset_id)
        return model.to_dto() if model is not None else None

    def list_assets(self) -> list[Asset]:
        stmt = select(AssetModel).order_by(AssetModel.asset_number)
        return [m.to_dto() for m in self.session.scalars(stmt)]

    def improvements_for(self, asset_id: UUID) -> list[CapitalImprovementRecord]:
        """Capital improvements of one asset, oldest first."""
        stmt = (
            select(CapitalImprovementModel)
            .where(CapitalImprovementModel.asset_id == asset_id)
            .order_by(
                CapitalImprovementModel.improvement_date,
                CapitalImprovementModel.created_at,
            )
        )
        return [m.to_dto() for m in self.session.scalars(stmt)]

    def improvements_by_asset(
        self, asset_ids: list[UUID],
    ) -> dict[UUID, list[CapitalImprovementRecord]]:
        """Improvements for several assets, oldest first per asset."""
        result: dict[UUID, list[CapitalImprovementRecord]] = {
            asset_id: [] for asset_id in asset_ids
        }
        if not asset_ids:
            return result
        stmt = (
            select(CapitalImprovementModel)
            .where(CapitalImprovementModel.asset_id.in_(asset_ids))
            .order_by(
                CapitalImprovementModel.improvement_date,
                CapitalImprovementModel.created_at,
            )
        )
        for model in self.session.scalars(stmt):
            result[model.asset_id].append(model.to_dto())
        return result
