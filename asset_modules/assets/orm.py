"""
Asset Register ORM Models (``asset_modules.assets.orm``).

Responsibility
--------------
SQLAlchemy persistence models for registered assets and their capital
improvements.  Maps the frozen DTOs from ``models.py`` to database tables.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``asset_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``asset_kernel`` except
through ``create_tables``.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from asset_kernel.db.base import TrackedBase


# ---------------------------------------------------------------------------
# AssetModel
# ---------------------------------------------------------------------------

class AssetModel(TrackedBase):
    """
    ORM model for ``Asset``.

    Table: ``assets_assets``
    """

    __tablename__ = "assets_assets"

    asset_number: Mapped[str] = mapped_column(String(100))
    name: Mapped[str] = mapped_column(String(500))
    purchase_date: Mapped[date]
    acquisition_cost: Mapped[Decimal]
    depreciation_method: Mapped[str | None] = mapped_column(
        String(50), nullable=True,
    )
    in_service_date: Mapped[date | None]
    useful_life_months: Mapped[int | None]
    useful_life_years: Mapped[int | None]
    salvage_value: Mapped[Decimal | None]
    residual_percent: Mapped[Decimal | None]
    declining_rate: Mapped[Decimal | None]
    status: Mapped[str] = mapped_column(String(50), default="active")
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    serial_number: Mapped[str | None] = mapped_column(
        String(200), nullable=True,
    )

    # Relationships (children)
    improvements: Mapped[list["CapitalImprovementModel"]] = relationship(
        back_populates="asset", cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("asset_number", name="uq_assets_assets_asset_number"),
        Index("idx_assets_assets_status", "status"),
        Index("idx_assets_assets_purchase_date", "purchase_date"),
    )

    def to_dto(self):
        from asset_modules.assets.models import Asset, AssetStatus
        return Asset(
            id=self.id,
            asset_number=self.asset_number,
            name=self.name,
            purchase_date=self.purchase_date,
            acquisition_cost=self.acquisition_cost,
            depreciation_method=self.depreciation_method,
            in_service_date=self.in_service_date,
            useful_life_months=self.useful_life_months,
            useful_life_years=self.useful_life_years,
            salvage_value=self.salvage_value,
            residual_percent=self.residual_percent,
            declining_rate=self.declining_rate,
            status=AssetStatus(self.status),
            location=self.location,
            serial_number=self.serial_number,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "AssetModel":
        return cls(
            id=dto.id,
            asset_number=dto.asset_number,
            name=dto.name,
            purchase_date=dto.purchase_date,
            acquisition_cost=dto.acquisition_cost,
            depreciation_method=dto.depreciation_method,
            in_service_date=dto.in_service_date,
            useful_life_months=dto.useful_life_months,
            useful_life_years=dto.useful_life_years,
            salvage_value=dto.salvage_value,
            residual_percent=dto.residual_percent,
            declining_rate=dto.declining_rate,
            status=dto.status.value,
            location=dto.location,
            serial_number=dto.serial_number,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return (
            f"<AssetModel(id={self.id!r}, asset_number={self.asset_number!r}, "
            f"name={self.name!r})>"
        )


# ---------------------------------------------------------------------------
# CapitalImprovementModel
# ---------------------------------------------------------------------------

class CapitalImprovementModel(TrackedBase):
    """
    ORM model for ``CapitalImprovementRecord``.

    Table: ``assets_capital_improvements``
    """

    __tablename__ = "assets_capital_improvements"

    asset_id: Mapped[UUID] = mapped_column(ForeignKey("assets_assets.id"))
    description: Mapped[str] = mapped_column(String(500))
    improvement_date: Mapped[date]
    cost: Mapped[Decimal]
    remaining_useful_life_months: Mapped[int | None]
    notes: Mapped[str | None] = mapped_column(String(2000), nullable=True)

    # Relationships (parent)
    asset: Mapped["AssetModel"] = relationship(back_populates="improvements")

    __table_args__ = (
        Index(
            "idx_assets_capital_improvements_asset_date",
            "asset_id", "improvement_date",
        ),
    )

    def to_dto(self):
        from asset_modules.assets.models import CapitalImprovementRecord
        return CapitalImprovementRecord(
            id=self.id,
            asset_id=self.asset_id,
            description=self.description,
            improvement_date=self.improvement_date,
            cost=self.cost,
            remaining_useful_life_months=self.remaining_useful_life_months,
            notes=self.notes,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "CapitalImprovementModel":
        return cls(
            id=dto.id,
            asset_id=dto.asset_id,
            description=dto.description,
            improvement_date=dto.improvement_date,
            cost=dto.cost,
            remaining_useful_life_months=dto.remaining_useful_life_months,
            notes=dto.notes,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return (
            f"<CapitalImprovementModel(id={self.id!r}, asset_id={self.asset_id!r}, "
            f"improvement_date={self.improvement_date!r})>"
        )
