"""
Asset Register Domain Models.

The nouns of the register as callers record them: assets and the capital
improvements made to them.  Values here are as entered (optional fields,
life in months or years, salvage as an amount or a percent); they become
a validated ``DepreciationInput`` only in ``helpers.build_depreciation_input``.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from asset_kernel.logging_config import get_logger

logger = get_logger("modules.assets.models")


class AssetStatus(Enum):
    """Asset lifecycle states."""
    ACTIVE = "active"
    IN_MAINTENANCE = "in_maintenance"
    RETIRED = "retired"
    DISPOSED = "disposed"


@dataclass(frozen=True)
class Asset:
    """A registered asset and the depreciation terms recorded for it."""
    id: UUID
    asset_number: str
    name: str
    purchase_date: date
    acquisition_cost: Decimal
    depreciation_method: str | None = None
    in_service_date: date | None = None  # defaults to purchase_date
    useful_life_months: int | None = None
    useful_life_years: int | None = None
    salvage_value: Decimal | None = None
    residual_percent: Decimal | None = None
    declining_rate: Decimal | None = None  # annual %, DECLINING_BALANCE only
    status: AssetStatus = AssetStatus.ACTIVE
    location: str | None = None
    serial_number: str | None = None


@dataclass(frozen=True)
class CapitalImprovementRecord:
    """A recorded capital improvement.

    ``remaining_useful_life_months`` is the life chosen for the re-based
    asset when the improvement was recorded; ``None`` keeps whatever life
    remained on the asset at that date.
    """
    id: UUID
    asset_id: UUID
    description: str
    improvement_date: date
    cost: Decimal
    remaining_useful_life_months: int | None = None
    notes: str | None = None
