"""
DepreciationSettings schema.

The typed, frozen form of a depreciation settings file.  YAML is parsed
into this by ``asset_config.loader``; every other layer receives the
dataclass, never the raw mapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from asset_engines.depreciation.types import SalvagePolicy


@dataclass(frozen=True)
class DepreciationSettings:
    """Register-wide depreciation defaults."""

    config_id: str = "default"
    version: int = 1

    # Zero-expense months at salvage shown after the life ends on monthly
    # schedules.
    post_life_tail_months: int = 36

    # How salvage is carried onto a re-based input after an improvement.
    salvage_policy: SalvagePolicy = SalvagePolicy.CARRY_FORWARD

    # Salvage as a percent of cost for assets that record neither a salvage
    # value nor a residual percent.  None means salvage must be recorded.
    default_residual_percent: Decimal | None = None

    # Useful life for assets that record neither months nor years.  None
    # means the life must be recorded.
    default_useful_life_years: int | None = None

    # Thread pool size for multi-asset report batches.
    max_workers: int = 4

    checksum: str = ""
