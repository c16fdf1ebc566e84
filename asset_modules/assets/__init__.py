"""
Asset Register Module (``asset_modules.assets``).

Responsibility
--------------
Thin glue for depreciation of registered assets: DTOs, persistence models,
a read selector, boundary conversion helpers and the
``AssetDepreciationService`` facade.

Architecture position
---------------------
**Modules layer** -- converts stored, loosely-typed asset records into
validated engine inputs and delegates every calculation to
``asset_engines``.

Invariants enforced
-------------------
* Money is ``Decimal`` from the first conversion onwards.
* Settings come from ``asset_config``; the clock is injected.

Failure modes
-------------
* ``InvalidInputError`` / ``UnsupportedMethodError`` for records that
  cannot be depreciated as stored.
"""

from asset_modules.assets.helpers import (
    book_value_series,
    build_depreciation_input,
    normalize_useful_life_months,
    parse_money,
    resolve_salvage_value,
)
from asset_modules.assets.models import Asset, AssetStatus, CapitalImprovementRecord
from asset_modules.assets.service import AssetDepreciationService, ImprovementOutcome

__all__ = [
    "Asset",
    "AssetStatus",
    "CapitalImprovementRecord",
    "AssetDepreciationService",
    "ImprovementOutcome",
    "parse_money",
    "normalize_useful_life_months",
    "resolve_salvage_value",
    "build_depreciation_input",
    "book_value_series",
]
