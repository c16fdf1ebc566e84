"""
asset_config -- single public entrypoint for depreciation settings.

Responsibility:
    Provides the ONLY way to obtain depreciation settings at runtime
    through ``get_depreciation_settings()``.  No other component reads
    settings files directly.

Architecture position:
    Configuration -- sits above ``asset_kernel`` and ``asset_engines`` and
    below ``asset_modules``.  Engines never import from ``asset_config``;
    settings reach them as explicit arguments.

Invariants enforced:
    - Single entrypoint: all runtime settings flow through
      ``get_depreciation_settings()``.
    - Deterministic identity: the same YAML always yields the same checksum.

Failure modes:
    - ``ConfigurationError`` -- missing file, malformed YAML, unknown keys
      or out-of-range values.

Audit relevance:
    Every successful call emits an ``ASSET_CONFIG_TRACE`` log entry with
    config_id, version and checksum, tying every schedule back to the
    settings that shaped it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from asset_config.loader import compute_checksum, load_settings, parse_settings
from asset_config.schema import DepreciationSettings

_logger = logging.getLogger("asset_kernel.config")

# Default settings file
DEFAULT_SETTINGS_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_depreciation_settings(config_path: Path | None = None) -> DepreciationSettings:
    """The ONLY public settings entrypoint.

    Args:
        config_path: Override path to a settings YAML file.
            Defaults to asset_config/sets/default.yaml.

    Returns:
        Frozen ``DepreciationSettings``.

    Raises:
        ConfigurationError: if the file cannot be loaded or validated.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_SETTINGS_PATH
    settings = load_settings(path)

    _logger.info(
        "ASSET_CONFIG_TRACE",
        extra={
            "trace_type": "ASSET_CONFIG_TRACE",
            "config_id": settings.config_id,
            "config_version": settings.version,
            "checksum": settings.checksum,
            "post_life_tail_months": settings.post_life_tail_months,
            "salvage_policy": settings.salvage_policy.value,
        },
    )
    return settings


__all__ = [
    "DepreciationSettings",
    "get_depreciation_settings",
    "load_settings",
    "parse_settings",
    "compute_checksum",
    "DEFAULT_SETTINGS_PATH",
]
