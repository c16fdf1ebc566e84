"""
Settings Loader (``asset_config.loader``).

Responsibility
--------------
Loads a depreciation settings YAML file and parses it into a frozen
``asset_config.schema.DepreciationSettings``.  Runtime callers go through
``asset_config.get_depreciation_settings()``, not this module.

Invariants enforced
-------------------
* Unknown keys and malformed values raise ``ConfigurationError`` naming
  the file; there are no silent defaults for values that are present but
  wrong.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing file  -> ``ConfigurationError``.
* Malformed YAML  -> ``ConfigurationError`` chained from ``yaml.YAMLError``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import fields
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from asset_config.schema import DepreciationSettings
from asset_engines.depreciation.types import SalvagePolicy
from asset_kernel.exceptions import ConfigurationError

_KNOWN_KEYS = frozenset(f.name for f in fields(DepreciationSettings)) - {"checksum"}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        ConfigurationError: if the file is missing, unreadable, not valid
            YAML, or does not hold a mapping.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(str(path), "file not found") from None
    except yaml.YAMLError as exc:
        raise ConfigurationError(str(path), f"malformed YAML: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    return data


def _int(path: str, data: dict[str, Any], key: str, minimum: int) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ConfigurationError(path, f"{key} must be an integer >= {minimum}, got {value!r}")
    return value


def _percent(path: str, value: Any) -> Decimal | None:
    if value is None:
        return None
    # YAML reads 12.5 as a float; str() keeps its shortest decimal form.
    try:
        percent = Decimal(str(value))
    except InvalidOperation:
        raise ConfigurationError(path, f"default_residual_percent is not a number: {value!r}") from None
    if not percent.is_finite() or percent < 0 or percent >= 100:
        raise ConfigurationError(path, f"default_residual_percent must be in [0, 100), got {value!r}")
    return percent


def parse_settings(data: dict[str, Any], source: str = "<dict>") -> DepreciationSettings:
    """
    Parse a ``DepreciationSettings`` from a dict.

    Postconditions:
        - Keys absent from ``data`` take the dataclass defaults.
        - ``checksum`` is ``compute_checksum(data)``.

    Raises:
        ConfigurationError: on unknown keys or out-of-range values.
    """
    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(source, f"unknown keys: {', '.join(unknown)}")

    kwargs: dict[str, Any] = {}
    if "config_id" in data:
        kwargs["config_id"] = str(data["config_id"])
    for key, minimum in (("version", 1), ("post_life_tail_months", 0), ("max_workers", 1)):
        value = _int(source, data, key, minimum)
        if value is not None:
            kwargs[key] = value
    if data.get("salvage_policy") is not None:
        try:
            kwargs["salvage_policy"] = SalvagePolicy(str(data["salvage_policy"]).lower())
        except ValueError:
            raise ConfigurationError(
                source, f"unknown salvage_policy {data['salvage_policy']!r}",
            ) from None
    kwargs["default_residual_percent"] = _percent(
        source, data.get("default_residual_percent"),
    )
    kwargs["default_useful_life_years"] = _int(
        source, data, "default_useful_life_years", 1,
    )
    return DepreciationSettings(checksum=compute_checksum(data), **kwargs)


def load_settings(path: Path) -> DepreciationSettings:
    """Load and parse one settings file."""
    return parse_settings(load_yaml_file(path), source=str(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Postconditions:
        - Returns a hex-encoded SHA-256 hash string.
        - Identical ``data`` always produces identical checksums
          (deterministic).
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
