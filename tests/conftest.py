"""
Pytest fixtures for the asset depreciation test suite.

Provides:
- Structured log capture
- In-memory SQLite sessions for the persistence boundary
- Common depreciation inputs and register records
"""

import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from asset_config.schema import DepreciationSettings
from asset_engines.depreciation import DepreciationInput, DepreciationMethod
from asset_kernel.domain.clock import DeterministicClock
from asset_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from asset_modules.assets.models import Asset

# Test actor ID for all persisted records
TEST_ACTOR_ID = uuid4()


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture asset_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            compute_annual_schedule(inp)
            logs = captured_logs()
            assert any(r["message"] == "ASSET_ENGINE_TRACE" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("asset_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def db_session():
    """Session on a fresh in-memory SQLite database with all tables created."""
    from asset_kernel.db.engine import (
        create_tables,
        get_session,
        init_engine_from_url,
        reset_engine,
    )

    init_engine_from_url("sqlite:///:memory:")
    create_tables()
    session = get_session()
    yield session
    session.close()
    reset_engine()


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    return DeterministicClock(datetime(2026, 3, 15, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings():
    return DepreciationSettings()


@pytest.fixture
def straight_line_input():
    """12,000 over 120 months, no salvage, in service January 2024."""
    return DepreciationInput(
        acquisition_cost=Decimal("12000"),
        in_service_date=date(2024, 1, 15),
        useful_life_months=120,
        method=DepreciationMethod.STRAIGHT_LINE,
    )


@pytest.fixture
def make_asset():
    """Factory for register assets with straight-line defaults."""

    def _make(**overrides):
        fields = {
            "id": uuid4(),
            "asset_number": f"AST-{uuid4().hex[:8]}",
            "name": "Forklift",
            "purchase_date": date(2024, 1, 15),
            "acquisition_cost": Decimal("12000.00"),
            "depreciation_method": "STRAIGHT_LINE",
            "useful_life_months": 120,
            "salvage_value": Decimal("0"),
        }
        fields.update(overrides)
        return Asset(**fields)

    return _make
