"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest
from datetime import date

from tests.factories import ProductionRecordFactory


# ===================
# SINGLETONS
# ===================

@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the singleton services between tests."""
    import services.dekoji_service as dekoji_module
    import services.lot_service as lot_module
    import services.shelf_allocation_service as shelf_module

    lot_module._lot_service = None
    shelf_module._shelf_allocation_service = None
    dekoji_module._dekoji_service = None
    yield
    lot_module._lot_service = None
    shelf_module._shelf_allocation_service = None
    dekoji_module._dekoji_service = None


# ===================
# SAMPLE DATA
# ===================

@pytest.fixture
def dekoji_date() -> date:
    """Out-feed day used across tests."""
    return date(2025, 1, 10)


@pytest.fixture
def day_records(dekoji_date) -> list:
    """
    A typical out-feed day.

    Batch 12 starter koji 42 kg (added next day, no cold storage)
    Batch 12 first-addition koji 25 kg (added 3 days later, refrigerated)
    Batch 13 starter koji 8 kg (no addition record)
    """
    records = []
    records += ProductionRecordFactory.koji_with_addition(
        batch_id="12",
        stage="moto",
        rice_weight_kg=42,
        completion_date=dekoji_date,
        gap_days=1,
    )
    records += ProductionRecordFactory.koji_with_addition(
        batch_id="12",
        stage="soe",
        rice_weight_kg=25,
        completion_date=dekoji_date,
        gap_days=3,
    )
    records.append(ProductionRecordFactory.create(
        batch_id="13",
        stage_code="motoKoji",
        rice_weight_kg=8,
        completion_date=dekoji_date,
    ))
    return records


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client():
    """
    Create FastAPI test client.

    Usage:
        def test_endpoint(test_client):
            response = test_client.post("/api/dekoji/plan", json={...})
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
