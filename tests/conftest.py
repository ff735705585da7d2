"""Pytest configuration.

Every test gets its own SQLite file under ``tmp_path`` so records never
leak between tests.  Demo seeding is switched off; tests that want the
demo rows call ``seed_demo_data`` themselves.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from patient_billing_api.app.core.config import settings
from patient_billing_api.app.core.db import init_db


@pytest.fixture(autouse=True)
def database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the application at a fresh, migrated database."""
    db_path = tmp_path / "patient_billing.db"
    monkeypatch.setattr(settings, "database_url", os.fspath(db_path))
    monkeypatch.setattr(settings, "seed_demo_data", False)
    init_db()
    return db_path


@pytest.fixture
def client(database: Path):
    from patient_billing_api.app.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
