"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API can start with no configuration at all (a local SQLite file and
demo data).  Override these via environment variables in any real
deployment.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Patient Billing API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path to the SQLite database file.  A relative path is resolved
    # against the package root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "patient_billing.db")

    # Insert the demo patients and transactions on startup when the
    # patients table is empty.
    seed_demo_data: bool = _env_flag("SEED_DEMO_DATA", "true")

    # Windows used by the dashboard endpoint.
    dashboard_months: int = int(os.getenv("DASHBOARD_MONTHS", "12"))
    dashboard_recent_days: int = int(os.getenv("DASHBOARD_RECENT_DAYS", "7"))

    # Bind address for ``run.py``.
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
