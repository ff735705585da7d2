"""Entry point for the Patient Billing API.

Serves the FastAPI application with Uvicorn.  Intended to be executed
from the project root, for example inside Docker where a single Python
file is specified as the command.

Configuration (DATABASE_URL, LOG_LEVEL, SEED_DEMO_DATA, ...) is read
from environment variables; see ``patient_billing_api/app/core/config.py``.
Host and port come from ``API_HOST`` and ``API_PORT`` (defaults
``0.0.0.0`` and ``8000``).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from patient_billing_api.app.core.config import settings
from patient_billing_api.app.main import app


async def run_api() -> None:
    """Start the API using Uvicorn."""
    config = Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


def main() -> None:
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("API stopped")


if __name__ == "__main__":
    main()
