"""
Application package initializer.

The app is organised into ``core`` (settings, logging, SQLite),
``schemas`` (pydantic payloads), ``services`` (record store and
analytics) and ``api`` (versioned FastAPI routers).
"""

from .main import app  # noqa: F401
