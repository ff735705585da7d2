"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers (patients, transactions)
under a unified prefix.  When new domains are introduced, include
their routers here.
"""

from fastapi import APIRouter

from .endpoints import patients, transactions

router = APIRouter()

router.include_router(patients.router, prefix="/patients", tags=["patients"])
# Analytics views live under /transactions/analytics/... and
# /transactions/patient/{id}/summary.
router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
