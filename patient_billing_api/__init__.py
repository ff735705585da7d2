"""
Top‑level package for the Patient Billing API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``patient_billing_api.app.main:app``.
"""

__all__ = []
