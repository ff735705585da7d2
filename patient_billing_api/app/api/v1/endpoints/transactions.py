"""
Transaction endpoints for API v1.

CRUD routes for transactions, lookups by patient and by status, and
the analytics views consumed by the dashboard (``/analytics/...`` and
``/patient/{patient_id}/summary``).  Monetary values are serialised
as decimal strings with two fractional digits.
"""

from decimal import Decimal
from typing import Dict, List

from fastapi import APIRouter, HTTPException, Query, status

from patient_billing_api.app.schemas.analytics import DashboardAnalytics, PatientFinancialSummary
from patient_billing_api.app.schemas.transaction import (
    TransactionCreate,
    TransactionRead,
    TransactionStatus,
    TransactionUpdate,
)
from patient_billing_api.app.services.aggregation import DEFAULT_MONTHS, MAX_MONTHS
from patient_billing_api.app.services.patient_service import PatientService
from patient_billing_api.app.services.statistics_service import StatisticsService
from patient_billing_api.app.services.transaction_service import (
    PatientReferenceError,
    TransactionService,
)


router = APIRouter()


@router.get("/", response_model=List[TransactionRead])
async def list_transactions() -> List[TransactionRead]:
    """Return all transactions, newest first."""
    return await TransactionService.list_transactions()


@router.post("/", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
async def create_transaction(transaction: TransactionCreate) -> TransactionRead:
    """Create a transaction.  The referenced patient must exist (400 otherwise)."""
    try:
        return await TransactionService.create_transaction(transaction)
    except PatientReferenceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


# ----------------------------------------------------------------------
# Analytics
# ----------------------------------------------------------------------

@router.get("/analytics/dashboard", response_model=DashboardAnalytics)
async def get_dashboard_analytics() -> DashboardAnalytics:
    """Totals, recent activity, monthly trend and breakdowns in one response."""
    return await StatisticsService.dashboard()


@router.get("/analytics/monthly-revenue", response_model=Dict[str, Decimal])
async def get_monthly_revenue(
    months: int = Query(DEFAULT_MONTHS, le=MAX_MONTHS),
) -> Dict[str, Decimal]:
    """Revenue per month for the last ``months`` months, oldest first.

    Months without transactions report ``0.00``; a non-positive
    ``months`` falls back to 12 and more than 1200 is rejected (422).
    """
    return await StatisticsService.monthly_revenue(months)


@router.get("/analytics/status-summary", response_model=Dict[str, int])
async def get_status_summary() -> Dict[str, int]:
    """Number of transactions per status."""
    return await StatisticsService.status_counts()


@router.get("/analytics/revenue-by-status", response_model=Dict[str, Decimal])
async def get_revenue_by_status() -> Dict[str, Decimal]:
    return await StatisticsService.revenue_by_status()


@router.get("/analytics/revenue-by-service", response_model=Dict[str, Decimal])
async def get_revenue_by_service() -> Dict[str, Decimal]:
    """Revenue per service type, highest first."""
    return await StatisticsService.revenue_by_service()


@router.get("/patient/{patient_id}/summary", response_model=PatientFinancialSummary)
async def get_patient_financial_summary(patient_id: int) -> PatientFinancialSummary:
    try:
        return await StatisticsService.patient_summary(patient_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


# ----------------------------------------------------------------------
# Lookups
# ----------------------------------------------------------------------

@router.get("/by-patient/{patient_id}", response_model=List[TransactionRead])
async def list_transactions_by_patient(patient_id: int) -> List[TransactionRead]:
    """Transactions of one patient, newest first.  Unknown patient yields 404."""
    if not await PatientService.patient_exists(patient_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Patient with ID {patient_id} not found"
        )
    return await TransactionService.list_by_patient(patient_id)


@router.get("/by-status/{status_value}", response_model=List[TransactionRead])
async def list_transactions_by_status(status_value: TransactionStatus) -> List[TransactionRead]:
    """Transactions with the given status (``Paid`` or ``Unpaid``)."""
    return await TransactionService.list_by_status(status_value)


@router.get("/{transaction_id}", response_model=TransactionRead)
async def get_transaction(transaction_id: int) -> TransactionRead:
    try:
        return await TransactionService.get_transaction(transaction_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{transaction_id}", response_model=TransactionRead)
async def update_transaction(transaction_id: int, updates: TransactionUpdate) -> TransactionRead:
    """Update a transaction.

    Partial updates are supported.  Moving the transaction to a patient
    that does not exist yields 400; an unknown transaction yields 404.
    """
    try:
        return await TransactionService.update_transaction(transaction_id, updates)
    except PatientReferenceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(transaction_id: int) -> None:
    try:
        await TransactionService.delete_transaction(transaction_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return None
