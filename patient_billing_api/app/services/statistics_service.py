"""
Service layer for financial statistics.

Each method reads one snapshot of transactions through
``TransactionService.load_snapshot`` and hands it to the pure
functions in ``aggregation``.  The monthly trend narrows the read to
the months it reports on; every other figure needs the full set.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Optional

from ..core.config import settings
from ..schemas.analytics import DashboardAnalytics, PatientFinancialSummary
from . import aggregation
from .patient_service import PatientService
from .transaction_service import TransactionService

logger = logging.getLogger(__name__)


class StatisticsService:
    """Aggregated revenue figures for the dashboard."""

    @classmethod
    async def dashboard(cls, now: Optional[datetime] = None) -> DashboardAnalytics:
        """Return every dashboard figure computed from a single snapshot.

        The trend and recent-activity windows come from
        ``settings.dashboard_months`` and ``settings.dashboard_recent_days``.
        """
        snapshot = await TransactionService.load_snapshot()
        logger.debug("Computing dashboard over %d transaction(s)", len(snapshot))
        figures = aggregation.dashboard(
            snapshot,
            now=now,
            months=settings.dashboard_months,
            days=settings.dashboard_recent_days,
        )
        return DashboardAnalytics(**figures)

    @classmethod
    async def monthly_revenue(
        cls, months: Optional[int] = aggregation.DEFAULT_MONTHS, now: Optional[datetime] = None
    ) -> Dict[str, Decimal]:
        """Return the zero-filled revenue trend for the last ``months`` months.

        The clock is read once so the ranged fetch and the bucketing
        agree on the current month.
        """
        now = aggregation.as_utc(now) if now is not None else datetime.now(timezone.utc)
        start, end = aggregation.month_window(months, now)
        snapshot = await TransactionService.load_snapshot(start=start, end=end)
        return aggregation.monthly_revenue(snapshot, months, now)

    @classmethod
    async def status_counts(cls) -> Dict[str, int]:
        snapshot = await TransactionService.load_snapshot()
        return aggregation.count_by_status(snapshot)

    @classmethod
    async def revenue_by_status(cls) -> Dict[str, Decimal]:
        snapshot = await TransactionService.load_snapshot()
        return aggregation.revenue_by_status(snapshot)

    @classmethod
    async def revenue_by_service(cls) -> Dict[str, Decimal]:
        snapshot = await TransactionService.load_snapshot()
        return aggregation.revenue_by_service_type(snapshot)

    @classmethod
    async def patient_summary(cls, patient_id: int) -> PatientFinancialSummary:
        """Return total, paid and unpaid amounts for a patient.

        Raises ``ValueError`` if the patient does not exist; the
        aggregation itself would report zeros for an unknown ID.
        """
        patient = await PatientService.get_patient(patient_id)
        snapshot = await TransactionService.list_by_patient(patient_id)
        totals = aggregation.patient_totals(snapshot, patient_id)
        return PatientFinancialSummary(
            patient_id=patient_id,
            patient_name=patient.name,
            total_amount=totals.total,
            paid_amount=totals.paid,
            unpaid_amount=totals.unpaid,
        )
