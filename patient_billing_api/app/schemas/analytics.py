"""
Pydantic models for the analytics responses.

Mappings keep the insertion order produced by the aggregation
functions: the monthly trend is oldest month first and the
service-type breakdown is highest revenue first.
"""

from decimal import Decimal
from typing import Dict, List

from pydantic import BaseModel, Field

from .transaction import TransactionRead


class DashboardAnalytics(BaseModel):
    total_transactions_count: int = Field(..., examples=[2])
    total_revenue: Decimal = Field(..., examples=["350.00"])
    paid_revenue: Decimal = Field(..., examples=["100.00"])
    unpaid_revenue: Decimal = Field(..., examples=["250.00"])
    recent_transactions: List[TransactionRead] = Field(default_factory=list)
    monthly_revenue: Dict[str, Decimal] = Field(
        default_factory=dict, examples=[{"Oct 2025": "0.00", "Nov 2025": "350.00"}]
    )
    transaction_count_by_status: Dict[str, int] = Field(
        default_factory=dict, examples=[{"Paid": 1, "Unpaid": 1}]
    )
    revenue_by_service_type: Dict[str, Decimal] = Field(
        default_factory=dict, examples=[{"X-Ray": "250.00", "Consultation": "100.00"}]
    )


class PatientFinancialSummary(BaseModel):
    """Totals for one patient; ``paid_amount`` is ``total_amount - unpaid_amount``."""

    patient_id: int
    patient_name: str
    total_amount: Decimal
    paid_amount: Decimal
    unpaid_amount: Decimal
