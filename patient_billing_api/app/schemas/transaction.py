"""
Pydantic models for billable transactions.

A transaction links a patient to a service, an amount and a payment
status.  ``status`` is the closed ``TransactionStatus`` enumeration:
anything other than ``Paid`` or ``Unpaid`` is rejected here, before it
can reach the store, because the analytics derive the paid share as
``total - unpaid``.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class TransactionStatus(str, Enum):
    PAID = "Paid"
    UNPAID = "Unpaid"


class TransactionBase(BaseModel):
    patient_id: int = Field(..., examples=[1])
    service_type: str = Field(..., min_length=1, max_length=50, examples=["Consultation"])
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, examples=["100.00"])
    transaction_date: datetime = Field(..., examples=["2025-11-01T00:00:00Z"])
    status: TransactionStatus = Field(TransactionStatus.UNPAID, examples=["Unpaid"])


class TransactionCreate(TransactionBase):
    """Schema for creating a transaction."""
    pass


class TransactionRead(TransactionBase):
    """Schema for reading a transaction."""

    id: int
    patient_name: Optional[str] = Field(None, examples=["John Doe"])
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class TransactionUpdate(BaseModel):
    """Schema for updating a transaction.

    All fields are optional; only provided fields will be updated.
    Changing ``patient_id`` re-validates that the patient exists.
    """
    patient_id: int | None = None
    service_type: str | None = Field(None, min_length=1, max_length=50)
    amount: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    transaction_date: datetime | None = None
    status: TransactionStatus | None = None
