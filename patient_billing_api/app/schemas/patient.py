"""
Pydantic models for patient data.

``PatientBase`` holds the demographic fields shared by requests and
responses; ``PatientCreate`` adds the optional medical record number
(generated by the service when omitted); ``PatientRead`` is the full
stored record.  ``PatientUpdate`` carries a partial demographic
update: the medical record number is immutable once assigned.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class PatientBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["John Doe"])
    date_of_birth: date = Field(..., examples=["1985-06-15"])
    contact_info: str = Field(..., min_length=1, max_length=20, examples=["555-1234"])


class PatientCreate(PatientBase):
    """Schema for creating a patient."""

    medical_record_number: Optional[str] = Field(
        None,
        max_length=32,
        examples=["MRN-001"],
        description="Generated as MRN-<UTC timestamp>-<8 hex chars> when omitted",
    )


class PatientRead(PatientBase):
    """Schema for reading a patient."""

    id: int
    medical_record_number: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class PatientUpdate(BaseModel):
    """Schema for updating a patient.

    All fields are optional; only provided fields will be updated.
    """
    name: str | None = Field(None, min_length=1, max_length=100)
    date_of_birth: date | None = None
    contact_info: str | None = Field(None, min_length=1, max_length=20)
