"""
Patient endpoints for API v1.

CRUD routes for patients plus a name search.  Deleting a patient also
deletes their transactions.
"""

from typing import List

from fastapi import APIRouter, HTTPException, Query, status

from patient_billing_api.app.schemas.patient import PatientCreate, PatientRead, PatientUpdate
from patient_billing_api.app.services.patient_service import (
    DuplicateMedicalRecordNumberError,
    PatientService,
)


router = APIRouter()


@router.get("/", response_model=List[PatientRead])
async def list_patients() -> List[PatientRead]:
    """Return all patients ordered by name."""
    return await PatientService.list_patients()


@router.post("/", response_model=PatientRead, status_code=status.HTTP_201_CREATED)
async def create_patient(patient: PatientCreate) -> PatientRead:
    """Create a patient.

    The medical record number is generated when omitted.  A number
    that is already in use yields 409.
    """
    try:
        return await PatientService.create_patient(patient)
    except DuplicateMedicalRecordNumberError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e


@router.get("/search/by-name", response_model=List[PatientRead])
async def search_patients_by_name(name: str = Query("")) -> List[PatientRead]:
    """Case-insensitive substring search on patient names."""
    if not name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name parameter is required")
    return await PatientService.search_by_name(name)


@router.get("/by-mrn/{medical_record_number}", response_model=PatientRead)
async def get_patient_by_mrn(medical_record_number: str) -> PatientRead:
    """Look a patient up by medical record number."""
    patient = await PatientService.get_patient_by_mrn(medical_record_number)
    if patient is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Patient with medical record number {medical_record_number} not found",
        )
    return patient


@router.get("/{patient_id}", response_model=PatientRead)
async def get_patient(patient_id: int) -> PatientRead:
    try:
        return await PatientService.get_patient(patient_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{patient_id}", response_model=PatientRead)
async def update_patient(patient_id: int, updates: PatientUpdate) -> PatientRead:
    """Update a patient's name, date of birth or contact info.

    Partial updates are supported; unspecified fields remain unchanged.
    """
    try:
        return await PatientService.update_patient(patient_id, updates)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_patient(patient_id: int) -> None:
    """Delete a patient together with all of their transactions."""
    try:
        await PatientService.delete_patient(patient_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return None
