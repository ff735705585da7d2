"""
Business logic for patients.

Patients are stored in SQLite.  The service generates medical record
numbers for patients created without one, restricts updates to the
demographic fields and removes a patient's transactions together with
the patient.
"""

import logging
import sqlite3
import uuid
from typing import List, Optional

from ..core.db import (
    from_db_date,
    from_db_timestamp,
    get_connection,
    to_db_date,
    to_db_timestamp,
    utcnow,
)
from ..schemas.patient import PatientCreate, PatientRead, PatientUpdate

logger = logging.getLogger(__name__)

_PATIENT_COLUMNS = (
    "id, name, date_of_birth, medical_record_number, contact_info, created_at, updated_at"
)


class DuplicateMedicalRecordNumberError(ValueError):
    """Raised when a medical record number is already assigned to another patient."""


def generate_medical_record_number() -> str:
    """Return a new number such as ``MRN-20251101093000-3F2A9C1B``."""
    return f"MRN-{utcnow():%Y%m%d%H%M%S}-{uuid.uuid4().hex[:8].upper()}"


def _row_to_patient(row: sqlite3.Row) -> PatientRead:
    return PatientRead(
        id=row["id"],
        name=row["name"],
        date_of_birth=from_db_date(row["date_of_birth"]),
        medical_record_number=row["medical_record_number"],
        contact_info=row["contact_info"],
        created_at=from_db_timestamp(row["created_at"]),
        updated_at=from_db_timestamp(row["updated_at"]),
    )


class PatientService:
    """Service for managing patient records."""

    @classmethod
    async def create_patient(cls, data: PatientCreate) -> PatientRead:
        """Insert a patient and return the stored record.

        A blank or missing ``medical_record_number`` is replaced by a
        generated one.  Raises ``DuplicateMedicalRecordNumberError`` if
        the number is already taken.
        """
        mrn = (data.medical_record_number or "").strip() or generate_medical_record_number()
        conn = get_connection()
        try:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    INSERT INTO patients (name, date_of_birth, medical_record_number, contact_info, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        data.name,
                        to_db_date(data.date_of_birth),
                        mrn,
                        data.contact_info,
                        to_db_timestamp(utcnow()),
                    ),
                )
            except sqlite3.IntegrityError as e:
                raise DuplicateMedicalRecordNumberError(
                    f"Medical record number {mrn} is already assigned"
                ) from e
            patient_id = cursor.lastrowid
            conn.commit()
            logger.info("Created patient %s (%s)", patient_id, mrn)
            row = cursor.execute(
                f"SELECT {_PATIENT_COLUMNS} FROM patients WHERE id = ?", (patient_id,)
            ).fetchone()
            return _row_to_patient(row)
        finally:
            conn.close()

    @classmethod
    async def list_patients(cls) -> List[PatientRead]:
        """Return all patients ordered by name."""
        conn = get_connection()
        try:
            rows = conn.execute(
                f"SELECT {_PATIENT_COLUMNS} FROM patients ORDER BY name, id"
            ).fetchall()
            return [_row_to_patient(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_patient(cls, patient_id: int) -> PatientRead:
        """Retrieve a patient by ID.  Raises ``ValueError`` if not found."""
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {_PATIENT_COLUMNS} FROM patients WHERE id = ?", (patient_id,)
            ).fetchone()
            if not row:
                raise ValueError(f"Patient with ID {patient_id} not found")
            return _row_to_patient(row)
        finally:
            conn.close()

    @classmethod
    async def get_patient_by_mrn(cls, medical_record_number: str) -> Optional[PatientRead]:
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {_PATIENT_COLUMNS} FROM patients WHERE medical_record_number = ?",
                (medical_record_number,),
            ).fetchone()
            return _row_to_patient(row) if row else None
        finally:
            conn.close()

    @classmethod
    async def patient_exists(cls, patient_id: int) -> bool:
        conn = get_connection()
        try:
            row = conn.execute("SELECT 1 FROM patients WHERE id = ?", (patient_id,)).fetchone()
            return row is not None
        finally:
            conn.close()

    @classmethod
    async def search_by_name(cls, name: str) -> List[PatientRead]:
        """Case-insensitive substring search on the patient name."""
        needle = name.strip().lower()
        patients = await cls.list_patients()
        return [p for p in patients if needle in p.name.lower()]

    @classmethod
    async def update_patient(cls, patient_id: int, updates: PatientUpdate) -> PatientRead:
        """Update the demographic fields that were provided.

        Raises ``ValueError`` if the patient does not exist.  The
        ``updated_at`` stamp is refreshed even when no field changes.
        """
        values = updates.model_dump(exclude_none=True)
        if "date_of_birth" in values:
            values["date_of_birth"] = to_db_date(values["date_of_birth"])
        values["updated_at"] = to_db_timestamp(utcnow())

        conn = get_connection()
        try:
            cursor = conn.cursor()
            exists = cursor.execute("SELECT id FROM patients WHERE id = ?", (patient_id,)).fetchone()
            if not exists:
                raise ValueError(f"Patient with ID {patient_id} not found")
            assignments = ", ".join(f"{key} = ?" for key in values)
            cursor.execute(
                f"UPDATE patients SET {assignments} WHERE id = ?",
                (*values.values(), patient_id),
            )
            conn.commit()
            logger.info("Updated patient %s: %s", patient_id, sorted(values))
            row = cursor.execute(
                f"SELECT {_PATIENT_COLUMNS} FROM patients WHERE id = ?", (patient_id,)
            ).fetchone()
            return _row_to_patient(row)
        finally:
            conn.close()

    @classmethod
    async def delete_patient(cls, patient_id: int) -> None:
        """Delete a patient and all of their transactions.

        Both deletes run in one database transaction.  The foreign key
        cascade would remove the transactions as well; deleting them
        first keeps the rule explicit.  Raises ``ValueError`` if the
        patient does not exist.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            exists = cursor.execute("SELECT id FROM patients WHERE id = ?", (patient_id,)).fetchone()
            if not exists:
                raise ValueError(f"Patient with ID {patient_id} not found")
            removed = cursor.execute(
                "DELETE FROM transactions WHERE patient_id = ?", (patient_id,)
            ).rowcount
            cursor.execute("DELETE FROM patients WHERE id = ?", (patient_id,))
            conn.commit()
            logger.info("Deleted patient %s and %d transaction(s)", patient_id, removed)
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
