"""
Business logic for billable transactions.

Transactions are stored in SQLite next to their patients.  The
service checks that the referenced patient exists whenever a
transaction is created or moved to another patient, and exposes
``load_snapshot`` so the analytics can read a consistent set of
records in one query.
"""

import logging
import sqlite3
from datetime import datetime
from typing import List, Optional

from ..core.db import (
    from_db_amount,
    from_db_timestamp,
    get_connection,
    to_db_amount,
    to_db_timestamp,
    utcnow,
)
from ..schemas.transaction import (
    TransactionCreate,
    TransactionRead,
    TransactionStatus,
    TransactionUpdate,
)

logger = logging.getLogger(__name__)

_SELECT_TRANSACTIONS = """
    SELECT t.id, t.patient_id, t.service_type, t.amount, t.transaction_date,
           t.status, t.created_at, t.updated_at, p.name AS patient_name
    FROM transactions t
    LEFT JOIN patients p ON p.id = t.patient_id
"""


class PatientReferenceError(ValueError):
    """Raised when a transaction refers to a patient that does not exist."""


def _row_to_transaction(row: sqlite3.Row) -> TransactionRead:
    return TransactionRead(
        id=row["id"],
        patient_id=row["patient_id"],
        patient_name=row["patient_name"],
        service_type=row["service_type"],
        amount=from_db_amount(row["amount"]),
        transaction_date=from_db_timestamp(row["transaction_date"]),
        status=TransactionStatus(row["status"]),
        created_at=from_db_timestamp(row["created_at"]),
        updated_at=from_db_timestamp(row["updated_at"]),
    )


def _ensure_patient(cursor: sqlite3.Cursor, patient_id: int) -> None:
    row = cursor.execute("SELECT id FROM patients WHERE id = ?", (patient_id,)).fetchone()
    if not row:
        logger.warning("Rejected transaction for unknown patient %s", patient_id)
        raise PatientReferenceError(f"Patient with ID {patient_id} does not exist")


class TransactionService:
    """Service for managing patient transactions."""

    @classmethod
    async def create_transaction(cls, data: TransactionCreate) -> TransactionRead:
        """Insert a transaction for an existing patient.

        Raises ``PatientReferenceError`` if ``data.patient_id`` does not
        match a stored patient.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            _ensure_patient(cursor, data.patient_id)
            cursor.execute(
                """
                INSERT INTO transactions (patient_id, service_type, amount, transaction_date, status, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    data.patient_id,
                    data.service_type,
                    to_db_amount(data.amount),
                    to_db_timestamp(data.transaction_date),
                    data.status.value,
                    to_db_timestamp(utcnow()),
                ),
            )
            transaction_id = cursor.lastrowid
            conn.commit()
            logger.info(
                "Created transaction %s for patient %s (%s %s)",
                transaction_id,
                data.patient_id,
                data.amount,
                data.status.value,
            )
            row = cursor.execute(
                _SELECT_TRANSACTIONS + " WHERE t.id = ?", (transaction_id,)
            ).fetchone()
            return _row_to_transaction(row)
        finally:
            conn.close()

    @classmethod
    async def list_transactions(cls) -> List[TransactionRead]:
        """Return all transactions, newest first."""
        return await cls._fetch(" ORDER BY t.transaction_date DESC, t.id DESC", ())

    @classmethod
    async def get_transaction(cls, transaction_id: int) -> TransactionRead:
        """Retrieve a transaction by ID.  Raises ``ValueError`` if not found."""
        rows = await cls._fetch(" WHERE t.id = ?", (transaction_id,))
        if not rows:
            raise ValueError(f"Transaction with ID {transaction_id} not found")
        return rows[0]

    @classmethod
    async def list_by_patient(cls, patient_id: int) -> List[TransactionRead]:
        return await cls._fetch(
            " WHERE t.patient_id = ? ORDER BY t.transaction_date DESC, t.id DESC",
            (patient_id,),
        )

    @classmethod
    async def list_by_status(cls, status: TransactionStatus) -> List[TransactionRead]:
        return await cls._fetch(
            " WHERE t.status = ? ORDER BY t.transaction_date DESC, t.id DESC",
            (TransactionStatus(status).value,),
        )

    @classmethod
    async def load_snapshot(
        cls,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[TransactionRead]:
        """Read the transactions the analytics work on in a single query.

        ``start`` is inclusive and ``end`` exclusive; either may be
        omitted.  Records come back in insertion order.
        """
        where_clauses: list[str] = []
        params: list = []
        if start is not None:
            where_clauses.append("t.transaction_date >= ?")
            params.append(to_db_timestamp(start))
        if end is not None:
            where_clauses.append("t.transaction_date < ?")
            params.append(to_db_timestamp(end))
        where_sql = " WHERE " + " AND ".join(where_clauses) if where_clauses else ""
        return await cls._fetch(where_sql + " ORDER BY t.id", tuple(params))

    @classmethod
    async def update_transaction(cls, transaction_id: int, updates: TransactionUpdate) -> TransactionRead:
        """Update the provided fields of a transaction.

        The patient reference is only checked when ``patient_id`` is
        given and differs from the stored one.  Raises ``ValueError``
        if the transaction does not exist and ``PatientReferenceError``
        if the new patient does not.
        """
        values = updates.model_dump(exclude_none=True)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            current = cursor.execute(
                "SELECT id, patient_id FROM transactions WHERE id = ?", (transaction_id,)
            ).fetchone()
            if not current:
                raise ValueError(f"Transaction with ID {transaction_id} not found")
            if "patient_id" in values and values["patient_id"] != current["patient_id"]:
                _ensure_patient(cursor, values["patient_id"])

            if "amount" in values:
                values["amount"] = to_db_amount(values["amount"])
            if "transaction_date" in values:
                values["transaction_date"] = to_db_timestamp(values["transaction_date"])
            if "status" in values:
                values["status"] = TransactionStatus(values["status"]).value
            values["updated_at"] = to_db_timestamp(utcnow())

            assignments = ", ".join(f"{key} = ?" for key in values)
            cursor.execute(
                f"UPDATE transactions SET {assignments} WHERE id = ?",
                (*values.values(), transaction_id),
            )
            conn.commit()
            logger.info("Updated transaction %s: %s", transaction_id, sorted(values))
            row = cursor.execute(
                _SELECT_TRANSACTIONS + " WHERE t.id = ?", (transaction_id,)
            ).fetchone()
            return _row_to_transaction(row)
        finally:
            conn.close()

    @classmethod
    async def delete_transaction(cls, transaction_id: int) -> None:
        """Delete a transaction.  Raises ``ValueError`` if not found."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM transactions WHERE id = ?", (transaction_id,))
            if cursor.rowcount == 0:
                raise ValueError(f"Transaction with ID {transaction_id} not found")
            conn.commit()
            logger.info("Deleted transaction %s", transaction_id)
        finally:
            conn.close()

    @classmethod
    async def _fetch(cls, clause: str, params: tuple) -> List[TransactionRead]:
        conn = get_connection()
        try:
            rows = conn.execute(_SELECT_TRANSACTIONS + clause, params).fetchall()
            return [_row_to_transaction(row) for row in rows]
        finally:
            conn.close()
