"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), applying migrations on application start
(``init_db``) and the conversions used to store timestamps and money.
SQLite is used as a lightweight embedded database; switching to
another DBMS means replacing the connection logic and adapting the
SQL in the migrations and services.

Applied migration versions are stored in the ``migrations`` table and
new migrations are executed in order.

Storage formats
---------------
* Instants are stored as naive UTC text in a fixed-width format
  (``YYYY-MM-DDTHH:MM:SS.ffffff``) so that string comparison in SQL
  matches chronological order.
* Money is stored as text (``"100.00"``) so no precision is lost to
  SQLite's REAL or NUMERIC affinity.
"""

import os
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Iterator, Optional

from .config import settings

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"
CENTS = Decimal("0.01")


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the package root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # patient_billing_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be read by
    name.  Type detection is left off; the services convert stored
    text back into ``datetime``/``Decimal`` values themselves.
    Foreign key enforcement is switched on for every connection since
    SQLite keeps it disabled by default and the patient cascade relies
    on it.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Yield a cursor, commit on success, roll back on error, always close."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_db_timestamp(value: datetime) -> str:
    """Serialise a datetime as naive UTC text.  Naive input is taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.strftime(TIMESTAMP_FORMAT)


def from_db_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


def to_db_date(value: date) -> str:
    return value.isoformat()


def from_db_date(value: str) -> date:
    return date.fromisoformat(value)


def quantize_amount(value) -> Decimal:
    """Round a monetary value to two decimal places."""
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def to_db_amount(value) -> str:
    return str(quantize_amount(value))


def from_db_amount(value: str) -> Decimal:
    return quantize_amount(value)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: patients and their billable transactions
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS patients (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            date_of_birth TEXT NOT NULL,
            medical_record_number TEXT NOT NULL UNIQUE,
            contact_info TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT
        );

        CREATE TABLE IF NOT EXISTS transactions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            patient_id INTEGER NOT NULL,
            service_type TEXT NOT NULL,
            amount TEXT NOT NULL CHECK (CAST(amount AS REAL) >= 0),
            transaction_date TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'Unpaid' CHECK (status IN ('Paid', 'Unpaid')),
            created_at TEXT NOT NULL,
            updated_at TEXT,
            FOREIGN KEY(patient_id) REFERENCES patients(id) ON DELETE CASCADE
        );
        """,
    ),
    # Migration 2: indices for the per-patient, ranged and status scans
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_transactions_patient_id ON transactions(patient_id);
        CREATE INDEX IF NOT EXISTS idx_transactions_date ON transactions(transaction_date);
        CREATE INDEX IF NOT EXISTS idx_transactions_status ON transactions(status);
        CREATE INDEX IF NOT EXISTS idx_patients_name ON patients(name);
        """,
    ),
]


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, reads the
    current schema version and applies every entry of ``MIGRATIONS``
    with a higher version number.  New migrations are appended with an
    incremented version.
    """
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
