"""
Demo data inserted on first start.

``seed_demo_data`` adds two patients with one transaction each when
the patients table is empty, so a fresh database shows something on
the dashboard.  Disable it with ``SEED_DEMO_DATA=false``.
"""

import logging
from datetime import date, datetime, timezone

from .db import get_cursor, to_db_amount, to_db_date, to_db_timestamp, utcnow

logger = logging.getLogger(__name__)

DEMO_PATIENTS = [
    ("John Doe", date(1985, 6, 15), "555-1234", "MRN-001"),
    ("Jane Smith", date(1990, 9, 20), "555-5678", "MRN-002"),
]

# (medical record number, service type, amount, date, status)
DEMO_TRANSACTIONS = [
    ("MRN-001", "Consultation", "100.00", datetime(2025, 11, 1, tzinfo=timezone.utc), "Paid"),
    ("MRN-002", "X-Ray", "250.00", datetime(2025, 11, 5, tzinfo=timezone.utc), "Unpaid"),
]


def seed_demo_data() -> bool:
    """Insert the demo records if no patient exists yet.

    Returns ``True`` when data was inserted.
    """
    with get_cursor() as cursor:
        if cursor.execute("SELECT 1 FROM patients LIMIT 1").fetchone():
            return False

        created_at = to_db_timestamp(utcnow())
        patient_ids = {}
        for name, dob, contact, mrn in DEMO_PATIENTS:
            cursor.execute(
                """
                INSERT INTO patients (name, date_of_birth, medical_record_number, contact_info, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (name, to_db_date(dob), mrn, contact, created_at),
            )
            patient_ids[mrn] = cursor.lastrowid

        for mrn, service_type, amount, when, status in DEMO_TRANSACTIONS:
            cursor.execute(
                """
                INSERT INTO transactions (patient_id, service_type, amount, transaction_date, status, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (patient_ids[mrn], service_type, to_db_amount(amount), to_db_timestamp(when), status, created_at),
            )

    logger.info(
        "Seeded %d demo patient(s) and %d transaction(s)",
        len(DEMO_PATIENTS),
        len(DEMO_TRANSACTIONS),
    )
    return True
