"""
Service layer.

``patient_service`` and ``transaction_service`` own the SQLite
records; ``aggregation`` holds the pure analytics functions and
``statistics_service`` feeds them snapshots for the API handlers.
"""
