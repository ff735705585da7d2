"""Configuration, logging, database access and demo data."""
