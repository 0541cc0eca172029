"""
Simple migration script: adds missing columns to existing tables.
Safe to run multiple times (checks before altering).
"""

import logging

from sqlalchemy import text, inspect
from database import engine, Base

# Import all models so Base.metadata knows about them
from models.user import User  # noqa: F401
from models.medication import Medication  # noqa: F401

logger = logging.getLogger(__name__)

USER_COLUMNS = [
    ("email", "VARCHAR(150)"),
    ("first_name", "VARCHAR(100)"),
    ("last_name", "VARCHAR(100)"),
    ("is_active", "BOOLEAN DEFAULT TRUE"),
]

MEDICATION_COLUMNS = [
    ("urgency", "VARCHAR(20) DEFAULT 'ROUTINE'"),
    ("dosage", "VARCHAR(120)"),
    ("instructions", "TEXT"),
    ("is_active", "BOOLEAN DEFAULT TRUE"),
    ("intake_times", "JSON"),
    ("days_of_week", "JSON"),
]


def get_existing_columns(conn, table_name: str) -> set:
    """Get the set of column names that already exist in a table."""
    insp = inspect(conn)
    if not insp.has_table(table_name):
        return set()
    return {col["name"] for col in insp.get_columns(table_name)}


def add_missing_columns(conn, table_name: str, columns) -> list[str]:
    existing = get_existing_columns(conn, table_name)
    added = []
    for col_name, col_type in columns:
        if col_name in existing:
            logger.debug("Column already exists: %s.%s", table_name, col_name)
            continue
        conn.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {col_name} {col_type}"))
        conn.commit()
        added.append(col_name)
        logger.info("Added column: %s.%s", table_name, col_name)
    return added


def migrate():
    is_postgres = engine.dialect.name == "postgresql"
    with engine.connect() as conn:
        lock_acquired = True
        if is_postgres:
            # Prevent concurrent migration execution across multiple startup workers.
            lock_acquired = bool(conn.execute(text("SELECT pg_try_advisory_lock(987654321)")).scalar())
        if not lock_acquired:
            logger.info("Migration skipped: another process is running migrations")
            return

        try:
            Base.metadata.create_all(bind=conn)
            conn.commit()
            logger.info("Tables created/verified")

            add_missing_columns(conn, "users", USER_COLUMNS)
            add_missing_columns(conn, "medications", MEDICATION_COLUMNS)

            conn.execute(text("UPDATE medications SET urgency = 'ROUTINE' WHERE urgency IS NULL"))
            conn.execute(text("UPDATE medications SET is_active = TRUE WHERE is_active IS NULL"))
            conn.commit()
        finally:
            if is_postgres:
                conn.execute(text("SELECT pg_advisory_unlock(987654321)"))
                conn.commit()

    logger.info("Migration complete")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    migrate()
