from sqlalchemy import inspect

from database import Base, engine
from migrate import MEDICATION_COLUMNS, get_existing_columns, migrate


def test_migrate_is_idempotent():
    Base.metadata.drop_all(bind=engine)
    try:
        migrate()
        migrate()

        assert inspect(engine).has_table("medications")
        with engine.connect() as conn:
            columns = get_existing_columns(conn, "medications")
        assert {name for name, _ in MEDICATION_COLUMNS} <= columns
    finally:
        Base.metadata.drop_all(bind=engine)


def test_missing_table_reports_no_columns():
    with engine.connect() as conn:
        assert get_existing_columns(conn, "does_not_exist") == set()
