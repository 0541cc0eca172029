import os
import sys
import tempfile
from pathlib import Path

# Must happen before anything under Backend/ is imported: config.py reads
# these once and database.py builds its engine from DATABASE_URL.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="medtrack-logs-"))
os.environ.setdefault("APP_TIMEZONE", "UTC")

BACKEND = Path(__file__).resolve().parents[1] / "Backend"
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))

import pytest  # noqa: E402

from services.medication_store import MedicationRecord  # noqa: E402


class InMemoryMedicationStore:
    """Dict-backed MedicationStore used by the engine tests."""

    def __init__(self, owners=(1,)):
        self.owners = set(owners)
        self.records: list[MedicationRecord] = []
        self.fetch_calls = 0
        self.fail_with: Exception | None = None

    def add(self, **fields) -> MedicationRecord:
        fields.setdefault("id", len(self.records) + 1)
        fields.setdefault("owner_id", 1)
        fields.setdefault("name", f"Medication {fields['id']}")
        record = MedicationRecord(**fields)
        self.records.append(record)
        return record

    def owner_exists(self, owner_id) -> bool:
        return owner_id in self.owners

    def find_active_medications_for_owner(self, owner_id):
        self.fetch_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        return [r for r in self.records if r.owner_id == owner_id and r.active]


@pytest.fixture
def store():
    return InMemoryMedicationStore()


@pytest.fixture
def db_session():
    from database import Base, SessionLocal, engine
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from database import Base, engine
    from main import app

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as c:
        yield c
    Base.metadata.drop_all(bind=engine)
