import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="contract-ledger-tests-")

# settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DATA_DIR"] = _TMP_DIR
os.environ["BACKUP_DIR"] = os.path.join(_TMP_DIR, "backup")
os.environ["SERIALIZE_WRITES"] = "false"
os.environ["NOTIFY_CONTRACT_FULL"] = "true"
os.environ.pop("SMTP_HOST", None)
os.environ.pop("NOTIFY_EMAIL_TO", None)

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from shared.core.database import Base, build_engine, get_db
from shared.utils.clock import FixedClock, SequentialIdGenerator, get_clock, get_id_generator
from contract_service.app.main import app

START = datetime(2026, 1, 15, 9, 0)


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", serialize_writes=False)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def clock():
    # every read moves one second forward so creation order is observable
    return FixedClock(START, step=timedelta(seconds=1))


@pytest.fixture
def ids():
    return SequentialIdGenerator("id")


@pytest.fixture
def client(session_factory, clock, ids):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_id_generator] = lambda: ids
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def create_contract(client):
    def _create(client_name="ACME", total_hours=10, **extra):
        body = {"clientName": client_name, "totalHours": total_hours, **extra}
        response = client.post("/api/contracts", json=body)
        assert response.status_code == 200, response.text
        return response.json()
    return _create


@pytest.fixture
def add_intervention(client):
    def _add(contract_id, hours, billable=True, description="Fix",
             date="2026-01-15T10:00:00", technician="Alice", location=None):
        body = {
            "contractId": contract_id,
            "date": date,
            "description": description,
            "hoursUsed": hours,
            "technician": technician,
            "isBillable": billable,
            "location": location,
        }
        response = client.post("/api/interventions", json=body)
        assert response.status_code == 200, response.text
        return response.json()["id"]
    return _add


@pytest.fixture
def get_contract(client):
    def _get(contract_id):
        response = client.get(f"/api/contracts/{contract_id}")
        assert response.status_code == 200, response.text
        return response.json()
    return _get
