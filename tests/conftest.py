"""
Pytest configuration and shared fixtures for tests
"""
import os
import tempfile
from datetime import datetime

os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="portal-uploads-"))
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest
from fastapi.testclient import TestClient

from portal.core.enums import RequestStatus, Role
from portal.core.security import issue_token
from portal.db.mongo import get_db
from portal.main import create_app
from portal.models.principal import Principal
from portal.repositories.storage import PortalStorage
from portal.services.lifecycle import RequestLifecycle

from fakes import FakeDatabase

ROADS = 1
WATER = 2

CERTIFICATE = 10  # roads, free
PERMIT = 11  # roads, fee 25
WATER_HOOKUP = 20  # water, free

CITIZEN_ID = 100
OTHER_CITIZEN_ID = 101
OFFICER_ID = 200
WATER_OFFICER_ID = 201
HEAD_ID = 202
ADMIN_ID = 300


@pytest.fixture(name="db")
def db_fixture():
    """In-memory database seeded with two departments and their services"""
    db = FakeDatabase()
    db.seed("departments", {"_id": ROADS, "name": "Roads", "description": "Streets and permits"})
    db.seed("departments", {"_id": WATER, "name": "Water", "description": None})
    db.seed("services", {"_id": CERTIFICATE, "name": "Road Certificate", "department_id": ROADS, "fee": 0})
    db.seed("services", {"_id": PERMIT, "name": "Excavation Permit", "department_id": ROADS, "fee": 25.0})
    db.seed("services", {"_id": WATER_HOOKUP, "name": "Water Hookup", "department_id": WATER, "fee": 0})

    now = datetime.utcnow()
    for _id, name, role, dept in [
        (CITIZEN_ID, "Cora Citizen", "citizen", None),
        (OTHER_CITIZEN_ID, "Otto Other", "citizen", None),
        (OFFICER_ID, "Olga Officer", "officer", ROADS),
        (WATER_OFFICER_ID, "Walt Water", "officer", WATER),
        (HEAD_ID, "Hana Head", "head", ROADS),
        (ADMIN_ID, "Ada Admin", "admin", None),
    ]:
        db.seed(
            "users",
            {
                "_id": _id,
                "name": name,
                "email": f"{name.split()[0].lower()}@example.org",
                "role": role,
                "department_id": dept,
                "password_hash": "",
                "created_at": now,
            },
        )
    return db


@pytest.fixture(name="storage")
def storage_fixture(db):
    return PortalStorage(db)


@pytest.fixture(name="lifecycle")
def lifecycle_fixture(storage):
    return RequestLifecycle(storage)


@pytest.fixture
def citizen():
    return Principal(id=CITIZEN_ID, role=Role.citizen, name="Cora Citizen")


@pytest.fixture
def other_citizen():
    return Principal(id=OTHER_CITIZEN_ID, role=Role.citizen, name="Otto Other")


@pytest.fixture
def officer():
    return Principal(id=OFFICER_ID, role=Role.officer, department_id=ROADS, name="Olga Officer")


@pytest.fixture
def water_officer():
    return Principal(id=WATER_OFFICER_ID, role=Role.officer, department_id=WATER, name="Walt Water")


@pytest.fixture
def head():
    return Principal(id=HEAD_ID, role=Role.head, department_id=ROADS, name="Hana Head")


@pytest.fixture
def admin():
    return Principal(id=ADMIN_ID, role=Role.admin, name="Ada Admin")


@pytest.fixture
def seed_request(db):
    """Insert a request straight into storage; returns its id"""

    def _seed(_id=500, citizen_id=CITIZEN_ID, service_id=CERTIFICATE, status=RequestStatus.submitted):
        now = datetime.utcnow()
        db.seed(
            "requests",
            {
                "_id": _id,
                "citizen_id": citizen_id,
                "service_id": service_id,
                "status": RequestStatus(status).value,
                "description": "Please process",
                "attachment": None,
                "created_at": now,
                "updated_at": now,
            },
        )
        return _id

    return _seed


@pytest.fixture(name="client")
def client_fixture(db):
    app = create_app()
    app.dependency_overrides[get_db] = lambda: db
    return TestClient(app)


def auth_headers(principal: Principal) -> dict:
    return {"Authorization": f"Bearer {issue_token(principal)}"}


@pytest.fixture(name="auth")
def auth_fixture():
    return auth_headers
