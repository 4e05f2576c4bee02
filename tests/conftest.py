"""Shared test fixtures."""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ecofire import cache as cache_module
from ecofire.auth import create_access_token
from ecofire.database import Base, get_db
from ecofire.events import event_bus
from ecofire.main import app, register_subscribers

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

USER_ID = "user_123"
OTHER_USER_ID = "user_456"


@pytest.fixture(autouse=True)
def isolated_state(monkeypatch):
    """Fresh tables, no Redis and an empty event bus for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    monkeypatch.setattr(cache_module.config, "REDIS_URL", None)
    monkeypatch.setattr(cache_module, "cache", cache_module.Cache())

    event_bus.clear()
    yield
    event_bus.clear()


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    unregister = register_subscribers(TestingSessionLocal)
    try:
        yield TestClient(app)
    finally:
        unregister()
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {create_access_token(USER_ID)}"}


@pytest.fixture
def other_auth_headers():
    return {"Authorization": f"Bearer {create_access_token(OTHER_USER_ID)}"}


@pytest.fixture
def api(client, auth_headers):
    """Small helper that calls the API as USER_ID and returns the decoded body."""

    class Api:
        def request(self, method, path, expected=200, **kwargs):
            response = client.request(method, path, headers=auth_headers, **kwargs)
            assert response.status_code == expected, response.text
            return response.json()

        def get(self, path, **kwargs):
            return self.request("GET", path, **kwargs)

        def post(self, path, json=None, expected=201, **kwargs):
            return self.request("POST", path, expected=expected, json=json, **kwargs)

        def put(self, path, json=None, **kwargs):
            return self.request("PUT", path, json=json, **kwargs)

        def delete(self, path, **kwargs):
            return self.request("DELETE", path, **kwargs)

        def create_qbo(self, name="Revenue", beginning=0, current=0, target=100, **extra):
            body = {
                "name": name,
                "beginningValue": beginning,
                "currentValue": current,
                "targetValue": target,
                "points": 5,
                **extra,
            }
            return self.post("/qbos", json=body)["data"]

        def create_pi(self, name="Leads", beginning=0, target=50, **extra):
            body = {"name": name, "beginningValue": beginning, "targetValue": target, **extra}
            return self.post("/pis", json=body)["data"]

        def create_job(self, title="Call customers", is_done=False):
            return self.post("/jobs", json={"title": title, "isDone": is_done})["data"]

        def map_pi_to_qbo(self, pi_id, qbo_id, impact):
            body = {"piId": pi_id, "qboId": qbo_id, "qboImpact": impact}
            return self.post("/pi-qbo-mappings", json=body)["data"]

        def map_job_to_pi(self, job_id, pi_id, impact):
            body = {"jobId": job_id, "piId": pi_id, "piImpactValue": impact}
            return self.post("/pi-job-mappings", json=body)["data"]

    return Api()
