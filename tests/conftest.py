import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("SENTRY_DSN", None)
os.environ.pop("RESEND_API_KEY", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.ratelimit import limiter  # noqa: E402

limiter.enabled = False


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
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
def client_for(session_factory):
    """Build API clients, one per traveler, each with its own visitor cookie."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    clients = []

    def make(name: str) -> TestClient:
        client = TestClient(app, cookies={"ctk": f"ctk-{name.lower()}"})
        client.patch("/api/me", json={"full_name": name}).raise_for_status()
        client.profile_id = client.get("/api/me").json()["id"]
        clients.append(client)
        return client

    yield make

    for client in clients:
        client.close()
    app.dependency_overrides.clear()


@pytest.fixture
def trip_payload():
    return {
        "title": "Lisbon long weekend",
        "destination": "Lisbon, Portugal",
        "start_date": "2026-07-01",
        "end_date": "2026-07-05",
        "max_participants": 6,
    }


@pytest.fixture
def squad(client_for, trip_payload):
    """A trip organised by Alice with Bob and Carol approved, in that order."""
    alice = client_for("Alice")
    bob = client_for("Bob")
    carol = client_for("Carol")

    trip = alice.post("/api/trips", json=trip_payload).json()["trip"]
    for traveler in (bob, carol):
        request = traveler.post(f"/api/trips/{trip['id']}/join", json={"message": "Count me in"}).json()
        alice.post(f"/api/trips/{trip['id']}/participants/{request['id']}/approve").raise_for_status()

    return {"trip_id": trip["id"], "alice": alice, "bob": bob, "carol": carol}
