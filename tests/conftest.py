import os

# Configuração precisa existir antes de importar showpro (lida no import).
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOCAL_ADMIN_USER"] = "admin"
os.environ["LOCAL_ADMIN_PASSWORD"] = "s3cret"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["DEFAULT_TENANT_SLUG"] = "showpro"
os.environ["RESERVED_HOST_SUFFIXES"] = "github.io,pages.dev"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from showpro.db.session import create_tables, drop_tables, engine
from showpro.main import app
from showpro.services.tenant_service import create_tenant


@pytest.fixture
def db():
    create_tables()
    yield
    drop_tables()


@pytest.fixture
def session(db):
    with Session(engine) as s:
        yield s


@pytest.fixture
def tenants(session):
    showpro = create_tenant(session, name="ShowPro Productions", slug="showpro", locale="en-US")
    acme = create_tenant(session, name="Acme Events", slug="acme", primary_color="#DC2626")
    return {"showpro": showpro, "acme": acme}


@pytest.fixture
def client(db):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client):
    response = client.post("/auth/login", json={"username": "admin", "password": "s3cret"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def event_payload():
    def _make(**overrides) -> dict:
        payload = {
            "title": "Annual Conference",
            "slug": "annual-conference",
            "status": "draft",
            "start_at": "2025-09-15T09:00:00Z",
            "end_at": "2025-09-15T17:00:00Z",
            "timezone": "America/New_York",
            "venue": "Javits Center, New York, NY",
            "description": "Keynotes, panels and live demos.",
            "banner_url": "https://placehold.co/1200x400",
            "stream": {
                "provider": "youtube",
                "embed_url": "https://www.youtube.com/embed/dQw4w9WgXcQ",
                "is_live": False,
                "replay_url": None,
            },
            "sessions": [
                {
                    "title": "Opening Keynote",
                    "start_at": "2025-09-15T09:00:00Z",
                    "end_at": "2025-09-15T10:00:00Z",
                    "description": "The future of live events.",
                    "speaker_name": "Alex Rivera",
                },
            ],
            "speakers": [
                {
                    "name": "Alex Rivera",
                    "title": "CEO",
                    "company": "ShowPro Productions",
                    "headshot_url": "https://placehold.co/150x150",
                    "bio": "Hybrid event pioneer.",
                },
            ],
            "resources": [
                {"name": "Event Program", "url": "https://example.com/program.pdf", "type": "pdf"},
            ],
        }
        payload.update(overrides)
        return payload

    return _make
