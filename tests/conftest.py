"""
Pytest fixtures for the Partner Request Portal tests.
Provides storage backings, configured apps and common payloads.
"""
import pytest
from fastapi.testclient import TestClient

from portal.core.config import Settings
from portal.db.session import create_db_engine
from portal.main import create_app
from portal.schemas.partner import PartnerCreate
from portal.schemas.request import RequestCreate
from portal.services.notifier import RequestNotifier
from portal.storage import MemoryStorage, SqlStorage

ADMIN_SECRET = "test-secret"


class RecordingNotifier(RequestNotifier):
    """Keeps every notified request instead of sending it anywhere"""

    def __init__(self):
        self.sent = []

    def notify(self, request):
        self.sent.append(request)


# ============== Settings Fixtures ==============

@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file"""
    return Settings(
        _env_file=None,
        ADMIN_SECRET=ADMIN_SECRET,
        STORAGE_BACKEND="memory",
        WEBHOOK_URL=None,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def sqlite_settings(tmp_path):
    """Settings pointing at a fresh SQLite file"""
    return Settings(
        _env_file=None,
        ADMIN_SECRET=ADMIN_SECRET,
        STORAGE_BACKEND="sql",
        DATABASE_URL=f"sqlite:///{tmp_path / 'portal.db'}",
        ALLOW_MEMORY_FALLBACK=False,
        LOG_LEVEL="WARNING",
    )


# ============== Storage Fixtures ==============

@pytest.fixture
def sql_storage(sqlite_settings):
    """SQL backing over a fresh SQLite file"""
    engine, tunnel = create_db_engine(sqlite_settings)
    storage = SqlStorage(engine, tunnel)
    storage.init_schema()
    yield storage
    storage.close()


@pytest.fixture(params=["memory", "sql"])
def storage(request):
    """Every storage backing; tests using this run once per backing"""
    if request.param == "memory":
        return MemoryStorage()
    return request.getfixturevalue("sql_storage")


# ============== Payload Fixtures ==============

@pytest.fixture
def partner_payload():
    return {"id": "1234", "name": "Acme", "email": "a@x.com", "phone": "555-0100"}


@pytest.fixture
def request_payload():
    return {
        "partnerId": "1234",
        "urgency": "high",
        "preferredContact": "email",
        "description": "Need help.",
    }


@pytest.fixture
def partner_in(partner_payload):
    return PartnerCreate.model_validate(partner_payload)


@pytest.fixture
def request_in(request_payload):
    return RequestCreate.model_validate(request_payload)


# ============== API Client Fixtures ==============

@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def app(settings, storage, notifier):
    return create_app(settings=settings, storage=storage, notifier=notifier)


@pytest.fixture
def client(app):
    """API test client (unauthenticated)"""
    return TestClient(app)


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_SECRET}"}


@pytest.fixture
def admin_client(app, admin_headers):
    """API test client sending the admin secret on every call"""
    client = TestClient(app)
    client.headers.update(admin_headers)
    return client
