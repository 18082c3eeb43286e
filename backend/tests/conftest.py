import io

import pytest
from fastapi.testclient import TestClient
from pypdf import PdfWriter
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from chefportal.config import settings
from chefportal.database import _set_sqlite_pragmas, get_db, init_db
from chefportal.main import app
from chefportal.services.auth_service import auth_service
from chefportal.utils.filesystem import ensure_data_dirs

ADMIN_EMAIL = "admin@chefoverseas.com"
ADMIN_PASSWORD = "admin-password-123"
TEST_OTP = "123456"


@pytest.fixture
def tmp_data(tmp_path):
    data_path = tmp_path / "PortalData"
    data_path.mkdir()
    original = settings.data_path
    settings.data_path = data_path
    ensure_data_dirs(data_path)
    yield data_path
    settings.data_path = original


@pytest.fixture
def test_db(tmp_data):
    db_path = tmp_data / "portal.sqlite"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    init_db(db_path)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def db(test_db):
    session = test_db()
    yield session
    session.close()


@pytest.fixture
def fresh_auth_service():
    """Reset in-memory sessions for each test."""
    auth_service.clear()
    yield auth_service
    auth_service.clear()


@pytest.fixture
def client(tmp_data, test_db, fresh_auth_service):
    return TestClient(app)


@pytest.fixture
def admin_headers(client):
    client.post("/api/admin/setup", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    r = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture
def fixed_otp(monkeypatch):
    monkeypatch.setattr("chefportal.services.auth_service.generate_otp", lambda: TEST_OTP)
    return TEST_OTP


@pytest.fixture
def login_candidate(client, fixed_otp):
    """Log a candidate in through the OTP flow; returns (headers, user json)."""
    def _login(email="chef@chefoverseas.com"):
        client.post("/api/auth/send-otp", json={"email": email})
        r = client.post("/api/auth/verify-otp", json={"email": email, "otp": fixed_otp})
        assert r.status_code == 200, r.text
        data = r.json()
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]
    return _login


@pytest.fixture
def make_pdf():
    def _make(signed: bool = False) -> bytes:
        writer = PdfWriter()
        writer.add_blank_page(width=200, height=200)
        if signed:
            writer.add_metadata({
                "/Producer": "DocuSign",
                "/Subject": "Electronically signed by the candidate",
            })
        buf = io.BytesIO()
        writer.write(buf)
        return buf.getvalue()
    return _make
