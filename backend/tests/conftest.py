import os
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")

from backend.api.deps import get_settings_cache
from backend.config import Config
from backend.db.base import Base
from backend.db.session import SessionLocal, engine, get_db
from backend.main import app
from backend.services.settings import LocalSettingsCache


USER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"


def make_token(user_id: str = USER_ID, email: str = "punter@example.com", **overrides) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "iat": now,
        "exp": now + timedelta(hours=1),
    }
    payload.update(overrides)
    return jwt.encode(payload, Config.SUPABASE_JWT_SECRET, algorithm="HS256")


@pytest.fixture()
def db_session():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture()
def settings_cache(tmp_path):
    return LocalSettingsCache(str(tmp_path / "settings"))


@pytest.fixture()
def client(db_session, settings_cache):
    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_settings_cache] = lambda: settings_cache
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture()
def other_auth_headers():
    return {"Authorization": f"Bearer {make_token(OTHER_USER_ID, 'other@example.com')}"}
