"""Tests for settings persistence, sync state and account routes."""
import json
from unittest.mock import MagicMock

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from backend.db.models import UserSettingsModel
from backend.models.settings import SyncState, Theme, UserSettings
from backend.services import settings as settings_service
from backend.utils.calculator import calculate_extraction

from conftest import USER_ID


def _remote_row(db_session, user_id=USER_ID):
    stmt = select(UserSettingsModel).where(UserSettingsModel.user_id == user_id)
    return db_session.execute(stmt).scalars().first()


# ---------------------------------------------------------------------------
# Load / update / save
# ---------------------------------------------------------------------------

def test_defaults_when_nothing_is_stored(client, auth_headers):
    response = client.get("/settings", headers=auth_headers)

    assert response.status_code == 200
    payload = response.json()
    assert payload["source"] == "defaults"
    assert payload["sync_state"] == "unsynced"
    assert payload["settings"] == {
        "default_commission": "2.0",
        "auto_calculate": False,
        "theme": "light",
        "email": "",
    }


def test_settings_require_auth(client):
    assert client.get("/settings").status_code == 401


def test_patch_updates_cache_only(client, auth_headers, db_session):
    response = client.patch(
        "/settings",
        json={"default_commission": "5", "theme": "dark"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["sync_state"] == "unsynced"
    assert payload["settings"]["default_commission"] == "5"
    assert payload["settings"]["theme"] == "dark"
    assert _remote_row(db_session) is None

    reloaded = client.get("/settings", headers=auth_headers).json()
    assert reloaded["source"] == "cache"
    assert reloaded["settings"]["theme"] == "dark"


def test_patch_rejects_non_decimal_commission(client, auth_headers):
    response = client.patch("/settings", json={"default_commission": "abc"}, headers=auth_headers)

    assert response.status_code == 422


def test_save_syncs_to_remote(client, auth_headers, db_session):
    client.patch("/settings", json={"default_commission": "3.5", "auto_calculate": True}, headers=auth_headers)

    response = client.post("/settings/save", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["sync_state"] == "synced"
    row = _remote_row(db_session)
    assert row.default_commission == 3.5
    assert row.auto_calculate is True
    assert row.theme == "light"


def test_save_twice_updates_existing_row(client, auth_headers, db_session):
    client.post("/settings/save", headers=auth_headers)
    client.patch("/settings", json={"theme": "system"}, headers=auth_headers)
    client.post("/settings/save", headers=auth_headers)

    rows = db_session.execute(select(UserSettingsModel)).scalars().all()
    assert len(rows) == 1
    assert rows[0].theme == "system"


def test_cache_takes_precedence_over_remote(db_session, settings_cache):
    settings_service.upsert_remote_settings(
        db_session, USER_ID, UserSettings(default_commission="1.0", theme=Theme.DARK)
    )
    settings_cache.save(USER_ID, UserSettings(default_commission="6.5"), SyncState.UNSYNCED)

    response = settings_service.load_settings(db_session, settings_cache, USER_ID)

    assert response.source == "cache"
    assert response.settings.default_commission == "6.5"
    assert response.settings.theme == Theme.LIGHT


def test_remote_load_populates_cache(db_session, settings_cache):
    settings_service.upsert_remote_settings(
        db_session, USER_ID, UserSettings(default_commission="1.0", theme=Theme.DARK)
    )

    first = settings_service.load_settings(db_session, settings_cache, USER_ID)
    second = settings_service.load_settings(db_session, settings_cache, USER_ID)

    assert first.source == "remote"
    assert first.sync_state == SyncState.SYNCED
    assert first.settings.default_commission == "1.0"
    assert second.source == "cache"
    assert second.sync_state == SyncState.SYNCED


def test_email_is_not_stored_remotely(db_session, settings_cache):
    settings_service.upsert_remote_settings(db_session, USER_ID, UserSettings(email="punter@example.com"))

    remote = settings_service.get_remote_settings(db_session, USER_ID)

    assert remote.email == ""


def test_corrupt_cache_file_is_ignored(db_session, settings_cache):
    settings_cache.directory.mkdir(parents=True, exist_ok=True)
    (settings_cache.directory / f"{USER_ID}.json").write_text("{not json", encoding="utf-8")

    response = settings_service.load_settings(db_session, settings_cache, USER_ID)

    assert response.source == "defaults"


def test_cache_file_records_sync_state(db_session, settings_cache):
    settings_service.save_settings(db_session, settings_cache, USER_ID)

    data = json.loads((settings_cache.directory / f"{USER_ID}.json").read_text(encoding="utf-8"))

    assert data["sync_state"] == "synced"
    assert data["settings"]["default_commission"] == "2.0"
    assert "cached_at" in data


# ---------------------------------------------------------------------------
# Sync failures
# ---------------------------------------------------------------------------

def test_failed_sync_is_reported_and_retried(client, auth_headers, db_session, monkeypatch):
    client.patch("/settings", json={"default_commission": "4"}, headers=auth_headers)

    def _fail(*args, **kwargs):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(settings_service, "upsert_remote_settings", _fail)
    failed = client.post("/settings/save", headers=auth_headers)

    assert failed.status_code == 200
    assert failed.json()["sync_state"] == "sync_failed"
    assert client.get("/settings", headers=auth_headers).json()["settings"]["default_commission"] == "4"
    assert _remote_row(db_session) is None

    monkeypatch.undo()
    retried = client.post("/settings/save", headers=auth_headers)

    assert retried.json()["sync_state"] == "synced"
    assert _remote_row(db_session).default_commission == 4.0


def test_change_after_sync_marks_unsynced(db_session, settings_cache):
    from backend.models.settings import UpdateSettingsRequest

    settings_service.save_settings(db_session, settings_cache, USER_ID)
    response = settings_service.update_settings(
        db_session, settings_cache, USER_ID, UpdateSettingsRequest(auto_calculate=True)
    )

    assert response.sync_state == SyncState.UNSYNCED


def test_empty_update_keeps_sync_state(db_session, settings_cache):
    from backend.models.settings import UpdateSettingsRequest

    settings_service.save_settings(db_session, settings_cache, USER_ID)
    response = settings_service.update_settings(db_session, settings_cache, USER_ID, UpdateSettingsRequest())

    assert response.sync_state == SyncState.SYNCED


@pytest.mark.parametrize(
    "current,target",
    [
        (SyncState.UNSYNCED, SyncState.SYNCED),
        (SyncState.UNSYNCED, SyncState.SYNC_FAILED),
        (SyncState.SYNCED, SyncState.SYNC_FAILED),
        (SyncState.SYNC_FAILED, SyncState.SYNCED),
    ],
)
def test_invalid_transitions_raise(current, target):
    with pytest.raises(ValueError):
        settings_service.transition(current, target)


def test_valid_transition_returns_target():
    assert settings_service.transition(SyncState.SYNCING, SyncState.SYNCED) == SyncState.SYNCED


# ---------------------------------------------------------------------------
# Calculator defaults
# ---------------------------------------------------------------------------

def test_calculator_uses_user_default_commission(client, auth_headers):
    client.patch("/settings", json={"default_commission": "5"}, headers=auth_headers)

    response = client.post(
        "/calculate/extraction",
        json={"freebet_value": 50, "back_odds": 3, "lay_odds": 3.4},
        headers=auth_headers,
    )

    assert response.status_code == 200
    expected = calculate_extraction(50, 3, 3.4, 5)
    assert response.json()["profit"] == expected.profit
    assert response.json()["commission"] == pytest.approx(0.05)


def test_anonymous_calculator_uses_app_default(client):
    response = client.post(
        "/calculate/extraction",
        json={"freebet_value": 50, "back_odds": 3, "lay_odds": 3.4},
    )

    assert response.status_code == 200
    assert response.json()["profit"] == calculate_extraction(50, 3, 3.4, 2.0).profit


def test_calculator_explicit_commission(client):
    response = client.post(
        "/calculate/extraction",
        json={"freebet_value": 50, "back_odds": 3, "lay_odds": 3.4, "commission_percent": 4.5},
    )

    payload = response.json()
    assert payload["lay_stake"] == 29.81
    assert payload["liability"] == 71.54
    assert payload["profit"] == 28.46


def test_calculator_rejects_out_of_range_odds(client):
    response = client.post(
        "/calculate/extraction",
        json={"freebet_value": 50, "back_odds": 1, "lay_odds": 3.4},
    )

    assert response.status_code == 422


def test_calculator_form_endpoint(client):
    complete = client.get(
        "/calculate/extraction",
        params={"freebet_value": "50", "back_odds": "3", "lay_odds": "3,4", "commission": "4.5"},
    )
    incomplete = client.get(
        "/calculate/extraction",
        params={"freebet_value": "50", "back_odds": "", "lay_odds": "3.4", "commission": "4.5"},
    )

    assert complete.json()["profit"] == 28.46
    assert incomplete.status_code == 200
    assert incomplete.json() is None


# ---------------------------------------------------------------------------
# Account email
# ---------------------------------------------------------------------------

def test_update_email(client, auth_headers, monkeypatch):
    supabase = MagicMock()
    supabase.auth.admin.update_user_by_id.return_value = MagicMock(user=MagicMock(id=USER_ID))
    monkeypatch.setattr("backend.services.account.get_supabase_client", lambda: supabase)

    response = client.put("/account/email", json={"email": "new@example.com"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["settings"]["email"] == "new@example.com"
    supabase.auth.admin.update_user_by_id.assert_called_once_with(USER_ID, {"email": "new@example.com"})


def test_update_email_failure(client, auth_headers, monkeypatch):
    supabase = MagicMock()
    supabase.auth.admin.update_user_by_id.return_value = MagicMock(user=None)
    monkeypatch.setattr("backend.services.account.get_supabase_client", lambda: supabase)

    response = client.put("/account/email", json={"email": "new@example.com"}, headers=auth_headers)

    assert response.status_code == 400
    assert client.get("/settings", headers=auth_headers).json()["settings"]["email"] == ""


def test_update_email_rejects_invalid_address(client, auth_headers):
    response = client.put("/account/email", json={"email": "not-an-email"}, headers=auth_headers)

    assert response.status_code == 422
