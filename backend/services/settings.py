"""Service for user settings: local cache first, remote store second.

Settings are written to a per-user JSON file before being synced to the
``user_settings`` table. On load the cached copy takes precedence over the
remote row; a failed remote write leaves the cache in ``sync_failed`` and
the next save retries it.

Sync states::

    unsynced -> syncing -> synced
                        -> sync_failed -> syncing ...
"""
from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.config import Config
from backend.db.models import UserSettingsModel
from backend.models.settings import (
    SettingsResponse,
    SyncState,
    Theme,
    UpdateSettingsRequest,
    UserSettings,
)


logger = logging.getLogger(__name__)

_TRANSITIONS = {
    SyncState.UNSYNCED: {SyncState.SYNCING, SyncState.UNSYNCED},
    SyncState.SYNCING: {SyncState.SYNCED, SyncState.SYNC_FAILED, SyncState.SYNCING, SyncState.UNSYNCED},
    SyncState.SYNCED: {SyncState.UNSYNCED, SyncState.SYNCING},
    SyncState.SYNC_FAILED: {SyncState.SYNCING, SyncState.UNSYNCED},
}


def transition(current: SyncState, target: SyncState) -> SyncState:
    """Validate a sync state transition and return the new state."""
    if target not in _TRANSITIONS[current]:
        raise ValueError(f"Invalid settings sync transition: {current.value} -> {target.value}")
    return target


class LocalSettingsCache:
    """Per-user settings stored as JSON files in a directory."""

    def __init__(self, directory: Optional[str] = None):
        self.directory = Path(directory or Config.SETTINGS_CACHE_DIR)

    def _path(self, user_id: str) -> Path:
        return self.directory / f"{user_id}.json"

    def load(self, user_id: str) -> Optional[Tuple[UserSettings, SyncState]]:
        """Return cached settings and their sync state, or None when nothing usable is cached."""
        path = self._path(user_id)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            settings = UserSettings.model_validate(data["settings"])
            state = SyncState(data.get("sync_state", SyncState.UNSYNCED.value))
        except (OSError, ValueError, KeyError, TypeError):
            logger.exception("Ignoring unreadable settings cache %s", path)
            return None
        return settings, state

    def save(self, user_id: str, settings: UserSettings, state: SyncState) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        data = {
            "settings": settings.model_dump(mode="json"),
            "sync_state": state.value,
            "cached_at": datetime.now(timezone.utc).isoformat(),
        }
        with open(self._path(user_id), "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)


def get_remote_settings(db: Session, user_id: str) -> Optional[UserSettings]:
    """Fetch settings from the remote store, or None if the user has none."""
    stmt = select(UserSettingsModel).where(UserSettingsModel.user_id == user_id)
    row = db.execute(stmt).scalars().first()
    if not row:
        return None

    defaults = UserSettings()
    return UserSettings(
        default_commission=(
            _format_commission(row.default_commission)
            if row.default_commission is not None
            else defaults.default_commission
        ),
        auto_calculate=row.auto_calculate if row.auto_calculate is not None else defaults.auto_calculate,
        theme=Theme(row.theme) if row.theme else defaults.theme,
    )


def upsert_remote_settings(db: Session, user_id: str, settings: UserSettings) -> UserSettings:
    """Insert or update the user's remote settings row. The email field is never stored remotely."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    fields = {
        "default_commission": float(settings.default_commission),
        "auto_calculate": settings.auto_calculate,
        "theme": settings.theme.value,
    }

    stmt = select(UserSettingsModel).where(UserSettingsModel.user_id == user_id)
    row = db.execute(stmt).scalars().first()
    if row:
        for field, value in fields.items():
            setattr(row, field, value)
        row.updated_at = now
    else:
        row = UserSettingsModel(
            id=str(uuid.uuid4()),
            user_id=user_id,
            created_at=now,
            updated_at=now,
            **fields,
        )
        db.add(row)

    db.commit()
    return get_remote_settings(db, user_id)


def _format_commission(value: float) -> str:
    return str(float(value))


def load_settings(db: Session, cache: LocalSettingsCache, user_id: str) -> SettingsResponse:
    """Load settings: cache first, then the remote store, then defaults."""
    cached = cache.load(user_id)
    if cached:
        settings, state = cached
        logger.debug("Settings for user %s loaded from cache", user_id)
        return SettingsResponse(settings=settings, sync_state=state, source="cache")

    try:
        remote = get_remote_settings(db, user_id)
    except SQLAlchemyError:
        logger.exception("Failed to load remote settings for user %s", user_id)
        db.rollback()
        remote = None

    if remote:
        cache.save(user_id, remote, SyncState.SYNCED)
        logger.info("Settings for user %s loaded from remote store", user_id)
        return SettingsResponse(settings=remote, sync_state=SyncState.SYNCED, source="remote")

    return SettingsResponse(settings=UserSettings(), sync_state=SyncState.UNSYNCED, source="defaults")


def update_settings(
    db: Session,
    cache: LocalSettingsCache,
    user_id: str,
    data: UpdateSettingsRequest,
) -> SettingsResponse:
    """Merge changes into the cached settings without touching the remote store."""
    current = load_settings(db, cache, user_id)
    changes = data.model_dump(exclude_none=True)
    settings = current.settings.model_copy(update=changes)

    state = current.sync_state
    if changes:
        state = transition(state, SyncState.UNSYNCED)

    cache.save(user_id, settings, state)
    return SettingsResponse(settings=settings, sync_state=state, source="cache")


def save_settings(db: Session, cache: LocalSettingsCache, user_id: str) -> SettingsResponse:
    """
    Persist settings to the cache and sync them to the remote store.

    A remote failure is logged and reported as sync_failed; the settings
    remain saved locally, so the call itself still succeeds.
    """
    current = load_settings(db, cache, user_id)
    settings = current.settings

    state = transition(current.sync_state, SyncState.SYNCING)
    cache.save(user_id, settings, state)

    try:
        upsert_remote_settings(db, user_id, settings)
        state = transition(state, SyncState.SYNCED)
        logger.info("Settings for user %s synced to remote store", user_id)
    except (SQLAlchemyError, ValueError):
        db.rollback()
        state = transition(state, SyncState.SYNC_FAILED)
        logger.exception("Failed to sync settings for user %s", user_id)

    cache.save(user_id, settings, state)
    return SettingsResponse(settings=settings, sync_state=state, source="cache")


def get_default_commission(db: Session, cache: LocalSettingsCache, user_id: Optional[str]) -> str:
    """The user's default commission percentage, or the app default for anonymous callers."""
    if not user_id:
        return Config.DEFAULT_COMMISSION
    return load_settings(db, cache, user_id).settings.default_commission
