"""Pydantic models for user settings."""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator
from enum import Enum

from backend.config import Config


class Theme(str, Enum):
    """UI theme."""
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class SyncState(str, Enum):
    """Sync state of the locally cached settings against the remote store."""
    UNSYNCED = "unsynced"
    SYNCING = "syncing"
    SYNCED = "synced"
    SYNC_FAILED = "sync_failed"


def _check_decimal(value: str) -> str:
    try:
        float(value)
    except (TypeError, ValueError):
        raise ValueError("default_commission must be a decimal string")
    return value


class UserSettings(BaseModel):
    """Per-user planner settings."""
    default_commission: str = Field(default=Config.DEFAULT_COMMISSION, description="Exchange commission in percent")
    auto_calculate: bool = False
    theme: Theme = Theme(Config.DEFAULT_THEME)
    email: str = ""
    
    @field_validator("default_commission")
    @classmethod
    def _commission_is_decimal(cls, value: str) -> str:
        return _check_decimal(value)


class UpdateSettingsRequest(BaseModel):
    """Partial settings update."""
    default_commission: Optional[str] = None
    auto_calculate: Optional[bool] = None
    theme: Optional[Theme] = None
    email: Optional[str] = None
    
    @field_validator("default_commission")
    @classmethod
    def _commission_is_decimal(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _check_decimal(value)


class SettingsResponse(BaseModel):
    """Settings together with their sync state."""
    settings: UserSettings
    sync_state: SyncState
    source: str = Field(..., description="Where the settings were loaded from: cache, remote or defaults")


class UpdateEmailRequest(BaseModel):
    """Request model for changing the account email."""
    email: EmailStr = Field(..., description="New email address")
