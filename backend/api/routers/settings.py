"""User settings and account routes."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from backend.api.deps import get_current_user, get_settings_cache
from backend.db.session import get_db
from backend.models.settings import SettingsResponse, UpdateEmailRequest, UpdateSettingsRequest
from backend.services import account as account_service
from backend.services import settings as settings_service
from backend.services.settings import LocalSettingsCache


router = APIRouter(tags=["Settings"])


@router.get("/settings", response_model=SettingsResponse)
def get_settings(
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
    cache: LocalSettingsCache = Depends(get_settings_cache),
):
    """Load settings; the local cache takes precedence over the remote store."""
    return settings_service.load_settings(db, cache, user["user_id"])


@router.patch("/settings", response_model=SettingsResponse)
def update_settings(
    data: UpdateSettingsRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
    cache: LocalSettingsCache = Depends(get_settings_cache),
):
    """Change settings locally. Call /settings/save to sync them."""
    return settings_service.update_settings(db, cache, user["user_id"], data)


@router.post("/settings/save", response_model=SettingsResponse)
def save_settings(
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
    cache: LocalSettingsCache = Depends(get_settings_cache),
):
    """
    Save settings locally and sync them to the remote store.
    
    A failed remote sync is reported through `sync_state` and can be
    retried by calling this endpoint again.
    """
    return settings_service.save_settings(db, cache, user["user_id"])


@router.put("/account/email", response_model=SettingsResponse, tags=["Account"])
def update_email(
    data: UpdateEmailRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
    cache: LocalSettingsCache = Depends(get_settings_cache),
):
    """Change the account email. Supabase sends a confirmation link to the new address."""
    try:
        email = account_service.update_user_email(user["user_id"], data.email)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return settings_service.update_settings(
        db, cache, user["user_id"], UpdateSettingsRequest(email=email)
    )
