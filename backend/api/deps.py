"""API dependencies (auth, settings cache)."""
from typing import Optional
import jwt
from fastapi import Header, HTTPException
from backend.config import Config
from backend.services.settings import LocalSettingsCache


def _decode_token(token: str) -> dict:
    if not Config.SUPABASE_JWT_SECRET:
        raise HTTPException(status_code=500, detail="Missing SUPABASE_JWT_SECRET")
    try:
        return jwt.decode(
            token,
            Config.SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            options={"verify_aud": False},
        )
    except jwt.PyJWTError as exc:
        raise HTTPException(status_code=401, detail="Invalid or expired token") from exc


def _to_user(payload: dict) -> dict:
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Token has no subject")
    return {
        "user_id": user_id,
        "email": payload.get("email"),
    }


def get_current_user(authorization: Optional[str] = Header(None, alias="Authorization")) -> dict:
    """
    Extract and validate the Supabase JWT from the Authorization header.
    Returns user info dict with 'user_id' and 'email'.
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="Authorization header required")
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")
    token = authorization.split(" ")[1]
    return _to_user(_decode_token(token))


def get_optional_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> Optional[dict]:
    """Extract user if auth header present, otherwise None."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization.split(" ")[1]
    return _to_user(_decode_token(token))


def get_settings_cache() -> LocalSettingsCache:
    """Local settings cache rooted at SETTINGS_CACHE_DIR."""
    return LocalSettingsCache(Config.SETTINGS_CACHE_DIR)
