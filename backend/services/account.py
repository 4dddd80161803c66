"""Account service backed by Supabase Auth."""
import logging

from supabase import AuthError

from backend.database.supabase_client import get_supabase_client


logger = logging.getLogger(__name__)


def update_user_email(user_id: str, email: str) -> str:
    """
    Change a user's email address in Supabase Auth.

    Supabase sends a confirmation link to the new address; the change
    takes effect once it is confirmed.
    """
    supabase = get_supabase_client()
    try:
        response = supabase.auth.admin.update_user_by_id(user_id, {"email": email})
    except AuthError as e:
        logger.warning("Email update failed for user %s: %s", user_id, e)
        raise ValueError(f"Failed to update email: {e}") from e

    if not response or not response.user:
        raise ValueError("Failed to update email")

    logger.info("Email update requested for user %s", user_id)
    return email
