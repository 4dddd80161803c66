"""Services package for the freebet planner backend."""

from backend.services.freebets import (
    list_freebets,
    get_freebet,
    create_freebet,
    update_freebet,
    delete_freebet,
    clear_freebets,
    extract_freebet,
    apply_extraction_result,
    reactivate_freebet,
)
from backend.services.settings import (
    LocalSettingsCache,
    load_settings,
    update_settings,
    save_settings,
)
from backend.services.account import update_user_email
