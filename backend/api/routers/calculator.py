"""Calculator endpoints."""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from backend.api.deps import get_optional_user, get_settings_cache
from backend.db.session import get_db
from backend.models.calculator import ExtractionRequest, ExtractionResult
from backend.services.settings import LocalSettingsCache, get_default_commission
from backend.utils.calculator import (
    calculate_extraction,
    calculate_extraction_from_strings,
    parse_decimal,
    validate_extraction_inputs,
)


router = APIRouter(tags=["Calculator"])


def run_extraction(
    request: ExtractionRequest,
    user_id: Optional[str],
    db: Session,
    cache: LocalSettingsCache,
) -> ExtractionResult:
    """Validate a calculator request, filling in the default commission, and calculate it."""
    commission = request.commission_percent
    if commission is None:
        commission = parse_decimal(get_default_commission(db, cache, user_id))
        if commission is None:
            raise HTTPException(status_code=400, detail="Default commission is not a number")

    try:
        validate_extraction_inputs(request.freebet_value, request.back_odds, request.lay_odds, commission)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return calculate_extraction(request.freebet_value, request.back_odds, request.lay_odds, commission)


@router.post("/calculate/extraction", response_model=ExtractionResult)
def calculate_freebet_extraction(
    request: ExtractionRequest,
    user: Optional[dict] = Depends(get_optional_user),
    db: Session = Depends(get_db),
    cache: LocalSettingsCache = Depends(get_settings_cache),
):
    """
    Calculate the lay stake and guaranteed profit for a Stake Not Returned free bet.
    
    When `commission_percent` is omitted the authenticated user's default
    commission is used (or the app default for anonymous requests).
    
    Example: £50 free bet, back 3.0, lay 3.4, 4.5% commission
    -> lay £29.81 (liability £71.54), guaranteed profit £28.46 (56.92%).
    """
    return run_extraction(request, user["user_id"] if user else None, db, cache)


@router.get("/calculate/extraction", response_model=Optional[ExtractionResult])
def calculate_freebet_extraction_from_form(
    freebet_value: Optional[str] = Query(None, description="Value of the free bet"),
    back_odds: Optional[str] = Query(None, description="Back odds at bookmaker"),
    lay_odds: Optional[str] = Query(None, description="Lay odds at exchange"),
    commission: Optional[str] = Query(None, description="Exchange commission in percent"),
):
    """
    Calculate from raw form values.
    
    Returns null while any field is empty or not a number. Values are not
    range-checked.
    """
    return calculate_extraction_from_strings(freebet_value, back_odds, lay_odds, commission)
