"""Freebet tracking routes."""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session
from backend.api.deps import get_current_user, get_settings_cache
from backend.api.routers.calculator import run_extraction
from backend.db.session import get_db
from backend.models.freebet import (
    CreateFreebetRequest,
    ExtractFreebetRequest,
    Freebet,
    FreebetsResponse,
    FreebetStatus,
    UpdateFreebetRequest,
)
from backend.services import freebets as freebets_service
from backend.services.settings import LocalSettingsCache
from backend.utils.aggregation import summarize_freebets
from backend.utils.export import export_freebets_to_csv


router = APIRouter(prefix="/freebets", tags=["Freebets"])


@router.get("", response_model=FreebetsResponse)
def list_freebets(
    status: Optional[FreebetStatus] = Query(None, description="Filter by status"),
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get all freebets for the current user, newest first."""
    freebets = freebets_service.list_freebets(db, user["user_id"])
    overview = summarize_freebets(freebets)
    if status:
        freebets = [f for f in freebets if f.status == status]
    return FreebetsResponse(freebets=freebets, total=len(freebets), overview=overview)


@router.post("", response_model=Freebet, status_code=201)
def create_freebet(
    data: CreateFreebetRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Register a new freebet. Freebets already past their expiry are stored as expired."""
    try:
        return freebets_service.create_freebet(db, user["user_id"], data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("")
def clear_freebets(
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete the current user's entire freebet history."""
    deleted = freebets_service.clear_freebets(db, user["user_id"])
    return {"message": "Freebet history cleared", "deleted": deleted}


@router.get("/export")
def export_freebets(
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Download the current user's freebets as CSV."""
    freebets = freebets_service.list_freebets(db, user["user_id"])
    return Response(
        content=export_freebets_to_csv(freebets),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="freebets.csv"'},
    )


@router.get("/{freebet_id}", response_model=Freebet)
def get_freebet(
    freebet_id: str,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get a specific freebet."""
    try:
        return freebets_service.get_freebet(db, user["user_id"], freebet_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{freebet_id}", response_model=Freebet)
def update_freebet(
    freebet_id: str,
    data: UpdateFreebetRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update a freebet's name, value, minimum odds or expiry."""
    try:
        return freebets_service.update_freebet(db, user["user_id"], freebet_id, data)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{freebet_id}")
def delete_freebet(
    freebet_id: str,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a freebet."""
    success = freebets_service.delete_freebet(db, user["user_id"], freebet_id)
    if not success:
        raise HTTPException(status_code=404, detail="Freebet not found")
    return {"message": "Freebet deleted"}


@router.post("/{freebet_id}/extract", response_model=Freebet)
def extract_freebet(
    freebet_id: str,
    data: ExtractFreebetRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
    cache: LocalSettingsCache = Depends(get_settings_cache),
):
    """
    Mark a freebet as extracted.
    
    Send either `extracted_value` (profit entered by hand) or `calculation`
    (calculator inputs); with a calculation the guaranteed profit is stored.
    """
    user_id = user["user_id"]
    try:
        freebets_service.get_freebet(db, user_id, freebet_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    try:
        if data.calculation is not None:
            result = run_extraction(data.calculation, user_id, db, cache)
            return freebets_service.apply_extraction_result(db, user_id, freebet_id, result)
        return freebets_service.extract_freebet(db, user_id, freebet_id, data.extracted_value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{freebet_id}/reactivate", response_model=Freebet)
def reactivate_freebet(
    freebet_id: str,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Return an extracted or expired freebet to active, clearing its extracted value."""
    try:
        return freebets_service.reactivate_freebet(db, user["user_id"], freebet_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
