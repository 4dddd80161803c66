"""Freebet statistics routes."""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from backend.api.deps import get_current_user
from backend.db.session import get_db
from backend.models.freebet import FreebetOverview
from backend.models.stats import MonthlySummary
from backend.services import freebets as freebets_service
from backend.utils.aggregation import aggregate_by_month, find_month, summarize_freebets


router = APIRouter(prefix="/stats", tags=["Stats"])


@router.get("/overview", response_model=FreebetOverview)
def get_overview(
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Freebet counts per status, active face value and total realised profit."""
    freebets = freebets_service.list_freebets(db, user["user_id"])
    return summarize_freebets(freebets)


@router.get("/monthly", response_model=List[MonthlySummary])
def get_monthly_stats(
    reference_date: Optional[date] = Query(None, description="Last month of the window (defaults to today)"),
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Summaries for the trailing 12 months, most recent first."""
    freebets = freebets_service.list_freebets(db, user["user_id"])
    return aggregate_by_month(freebets, reference_date)


@router.get("/monthly/{year}/{month}", response_model=MonthlySummary)
def get_month_stats(
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., ge=1, le=12),
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Summary for a single month; months outside the trailing window are empty."""
    freebets = freebets_service.list_freebets(db, user["user_id"])
    return find_month(aggregate_by_month(freebets), year, month)
