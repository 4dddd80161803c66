"""Service for managing freebet records."""
from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from backend.db.models import FreebetModel
from backend.models.calculator import ExtractionResult
from backend.models.freebet import (
    CreateFreebetRequest,
    Freebet,
    FreebetStatus,
    UpdateFreebetRequest,
)


logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def derive_status(expiry: date, today: Optional[date] = None) -> FreebetStatus:
    """Status of a freebet that has not been extracted: expired once its expiry date has passed."""
    today = today or date.today()
    return FreebetStatus.EXPIRED if expiry < today else FreebetStatus.ACTIVE


def _get_model(db: Session, user_id: str, freebet_id: str) -> FreebetModel:
    stmt = select(FreebetModel).where(
        FreebetModel.id == freebet_id,
        FreebetModel.user_id == user_id,
    )
    row = db.execute(stmt).scalars().first()
    if not row:
        raise ValueError("Freebet not found")
    return row


def refresh_expired(db: Session, user_id: str, today: Optional[date] = None) -> int:
    """Move active freebets whose expiry has passed to expired. Returns the number updated."""
    today = today or date.today()
    stmt = select(FreebetModel).where(
        FreebetModel.user_id == user_id,
        FreebetModel.status == FreebetStatus.ACTIVE.value,
        FreebetModel.expiry < today,
    )
    rows = db.execute(stmt).scalars().all()
    for row in rows:
        row.status = FreebetStatus.EXPIRED.value
        row.updated_at = _now()
    if rows:
        db.commit()
        logger.info("Marked %d freebet(s) as expired for user %s", len(rows), user_id)
    return len(rows)


def list_freebets(
    db: Session,
    user_id: str,
    status: Optional[FreebetStatus] = None,
    today: Optional[date] = None,
) -> List[Freebet]:
    """Get a user's freebets, newest first, after refreshing expiry status."""
    refresh_expired(db, user_id, today=today)

    stmt = select(FreebetModel).where(FreebetModel.user_id == user_id)
    if status:
        stmt = stmt.where(FreebetModel.status == status.value)
    stmt = stmt.order_by(FreebetModel.created_at.desc())

    rows = db.execute(stmt).scalars().all()
    return [_parse_freebet(row) for row in rows]


def get_freebet(db: Session, user_id: str, freebet_id: str) -> Freebet:
    """Get a specific freebet."""
    return _parse_freebet(_get_model(db, user_id, freebet_id))


def create_freebet(
    db: Session,
    user_id: str,
    data: CreateFreebetRequest,
    today: Optional[date] = None,
) -> Freebet:
    """Register a new freebet; its status is derived from the expiry date."""
    now = _now()
    model = FreebetModel(
        id=str(uuid.uuid4()),
        user_id=user_id,
        name=data.name,
        value=float(data.value),
        min_odds=float(data.min_odds),
        expiry=data.expiry,
        status=derive_status(data.expiry, today).value,
        extracted_value=None,
        created_at=now,
        updated_at=now,
    )
    db.add(model)
    db.commit()
    db.refresh(model)
    logger.info("Created freebet %s (%s) for user %s", model.id, model.status, user_id)
    return _parse_freebet(model)


def update_freebet(
    db: Session,
    user_id: str,
    freebet_id: str,
    data: UpdateFreebetRequest,
    today: Optional[date] = None,
) -> Freebet:
    """Update a freebet's name, value, minimum odds or expiry.

    A new expiry re-derives the status of freebets that are not extracted.
    """
    model = _get_model(db, user_id, freebet_id)
    update_data = data.model_dump(exclude_none=True)

    if not update_data:
        return _parse_freebet(model)

    for field, value in update_data.items():
        setattr(model, field, value)
    if "expiry" in update_data and model.status != FreebetStatus.EXTRACTED.value:
        model.status = derive_status(model.expiry, today).value
    model.updated_at = _now()

    db.commit()
    db.refresh(model)
    return _parse_freebet(model)


def delete_freebet(db: Session, user_id: str, freebet_id: str) -> bool:
    """Delete a freebet."""
    result = db.execute(
        delete(FreebetModel).where(
            FreebetModel.id == freebet_id,
            FreebetModel.user_id == user_id,
        )
    )
    db.commit()
    deleted = (result.rowcount or 0) > 0
    if deleted:
        logger.info("Deleted freebet %s for user %s", freebet_id, user_id)
    return deleted


def clear_freebets(db: Session, user_id: str) -> int:
    """Delete all of a user's freebets."""
    result = db.execute(delete(FreebetModel).where(FreebetModel.user_id == user_id))
    db.commit()
    count = result.rowcount or 0
    logger.info("Cleared %d freebet(s) for user %s", count, user_id)
    return count


def extract_freebet(db: Session, user_id: str, freebet_id: str, extracted_value: float) -> Freebet:
    """Mark a freebet as extracted with the realised profit."""
    if extracted_value < 0:
        raise ValueError("Extracted value cannot be negative")

    model = _get_model(db, user_id, freebet_id)
    model.status = FreebetStatus.EXTRACTED.value
    model.extracted_value = float(extracted_value)
    model.updated_at = _now()

    db.commit()
    db.refresh(model)
    logger.info("Extracted freebet %s for user %s: %.2f", freebet_id, user_id, extracted_value)
    return _parse_freebet(model)


def apply_extraction_result(
    db: Session,
    user_id: str,
    freebet_id: str,
    result: ExtractionResult,
) -> Freebet:
    """Mark a freebet as extracted using the guaranteed profit of a calculation."""
    return extract_freebet(db, user_id, freebet_id, result.profit)


def reactivate_freebet(db: Session, user_id: str, freebet_id: str) -> Freebet:
    """Return a freebet to active, clearing any extracted value."""
    model = _get_model(db, user_id, freebet_id)
    model.status = FreebetStatus.ACTIVE.value
    model.extracted_value = None
    model.updated_at = _now()

    db.commit()
    db.refresh(model)
    logger.info("Reactivated freebet %s for user %s", freebet_id, user_id)
    return _parse_freebet(model)


def _parse_freebet(model: FreebetModel) -> Freebet:
    """Convert SQLAlchemy model to Pydantic."""
    status = FreebetStatus(model.status)
    return Freebet(
        id=str(model.id),
        user_id=str(model.user_id),
        name=model.name,
        value=float(model.value),
        min_odds=float(model.min_odds),
        expiry=model.expiry,
        status=status,
        extracted_value=float(model.extracted_value or 0) if status == FreebetStatus.EXTRACTED else None,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
