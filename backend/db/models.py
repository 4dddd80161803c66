"""SQLAlchemy models mapping Supabase tables."""
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    String,
)
from backend.db.base import Base


class FreebetModel(Base):
    """Represents freebets table."""

    __tablename__ = "freebets"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    name = Column(String, nullable=False)
    value = Column(Float, nullable=False)
    min_odds = Column(Float, nullable=False)
    expiry = Column(Date, nullable=False)
    status = Column(String, nullable=False, default="active")
    extracted_value = Column(Float, nullable=True)
    created_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, nullable=True)


class UserSettingsModel(Base):
    """Represents user_settings table."""

    __tablename__ = "user_settings"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, unique=True, index=True, nullable=False)
    default_commission = Column(Float, nullable=True)
    auto_calculate = Column(Boolean, nullable=True, default=False)
    theme = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, nullable=True)
