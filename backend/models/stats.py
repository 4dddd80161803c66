"""Pydantic models for freebet statistics."""
from pydantic import BaseModel, Field


class MonthlySummary(BaseModel):
    """Freebet activity attributed to a single calendar month."""
    month_key: str = Field(..., description="Month key in YYYY-MM format")
    year: int
    month: int = Field(..., ge=1, le=12)
    label: str = Field(..., description="Display label, e.g. 'October 2026'")
    total_freebets: int = 0
    active_freebets: int = 0
    extracted_freebets: int = 0
    expired_freebets: int = 0
    total_value: float = 0.0
    extracted_value: float = 0.0
    profit: float = 0.0
    extraction_rate: float = 0.0
