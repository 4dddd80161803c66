"""Pydantic models for freebet tracking."""
from datetime import date, datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator, model_validator
from enum import Enum

from backend.models.calculator import ExtractionRequest


class FreebetStatus(str, Enum):
    """Lifecycle status of a freebet."""
    ACTIVE = "active"
    EXPIRED = "expired"
    EXTRACTED = "extracted"


def _clean_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Name must not be blank")
    return value


class CreateFreebetRequest(BaseModel):
    """Request model for registering a new freebet."""
    name: str = Field(..., min_length=1, description="Freebet name (e.g. 'Bet365 £10 free bet')")
    value: float = Field(..., gt=0, description="Face value of the freebet")
    min_odds: float = Field(..., ge=1.0, description="Minimum qualifying odds")
    expiry: date = Field(..., description="Expiry date")
    
    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return _clean_name(value)
    
    class Config:
        json_schema_extra = {
            "example": {
                "name": "Bet365 £50 free bet",
                "value": 50.0,
                "min_odds": 2.0,
                "expiry": "2026-12-31",
            }
        }


class UpdateFreebetRequest(BaseModel):
    """Request model for editing a freebet's details."""
    name: Optional[str] = Field(None, min_length=1)
    value: Optional[float] = Field(None, gt=0)
    min_odds: Optional[float] = Field(None, ge=1.0)
    expiry: Optional[date] = None
    
    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _clean_name(value)


class ExtractFreebetRequest(BaseModel):
    """
    Request model for marking a freebet as extracted.
    
    Either a manually entered profit or the calculator inputs used for
    the extraction; the calculated profit is stored in the latter case.
    """
    extracted_value: Optional[float] = Field(None, ge=0, description="Realised profit")
    calculation: Optional[ExtractionRequest] = Field(None, description="Calculator inputs")
    
    @model_validator(mode="after")
    def _one_source(self):
        if (self.extracted_value is None) == (self.calculation is None):
            raise ValueError("Provide exactly one of extracted_value or calculation")
        return self


class Freebet(BaseModel):
    """Freebet record."""
    id: str
    user_id: str
    name: str
    value: float
    min_odds: float
    expiry: date
    status: FreebetStatus = FreebetStatus.ACTIVE
    extracted_value: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    @model_validator(mode="after")
    def _extracted_value_matches_status(self):
        if (self.status == FreebetStatus.EXTRACTED) != (self.extracted_value is not None):
            raise ValueError("extracted_value must be set if and only if status is 'extracted'")
        return self


class FreebetOverview(BaseModel):
    """Dashboard counters across all of a user's freebets."""
    active_freebets: int = 0
    expired_freebets: int = 0
    extracted_freebets: int = 0
    total_active_value: float = 0.0
    total_profit: float = 0.0


class FreebetsResponse(BaseModel):
    """Response model for listing freebets."""
    freebets: List[Freebet]
    total: int
    overview: FreebetOverview
