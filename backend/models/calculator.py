"""Pydantic models for the freebet extraction calculator."""
from typing import Optional
from pydantic import BaseModel, Field


class ExtractionRequest(BaseModel):
    """Request model for a Stake Not Returned extraction."""
    freebet_value: float = Field(..., gt=0, description="Face value of the free bet")
    back_odds: float = Field(..., gt=1.0, description="Back odds at bookmaker")
    lay_odds: float = Field(..., gt=1.0, description="Lay odds at exchange")
    commission_percent: Optional[float] = Field(
        None,
        ge=0,
        lt=100,
        description="Exchange commission in percent (4.5 = 4.5%). Defaults to the user's setting.",
    )
    
    class Config:
        json_schema_extra = {
            "example": {
                "freebet_value": 50.0,
                "back_odds": 3.0,
                "lay_odds": 3.4,
                "commission_percent": 4.5
            }
        }


class ExtractionResult(BaseModel):
    """Result of a Stake Not Returned extraction."""
    # Input echo
    freebet_value: float
    back_odds: float
    lay_odds: float
    commission: float = Field(..., description="Commission as a fraction (0.045 = 4.5%)")
    
    # Calculated values
    back_stake: float = Field(..., description="Stake placed with the free bet (unrounded)")
    lay_stake: float = Field(..., description="Amount to lay at exchange")
    liability: float = Field(..., description="Potential loss at exchange if back bet wins")
    back_win: float = Field(..., description="Net result if the back bet wins")
    lay_win: float = Field(..., description="Net result if the lay bet wins")
    profit: float = Field(..., description="Guaranteed profit (worst of both outcomes)")
    extraction_rate: float = Field(..., description="Profit as a percentage of the free bet value")
    
    class Config:
        json_schema_extra = {
            "example": {
                "freebet_value": 50.0,
                "back_odds": 3.0,
                "lay_odds": 3.4,
                "commission": 0.045,
                "back_stake": 50.0,
                "lay_stake": 29.81,
                "liability": 71.54,
                "back_win": 28.46,
                "lay_win": 28.46,
                "profit": 28.46,
                "extraction_rate": 56.92
            }
        }
