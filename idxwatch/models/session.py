"""Market session state model."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class SessionStatus(str, Enum):
    """Open/closed classification of the market."""

    OPEN = "OPEN"
    CLOSED_WEEKEND = "CLOSED_WEEKEND"
    CLOSED_HOLIDAY = "CLOSED_HOLIDAY"
    CLOSED_AFTER_HOURS = "CLOSED_AFTER_HOURS"


class MarketSessionState(BaseModel):
    """Session state at a given instant."""

    status: SessionStatus = Field(..., description="Session classification")
    next_open_at: Optional[datetime] = Field(
        default=None, description="Next trading-day open (None while open)"
    )

    model_config = {"frozen": True}

    @property
    def is_open(self) -> bool:
        return self.status is SessionStatus.OPEN
