"""PricePoint data model."""

from datetime import datetime
from pydantic import BaseModel, Field


class PricePoint(BaseModel):
    """A single observed (or placeholder) price at an instant."""

    timestamp: datetime = Field(..., description="Sample timestamp")
    price: float = Field(..., description="Observed price")

    model_config = {"frozen": True}
