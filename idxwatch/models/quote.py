"""Quote data model."""

from pydantic import BaseModel, Field


class Quote(BaseModel):
    """Represents a scraped quote for a symbol."""

    symbol: str = Field(..., min_length=1, description="Exchange-qualified symbol")
    price: float = Field(..., ge=0, description="Last price")
    change_text: str = Field(
        default="", description="Change versus previous close (e.g., '+25.00 (0.26%)')"
    )
    details: list[tuple[str, str]] = Field(
        default_factory=list, description="Key statistics as (label, value) rows"
    )

    model_config = {"frozen": True}

    @property
    def display_symbol(self) -> str:
        """Symbol without the exchange suffix."""
        return self.symbol.split(":", 1)[0]
