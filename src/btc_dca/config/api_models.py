"""Pydantic models for API request validation and responses."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime

from btc_dca.schedule.schedule_generator import Cadence


class SimulationRequest(BaseModel):
    """Request model for the simulation endpoint."""

    start_date: str = Field(
        ...,
        description="First purchase date (YYYY-MM-DD)"
    )
    end_date: str = Field(
        ...,
        description="Last date a purchase may fall on (YYYY-MM-DD, inclusive)"
    )
    cadence: Cadence = Field(
        default=Cadence.WEEKLY,
        description="Purchase interval: weekly, biweekly or monthly"
    )
    amount: float = Field(
        default=100.0,
        gt=0,
        allow_inf_nan=False,
        description="Fiat amount spent on each purchase (> 0)"
    )

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "start_date": "2024-01-01",
            "end_date": "2024-12-31",
            "cadence": "weekly",
            "amount": 100,
        }
    })

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def validate_dates(cls, v):
        """Validate date format."""
        if not isinstance(v, str):
            raise ValueError("Dates must be strings in YYYY-MM-DD format")

        v = v.strip()
        try:
            datetime.strptime(v, "%Y-%m-%d")
            return v
        except ValueError:
            raise ValueError(f"Invalid date format: {v}. Use YYYY-MM-DD")

    @field_validator("cadence", mode="before")
    @classmethod
    def normalize_cadence(cls, v):
        """Accept cadence names case-insensitively."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class TimelinePointModel(BaseModel):
    date: str
    invested_cumulative: float
    btc_cumulative: float
    value: float
    price: float


class SummaryModel(BaseModel):
    total_invested: float = 0.0
    total_units: float = 0.0
    current_value: float = 0.0
    profit_and_loss: float = 0.0
    profit_and_loss_percent: float = 0.0
    latest_price: float = 0.0


class SimulationResponse(BaseModel):
    """Response model for the simulation endpoint."""

    timeline: List[TimelinePointModel]
    summary: SummaryModel
    schedule_size: int
    used_mock_prices: bool = False


class NewsItemModel(BaseModel):
    title: str
    link: str = "#"
    source: str = ""
    published_at: Optional[str] = None
    score: int = Field(..., ge=0, le=100)


class SentimentResponse(BaseModel):
    """Response model for the sentiment endpoint."""

    score: int = Field(default=50, ge=0, le=100)
    label: str = Field(default="Neutral/Range", description="Bullish tilt, Bearish tilt or Neutral/Range")
    items: List[NewsItemModel] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error response model."""

    status: str = "error"
    error_code: str
    message: str
    details: Optional[dict] = None
    timestamp: str
