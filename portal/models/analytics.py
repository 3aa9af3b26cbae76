"""Analytics input documents and rolling summary models."""
from typing import Any, Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from portal.models.coercion import normalize_counts, to_count, to_datetime


class DailyGoingDay(BaseModel):
    """Attendance bucket for one calendar day."""
    date_key: str  # YYYY-MM-DD
    count: int = 0

    @field_validator("count", mode="before")
    @classmethod
    def coerce_count(cls, v: Any) -> int:
        return to_count(v)


class VibeDailyDay(BaseModel):
    """Vibe votes for one calendar day.

    ``counts`` keeps the category order of the source document
    (e.g. packed, buzzing, chill, quiet).
    """
    date_key: str
    total_votes: Optional[int] = None
    top_vibe: Optional[str] = None
    counts: dict[str, int] = Field(default_factory=dict)
    last_updated_at: Optional[datetime] = None

    @field_validator("counts", mode="before")
    @classmethod
    def coerce_counts(cls, v: Any) -> dict[str, int]:
        return normalize_counts(v)

    @field_validator("total_votes", mode="before")
    @classmethod
    def coerce_total_votes(cls, v: Any) -> Optional[int]:
        return None if v is None else to_count(v)

    @field_validator("top_vibe", mode="before")
    @classmethod
    def coerce_top_vibe(cls, v: Any) -> Optional[str]:
        text = str(v).strip() if v is not None else ""
        return text or None

    @field_validator("last_updated_at", mode="before")
    @classmethod
    def coerce_last_updated_at(cls, v: Any) -> Optional[datetime]:
        return to_datetime(v)


class ReviewRecord(BaseModel):
    """A review document as stored.

    Fields are kept loosely typed; the aggregator coerces them and treats
    anything unusable as a neutral contribution.
    """
    review_id: str = ""
    rating: Any = None
    vibe: Any = None
    comment: Any = None
    created_at: Any = None
    visit_date_key: Any = None


class DailyGoingSummary(BaseModel):
    """Attendance rollup: today and the 7 most recent days present."""
    total_days: int = 0
    today: int = 0
    last7: int = 0
    days: list[DailyGoingDay] = Field(default_factory=list)


class VibeDailySummary(BaseModel):
    """Vibe vote rollup over today and the 7 most recent days present."""
    total_days: int = 0
    today_votes: int = 0
    last7_votes: int = 0
    today_top_vibe: Optional[str] = None
    top_vibe_last7: Optional[str] = None
    today_counts: dict[str, int] = Field(default_factory=dict)
    last7_counts: dict[str, int] = Field(default_factory=dict)
    days: list[VibeDailyDay] = Field(default_factory=list)
    latest: Optional[VibeDailyDay] = None


class VibeTagCount(BaseModel):
    vibe: str
    count: int


class ReviewsSummary(BaseModel):
    """Review statistics.

    ``avg_rating`` is left unrounded; presentation rounds to one decimal.
    """
    total: int = 0
    avg_rating: float = 0.0
    last30_days: int = 0
    rating_distribution: dict[int, int] = Field(
        default_factory=lambda: {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    )
    top_vibe_tags: list[VibeTagCount] = Field(default_factory=list)
    latest: Optional[ReviewRecord] = None
    recent: list[ReviewRecord] = Field(default_factory=list)


class VenueAnalytics(BaseModel):
    """Full analytics view for one venue."""
    venue_id: str
    venue_name: str = ""
    generated_at: datetime
    daily_going: DailyGoingSummary
    vibe_daily: VibeDailySummary
    reviews: ReviewsSummary
