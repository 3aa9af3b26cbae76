"""Event and recurrence models using Pydantic."""
from typing import Optional, Literal
from datetime import datetime
from pydantic import BaseModel, Field, field_validator, model_validator

from portal.models.coercion import utc_now

EventStatus = Literal["active", "draft", "cancelled"]

AGE_REQUIREMENTS = ["18+", "21+"]


def _check_age_requirement(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if value not in AGE_REQUIREMENTS:
        raise ValueError(f"age_requirement must be one of {AGE_REQUIREMENTS}")
    return value


class Occurrence(BaseModel):
    """One concrete (start, end) instance of a possibly recurring event."""
    start: datetime
    end: datetime

    @model_validator(mode="after")
    def check_end_after_start(self) -> "Occurrence":
        if self.end <= self.start:
            raise ValueError("occurrence end must be after start")
        return self

    @property
    def duration_seconds(self) -> float:
        return (self.end - self.start).total_seconds()


class RecurrenceRequest(BaseModel):
    """Inputs to the weekly occurrence generator.

    Weekdays use 0=Sunday .. 6=Saturday. The generator itself rejects an
    empty weekday set, so this model stays permissive.
    """
    start: datetime
    end: datetime
    weekdays: list[int] = Field(default_factory=list)
    count: int = 10


class Recurrence(BaseModel):
    """Recurrence metadata stored on every occurrence of a series."""
    frequency: Literal["weekly"] = "weekly"
    by_weekday: list[int]
    occurrences: int
    timezone: str


class EventDraft(BaseModel):
    """Event fields as entered by a venue admin."""
    name: str = ""
    description: str = ""
    status: EventStatus = "active"
    cover_charge: str = ""
    age_requirement: str = "21+"
    music_genres: list[str] = Field(default_factory=list)
    artists: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    # "Ladies Free Before X" -> "9:30 PM" etc.
    tag_times: dict[str, str] = Field(default_factory=dict)
    dress_code: str = ""
    event_type: str = ""
    promoted: bool = False
    images: list[str] = Field(default_factory=list)
    ticket_url: str = ""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    is_recurring: bool = False
    repeat_weekdays: list[int] = Field(default_factory=list)
    occurrences: Optional[int] = None

    @field_validator("artists", "music_genres", "images", mode="before")
    @classmethod
    def split_text_lists(cls, v):
        """Accept comma/newline separated text as well as lists."""
        if isinstance(v, str):
            parts = v.replace("\n", ",").split(",")
            return [p.strip() for p in parts if p.strip()]
        return v

    @field_validator("age_requirement")
    @classmethod
    def check_age_requirement(cls, v: str) -> str:
        return _check_age_requirement(v)


class EventUpdate(BaseModel):
    """Editable fields of a single occurrence.

    Recurrence fields are not editable here; an edit never changes the series.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    event_type: Optional[str] = None
    age_requirement: Optional[str] = None
    dress_code: Optional[str] = None
    cover_charge: Optional[str] = None
    ticket_url: Optional[str] = None
    artists: Optional[list[str]] = None
    music_genres: Optional[list[str]] = None
    tags: Optional[list[str]] = None
    images: Optional[list[str]] = None
    status: Optional[EventStatus] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @field_validator("age_requirement")
    @classmethod
    def check_age_requirement(cls, v: Optional[str]) -> Optional[str]:
        return _check_age_requirement(v)


class Event(BaseModel):
    """A persisted event occurrence."""
    event_id: str
    venue_id: str
    venue_name: str = ""

    name: str
    description: str = ""
    status: EventStatus = "active"
    cover_charge: str = ""
    age_requirement: str = ""
    music_genres: list[str] = Field(default_factory=list)
    artists: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    dress_code: str = ""
    event_type: str = ""
    promoted: bool = False
    images: list[str] = Field(default_factory=list)
    ticket_url: str = ""

    start_date: datetime
    end_date: datetime

    is_recurring: bool = False
    series_id: Optional[str] = None
    recurrence: Optional[Recurrence] = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    created_by_admin_email: Optional[str] = None

    hot_score: int = 0
    views: int = 0
