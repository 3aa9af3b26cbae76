"""Venue admin, venue profile and session models."""
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class VenueAdmin(BaseModel):
    """Admin record keyed by lower-cased email.

    Older records carry a single ``venue_id``; newer ones a ``venue_ids`` list.
    """
    email: str
    venue_ids: list[str] = Field(default_factory=list)
    venue_id: Optional[str] = None  # legacy shape

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return (v or "").strip().lower()

    def assigned_venue_ids(self) -> list[str]:
        """Return assigned venues, preferring the list over the legacy field."""
        if self.venue_ids:
            return list(self.venue_ids)
        if self.venue_id:
            return [self.venue_id]
        return []


class VenueProfile(BaseModel):
    """Venue metadata shown and edited on the portal dashboard."""
    venue_id: str
    name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    phone: str = ""
    website: str = ""
    instagram_url: str = ""
    venue_type: str = ""
    genre: str = ""
    tags: str = ""
    min_age: str = ""
    hours: list[str] = Field(default_factory=list)  # one free-text line per entry
    timezone: Optional[str] = None


class VenueDetailsUpdate(BaseModel):
    """Editable venue details. Unset fields are left unchanged."""
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    instagram_url: Optional[str] = None
    venue_type: Optional[str] = None
    genre: Optional[str] = None
    tags: Optional[str] = None
    min_age: Optional[str] = None

    @field_validator("*")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None


class VenueHoursUpdate(BaseModel):
    """Opening hours as lines, or as newline separated text."""
    hours: list[str] = Field(default_factory=list)

    @field_validator("hours", mode="before")
    @classmethod
    def split_lines(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split("\n")
        if isinstance(v, list):
            return [line.strip() for line in v if isinstance(line, str) and line.strip()]
        return v


class AdminSession(BaseModel):
    """Explicit per-request context: who is acting, on which venue."""
    admin_email: str
    venue_id: str
    venue_ids: list[str] = Field(default_factory=list)
