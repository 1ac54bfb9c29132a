"""
Event-related Pydantic schemas
"""

from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from campus_pulse.schemas.club import Category
from campus_pulse.schemas.common import CamelModel, Timestamp, URL_PATTERN

class Review(CamelModel):
    """A review left on a past event"""
    id: str
    author: str
    rating: int = Field(ge=1, le=5)
    comment: str
    date: Timestamp  # submission time

class Event(CamelModel):
    """An event as stored in the events collection"""
    id: str
    club_id: str
    slug: str
    title: str
    description: str
    date: Timestamp
    location: str
    category: Category
    registration_link: str
    image: str
    tags: List[str] = Field(default_factory=list)
    gallery: List[str] = Field(default_factory=list)
    reviews: List[Review] = Field(default_factory=list)

    @field_validator("tags", "gallery", "reviews", mode="before")
    @classmethod
    def _missing_collection_is_empty(cls, value):
        return [] if value is None else value

# -------- Forms --------

class EventCreate(CamelModel):
    """Event form, used for both create and edit"""
    title: str = Field(min_length=3)
    description: str = Field(min_length=10)
    date: date
    time: str = Field(default="18:00", pattern=r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
    location: str = Field(min_length=3)
    registration_link: str = Field(pattern=URL_PATTERN)
    image: Optional[str] = None
    tags: Optional[str] = None  # comma separated

class ReviewCreate(BaseModel):
    """Review form"""
    author: str = Field(min_length=2)
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=10)

class GalleryUpload(BaseModel):
    images: List[str] = Field(min_length=1)

class GalleryRemove(BaseModel):
    image: str
