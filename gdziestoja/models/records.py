from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, Field


class UrlType(str, Enum):
    VOIVODESHIP = "voivodeship"
    CITY = "city"


class DiscoveredURL(BaseModel):
    type: UrlType
    url: str = Field(..., min_length=1, description="Site-relative link as found on the page")
    created: str = Field(..., description="ISO8601 UTC timestamp of first discovery")


class VenueCreate(BaseModel):
    """Insert-or-replace payload for a venue, keyed by (title, location)."""

    title: str
    location: Tuple[str, str] = Field(..., description="(lat, lng) exactly as found in the map link")
    description: str = ""
    date_added: str = Field(..., description="ISO8601 UTC timestamp")
    author: str = "Unknown"
    rating: float = Field(0.0, ge=0, le=5)

    @property
    def location_text(self) -> str:
        return f"{self.location[0]},{self.location[1]}"


class CommentCreate(BaseModel):
    venue_id: int
    parent_id: Optional[int] = Field(None, description="Generated id of the root comment this reply belongs to")
    text: str = ""
    author: str = "Unknown"
    score: str = "0"
    timestamp: str
