"""
Data models for the Lagos cinema guide.

Defines Pydantic models for movies, cinemas and showtimes as they come out of
the listings database, plus the embedded and enumeration shapes returned by
the query client. Rows are mapped to these models at the database boundary so
callers never handle raw mappings.
"""

from datetime import datetime
from datetime import timezone
from typing import List
from typing import Optional
from typing import Union

from pydantic import BaseModel
from pydantic import Field
from pydantic import field_validator


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Accepts a trailing ``Z`` as UTC. Naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class Movie(BaseModel):
    """
    A movie as stored in the listings database.

    The title is never None: a NULL title maps to the empty string so the
    record can always be sorted by title.
    """

    id: int = Field(
        ...,
        description="Database primary key"
    )

    title: str = Field(
        default="",
        description="Display title"
    )

    description: Optional[str] = Field(
        default=None,
        description="Plot summary"
    )

    release_year: Optional[int] = Field(
        default=None,
        description="Year of release"
    )

    duration_minutes: Optional[int] = Field(
        default=None,
        ge=0,
        description="Running time in minutes"
    )

    rating: Optional[float] = Field(
        default=None,
        description="Primary audience rating (e.g. IMDb)"
    )

    poster_url: Optional[str] = Field(
        default=None,
        description="Poster image reference"
    )

    metacritic_rating: Optional[float] = Field(
        default=None,
        description="Metacritic score"
    )

    rotten_tomatoes_rating: Optional[float] = Field(
        default=None,
        description="Rotten Tomatoes score"
    )

    created_at: Optional[datetime] = Field(
        default=None,
        description="When the row was created"
    )

    updated_at: Optional[datetime] = Field(
        default=None,
        description="When the row was last updated"
    )

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, v: Optional[str]) -> str:
        """Map a NULL title to the empty string."""
        return "" if v is None else v


class Cinema(BaseModel):
    """A cinema venue."""

    id: int = Field(
        ...,
        description="Database primary key"
    )

    name: str = Field(
        ...,
        description="Cinema name"
    )

    location: Optional[str] = Field(
        default=None,
        description="Short location, e.g. neighbourhood"
    )

    verbose_location: Optional[str] = Field(
        default=None,
        description="Longer location text preferred for display"
    )

    address: Optional[str] = Field(
        default=None,
        description="Street address"
    )

    created_at: Optional[datetime] = Field(
        default=None,
        description="When the row was created"
    )

    updated_at: Optional[datetime] = Field(
        default=None,
        description="When the row was last updated"
    )

    @property
    def display_location(self) -> Optional[str]:
        """Verbose location if present, else location, else None."""
        return self.verbose_location or self.location or None


class Showtime(BaseModel):
    """
    A single screening of a movie at a cinema.

    ``start_time`` keeps the ISO-8601 text exactly as stored so timestamps
    compare chronologically as strings; use ``starts_at`` for a datetime.
    """

    id: int = Field(
        ...,
        description="Database primary key"
    )

    movie_id: int = Field(
        ...,
        description="Reference to the screened movie"
    )

    cinema_id: int = Field(
        ...,
        description="Reference to the cinema"
    )

    start_time: str = Field(
        ...,
        min_length=1,
        description="Start instant as ISO-8601 text"
    )

    screen_type: str = Field(
        default="",
        description="Screen label (2D, 3D, IMAX, ...)"
    )

    movie_url: Optional[str] = Field(
        default=None,
        description="Booking page on the cinema's site"
    )

    created_at: Optional[datetime] = Field(
        default=None,
        description="When the row was created"
    )

    updated_at: Optional[datetime] = Field(
        default=None,
        description="When the row was last updated"
    )

    @field_validator("screen_type", mode="before")
    @classmethod
    def default_screen_type(cls, v: Optional[str]) -> str:
        return "" if v is None else v

    @property
    def starts_at(self) -> datetime:
        """Start instant as an aware datetime."""
        return parse_timestamp(self.start_time)


class ShowtimeWithCinema(Showtime):
    """A showtime with its cinema record embedded."""

    cinema: Cinema


class ShowtimeWithMovie(Showtime):
    """A showtime with its movie record embedded."""

    movie: Movie


class MovieSummary(BaseModel):
    """Movie id and title, used to enumerate movie pages."""

    id: int
    title: str = ""

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, v: Optional[str]) -> str:
        return "" if v is None else v


class CinemaSummary(BaseModel):
    """Cinema id and name, used to enumerate cinema pages."""

    id: int
    name: str


class CinemaShowtimes(BaseModel):
    """Showtimes at one cinema, in input order."""

    cinema: Cinema
    showtimes: List[ShowtimeWithCinema] = Field(default_factory=list)


class MovieShowtimes(BaseModel):
    """Showtimes of one movie, in input order."""

    movie: Movie
    showtimes: List[ShowtimeWithMovie] = Field(default_factory=list)
