from datetime import datetime
from datetime import timezone

import pytest
from pydantic import ValidationError

from lagos_cinema_guide.exceptions import FetchError
from lagos_cinema_guide.exceptions import RecordNotFoundError
from lagos_cinema_guide.models import Cinema
from lagos_cinema_guide.models import Movie
from lagos_cinema_guide.models import MovieSummary
from lagos_cinema_guide.models import Showtime
from lagos_cinema_guide.models import parse_timestamp


def test_movie_null_title_becomes_empty_string():
    assert Movie(id=1, title=None).title == ""
    assert MovieSummary(id=1, title=None).title == ""


def test_movie_requires_id():
    with pytest.raises(ValidationError):
        Movie(title="No id")


def test_cinema_display_location():
    cinema = Cinema(id=1, name="EbonyLife", location="VI", verbose_location="Victoria Island, Lagos")
    assert cinema.display_location == "Victoria Island, Lagos"
    assert Cinema(id=2, name="Bare").display_location is None


def test_showtime_keeps_start_time_text():
    showtime = Showtime(id=1, movie_id=2, cinema_id=3, start_time="2025-01-02T10:00:00Z", screen_type=None)

    assert showtime.start_time == "2025-01-02T10:00:00Z"
    assert showtime.screen_type == ""
    assert showtime.starts_at == datetime(2025, 1, 2, 10, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "value",
    [
        "2025-01-02T10:00:00Z",
        "2025-01-02T10:00:00+00:00",
        "2025-01-02T11:00:00+01:00",
        "2025-01-02T10:00:00",
        datetime(2025, 1, 2, 10, 0),
    ],
)
def test_parse_timestamp_normalizes_to_same_instant(value):
    assert parse_timestamp(value) == datetime(2025, 1, 2, 10, 0, tzinfo=timezone.utc)


def test_record_not_found_messages():
    missing = RecordNotFoundError("movie", 5, 0)
    assert isinstance(missing, FetchError)
    assert str(missing) == "get_movie_by_id: no movie with id 5"

    duplicated = RecordNotFoundError("cinema", 3, 2, operation="get_cinema_by_id")
    assert str(duplicated) == "get_cinema_by_id: expected one cinema with id 3, got 2"
