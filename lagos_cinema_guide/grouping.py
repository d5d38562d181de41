"""
Showtime grouping helpers.

Each helper makes a single pass and returns an insertion-ordered dict: groups
appear in the order their first showtime was seen and every group keeps the
input order of its showtimes.
"""

from datetime import tzinfo
from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional
from typing import TypeVar

from lagos_cinema_guide.formatting import format_date_key
from lagos_cinema_guide.models import CinemaShowtimes
from lagos_cinema_guide.models import MovieShowtimes
from lagos_cinema_guide.models import Showtime
from lagos_cinema_guide.models import ShowtimeWithCinema
from lagos_cinema_guide.models import ShowtimeWithMovie

S = TypeVar("S", bound=Showtime)


def group_showtimes_by_date(
    showtimes: Iterable[S],
    tz: Optional[tzinfo] = None,
) -> Dict[str, List[S]]:
    """Group showtimes by local calendar date (``YYYY-MM-DD``)."""
    groups: Dict[str, List[S]] = {}
    for showtime in showtimes:
        key = format_date_key(showtime.start_time, tz)
        groups.setdefault(key, []).append(showtime)
    return groups


def group_showtimes_by_cinema(showtimes: Iterable[ShowtimeWithCinema]) -> Dict[int, CinemaShowtimes]:
    """Group showtimes by cinema id, keeping the embedded cinema record."""
    groups: Dict[int, CinemaShowtimes] = {}
    for showtime in showtimes:
        group = groups.get(showtime.cinema.id)
        if group is None:
            group = groups[showtime.cinema.id] = CinemaShowtimes(cinema=showtime.cinema)
        group.showtimes.append(showtime)
    return groups


def group_showtimes_by_movie(showtimes: Iterable[ShowtimeWithMovie]) -> Dict[int, MovieShowtimes]:
    """Group showtimes by movie id, keeping the embedded movie record."""
    groups: Dict[int, MovieShowtimes] = {}
    for showtime in showtimes:
        group = groups.get(showtime.movie.id)
        if group is None:
            group = groups[showtime.movie.id] = MovieShowtimes(movie=showtime.movie)
        group.showtimes.append(showtime)
    return groups
