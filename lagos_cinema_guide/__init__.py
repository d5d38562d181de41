"""
Lagos Cinema Guide data layer.

Read-only access to the listings database behind the Lagos cinema guide
site: movies, cinemas and their upcoming showtimes, plus the ranking,
grouping and display formatting the listing pages need.

Main Components:
- Database: async read-only query client (aiosqlite)
- Ranking: orders now-showing movies by earliest upcoming showtime
- Formatting: slugs, running times, ratings, fixed-English dates
- Grouping: showtimes by date, cinema or movie
- CLI: plain-text listing printer for operators

Usage:
    from lagos_cinema_guide import Database

    async with Database() as db:
        movies = await db.get_now_showing_movies()
"""

__version__ = "1.0.0"
__license__ = "MIT"

from lagos_cinema_guide.database import Database
from lagos_cinema_guide.exceptions import CinemaGuideError
from lagos_cinema_guide.exceptions import FetchError
from lagos_cinema_guide.exceptions import RecordNotFoundError
from lagos_cinema_guide.models import Cinema
from lagos_cinema_guide.models import Movie
from lagos_cinema_guide.models import Showtime
from lagos_cinema_guide.ranking import rank_now_showing

__all__ = [
    "CinemaGuideError",
    "Cinema",
    "Database",
    "FetchError",
    "Movie",
    "RecordNotFoundError",
    "Showtime",
    "rank_now_showing",
]
