"""
Query client for the listings database.

Provides a read-only async interface over the movies, cinemas and showtimes
tables with connection management, row-to-model mapping and the now-showing
ranking. The schema is owned by the listings service; this module never
creates, alters or writes tables.
"""

import asyncio
import logging
import sqlite3
from contextlib import asynccontextmanager
from datetime import datetime
from datetime import timezone
from pathlib import Path
from typing import Any
from typing import AsyncGenerator
from typing import Dict
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple
from typing import Union

import aiosqlite

from lagos_cinema_guide.exceptions import FetchError
from lagos_cinema_guide.exceptions import RecordNotFoundError
from lagos_cinema_guide.models import Cinema
from lagos_cinema_guide.models import CinemaSummary
from lagos_cinema_guide.models import Movie
from lagos_cinema_guide.models import MovieSummary
from lagos_cinema_guide.models import ShowtimeWithCinema
from lagos_cinema_guide.models import ShowtimeWithMovie
from lagos_cinema_guide.models import parse_timestamp
from lagos_cinema_guide.ranking import rank_now_showing
from lagos_cinema_guide.settings import get_settings

logger = logging.getLogger(__name__)

MOVIE_COLUMNS = (
    "id", "title", "description", "release_year", "duration_minutes", "rating",
    "poster_url", "metacritic_rating", "rotten_tomatoes_rating", "created_at", "updated_at",
)
CINEMA_COLUMNS = (
    "id", "name", "location", "verbose_location", "address", "created_at", "updated_at",
)
SHOWTIME_COLUMNS = (
    "id", "movie_id", "cinema_id", "start_time", "screen_type", "movie_url", "created_at", "updated_at",
)
REQUIRED_TABLES = ("movies", "cinemas", "showtimes")

Now = Union[str, datetime, None]


def utc_now_iso() -> str:
    """Current instant as ISO-8601 UTC text, e.g. ``2025-01-01T09:00:00+00:00``."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _now_boundary(now: Now) -> str:
    """Normalize a query boundary to the stored ``+00:00`` UTC text format."""
    if now is None:
        return utc_now_iso()
    return parse_timestamp(now).astimezone(timezone.utc).isoformat()


def _select_list(alias: str, columns: Sequence[str], prefix: str = "") -> str:
    """Build ``alias.col AS prefixcol`` select items."""
    return ", ".join(f"{alias}.{col} AS {prefix}{col}" for col in columns)


def _pick(row: sqlite3.Row, columns: Sequence[str], prefix: str = "") -> Dict[str, Any]:
    return {col: row[f"{prefix}{col}"] for col in columns}


class Database:
    """
    Async read-only client for the listings database.

    Keeps one lazily opened connection guarded by a lock, so at most one
    query is in flight. Every query that filters on "now" evaluates it once
    per call unless the caller passes ``now`` explicitly.
    """

    def __init__(self, db_path: Optional[Path] = None) -> None:
        """Initialize the client with an optional custom database path."""
        self.db_path = Path(db_path or get_settings().db_path)
        self._connection: Optional[aiosqlite.Connection] = None
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Open the connection and check the listings tables are present."""
        rows = await self._fetch(
            "initialize",
            "SELECT name FROM sqlite_master WHERE type = 'table'",
        )
        tables = {row["name"] for row in rows}
        missing = [name for name in REQUIRED_TABLES if name not in tables]
        if missing:
            raise FetchError("initialize", f"missing tables: {', '.join(missing)}")
        logger.info(f"Listings database opened read-only at {self.db_path}")

    async def close(self) -> None:
        """Close database connection cleanly."""
        async with self._lock:
            if self._connection:
                await self._connection.close()
                self._connection = None

    @asynccontextmanager
    async def _get_connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Get the read-only connection, opening it on first use."""
        async with self._lock:
            if not self._connection:
                uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
                self._connection = await aiosqlite.connect(uri, uri=True, timeout=30.0)
                self._connection.row_factory = aiosqlite.Row
                await self._connection.execute("PRAGMA query_only = ON")
            yield self._connection

    async def _fetch(self, operation: str, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        """
        Run one SELECT and return all rows.

        Raises:
            FetchError: if the database cannot be opened or the query fails
        """
        try:
            async with self._get_connection() as conn:
                async with conn.execute(sql, params) as cursor:
                    rows = list(await cursor.fetchall())
        except (aiosqlite.Error, sqlite3.Error) as exc:
            logger.error(f"Query {operation} failed", exc_info=True)
            raise FetchError(operation, str(exc)) from exc

        logger.debug(f"{operation}: {len(rows)} rows")
        return rows

    async def _fetch_single(self, operation: str, entity: str, record_id: int, sql: str) -> sqlite3.Row:
        rows = await self._fetch(operation, sql, (record_id,))
        if len(rows) != 1:
            logger.warning(f"{operation}: expected 1 {entity} row for id={record_id}, got {len(rows)}")
            raise RecordNotFoundError(entity, record_id, len(rows), operation)
        return rows[0]

    async def get_now_showing_movies(self, now: Now = None) -> List[Movie]:
        """
        Get movies with at least one showtime at or after ``now``.

        Returns:
            Movies ordered by earliest upcoming showtime, then title
        """
        boundary = _now_boundary(now)
        rows = await self._fetch(
            "get_now_showing_movies",
            f"""
            SELECT {_select_list("m", MOVIE_COLUMNS)}, s.start_time AS showtime__start_time
            FROM movies m
            JOIN showtimes s ON s.movie_id = m.id
            WHERE s.start_time >= ?
            ORDER BY m.id
            """,
            (boundary,),
        )

        entries: Dict[int, Tuple[Movie, List[str]]] = {}
        for row in rows:
            movie_id = row["id"]
            if movie_id not in entries:
                entries[movie_id] = (Movie(**_pick(row, MOVIE_COLUMNS)), [])
            entries[movie_id][1].append(row["showtime__start_time"])

        movies = rank_now_showing(entries.values())
        logger.info(f"Found {len(movies)} movies now showing (from {boundary})")
        return movies

    async def get_movie_by_id(self, movie_id: int) -> Movie:
        """
        Get a single movie.

        Raises:
            RecordNotFoundError: unless exactly one row matches
        """
        row = await self._fetch_single(
            "get_movie_by_id",
            "movie",
            movie_id,
            f"SELECT {', '.join(MOVIE_COLUMNS)} FROM movies WHERE id = ?",
        )
        return Movie(**_pick(row, MOVIE_COLUMNS))

    async def get_all_movies(self) -> List[Movie]:
        """Get every movie ordered by title."""
        rows = await self._fetch(
            "get_all_movies",
            f"SELECT {', '.join(MOVIE_COLUMNS)} FROM movies ORDER BY title",
        )
        return [Movie(**_pick(row, MOVIE_COLUMNS)) for row in rows]

    async def get_showtimes_for_movie(self, movie_id: int, now: Now = None) -> List[ShowtimeWithCinema]:
        """
        Get upcoming showtimes for a movie with each cinema embedded.

        Args:
            movie_id: Movie identifier
            now: Lower bound for start_time (defaults to the current instant)

        Returns:
            Showtimes ordered by start time
        """
        rows = await self._fetch(
            "get_showtimes_for_movie",
            f"""
            SELECT {_select_list("s", SHOWTIME_COLUMNS)}, {_select_list("c", CINEMA_COLUMNS, "cinema__")}
            FROM showtimes s
            JOIN cinemas c ON c.id = s.cinema_id
            WHERE s.movie_id = ? AND s.start_time >= ?
            ORDER BY s.start_time
            """,
            (movie_id, _now_boundary(now)),
        )
        return [
            ShowtimeWithCinema(
                **_pick(row, SHOWTIME_COLUMNS),
                cinema=Cinema(**_pick(row, CINEMA_COLUMNS, "cinema__")),
            )
            for row in rows
        ]

    async def get_cinemas(self) -> List[Cinema]:
        """Get every cinema ordered by name."""
        rows = await self._fetch(
            "get_cinemas",
            f"SELECT {', '.join(CINEMA_COLUMNS)} FROM cinemas ORDER BY name",
        )
        return [Cinema(**_pick(row, CINEMA_COLUMNS)) for row in rows]

    async def get_cinema_by_id(self, cinema_id: int) -> Cinema:
        """
        Get a single cinema.

        Raises:
            RecordNotFoundError: unless exactly one row matches
        """
        row = await self._fetch_single(
            "get_cinema_by_id",
            "cinema",
            cinema_id,
            f"SELECT {', '.join(CINEMA_COLUMNS)} FROM cinemas WHERE id = ?",
        )
        return Cinema(**_pick(row, CINEMA_COLUMNS))

    async def get_showtimes_for_cinema(self, cinema_id: int, now: Now = None) -> List[ShowtimeWithMovie]:
        """
        Get upcoming showtimes at a cinema with each movie embedded.

        Args:
            cinema_id: Cinema identifier
            now: Lower bound for start_time (defaults to the current instant)

        Returns:
            Showtimes ordered by start time
        """
        rows = await self._fetch(
            "get_showtimes_for_cinema",
            f"""
            SELECT {_select_list("s", SHOWTIME_COLUMNS)}, {_select_list("m", MOVIE_COLUMNS, "movie__")}
            FROM showtimes s
            JOIN movies m ON m.id = s.movie_id
            WHERE s.cinema_id = ? AND s.start_time >= ?
            ORDER BY s.start_time
            """,
            (cinema_id, _now_boundary(now)),
        )
        return [
            ShowtimeWithMovie(
                **_pick(row, SHOWTIME_COLUMNS),
                movie=Movie(**_pick(row, MOVIE_COLUMNS, "movie__")),
            )
            for row in rows
        ]

    async def get_all_movie_ids(self) -> List[MovieSummary]:
        """Get id and title of every movie."""
        rows = await self._fetch("get_all_movie_ids", "SELECT id, title FROM movies")
        return [MovieSummary(id=row["id"], title=row["title"]) for row in rows]

    async def get_all_cinema_ids(self) -> List[CinemaSummary]:
        """Get id and name of every cinema."""
        rows = await self._fetch("get_all_cinema_ids", "SELECT id, name FROM cinemas")
        return [CinemaSummary(id=row["id"], name=row["name"]) for row in rows]

    async def __aenter__(self) -> "Database":
        """Async context manager entry; closes the connection if initialization fails."""
        try:
            await self.initialize()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
