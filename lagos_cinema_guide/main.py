"""
Command-line listing printer.

Prints the data a site build would consume as plain text, so operators can
check the listings database without building pages.

Usage:
    lagos-cinema-guide now-showing
    lagos-cinema-guide movie 12
    lagos-cinema-guide cinema 3
    lagos-cinema-guide --db /srv/listings/lagos_cinema.db movies
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List
from typing import Optional

import structlog

from lagos_cinema_guide.database import Database
from lagos_cinema_guide.exceptions import FetchError
from lagos_cinema_guide.formatting import format_date
from lagos_cinema_guide.formatting import format_duration
from lagos_cinema_guide.formatting import format_full_date
from lagos_cinema_guide.formatting import format_rating
from lagos_cinema_guide.formatting import format_showtime
from lagos_cinema_guide.formatting import slugify
from lagos_cinema_guide.grouping import group_showtimes_by_cinema
from lagos_cinema_guide.grouping import group_showtimes_by_date
from lagos_cinema_guide.grouping import group_showtimes_by_movie
from lagos_cinema_guide.models import Movie
from lagos_cinema_guide.settings import get_settings

log = structlog.get_logger(__name__)


def _movie_line(movie: Movie) -> str:
    details = [
        str(movie.release_year) if movie.release_year else "",
        format_duration(movie.duration_minutes),
        f"★ {format_rating(movie.rating)}" if format_rating(movie.rating) else "",
    ]
    extra = " · ".join(part for part in details if part)
    line = f"[{movie.id}] {movie.title}"
    return f"{line}  ({extra})" if extra else line


async def now_showing(db: Database) -> List[str]:
    """Now-showing movies in ranked order."""
    movies = await db.get_now_showing_movies()
    lines = [f"{get_settings().site_name}: now showing", ""]
    lines.extend(_movie_line(movie) for movie in movies)
    if not movies:
        lines.append("Nothing scheduled.")
    return lines


async def movie_detail(db: Database, movie_id: int) -> List[str]:
    """One movie with its upcoming showtimes grouped by date, then cinema."""
    movie = await db.get_movie_by_id(movie_id)
    showtimes = await db.get_showtimes_for_movie(movie_id)

    lines = [_movie_line(movie), f"/movies/{movie.id}/{slugify(movie.title)}"]
    if movie.description:
        lines.append(movie.description)
    critics = []
    if movie.metacritic_rating is not None:
        critics.append(f"Metacritic {movie.metacritic_rating:g}")
    if movie.rotten_tomatoes_rating is not None:
        critics.append(f"Rotten Tomatoes {movie.rotten_tomatoes_rating:g}%")
    if critics:
        lines.append(" · ".join(critics))

    for day, day_showtimes in group_showtimes_by_date(showtimes).items():
        lines.extend(["", format_full_date(day_showtimes[0].start_time)])
        for group in group_showtimes_by_cinema(day_showtimes).values():
            location = group.cinema.display_location
            header = f"  {group.cinema.name}" + (f" ({location})" if location else "")
            lines.append(header)
            for showtime in group.showtimes:
                entry = f"    {format_showtime(showtime.start_time)} {showtime.screen_type}".rstrip()
                if showtime.movie_url:
                    entry += f"  {showtime.movie_url}"
                lines.append(entry)

    if not showtimes:
        lines.extend(["", "No upcoming showtimes."])
    return lines


async def cinema_detail(db: Database, cinema_id: int) -> List[str]:
    """One cinema with its upcoming showtimes grouped by movie."""
    cinema = await db.get_cinema_by_id(cinema_id)
    showtimes = await db.get_showtimes_for_cinema(cinema_id)

    lines = [f"[{cinema.id}] {cinema.name}", f"/cinemas/{cinema.id}/{slugify(cinema.name)}"]
    if cinema.display_location:
        lines.append(cinema.display_location)
    if cinema.address:
        lines.append(cinema.address)

    for group in group_showtimes_by_movie(showtimes).values():
        lines.extend(["", _movie_line(group.movie)])
        for showtime in group.showtimes:
            entry = f"  {format_date(showtime.start_time)} {format_showtime(showtime.start_time)} {showtime.screen_type}"
            lines.append(entry.rstrip())

    if not showtimes:
        lines.extend(["", "No upcoming showtimes."])
    return lines


async def movie_index(db: Database) -> List[str]:
    """Every movie ordered by title."""
    return [_movie_line(movie) for movie in await db.get_all_movies()]


async def cinema_index(db: Database) -> List[str]:
    """Every cinema ordered by name, with its display location."""
    lines = []
    for cinema in await db.get_cinemas():
        location = cinema.display_location
        lines.append(f"[{cinema.id}] {cinema.name}" + (f" ({location})" if location else ""))
    return lines


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the listing commands."""
    parser = argparse.ArgumentParser(
        prog="lagos-cinema-guide",
        description="Print Lagos cinema listings from the listings database.",
    )
    parser.add_argument("--db", type=Path, default=None, help="Listings database path")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("now-showing", help="Movies with upcoming showtimes")
    commands.add_parser("movies", help="All movies by title")
    commands.add_parser("cinemas", help="All cinemas by name")
    movie = commands.add_parser("movie", help="One movie and its upcoming showtimes")
    movie.add_argument("id", type=int)
    cinema = commands.add_parser("cinema", help="One cinema and its upcoming showtimes")
    cinema.add_argument("id", type=int)
    return parser


async def run(args: argparse.Namespace) -> List[str]:
    """Execute one command against the listings database."""
    async with Database(args.db) as db:
        if args.command == "now-showing":
            return await now_showing(db)
        if args.command == "movie":
            return await movie_detail(db, args.id)
        if args.command == "cinema":
            return await cinema_detail(db, args.id)
        if args.command == "movies":
            return await movie_index(db)
        return await cinema_index(db)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return the process exit status."""
    args = build_parser().parse_args(argv)
    get_settings().setup_logging()

    try:
        lines = asyncio.run(run(args))
    except FetchError as exc:
        # RecordNotFoundError is a FetchError
        log.error("command_failed", command=args.command, error=str(exc))
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print("\n".join(lines))
    log.info("command_completed", command=args.command, lines=len(lines))
    return 0


if __name__ == "__main__":
    sys.exit(main())
