"""
Now-showing ranking.

Orders movies that have at least one upcoming showtime by their earliest
upcoming showtime, then by title. Timestamps and titles are compared as
plain strings (ordinal, case-sensitive); ISO-8601 UTC text of a consistent
format sorts chronologically, so timestamps are never reformatted first.
"""

from typing import Iterable
from typing import List
from typing import Optional
from typing import Tuple

from lagos_cinema_guide.models import Movie


def earliest_showtime(timestamps: Iterable[str], now: Optional[str] = None) -> Optional[str]:
    """
    Return the minimum start timestamp, or None if there is none.

    Args:
        timestamps: ISO-8601 start timestamps
        now: If given, timestamps before it are ignored

    Returns:
        The earliest qualifying timestamp, unchanged
    """
    earliest: Optional[str] = None
    for ts in timestamps:
        if now is not None and ts < now:
            continue
        if earliest is None or ts < earliest:
            earliest = ts
    return earliest


def rank_now_showing(
    entries: Iterable[Tuple[Movie, Iterable[str]]],
    now: Optional[str] = None,
) -> List[Movie]:
    """
    Rank movies by earliest upcoming showtime, then title.

    Movies without a qualifying showtime are left out entirely. The sort is
    stable, so movies tied on both keys keep their input order.

    Args:
        entries: (movie, start timestamps) pairs
        now: Optional lower bound applied to the timestamps

    Returns:
        Movie records in display order
    """
    keyed: List[Tuple[str, str, Movie]] = []
    for movie, timestamps in entries:
        earliest = earliest_showtime(timestamps, now)
        if earliest is None:
            continue
        keyed.append((earliest, movie.title or "", movie))

    keyed.sort(key=lambda item: (item[0], item[1]))
    return [movie for _, _, movie in keyed]
