"""
Display formatting helpers.

Slugs, running times, ratings and fixed-English date/time strings for the
listing pages. Timestamps are converted to the configured display timezone
(Africa/Lagos by default) before rendering.
"""

import re
from datetime import datetime
from datetime import tzinfo
from decimal import ROUND_HALF_UP
from decimal import Decimal
from typing import Optional
from typing import Union

from lagos_cinema_guide.models import Cinema
from lagos_cinema_guide.models import parse_timestamp
from lagos_cinema_guide.settings import get_settings

Timestamp = Union[str, datetime]

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")

# Fixed English names so output does not depend on the process locale
DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def slugify(text: str) -> str:
    """
    Derive a URL-safe slug from a display string.

    Lower-cases, collapses every run of characters outside ``[a-z0-9]`` into
    a single hyphen and strips a leading or trailing hyphen.

    >>> slugify("The Dark Knight!")
    'the-dark-knight'
    """
    slug = _NON_SLUG_CHARS.sub("-", text.lower())
    if slug.startswith("-"):
        slug = slug[1:]
    if slug.endswith("-"):
        slug = slug[:-1]
    return slug


generate_slug = slugify


def format_duration(minutes: Optional[int]) -> str:
    """Render a running time as ``2h 5m``, ``1h`` or ``45m``; empty if unknown."""
    if not minutes:
        return ""
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_rating(rating: Optional[float]) -> str:
    """Render a rating with one decimal place; empty if unknown."""
    if not rating:
        return ""
    # Half-up on the exact binary value, same as Number.toFixed
    return str(Decimal(rating).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def display_location(cinema: Cinema) -> Optional[str]:
    """Verbose location if present, else location, else None."""
    return cinema.display_location


def to_local(value: Timestamp, tz: Optional[tzinfo] = None) -> datetime:
    """Parse a timestamp and convert it to the display timezone."""
    return parse_timestamp(value).astimezone(tz or get_settings().tzinfo)


def format_showtime(value: Timestamp, tz: Optional[tzinfo] = None) -> str:
    """``h:mm AM/PM``, e.g. ``7:30 PM``."""
    local = to_local(value, tz)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {meridiem}"


def format_date(value: Timestamp, tz: Optional[tzinfo] = None) -> str:
    """``Dow, Mon D``, e.g. ``Thu, Jan 2``."""
    local = to_local(value, tz)
    return f"{DAY_NAMES[local.weekday()][:3]}, {MONTH_NAMES[local.month - 1][:3]} {local.day}"


def format_full_date(value: Timestamp, tz: Optional[tzinfo] = None) -> str:
    """``Weekday, Month D, YYYY``, e.g. ``Thursday, January 2, 2025``."""
    local = to_local(value, tz)
    return f"{DAY_NAMES[local.weekday()]}, {MONTH_NAMES[local.month - 1]} {local.day}, {local.year}"


def format_day_short(value: Timestamp, tz: Optional[tzinfo] = None) -> str:
    """Abbreviated weekday, e.g. ``Thu``."""
    return DAY_NAMES[to_local(value, tz).weekday()][:3]


def format_day_num(value: Timestamp, tz: Optional[tzinfo] = None) -> str:
    """Day of the month without padding, e.g. ``2``."""
    return str(to_local(value, tz).day)


def format_month_short(value: Timestamp, tz: Optional[tzinfo] = None) -> str:
    """Abbreviated month, e.g. ``Jan``."""
    return MONTH_NAMES[to_local(value, tz).month - 1][:3]


def format_date_key(value: Timestamp, tz: Optional[tzinfo] = None) -> str:
    """Calendar date in the display timezone as ``YYYY-MM-DD``."""
    return to_local(value, tz).date().isoformat()
