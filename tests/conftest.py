import sqlite3
from pathlib import Path

import pytest
import pytest_asyncio

from lagos_cinema_guide.database import Database

# Fixed query boundary for deterministic listings
NOW = "2025-01-01T00:00:00+00:00"

SCHEMA = """
CREATE TABLE movies (
    id INTEGER PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT,
    release_year INTEGER,
    duration_minutes INTEGER,
    rating REAL,
    poster_url TEXT,
    metacritic_rating REAL,
    rotten_tomatoes_rating REAL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE cinemas (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    location TEXT,
    verbose_location TEXT,
    address TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE showtimes (
    id INTEGER PRIMARY KEY,
    movie_id INTEGER NOT NULL REFERENCES movies(id),
    cinema_id INTEGER NOT NULL REFERENCES cinemas(id),
    start_time TEXT NOT NULL,
    screen_type TEXT NOT NULL,
    movie_url TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""

MOVIES = [
    (1, "The Dark Knight", "Batman faces the Joker.", 2008, 152, 9.0, "https://img.example/tdk.jpg", 84, 94),
    (2, "Anikulapo", "A travelling cloth merchant in Oyo.", 2022, 142, 7.1, None, None, None),
    (3, "Alpha", None, 2018, 96, 6.6, None, None, None),
    (4, "Zed", None, None, 60, None, None, None, None),
    (5, "Old Film", None, 1999, None, None, None, None, None),
    (6, "Gangs of Lagos", None, 2023, 124, 6.2, None, None, None),
]

CINEMAS = [
    (1, "Filmhouse IMAX Lekki", "Lekki", "Lekki Phase 1, Lagos", "Admiralty Way"),
    (2, "Genesis Cinemas Maryland", "Maryland", None, None),
    (3, "EbonyLife Cinemas", None, None, "Victoria Island"),
]

SHOWTIMES = [
    (1, 1, 1, "2025-01-02T10:00:00+00:00", "IMAX", "https://tickets.example/1"),
    (2, 1, 2, "2025-01-03T18:30:00+00:00", "2D", None),
    (3, 2, 2, "2025-01-01T09:00:00+00:00", "2D", None),
    (4, 2, 1, "2025-01-02T19:00:00+00:00", "3D", None),
    (5, 3, 3, "2025-01-01T09:00:00+00:00", "2D", None),
    (6, 4, 1, "2025-01-01T09:00:00+00:00", "2D", None),
    (7, 5, 1, "2024-12-30T20:00:00+00:00", "2D", None),
    (8, 1, 1, "2024-12-31T23:00:00+00:00", "IMAX", None),
    (9, 2, 3, "2099-06-01T12:00:00+00:00", "2D", "https://tickets.example/9"),
]


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Writes a seeded listings database and returns its path."""
    path = tmp_path / "listings.db"
    conn = sqlite3.connect(path)
    try:
        conn.executescript(SCHEMA)
        conn.executemany(
            """
            INSERT INTO movies (id, title, description, release_year, duration_minutes, rating,
                                poster_url, metacritic_rating, rotten_tomatoes_rating)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            MOVIES,
        )
        conn.executemany(
            "INSERT INTO cinemas (id, name, location, verbose_location, address) VALUES (?, ?, ?, ?, ?)",
            CINEMAS,
        )
        conn.executemany(
            """
            INSERT INTO showtimes (id, movie_id, cinema_id, start_time, screen_type, movie_url)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            SHOWTIMES,
        )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest_asyncio.fixture
async def db(db_path: Path):
    """Provides an initialized read-only client over the seeded database."""
    db_instance = Database(db_path=db_path)
    await db_instance.initialize()
    yield db_instance
    await db_instance.close()


@pytest.fixture
def now() -> str:
    return NOW
