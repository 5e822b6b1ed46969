"""
SQLite persistence for download sessions and their links.

Tables (created by `initialize_db`, normally run once during setup):
  Website(id, website_name, download_start_date_time, download_end_date_time,
          total_elapsed_time, total_downloaded_kilobytes)
  Link(id, link_name, website_id -> Website.id, total_elapsed_time,
       total_downloaded_kilobytes)
"""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Union

DEFAULT_DB_PATH = Path("website_downloader.db")

SCHEMA = """
CREATE TABLE IF NOT EXISTS Website (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    website_name TEXT NOT NULL,
    download_start_date_time TEXT NOT NULL,
    download_end_date_time TEXT,
    total_elapsed_time INTEGER,       -- milliseconds
    total_downloaded_kilobytes INTEGER
);
CREATE TABLE IF NOT EXISTS Link (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    link_name TEXT NOT NULL,
    website_id INTEGER NOT NULL REFERENCES Website(id),
    total_elapsed_time INTEGER NOT NULL,        -- milliseconds
    total_downloaded_kilobytes INTEGER NOT NULL
);
"""


def get_connection(db_path: Union[str, Path] = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Open a SQLite connection with foreign keys enforced."""
    conn = sqlite3.connect(str(db_path))
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def initialize_db(db_path: Union[str, Path] = DEFAULT_DB_PATH) -> None:
    """Create the Website and Link tables if they are missing."""
    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA)
        conn.commit()
    finally:
        conn.close()


class WebsiteStore:
    """Records one Website row per run and one Link row per downloaded link."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def insert_website(self, name: str, start_time: datetime) -> int:
        cursor = self.conn.execute(
            "INSERT INTO Website (website_name, download_start_date_time) VALUES (?, ?)",
            (name, start_time.isoformat()),
        )
        self.conn.commit()
        return cursor.lastrowid

    def insert_link(self, website_id: int, url: str, elapsed_ms: int, size_kb: int) -> None:
        self.conn.execute(
            "INSERT INTO Link (link_name, website_id, total_elapsed_time, total_downloaded_kilobytes) "
            "VALUES (?, ?, ?, ?)",
            (url, website_id, elapsed_ms, size_kb),
        )
        self.conn.commit()

    def update_website(
        self,
        website_id: int,
        end_time: datetime,
        total_elapsed_ms: int,
        total_kb: int,
    ) -> None:
        self.conn.execute(
            "UPDATE Website SET download_end_date_time = ?, total_elapsed_time = ?, "
            "total_downloaded_kilobytes = ? WHERE id = ?",
            (end_time.isoformat(), total_elapsed_ms, total_kb, website_id),
        )
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()


@contextmanager
def open_store(db_path: Union[str, Path] = DEFAULT_DB_PATH) -> Iterator[WebsiteStore]:
    """Yield a store whose connection is closed on exit, success or not."""
    store = WebsiteStore(get_connection(db_path))
    try:
        yield store
    finally:
        store.close()
