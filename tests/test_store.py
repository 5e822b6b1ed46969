import sqlite3
from datetime import datetime, timedelta

import pytest

from website_downloader.store import initialize_db, open_store


def test_insert_website_returns_generated_ids(db_path, query):
    start = datetime(2026, 1, 2, 3, 4, 5, 678000)
    with open_store(db_path) as store:
        first = store.insert_website("example.com", start)
        second = store.insert_website("example.org", start)

    assert second == first + 1
    assert query("SELECT id, website_name, download_start_date_time, download_end_date_time FROM Website") == [
        (first, "example.com", "2026-01-02T03:04:05.678000", None),
        (second, "example.org", "2026-01-02T03:04:05.678000", None),
    ]


def test_insert_link_and_update_website(db_path, query):
    start = datetime(2026, 1, 2, 3, 4, 5)
    end = start + timedelta(seconds=2)
    with open_store(db_path) as store:
        website_id = store.insert_website("example.com", start)
        store.insert_link(website_id, "https://example.com/a", 120, 3)
        store.insert_link(website_id, "https://example.com/b", 80, 0)
        store.update_website(website_id, end, 2000, 3)

    assert query("SELECT link_name, website_id, total_elapsed_time, total_downloaded_kilobytes FROM Link ORDER BY id") == [
        ("https://example.com/a", website_id, 120, 3),
        ("https://example.com/b", website_id, 80, 0),
    ]
    assert query(
        "SELECT download_end_date_time, total_elapsed_time, total_downloaded_kilobytes FROM Website WHERE id = ?",
        (website_id,),
    ) == [("2026-01-02T03:04:07", 2000, 3)]


def test_values_are_bound_not_interpolated(db_path, query):
    name = "example.com'); DROP TABLE Website; --"
    with open_store(db_path) as store:
        store.insert_website(name, datetime.now())

    assert query("SELECT website_name FROM Website") == [(name,)]


def test_link_requires_existing_website(db_path):
    with open_store(db_path) as store:
        with pytest.raises(sqlite3.IntegrityError):
            store.insert_link(999, "https://example.com/a", 1, 1)


def test_connection_is_closed_on_error(db_path):
    with pytest.raises(RuntimeError):
        with open_store(db_path) as store:
            raise RuntimeError("boom")

    with pytest.raises(sqlite3.ProgrammingError):
        store.conn.execute("SELECT 1")


def test_missing_schema_raises(tmp_path):
    with open_store(tmp_path / "empty.db") as store:
        with pytest.raises(sqlite3.OperationalError):
            store.insert_website("example.com", datetime.now())


def test_initialize_db_is_repeatable(tmp_path):
    path = tmp_path / "website_downloader.db"
    initialize_db(path)
    initialize_db(path)

    conn = sqlite3.connect(str(path))
    try:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
    finally:
        conn.close()
    assert {"Website", "Link"} <= tables
