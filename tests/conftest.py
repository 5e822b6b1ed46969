from __future__ import annotations

import sqlite3
from typing import Dict, List, Optional, Union

import pytest
import requests

from website_downloader.store import initialize_db


class FakeResponse:
    """Just enough of requests.Response for streaming downloads."""

    def __init__(self, url: str, body: bytes, status_code: int = 200):
        self.url = url
        self.body = body
        self.status_code = status_code
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        return False

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error for url: {self.url}")

    def iter_content(self, chunk_size: int = 1):
        for i in range(0, len(self.body), chunk_size):
            yield self.body[i:i + chunk_size]


class FakeSession:
    """
    Serves canned pages by URL.

    A page is bytes (200), an (status, bytes) tuple, or an exception to raise.
    Unknown URLs raise ConnectionError. `redirects` maps a URL to the URL
    it redirects to; the response reports the final URL.
    """

    def __init__(
        self,
        pages: Dict[str, Union[bytes, tuple, Exception]],
        redirects: Optional[Dict[str, str]] = None,
    ):
        self.pages = pages
        self.redirects = redirects or {}
        self.requested: List[str] = []
        self.headers: Dict[str, str] = {}

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def get(self, url, stream=False, timeout=None, allow_redirects=True):
        self.requested.append(url)
        while allow_redirects and url in self.redirects:
            url = self.redirects[url]
        page = self.pages.get(url)
        if page is None:
            raise requests.ConnectionError(f"Connection refused: {url}")
        if isinstance(page, Exception):
            raise page
        if isinstance(page, tuple):
            status, body = page
            return FakeResponse(url, body, status)
        return FakeResponse(url, page)


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "website_downloader.db"
    initialize_db(path)
    return path


@pytest.fixture
def query(db_path):
    """Run a SELECT against the test database on a separate connection."""
    def run(sql: str, params=()):
        conn = sqlite3.connect(str(db_path))
        try:
            return conn.execute(sql, params).fetchall()
        finally:
            conn.close()
    return run
