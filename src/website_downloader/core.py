"""
Download orchestration: homepage, its links, and the session record.
"""
from __future__ import annotations

import sys
import time
from contextlib import ExitStack
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Union

import requests

from website_downloader.fetcher import create_session, download_file
from website_downloader.links import extract_links
from website_downloader.store import DEFAULT_DB_PATH, WebsiteStore, open_store
from website_downloader.urls import (
    HOMEPAGE_FILENAME,
    extract_domain_name,
    is_valid_url,
    link_filename,
    normalize_seed_url,
)

DOWNLOADED = "downloaded"
INVALID = "invalid"
FAILED = "failed"


class DownloaderError(Exception):
    """Base class for errors that abort a download run."""


class HomepageDownloadError(DownloaderError):
    """The seed page could not be fetched, so there are no links to follow."""

    def __init__(self, url: str, reason: Optional[str]):
        super().__init__(f"Failed to download homepage {url}: {reason}")
        self.url = url
        self.reason = reason


@dataclass(frozen=True, slots=True)
class LinkOutcome:
    """What happened to one extracted link."""
    url: str
    status: str
    path: Optional[Path] = None
    elapsed_ms: int = 0
    size_kb: int = 0
    error: Optional[str] = None


@dataclass(slots=True)
class RunContext:
    """State shared by every step of a run after the Website row exists."""
    store: WebsiteStore
    session: requests.Session
    directory: Path
    website_id: int
    timeout: Optional[float] = None
    total_kb: int = 0


@dataclass(slots=True)
class RunSummary:
    """Result of a completed run."""
    website_id: int
    domain: str
    directory: Path
    start_time: datetime
    end_time: datetime
    total_elapsed_ms: int
    total_kb: int
    outcomes: List[LinkOutcome] = field(default_factory=list)

    @property
    def downloaded(self) -> int:
        return sum(1 for o in self.outcomes if o.status == DOWNLOADED)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.status == INVALID)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == FAILED)


def elapsed_ms(start: datetime, end: datetime) -> int:
    """Whole milliseconds between two timestamps."""
    return (end - start) // timedelta(milliseconds=1)


def print_line(message: str) -> None:
    """Print a progress line to stdout."""
    sys.stdout.write(f"{message}\n")
    sys.stdout.flush()


def prepare_directory(output_root: Union[str, Path], domain: str) -> Optional[Path]:
    """Create (or reuse) the output directory for a domain. None on failure."""
    directory = Path(output_root) / domain
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        sys.stderr.write(f"Cannot create {directory}: {e}\n")
        return None
    return directory


def process_link(ctx: RunContext, href: str) -> LinkOutcome:
    """Validate, download and record a single link."""
    if not is_valid_url(href):
        print_line(f"Invalid link format, skipped: {href}")
        return LinkOutcome(url=href, status=INVALID)

    print_line(f"Processing link: {href}")
    path = ctx.directory / link_filename(href)

    started = time.monotonic()
    result = download_file(ctx.session, href, path, timeout=ctx.timeout)
    took_ms = int((time.monotonic() - started) * 1000)

    if not result.ok:
        return LinkOutcome(url=href, status=FAILED, path=path, elapsed_ms=took_ms, error=result.error)

    size_kb = path.stat().st_size // 1024
    ctx.total_kb += size_kb
    ctx.store.insert_link(ctx.website_id, href, took_ms, size_kb)
    print_line(f"Downloaded: {href} ({size_kb} KB)")

    return LinkOutcome(url=href, status=DOWNLOADED, path=path, elapsed_ms=took_ms, size_kb=size_kb)


def download_website(
    seed_url: str,
    output_root: Union[str, Path] = ".",
    db_path: Union[str, Path] = DEFAULT_DB_PATH,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> Optional[RunSummary]:
    """
    Download a homepage and every valid link on it, recording the run.

    Returns None when the seed URL is invalid or the output directory cannot
    be created; nothing is fetched or stored in that case. Per-link failures
    are recorded in the summary. Store errors and a failed homepage download
    propagate to the caller.
    """
    if not is_valid_url(seed_url):
        print_line("Invalid URL format. Exiting.")
        return None

    seed_url = normalize_seed_url(seed_url)
    domain = extract_domain_name(seed_url)
    directory = prepare_directory(output_root, domain)
    if directory is None:
        print_line("Failed to create directory for the website. Exiting.")
        return None

    start_time = datetime.now()

    with ExitStack() as stack:
        if session is None:
            session = stack.enter_context(create_session())
        store = stack.enter_context(open_store(db_path))

        website_id = store.insert_website(domain, start_time)
        ctx = RunContext(
            store=store,
            session=session,
            directory=directory,
            website_id=website_id,
            timeout=timeout,
        )

        homepage_path = directory / HOMEPAGE_FILENAME
        homepage = download_file(session, seed_url, homepage_path, timeout=timeout)
        if not homepage.ok:
            raise HomepageDownloadError(seed_url, homepage.error)
        print_line(f"Downloaded homepage to: {homepage_path}")

        # relative links resolve against where the homepage landed after redirects
        hrefs = extract_links(homepage_path, homepage.final_url or seed_url)
        outcomes = [process_link(ctx, href) for href in hrefs]

        end_time = datetime.now()
        total_elapsed = elapsed_ms(start_time, end_time)
        store.update_website(website_id, end_time, total_elapsed, ctx.total_kb)

    print_line(f"Website download completed. Total size: {ctx.total_kb} KB.")

    return RunSummary(
        website_id=website_id,
        domain=domain,
        directory=directory,
        start_time=start_time,
        end_time=end_time,
        total_elapsed_ms=total_elapsed,
        total_kb=ctx.total_kb,
        outcomes=outcomes,
    )
