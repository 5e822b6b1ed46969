"""
Downloads a web page and the pages it links to, recording timing and size
metadata for the run in a SQLite database.
"""
from website_downloader.core import (
    DownloaderError,
    HomepageDownloadError,
    LinkOutcome,
    RunSummary,
    download_website,
)
from website_downloader.store import WebsiteStore, initialize_db, open_store
from website_downloader.urls import extract_domain_name, is_valid_url

__version__ = "1.0.0"
__all__ = [
    "download_website",
    "DownloaderError",
    "HomepageDownloadError",
    "LinkOutcome",
    "RunSummary",
    "WebsiteStore",
    "initialize_db",
    "open_store",
    "extract_domain_name",
    "is_valid_url",
]
