"""
Streaming HTTP downloads to local files.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import requests

DEFAULT_USER_AGENT = "WebsiteDownloader/1.0"
CHUNK_SIZE = 1024


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Outcome of a single download."""
    url: str
    path: Path
    bytes_written: int = 0
    error: Optional[str] = None
    final_url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def create_session(user_agent: str = DEFAULT_USER_AGENT) -> requests.Session:
    """Build the HTTP session shared by every download in a run."""
    session = requests.Session()
    session.headers["User-Agent"] = user_agent
    return session


def download_file(
    session: requests.Session,
    url: str,
    path: Union[str, Path],
    timeout: Optional[float] = None,
    chunk_size: int = CHUNK_SIZE,
) -> FetchResult:
    """
    Stream `url` into `path`, truncating any existing file.

    Any failure while fetching or writing is reported on stderr and returned
    in the result instead of raised. A partially written file is left in
    place. `final_url` is the URL the body came from after redirects.
    """
    path = Path(path)
    written = 0
    final_url = url
    try:
        with session.get(url, stream=True, timeout=timeout, allow_redirects=True) as resp:
            final_url = resp.url or url
            resp.raise_for_status()
            with path.open("wb") as fh:
                for chunk in resp.iter_content(chunk_size=chunk_size):
                    if chunk:
                        fh.write(chunk)
                        written += len(chunk)
    except Exception as e:  # urllib3 parse errors escape RequestException
        print_fetch_error(url, e)
        return FetchResult(url=url, path=path, bytes_written=written, error=str(e) or type(e).__name__)

    return FetchResult(url=url, path=path, bytes_written=written, final_url=final_url)


def print_fetch_error(url: str, error: BaseException) -> None:
    """Print a failed download to stderr."""
    sys.stderr.write(f"Failed to download: {url} ({error})\n")
    sys.stderr.flush()
