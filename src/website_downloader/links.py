"""
Hyperlink extraction from downloaded HTML.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup, SoupStrainer

# Only <a href> and <base href> are needed
LINK_STRAINER = SoupStrainer(["a", "base"], href=True)


def extract_links(path: Union[str, Path], base_url: str) -> List[str]:
    """
    Return absolute href targets of every <a> tag in document order.

    Relative hrefs are resolved against the document's <base href> when it
    has one, otherwise against `base_url`. Duplicates are kept.
    """
    html = Path(path).read_bytes()
    soup = BeautifulSoup(html, "lxml", parse_only=LINK_STRAINER)

    base_tag = soup.find("base")
    if base_tag is not None and base_tag.get("href"):
        base_url = urljoin(base_url, base_tag["href"].strip())

    return [
        urljoin(base_url, a["href"].strip())
        for a in soup.find_all("a")
        if a.get("href")
    ]
