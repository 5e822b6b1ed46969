"""
Command-line interface for the website downloader.
"""
from __future__ import annotations

import argparse
import sys
import traceback
from typing import List, Optional

from website_downloader.core import RunSummary, download_website, print_line
from website_downloader.fetcher import DEFAULT_USER_AGENT, create_session
from website_downloader.store import DEFAULT_DB_PATH, initialize_db
from website_downloader.urls import is_valid_url


def print_summary(summary: RunSummary) -> None:
    """Print run summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("DOWNLOAD SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"Website:            {summary.domain} (id {summary.website_id})\n")
    sys.stderr.write(f"Output directory:   {summary.directory}\n")
    sys.stderr.write(f"Links downloaded:   {summary.downloaded}\n")
    sys.stderr.write(f"Links skipped:      {summary.skipped}\n")
    sys.stderr.write(f"Links failed:       {summary.failed}\n")
    sys.stderr.write(f"Total size:         {summary.total_kb} KB\n")
    sys.stderr.write(f"Elapsed:            {summary.total_elapsed_ms} ms\n")

    sys.stderr.write("\n")


def read_seed_url() -> str:
    """Prompt for the seed URL and read one line from stdin."""
    print_line("Enter a valid URL to download:")
    return sys.stdin.readline().strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Download a web page and every page it links to, recording timings in SQLite."
    )
    parser.add_argument("url", nargs="?", help="Page to download (read from stdin when omitted)")
    parser.add_argument("--db", default=str(DEFAULT_DB_PATH), help=f"SQLite database file (default: {DEFAULT_DB_PATH})")
    parser.add_argument("--output-root", default=".", help="Directory the domain folder is created in (default: .)")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds (default: none)")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header")
    parser.add_argument("--init-db", action="store_true", help="Create the Website and Link tables if missing")
    parser.add_argument("--verbose", action="store_true", help="Show a summary when done")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the downloader CLI."""
    args = build_parser().parse_args(argv)
    seed_url = args.url if args.url is not None else read_seed_url()

    try:
        if args.init_db and is_valid_url(seed_url):
            initialize_db(args.db)
        with create_session(args.user_agent) as session:
            summary = download_website(
                seed_url,
                output_root=args.output_root,
                db_path=args.db,
                session=session,
                timeout=args.timeout,
            )
    except Exception:
        traceback.print_exc()
        return 0

    if summary is not None and args.verbose:
        print_summary(summary)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
