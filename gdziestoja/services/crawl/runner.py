from __future__ import annotations

import argparse
import json
import os
from typing import List, Optional

from gdziestoja.config import configure_logging, load_settings
from gdziestoja.db.sqlite_connector import close_connection

from .base import CommentRecord
from .fetcher import PageFetcher
from .orchestrator import polite_pause
from .pipeline import stage_venue_page, write_jsonl
from .spiders.directory_spider import DirectorySpider


def run_venue(*, url: Optional[str], file: Optional[str], out_dir: str) -> str:
    """Parse a venue page (fetched or local) with its comments and stage them as JSONL.

    With --url the comment pages 1..pages_count-1 are fetched as well; a local
    file only contributes the comments printed on it.
    """
    settings = load_settings()
    spider = DirectorySpider()
    comments: List[CommentRecord] = []
    if url:
        with PageFetcher(
            settings.base_url,
            timeout=settings.http_timeout,
            headers={"User-Agent": settings.user_agent},
        ) as fetcher:
            source = fetcher.absolute_url(url)
            html = fetcher.get(source)
            record = spider.parse_venue(html, source_url=source)
            comments.extend(spider.iter_comments(html))
            for index in range(1, record.pages_count):
                polite_pause(settings.delays.comment_page)
                comments.extend(spider.iter_comments(fetcher.get(spider.comment_page_url(source, index))))
    else:
        with open(file, "r", encoding="utf-8") as f:
            html = f.read()
        record = spider.parse_venue(html, source_url=file)
        comments.extend(spider.iter_comments(html))
    return write_jsonl(stage_venue_page(record, comments), out_dir=out_dir, filename_prefix="venue")


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Run directory crawler tasks")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("crawl", help="Crawl regions, cities and venues into the SQLite database")

    venue = sub.add_parser("venue", help="Parse one venue page into a JSONL record")
    src = venue.add_mutually_exclusive_group(required=True)
    src.add_argument("--url", help="Venue page URL (absolute or site-relative)")
    src.add_argument("--file", help="Local HTML file path")
    default_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", ".."))
    venue.add_argument("--out-dir", default=os.path.join(default_root, "data", "scraped", "venues"))

    sub.add_parser("stats", help="Print row counts of the SQLite database")

    args = parser.parse_args(argv)

    if args.cmd == "crawl":
        from gdziestoja.main import main as crawl_main

        return crawl_main()

    if args.cmd == "venue":
        configure_logging(load_settings().log_level)
        path = run_venue(url=args.url, file=args.file, out_dir=args.out_dir)
        print(path)
        return 0

    if args.cmd == "stats":
        from gdziestoja.services.store import count_rows

        try:
            print(json.dumps(count_rows(), sort_keys=True))
        finally:
            close_connection()
        return 0

    parser.error("unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
