from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Optional

from gdziestoja.config import CrawlDelays
from gdziestoja.models.records import UrlType
from gdziestoja.services import store as default_store

from .fetcher import PageFetcher
from .spiders.directory_spider import DirectorySpider
from .threads import persist_thread

logger = logging.getLogger(__name__)


def polite_pause(
    max_seconds: float,
    *,
    sleep: Callable[[float], Any] = time.sleep,
    rand: Callable[[], float] = random.random,
) -> float:
    """Sleep a random fraction of max_seconds; returns the time slept."""
    if max_seconds <= 0:
        return 0.0
    seconds = rand() * max_seconds
    logger.debug("Pausing %.2fs (max %.2fs)", seconds, max_seconds)
    sleep(seconds)
    return seconds


@dataclass
class CrawlSummary:
    regions: int = 0
    cities: int = 0
    venues: int = 0
    comments: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class CrawlOrchestrator:
    """Sequential region -> city -> venue crawl.

    Regions and cities are persisted to the frontier store as soon as they are
    seen, so a later run starts from what is already stored: the home page is
    only fetched when no region is known, while region pages are always
    re-read for new cities. Venue links live only for the duration of a run.

    Any fetch, parse or storage error propagates out of run(); whatever was
    committed before it stays in the database.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        *,
        spider: Optional[DirectorySpider] = None,
        delays: Optional[CrawlDelays] = None,
        store: Any = None,
        sleep: Callable[[float], Any] = time.sleep,
        rand: Callable[[], float] = random.random,
    ) -> None:
        self.fetcher = fetcher
        self.spider = spider or DirectorySpider()
        self.delays = delays or CrawlDelays()
        self.store = store if store is not None else default_store
        self._sleep = sleep
        self._rand = rand

    def run(self) -> CrawlSummary:
        regions = self.store.list_urls(UrlType.VOIVODESHIP)
        cities = self.store.list_urls(UrlType.CITY)
        logger.info("Frontier loaded: %d regions, %d cities", len(regions), len(cities))

        if not regions:
            regions = self.discover_regions(regions)
        cities = self.discover_cities(regions, cities)

        self.pause(self.delays.discovery_pause)

        venues = self.collect_venues(cities)
        summary = CrawlSummary(regions=len(regions), cities=len(cities))
        for venue_path in venues:
            summary.comments += self.harvest_venue(venue_path)
            summary.venues += 1
        logger.info("Crawl finished: %s", summary.to_dict())
        return summary

    # --- Tiers ---
    def discover_regions(self, regions: List[str]) -> List[str]:
        """Read region links off the home page; returns regions plus the new ones."""
        found = list(regions)
        seen = set(found)
        self.pause(self.delays.home)
        html = self.fetcher.get(self.fetcher.base_url)
        for href in self.spider.parse_home(html):
            if href in seen:
                continue
            seen.add(href)
            found.append(href)
            self.store.upsert_url(UrlType.VOIVODESHIP, href)
        logger.info("Discovered %d regions", len(found) - len(regions))
        return found

    def discover_cities(self, regions: List[str], cities: List[str]) -> List[str]:
        """Visit every region page; returns cities plus the ones not seen before."""
        found = list(cities)
        seen = set(found)
        for region in regions:
            self.pause(self.delays.region)
            html = self.fetcher.get(region)
            for href in self.spider.parse_region(html):
                if href in seen:
                    continue
                seen.add(href)
                found.append(href)
                self.store.upsert_url(UrlType.CITY, href)
        logger.info("Discovered %d new cities (%d total)", len(found) - len(cities), len(found))
        return found

    def collect_venues(self, cities: List[str]) -> List[str]:
        """Gather venue detail links from every city listing, first occurrence order."""
        venues: List[str] = []
        seen = set()
        for city in cities:
            logger.info(self.fetcher.absolute_url(city))
            self.pause(self.delays.city)
            html = self.fetcher.get(city)
            for href in self.spider.parse_city(html):
                if href not in seen:
                    seen.add(href)
                    venues.append(href)
        logger.info("Collected %d venues from %d cities", len(venues), len(cities))
        return venues

    def harvest_venue(self, venue_path: str) -> int:
        """Store one venue and the comments of its pages 1..pages_count-1.

        Page 0 is only read for the venue itself; its comments are not stored.
        Returns the number of comments inserted.
        """
        url = self.fetcher.absolute_url(venue_path)
        self.pause(self.delays.venue)
        record = self.spider.parse_venue(self.fetcher.get(url), source_url=url)
        venue_id = self.store.upsert_venue(record.to_create())

        inserted = 0
        for index in range(1, record.pages_count):
            page_url = self.spider.comment_page_url(url, index)
            self.pause(self.delays.comment_page)
            comments = self.spider.iter_comments(self.fetcher.get(page_url))
            inserted += len(persist_thread(comments, venue_id, self.store.upsert_comment))
        logger.debug("Venue %s (%s): %d pages, %d comments", venue_id, url, record.pages_count, inserted)
        return inserted

    def pause(self, max_seconds: float) -> float:
        return polite_pause(max_seconds, sleep=self._sleep, rand=self._rand)
