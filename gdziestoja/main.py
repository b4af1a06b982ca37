"""Process entrypoint: crawl everything once, exit 0 on success and 1 on the first error."""
import logging
from typing import Optional

from gdziestoja.config import Settings, configure_logging, load_settings
from gdziestoja.db.sqlite_connector import close_connection
from gdziestoja.services.crawl.fetcher import PageFetcher
from gdziestoja.services.crawl.orchestrator import CrawlOrchestrator, CrawlSummary

logger = logging.getLogger(__name__)


def run_crawl(settings: Settings) -> CrawlSummary:
    with PageFetcher(
        settings.base_url,
        timeout=settings.http_timeout,
        headers={"User-Agent": settings.user_agent},
    ) as fetcher:
        return CrawlOrchestrator(fetcher, delays=settings.delays).run()


def main(settings: Optional[Settings] = None) -> int:
    settings = settings or load_settings()
    configure_logging(settings.log_level)
    try:
        run_crawl(settings)
    except Exception:
        logger.exception("Failed to scrape")
        return 1
    finally:
        close_connection()
    logger.info("The end.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
