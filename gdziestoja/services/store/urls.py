from datetime import datetime, timezone
from typing import List, Optional, Union

from gdziestoja.db.sqlite_connector import execute, run_sql
from gdziestoja.models.records import DiscoveredURL, UrlType


def list_urls(url_type: Union[UrlType, str]) -> List[str]:
    """Return stored URLs of the given type in discovery order."""
    rows = run_sql(
        "SELECT url FROM urls WHERE type = :type ORDER BY url_id",
        {"type": UrlType(url_type).value},
    )
    return [r["url"] for r in rows]


def upsert_url(url_type: Union[UrlType, str], url: str, created: Optional[str] = None) -> bool:
    """Record a discovered URL. Idempotent on url; returns True only for a first sighting."""
    rec = DiscoveredURL(
        type=url_type,
        url=url,
        created=created or datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    )
    cur = execute(
        "INSERT OR IGNORE INTO urls (type, url, created) VALUES (:type, :url, :created)",
        {"type": rec.type.value, "url": rec.url, "created": rec.created},
    )
    return cur.rowcount > 0
