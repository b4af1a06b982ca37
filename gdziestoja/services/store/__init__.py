"""SQLite-backed storage for the crawl frontier and extracted records.

Functions are imported at package level so callers can pass the package itself
around as the store.
"""
from .urls import list_urls, upsert_url
from .venues import upsert_venue, delete_venue
from .comments import upsert_comment, get_comments
from .admin import count_rows

__all__ = [
    # frontier
    'list_urls','upsert_url',
    # venues
    'upsert_venue','delete_venue',
    # comments
    'upsert_comment','get_comments',
    # admin
    'count_rows',
]
