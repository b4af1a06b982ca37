"""Directory crawling subsystem.

Structure:
- base.py: common types and utilities (records, timestamp normalization, text fallbacks)
- fetcher.py: httpx page fetcher with the fixed browser header
- spiders/: page-type extraction (home, region, city, venue, comment pages)
- threads.py: parent/child inference for comments on a page
- orchestrator.py: sequential region -> city -> venue traversal with politeness pauses
- pipeline.py: dedupe + JSONL staging writer
- runner.py: tiny CLI entrypoint for manual runs

Everything is sequential: one request in flight at a time, selectolax for parsing
and SQLite (gdziestoja.services.store) for persistence.
"""
