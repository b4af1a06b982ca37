from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Dict, Iterable, Tuple

from .base import CommentRecord, VenueRecord


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def staged(kind: str, record) -> Dict:
    """Tag a venue/comment record with its kind for the JSONL stage."""
    return {"kind": kind, **record.to_dict()}


def stage_venue_page(venue: VenueRecord, comments: Iterable[CommentRecord]) -> Iterable[Dict]:
    yield staged("venue", venue)
    for c in comments:
        yield staged("comment", c)


def _record_dedupe_key(rec: Dict) -> Tuple:
    # Venues by natural key; comments repeat across overlapping pages with identical author/time/text
    if rec.get("kind") == "comment":
        return ("comment", rec.get("author"), rec.get("timestamp"), rec.get("text"))
    return ("venue", rec.get("title"), rec.get("lat"), rec.get("lng"))


def write_jsonl(records: Iterable[Dict], out_dir: str, filename_prefix: str) -> str:
    """Write staged records to a JSONL file, skipping repeats of the same venue or comment.

    Returns the path to the written file.
    """
    ensure_dir(out_dir)
    dt = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    path = os.path.join(out_dir, f"{filename_prefix}-{dt}.jsonl")

    seen: set = set()
    with open(path, "a", encoding="utf-8") as f:
        for rec in records:
            key = _record_dedupe_key(rec)
            if key in seen:
                continue
            seen.add(key)
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")
    return path
