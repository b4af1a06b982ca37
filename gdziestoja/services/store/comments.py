from typing import Any, Dict, List

from gdziestoja.db.sqlite_connector import execute, run_sql
from gdziestoja.models.records import CommentCreate


def upsert_comment(comment: CommentCreate) -> int:
    """Insert a comment and return its generated comment_id."""
    cur = execute(
        "INSERT OR REPLACE INTO comments (post_id, parent_id, text, author, score, timestamp) "
        "VALUES (:post_id, :parent_id, :text, :author, :score, :timestamp)",
        {
            "post_id": comment.venue_id,
            "parent_id": comment.parent_id,
            "text": comment.text,
            "author": comment.author,
            "score": comment.score,
            "timestamp": comment.timestamp,
        },
    )
    return int(cur.lastrowid)


def get_comments(venue_id: int) -> List[Dict[str, Any]]:
    """Return the venue's comments in insertion order."""
    return run_sql(
        "SELECT comment_id, post_id, parent_id, text, author, score, timestamp "
        "FROM comments WHERE post_id = :id ORDER BY comment_id",
        {"id": venue_id},
    )
