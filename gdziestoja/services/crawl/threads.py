from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from gdziestoja.models.records import CommentCreate

from .base import CommentRecord


def persist_thread(
    records: Iterable[CommentRecord],
    venue_id: int,
    insert: Callable[[CommentCreate], int],
) -> List[int]:
    """Insert one page of comments in document order, linking replies to their root.

    The markup carries no parent ids, only indentation. Every reply is attached
    to the most recently inserted root comment of the same page (one level
    deep, whatever the visual depth). A reply seen before any root gets no
    parent. Returns the generated ids in insertion order.
    """
    ids: List[int] = []
    last_root_id: Optional[int] = None
    for rec in records:
        comment_id = insert(
            CommentCreate(
                venue_id=venue_id,
                parent_id=last_root_id if rec.is_reply else None,
                text=rec.text,
                author=rec.author,
                score=rec.score,
                timestamp=rec.timestamp,
            )
        )
        if not rec.is_reply:
            last_root_id = comment_id
        ids.append(comment_id)
    return ids
