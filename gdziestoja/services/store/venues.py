from gdziestoja.db.sqlite_connector import execute
from gdziestoja.models.records import VenueCreate


def upsert_venue(venue: VenueCreate) -> int:
    """Insert a venue, replacing any row with the same (title, location). Returns post_id."""
    cur = execute(
        "INSERT OR REPLACE INTO posts (title, location, description, date_added, author, rating) "
        "VALUES (:title, :location, :description, :date_added, :author, :rating)",
        {
            "title": venue.title,
            "location": venue.location_text,
            "description": venue.description,
            "date_added": venue.date_added,
            "author": venue.author,
            "rating": venue.rating,
        },
    )
    return int(cur.lastrowid)


def delete_venue(venue_id: int) -> int:
    """Delete a venue; its comments go with it (ON DELETE CASCADE)."""
    cur = execute("DELETE FROM posts WHERE post_id = :id", {"id": venue_id})
    return cur.rowcount
