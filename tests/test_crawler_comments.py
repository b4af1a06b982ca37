from pathlib import Path

import pytest

from gdziestoja.services.crawl.base import CommentRecord, ExtractionError
from gdziestoja.services.crawl.spiders.directory_spider import DirectorySpider
from gdziestoja.services.crawl.threads import persist_thread


def read_fixture(name: str) -> str:
    p = Path(__file__).parent / "fixtures" / name
    return p.read_text(encoding="utf-8")


class FakeCommentStore:
    """Hands out sequential ids like an autoincrement column."""

    def __init__(self, start: int = 100):
        self.next_id = start
        self.rows = []

    def insert(self, comment):
        cid = self.next_id
        self.next_id += 1
        self.rows.append((cid, comment))
        return cid


def test_parse_comments_fields():
    records = DirectorySpider().parse_comments(read_fixture("venue_comments_1.html"))
    assert len(records) == 2
    root, reply = records
    assert root.author == "Ola"
    assert root.text == "Najlepsze pierogi w mieście!"
    assert root.score == "3"
    assert root.timestamp == "2023-07-01T08:00:00.000Z"
    assert root.is_reply is False

    assert reply.author == "Gość"
    assert reply.score == "0"
    assert reply.timestamp == "2023-07-02T07:15:00.000Z"
    assert reply.is_reply is True


def test_parse_comments_reply_detection_and_author_fallback():
    records = DirectorySpider().parse_comments(read_fixture("comments_thread.html"))
    assert [r.text for r in records] == ["root A", "reply B", "root C", "reply D"]
    assert [r.is_reply for r in records] == [False, True, False, True]
    assert records[2].score == "-1"
    assert records[3].author == "Unknown"


def test_comment_without_timestamp_fails():
    html = '<article class="cmt"><p class="cmt-c">bez daty</p></article>'
    with pytest.raises(ExtractionError):
        DirectorySpider().parse_comments(html)


def test_persist_thread_attaches_replies_to_latest_root():
    records = DirectorySpider().parse_comments(read_fixture("comments_thread.html"))
    store = FakeCommentStore()
    ids = persist_thread(records, venue_id=7, insert=store.insert)

    assert ids == [100, 101, 102, 103]
    parents = {c.text: c.parent_id for _, c in store.rows}
    assert parents == {"root A": None, "reply B": 100, "root C": None, "reply D": 102}
    assert all(c.venue_id == 7 for _, c in store.rows)


def test_persist_thread_flattens_consecutive_replies():
    def rec(text, is_reply):
        return CommentRecord(text=text, author="x", score="0", timestamp="2023-01-01T00:00:00.000Z", is_reply=is_reply)

    store = FakeCommentStore(start=1)
    persist_thread([rec("r", False), rec("a", True), rec("b", True)], venue_id=1, insert=store.insert)
    assert [c.parent_id for _, c in store.rows] == [None, 1, 1]


def test_persist_thread_reply_before_any_root_has_no_parent():
    store = FakeCommentStore(start=1)
    orphan = CommentRecord(text="o", author="x", score="0", timestamp="2023-01-01T00:00:00.000Z", is_reply=True)
    persist_thread([orphan], venue_id=1, insert=store.insert)
    assert store.rows[0][1].parent_id is None


def test_comment_page_url():
    spider = DirectorySpider()
    assert spider.comment_page_url("https://gdziestoja.pl/miejsce/101-x/", 2) == "https://gdziestoja.pl/miejsce/101-x/strona/2"
    assert spider.comment_page_url("https://gdziestoja.pl/miejsce/101-x", 1) == "https://gdziestoja.pl/miejsce/101-x/strona/1"


def test_comments_before_a_malformed_one_stay_stored(sqlite_db):
    from gdziestoja.models.records import VenueCreate
    from gdziestoja.services import store

    venue_id = store.upsert_venue(
        VenueCreate(title="Pierogarnia", location=("52.2297", "21.0122"), date_added="2023-06-15T08:30:00.000Z")
    )
    html = (
        '<article class="cmt"><span class="userlink">Ola</span>'
        '<time datetime="2023-07-01T08:00:00Z"></time><p class="cmt-c">ok</p></article>'
        '<article class="cmt"><span class="userlink">Jan</span>'
        '<time datetime="bad"></time><p class="cmt-c">zepsuty</p></article>'
    )
    with pytest.raises(ExtractionError):
        persist_thread(DirectorySpider().iter_comments(html), venue_id, store.upsert_comment)

    rows = store.get_comments(venue_id)
    assert [r["text"] for r in rows] == ["ok"]
