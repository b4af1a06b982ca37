import json
from pathlib import Path

from gdziestoja.services import store
from gdziestoja.services.crawl import runner
from gdziestoja.models.records import UrlType
from gdziestoja.services.crawl.base import CommentRecord
from gdziestoja.services.crawl.pipeline import stage_venue_page, write_jsonl
from gdziestoja.services.crawl.spiders.directory_spider import DirectorySpider


def fixture_path(name: str) -> Path:
    return Path(__file__).parent / "fixtures" / name


def test_runner_venue_from_file_writes_jsonl(tmp_path, capsys):
    out_dir = tmp_path / "venues"
    rc = runner.main(["venue", "--file", str(fixture_path("venue.html")), "--out-dir", str(out_dir)])
    assert rc == 0
    path = capsys.readouterr().out.strip()
    assert Path(path).parent == out_dir

    with open(path, "r", encoding="utf-8") as f:
        lines = [json.loads(l) for l in f if l.strip()]
    assert [l["kind"] for l in lines] == ["venue", "comment"]
    rec, comment = lines
    assert rec["title"] == "Pierogarnia na kółkach"
    assert (rec["lat"], rec["lng"]) == ("52.2297", "21.0122")
    assert rec["pages_count"] == 2
    assert comment["author"] == "Ola"
    assert comment["text"] == "Komentarz z pierwszej strony"


def test_runner_stats(sqlite_db, capsys):
    store.upsert_url(UrlType.CITY, "/miasto/warszawa/")
    assert runner.main(["stats"]) == 0
    counts = json.loads(capsys.readouterr().out)
    assert counts == {"comments": 0, "posts": 0, "urls": 1}


def test_main_returns_non_zero_on_failure(sqlite_db, monkeypatch):
    from gdziestoja import main as entry

    def boom(settings):
        raise RuntimeError("network down")

    monkeypatch.setattr(entry, "run_crawl", boom)
    assert entry.main() == 1


def test_write_jsonl_skips_repeated_comments(tmp_path):
    venue = DirectorySpider().parse_venue(fixture_path("venue.html").read_text(encoding="utf-8"))
    ola = CommentRecord(text="Pyszne", author="Ola", score="1", timestamp="2023-07-01T08:00:00.000Z")
    # Same comment seen again on the next page, score changed meanwhile
    ola_again = CommentRecord(text="Pyszne", author="Ola", score="2", timestamp="2023-07-01T08:00:00.000Z")
    jan = CommentRecord(text="Pyszne", author="Jan", score="0", timestamp="2023-07-01T08:00:00.000Z")

    path = write_jsonl(stage_venue_page(venue, [ola, ola_again, jan]), out_dir=str(tmp_path), filename_prefix="venue")
    with open(path, "r", encoding="utf-8") as f:
        lines = [json.loads(l) for l in f if l.strip()]
    assert [(l["kind"], l.get("author")) for l in lines] == [("venue", "Jan"), ("comment", "Ola"), ("comment", "Jan")]
    assert lines[1]["score"] == "1"
