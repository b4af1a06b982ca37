from __future__ import annotations

import re
from typing import Iterator, List, Optional, Sequence, Tuple
from urllib.parse import parse_qs, urlparse

from selectolax.parser import HTMLParser

from ..base import (
    UNKNOWN_AUTHOR,
    CommentRecord,
    ExtractionError,
    Spider,
    VenueRecord,
    first_text,
    node_text,
    to_iso_utc,
)

_LEADING_INT = re.compile(r"[+-]?\d+")


class DirectorySpider(Spider):
    """Selector-driven parser for the region -> city -> venue directory layout.

    Page types:
      - home: links to regions (voivodeships)
      - region: links to cities
      - city: venue listing; only links into venue detail pages are kept
      - venue: the venue record plus the pagination used for comment pages
      - comment page: the venue's comments, replies indented in a marker container

    Fetching is the orchestrator's job; every method here takes raw HTML.
    """

    name = "gdziestoja_directory"

    def __init__(
        self,
        *,
        region_link_sel: str = ".list-group-item-prov a",
        city_link_sel: str = ".btn-city",
        venue_link_sel: str = ".cellname a",
        venue_path_marker: str = "/miejsce/",
        title_sel: str = "article h4",
        description_sel: str = ".place-description",
        rating_sel: str = '[property="v:average"]',
        date_sel: str = "time.text-light",
        author_scope_sel: str = "article.row",
        author_sels: Sequence[str] = (".userlink", ".user"),
        map_link_sel: str = "aside a",
        map_query_param: str = "query",
        pagination_sel: str = "ul.pagination li.page-item",
        comment_sel: str = "article.cmt",
        comment_time_sel: str = "time",
        comment_score_sel: str = ".vc-sp",
        comment_text_sel: str = "p.cmt-c",
        reply_container: Tuple[str, str] = ("div", "ml-4"),
        comment_page_segment: str = "strona",
    ) -> None:
        self.region_link_sel = region_link_sel
        self.city_link_sel = city_link_sel
        self.venue_link_sel = venue_link_sel
        self.venue_path_marker = venue_path_marker
        self.title_sel = title_sel
        self.description_sel = description_sel
        self.rating_sel = rating_sel
        self.date_sel = date_sel
        self.author_scope_sel = author_scope_sel
        self.author_sels = tuple(author_sels)
        self.map_link_sel = map_link_sel
        self.map_query_param = map_query_param
        self.pagination_sel = pagination_sel
        self.comment_sel = comment_sel
        self.comment_time_sel = comment_time_sel
        self.comment_score_sel = comment_score_sel
        self.comment_text_sel = comment_text_sel
        self.reply_container = reply_container
        self.comment_page_segment = comment_page_segment

    # --- Link discovery ---
    def parse_home(self, html: str) -> List[str]:
        return self._hrefs(html, self.region_link_sel)

    def parse_region(self, html: str) -> List[str]:
        return self._hrefs(html, self.city_link_sel)

    def parse_city(self, html: str) -> List[str]:
        return [h for h in self._hrefs(html, self.venue_link_sel) if self.venue_path_marker in h]

    # --- Venue page ---
    def parse_venue(self, html: str, *, source_url: Optional[str] = None) -> VenueRecord:
        doc = HTMLParser(html)

        date_node = doc.css_first(self.date_sel)
        date_added = to_iso_utc(
            date_node.attributes.get("datetime") if date_node else None,
            field_name=f"venue date ({self.date_sel}[datetime])",
        )
        lat, lng = self._parse_coordinates(doc)

        return VenueRecord(
            title=node_text(doc.css_first(self.title_sel)),
            lat=lat,
            lng=lng,
            description=node_text(doc.css_first(self.description_sel)),
            date_added=date_added,
            author=first_text(doc.css_first(self.author_scope_sel), self.author_sels, UNKNOWN_AUTHOR),
            rating=self._parse_rating(node_text(doc.css_first(self.rating_sel))),
            pages_count=max(1, len(doc.css(self.pagination_sel)) - 1),
            source_url=source_url,
        )

    # --- Comment pages ---
    def iter_comments(self, html: str) -> Iterator[CommentRecord]:
        """Yield comments in document order, each flagged as reply or root.

        A node is only parsed once the previous record has been consumed, so a
        caller storing as it goes keeps everything before a malformed comment.
        """
        doc = HTMLParser(html)
        for node in doc.css(self.comment_sel):
            time_node = node.css_first(self.comment_time_sel)
            timestamp = to_iso_utc(
                time_node.attributes.get("datetime") if time_node else None,
                field_name="comment timestamp",
            )
            yield CommentRecord(
                text=node_text(node.css_first(self.comment_text_sel)),
                author=first_text(node, self.author_sels, UNKNOWN_AUTHOR),
                score=node_text(node.css_first(self.comment_score_sel)) or "0",
                timestamp=timestamp,
                is_reply=self._inside_reply_container(node),
            )

    def parse_comments(self, html: str) -> List[CommentRecord]:
        return list(self.iter_comments(html))

    def comment_page_url(self, venue_url: str, index: int) -> str:
        base = venue_url.strip()
        if not base.endswith("/"):
            base += "/"
        return f"{base}{self.comment_page_segment}/{index}"

    # --- Internals ---
    @staticmethod
    def _hrefs(html: str, selector: str) -> List[str]:
        doc = HTMLParser(html)
        out: List[str] = []
        for node in doc.css(selector):
            href = node.attributes.get("href")
            if href:
                out.append(href)
        return out

    def _parse_coordinates(self, doc: HTMLParser) -> Tuple[str, str]:
        node = doc.css_first(self.map_link_sel)
        href = node.attributes.get("href") if node else None
        if not href:
            raise ExtractionError(f"Missing map link ({self.map_link_sel})")
        parsed = urlparse(href.strip())
        if not parsed.scheme or not parsed.netloc:
            raise ExtractionError(f"Map link is not an absolute URL: {href!r}")
        values = parse_qs(parsed.query).get(self.map_query_param) or []
        parts = values[0].split(",") if values else []
        if len(parts) < 2:
            raise ExtractionError(f"Map link has no '{self.map_query_param}=<lat>,<lng>' parameter: {href!r}")
        return parts[0], parts[1]

    @staticmethod
    def _parse_rating(text: str) -> float:
        # '4.67' -> 4.0; absent or non-numeric -> 0
        m = _LEADING_INT.match(text.split(".")[0].strip())
        if not m:
            return 0.0
        return min(max(float(m.group()), 0.0), 5.0)

    def _inside_reply_container(self, node) -> bool:
        tag, css_class = self.reply_container
        parent = node.parent
        while parent is not None:
            if parent.tag == tag and css_class in (parent.attributes.get("class") or "").split():
                return True
            parent = parent.parent
        return False
