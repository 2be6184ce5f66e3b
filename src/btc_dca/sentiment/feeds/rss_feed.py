# src/btc_dca/sentiment/feeds/rss_feed.py

import re
from datetime import datetime, timezone
from typing import Any, List, Optional

import feedparser
import requests

from btc_dca.sentiment.feeds.base_feed import BaseFeed
from btc_dca.sentiment.feed_schemas.news_item import NewsItem
from btc_dca.sentiment.scorer import LexiconScorer
from btc_dca.utils.logger import get_logger
from btc_dca.validation import InputSanitizer

logger = get_logger("RSSFeed")

_RSS_SUFFIX = re.compile(r"\s+RSS.*$", re.IGNORECASE)
_HTML_TAG = re.compile(r"<.*?>", re.DOTALL)
_WHITESPACE = re.compile(r"\s+")


def _strip_html(text: str) -> str:
    return _WHITESPACE.sub(" ", _HTML_TAG.sub(" ", text)).strip()


def _entry_snippet(entry: Any) -> str:
    """Plain-text summary of an entry, falling back to its first content block."""
    summary = InputSanitizer.sanitize_text(entry.get("summary"))
    if not summary:
        content = entry.get("content") or []
        if content:
            first = content[0]
            summary = InputSanitizer.sanitize_text(first.get("value") if hasattr(first, "get") else first)
    return _strip_html(summary)


def _entry_published(entry: Any) -> Optional[datetime]:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    try:
        return datetime(*parsed[:6], tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None


class RSSFeed(BaseFeed):
    """
    Fetches one RSS/Atom feed and scores its most recent entries.

    The feed body is downloaded with requests (bounded by ``timeout``) and
    parsed with feedparser. Only the first ``limit`` entries are kept.
    """

    def __init__(
        self,
        url: str,
        name: Optional[str] = None,
        limit: int = 10,
        timeout: float = 10.0,
        scorer: Optional[LexiconScorer] = None,
    ) -> None:
        super().__init__(source_name=name or url)
        self.url = url
        self.name = name
        self.limit = limit
        self.timeout = timeout
        self.scorer = scorer or LexiconScorer()

    def _download(self) -> bytes:
        response = requests.get(
            self.url,
            timeout=self.timeout,
            headers={"User-Agent": "btc-dca-sentiment/1.0"},
        )
        response.raise_for_status()
        return response.content

    def _source_title(self, parsed: Any) -> str:
        if self.name:
            return self.name
        title = (parsed.get("feed") or {}).get("title") or ""
        return _RSS_SUFFIX.sub("", title)

    def fetch_data(self) -> List[NewsItem]:
        """
        Download, parse and score the feed.

        Returns:
            List[NewsItem]: Up to ``limit`` scored items.

        Raises:
            requests.RequestException: On network / HTTP failure.
            ValueError: If the body is not a parseable feed.
        """
        body = self._download()
        parsed = feedparser.parse(body)

        entries = parsed.get("entries") or []
        if parsed.get("bozo") and not entries:
            raise ValueError(f"Unparseable feed {self.url}: {parsed.get('bozo_exception')}")

        source = self._source_title(parsed)
        items: List[NewsItem] = []
        for entry in entries[: self.limit]:
            title = InputSanitizer.sanitize_text(entry.get("title")).strip()
            items.append(
                NewsItem(
                    title=title,
                    link=entry.get("link") or entry.get("id") or "#",
                    source=source,
                    published_at=_entry_published(entry),
                    score=self.scorer.score_item(title, _entry_snippet(entry)),
                )
            )

        self.log_fetch(len(items))
        return items

    def validate_data(self, data: List[NewsItem]) -> bool:
        """
        Check that the feed produced items with headlines.

        Args:
            data (List[NewsItem]): Fetched items.

        Returns:
            bool: True if there is at least one titled item.
        """
        if not data:
            logger.warning(f"{self.source_name}: no news items fetched.")
            return False

        if not any(item.title for item in data):
            logger.warning(f"{self.source_name}: items carry no titles.")
            return False

        return True
