# src/btc_dca/sentiment/feed_schemas/news_item.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class NewsItem:
    """
    One scored headline taken from a news feed.

    Attributes:
        title (str): Headline.
        link (str): URL of the article ("#" when the feed gives none).
        source (str): Feed title the item came from.
        published_at (Optional[datetime]): Publication time (UTC), None if unknown.
        score (int): Lexical sentiment of title + snippet, 0..100.
    """
    title: str
    link: str = "#"
    source: str = ""
    published_at: Optional[datetime] = None
    score: int = field(default=50)

    def sort_key(self) -> float:
        """Recency key; undated items sort as the oldest."""
        return self.published_at.timestamp() if self.published_at else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "link": self.link,
            "source": self.source,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "score": self.score,
        }
