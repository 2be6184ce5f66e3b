# src/btc_dca/sentiment/sentiment_aggregator.py
"""
Sentiment Aggregator Module

Fetches several news feeds concurrently and reduces them to one 0..100
sentiment index plus the list of scored headlines behind it.

Core Responsibilities:
    - Fetch every feed in its own worker thread
    - Tolerate individual feed failures and timeouts (logged, then ignored)
    - Merge items, sort most-recent-first, keep a fixed-size window
    - Aggregate per-item scores with the lexical scorer
    - Fall back to the neutral index (50) with no items if everything fails
"""

from concurrent.futures import ThreadPoolExecutor, as_completed, TimeoutError as FuturesTimeout
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from btc_dca.monitoring.error_logging import ErrorComponent, ErrorLogger, FallbackReason
from btc_dca.sentiment.feed_schemas.news_item import NewsItem
from btc_dca.sentiment.feeds.base_feed import BaseFeed
from btc_dca.sentiment.feeds.rss_feed import RSSFeed
from btc_dca.sentiment.lexicon import NEUTRAL_SCORE
from btc_dca.sentiment.scorer import LexiconScorer, sentiment_label
from btc_dca.utils.config_loader import SentimentConfig
from btc_dca.utils.logger import get_logger

logger = get_logger("sentiment_aggregator")


@dataclass(frozen=True)
class SentimentResult:
    """Aggregate index and the recency-ordered items it was computed from."""
    score: int = NEUTRAL_SCORE
    items: List[NewsItem] = field(default_factory=list)

    @classmethod
    def neutral(cls) -> "SentimentResult":
        return cls(score=NEUTRAL_SCORE, items=[])

    @property
    def label(self) -> str:
        return sentiment_label(self.score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "label": self.label,
            "items": [item.to_dict() for item in self.items],
        }


def select_recent(items: Sequence[NewsItem], max_items: int) -> List[NewsItem]:
    """Most-recent-first window of at most ``max_items`` items (undated last)."""
    return sorted(items, key=lambda item: item.sort_key(), reverse=True)[:max_items]


class SentimentAggregator:
    """
    Aggregates headline sentiment across multiple feeds.

    Example:
        aggregator = SentimentAggregator.from_config(config.sentiment)
        result = aggregator.run()
        result.score   # 0..100
    """

    def __init__(
        self,
        feeds: Sequence[BaseFeed],
        max_items: int = 20,
        feed_timeout: float = 10.0,
        scorer: Optional[LexiconScorer] = None,
        error_logger: Optional[ErrorLogger] = None,
    ):
        """
        Args:
            feeds: Feed handlers to fetch from.
            max_items: Size of the recency window that is scored.
            feed_timeout: Seconds to wait for all feeds before giving up on stragglers.
            scorer: Lexical scorer used for the aggregate.
            error_logger: Fallback/error recorder.
        """
        self.feeds = list(feeds)
        self.max_items = max_items
        self.feed_timeout = feed_timeout
        self.scorer = scorer or LexiconScorer()
        self.error_logger = error_logger or ErrorLogger(ErrorComponent.SENTIMENT_AGGREGATOR)

        logger.info(f"SentimentAggregator initialized | feeds={len(self.feeds)} | max_items={max_items}")

    @classmethod
    def from_config(cls, config: SentimentConfig, **kwargs) -> "SentimentAggregator":
        """Build RSS feed handlers from a SentimentConfig."""
        scorer = kwargs.pop("scorer", None) or LexiconScorer()
        feeds = [
            RSSFeed(
                url=feed.url,
                name=feed.name,
                limit=config.per_feed_limit,
                timeout=config.feed_timeout,
                scorer=scorer,
            )
            for feed in config.feeds
        ]
        return cls(
            feeds=feeds,
            max_items=config.max_items,
            feed_timeout=config.feed_timeout,
            scorer=scorer,
            **kwargs,
        )

    def _process_feed(self, feed: BaseFeed) -> List[NewsItem]:
        items = feed.fetch_data()
        if not feed.validate_data(items):
            logger.warning(f"{feed.source_name}: invalid or empty data, skipping.")
            return []
        return items

    def collect_items(self) -> List[NewsItem]:
        """
        Fetch all feeds in parallel and merge their items.

        Individual failures are logged and contribute no items.
        """
        if not self.feeds:
            return []

        merged: List[NewsItem] = []
        executor = ThreadPoolExecutor(max_workers=len(self.feeds))
        future_to_feed = {executor.submit(self._process_feed, feed): feed for feed in self.feeds}
        try:
            for future in as_completed(future_to_feed, timeout=self.feed_timeout):
                feed = future_to_feed[future]
                try:
                    items = future.result()
                    merged.extend(items)
                    logger.info(f"{feed.source_name}: contributed {len(items)} items")
                except Exception as e:
                    self.error_logger.log_fallback(
                        reason=FallbackReason.EXTERNAL_API_FAILURE,
                        exception=e,
                        context={"feed": feed.source_name},
                        fallback_action="Skipping feed",
                    )
        except FuturesTimeout as e:
            pending = [f.source_name for fut, f in future_to_feed.items() if not fut.done()]
            self.error_logger.log_fallback(
                reason=FallbackReason.TIMEOUT,
                exception=e,
                context={"feeds": pending, "timeout": self.feed_timeout},
                fallback_action="Skipping feeds that did not answer in time",
            )
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return merged

    def aggregate_items(self, items: Sequence[NewsItem]) -> SentimentResult:
        """Window the items by recency and aggregate their scores."""
        window = select_recent(items, self.max_items)
        score = self.scorer.aggregate(item.score for item in window)
        logger.info(f"Aggregated sentiment {score} from {len(window)} of {len(items)} items")
        return SentimentResult(score=score, items=window)

    def run(self) -> SentimentResult:
        """
        Execute the full fetch -> window -> aggregate pass.

        Never raises: an unexpected failure yields the neutral result.
        """
        try:
            return self.aggregate_items(self.collect_items())
        except Exception as e:
            self.error_logger.log_fallback(
                reason=FallbackReason.UNKNOWN,
                exception=e,
                fallback_action="Returning neutral sentiment",
            )
            return SentimentResult.neutral()
