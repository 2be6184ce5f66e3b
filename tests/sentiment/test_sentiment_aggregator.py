"""Tests for multi-feed sentiment aggregation."""

import time
from datetime import datetime, timedelta, timezone
from typing import List

import pytest

from btc_dca.monitoring.error_logging import ErrorComponent, ErrorLogger
from btc_dca.sentiment.feed_schemas.news_item import NewsItem
from btc_dca.sentiment.feeds.base_feed import BaseFeed
from btc_dca.sentiment.feeds.rss_feed import RSSFeed
from btc_dca.sentiment.sentiment_aggregator import (
    SentimentAggregator,
    SentimentResult,
    select_recent,
)
from btc_dca.utils.config_loader import FeedConfig, SentimentConfig

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _item(title: str, hours_ago, score: int) -> NewsItem:
    published = None if hours_ago is None else NOW - timedelta(hours=hours_ago)
    return NewsItem(title=title, link="#", source="Test", published_at=published, score=score)


class StaticFeed(BaseFeed):
    def __init__(self, name: str, items: List[NewsItem], delay: float = 0.0):
        super().__init__(source_name=name)
        self.items = items
        self.delay = delay

    def fetch_data(self) -> List[NewsItem]:
        if self.delay:
            time.sleep(self.delay)
        return list(self.items)

    def validate_data(self, data: List[NewsItem]) -> bool:
        return bool(data)


class BrokenFeed(BaseFeed):
    def fetch_data(self):
        raise ConnectionError("feed down")

    def validate_data(self, data):
        return True


@pytest.fixture
def error_logger(tmp_path):
    return ErrorLogger(ErrorComponent.SENTIMENT_AGGREGATOR, error_log_path=tmp_path / "errors.jsonl")


class TestSentimentAggregator:
    """Test fetching, windowing and aggregation."""

    def test_merges_sorts_and_aggregates(self, error_logger):
        """Items from all feeds are merged newest-first and averaged."""
        feeds = [
            StaticFeed("a", [_item("old", 10, 40), _item("new", 1, 60)]),
            StaticFeed("b", [_item("mid", 5, 80)]),
        ]
        result = SentimentAggregator(feeds, error_logger=error_logger).run()

        assert [i.title for i in result.items] == ["new", "mid", "old"]
        assert result.score == 60

    def test_window_is_capped_most_recent_first(self, error_logger):
        """Only the max_items most recent items are kept and scored."""
        items = [_item(f"h{h}", h, 50 + h) for h in range(30)]
        result = SentimentAggregator([StaticFeed("a", items)], max_items=20, error_logger=error_logger).run()

        assert len(result.items) == 20
        assert result.items[0].title == "h0"
        assert result.items[-1].title == "h19"
        # mean of 50..69
        assert result.score == 60

    def test_failed_feed_does_not_block_others(self, error_logger):
        """A failing feed is logged and the rest still contribute."""
        feeds = [BrokenFeed("broken"), StaticFeed("ok", [_item("fine", 1, 70)])]
        result = SentimentAggregator(feeds, error_logger=error_logger).run()

        assert [i.title for i in result.items] == ["fine"]
        assert result.score == 70
        assert error_logger.fallback_count == 1

    def test_slow_feed_is_dropped_after_timeout(self, error_logger):
        """Feeds still pending at the deadline are dropped."""
        feeds = [
            StaticFeed("slow", [_item("late", 0, 0)], delay=1.0),
            StaticFeed("fast", [_item("quick", 2, 90)]),
        ]
        started = time.monotonic()
        result = SentimentAggregator(feeds, feed_timeout=0.2, error_logger=error_logger).run()

        assert time.monotonic() - started < 0.9
        assert [i.title for i in result.items] == ["quick"]
        assert error_logger.error_history[-1]["reason"] == "timeout"

    def test_all_feeds_failing_gives_neutral(self, error_logger):
        """With every feed down the result is neutral and empty."""
        result = SentimentAggregator([BrokenFeed("x"), BrokenFeed("y")], error_logger=error_logger).run()
        assert result == SentimentResult(score=50, items=[])

    def test_invalid_feed_data_is_skipped(self, error_logger):
        """Feeds whose data fails validation contribute nothing."""
        result = SentimentAggregator([StaticFeed("empty", [])], error_logger=error_logger).run()
        assert result.score == 50
        assert result.items == []

    def test_no_feeds(self, error_logger):
        """No feeds configured gives the neutral result."""
        assert SentimentAggregator([], error_logger=error_logger).run() == SentimentResult.neutral()

    def test_run_never_raises(self, error_logger, monkeypatch):
        """An unexpected error inside run yields the neutral result."""
        aggregator = SentimentAggregator([StaticFeed("a", [_item("x", 1, 90)])], error_logger=error_logger)

        def explode(items):
            raise RuntimeError("boom")

        monkeypatch.setattr(aggregator, "aggregate_items", explode)
        assert aggregator.run() == SentimentResult.neutral()

    def test_from_config(self):
        """from_config builds one RSSFeed per configured feed."""
        config = SentimentConfig(
            feeds=[FeedConfig(url="https://a.example/rss"), FeedConfig(url="https://b.example/rss", name="B")],
            per_feed_limit=5,
            max_items=7,
            feed_timeout=2.5,
        )
        aggregator = SentimentAggregator.from_config(config)

        assert aggregator.max_items == 7
        assert aggregator.feed_timeout == 2.5
        assert all(isinstance(f, RSSFeed) for f in aggregator.feeds)
        assert [f.limit for f in aggregator.feeds] == [5, 5]
        assert aggregator.feeds[1].source_name == "B"


class TestSelectRecent:
    """Test recency ordering."""

    def test_undated_items_sort_last(self):
        """Items without a date sort after dated ones."""
        items = [_item("undated", None, 50), _item("dated", 100, 50)]
        assert [i.title for i in select_recent(items, 5)] == ["dated", "undated"]


def test_result_to_dict():
    """Serialized result carries score, label and ISO timestamps."""
    result = SentimentResult(score=55, items=[_item("x", 1, 55)])
    data = result.to_dict()
    assert data["score"] == 55
    assert data["label"] == "Neutral/Range"
    assert data["items"][0]["published_at"] == "2024-05-01T11:00:00+00:00"


@pytest.mark.parametrize("score, label", [(60, "Bullish tilt"), (50, "Neutral/Range"), (40, "Bearish tilt")])
def test_result_label(score, label):
    """The result exposes the band label of its index."""
    assert SentimentResult(score=score).label == label
