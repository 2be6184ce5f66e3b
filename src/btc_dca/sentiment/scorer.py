# src/btc_dca/sentiment/scorer.py
"""
Lexical Sentiment Scorer

Scores short texts (headline + snippet) on a 0..100 index:

    raw    = +2 per distinct positive term found - 2 per distinct negative term found
    raw    = clamp(raw, -20, +20)
    score  = round(((raw + 20) / 40) * 100)

Each lexicon term counts at most once per text, however many times it
occurs. Empty text scores 50, the same as a text whose hits cancel out.
The batch index is the rounded mean of per-item scores (50 when empty).
An index of 60 or more reads as a bullish tilt, 40 or less as bearish.
"""

import math
from typing import Iterable, Optional, Sequence

from btc_dca.sentiment.lexicon import (
    BEARISH_CEILING,
    BEARISH_LABEL,
    BULLISH_FLOOR,
    BULLISH_LABEL,
    NEGATIVE_TERMS,
    NEUTRAL_LABEL,
    NEUTRAL_SCORE,
    POSITIVE_TERMS,
    RAW_CLAMP,
    TERM_WEIGHT,
)
from btc_dca.utils.logger import get_logger

logger = get_logger("sentiment_scorer")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class LexiconScorer:
    """
    Deterministic keyword scorer.

    Example:
        scorer = LexiconScorer()
        scorer.score_text("BTC surges to new all-time high")   # 60
        scorer.aggregate([80, 20])                              # 50
    """

    def __init__(
        self,
        positive: Sequence[str] = POSITIVE_TERMS,
        negative: Sequence[str] = NEGATIVE_TERMS,
        weight: int = TERM_WEIGHT,
        clamp: int = RAW_CLAMP,
    ):
        if clamp <= 0:
            raise ValueError("clamp must be positive")
        # dict.fromkeys keeps order and drops duplicate terms
        self.positive = tuple(dict.fromkeys(t.lower() for t in positive))
        self.negative = tuple(dict.fromkeys(t.lower() for t in negative))
        self.weight = weight
        self.clamp = clamp

    def raw_score(self, text: Optional[str]) -> int:
        """Keyword balance clamped to [-clamp, clamp]."""
        if not text:
            return 0
        lowered = text.lower()
        positive_hits = sum(1 for term in self.positive if term in lowered)
        negative_hits = sum(1 for term in self.negative if term in lowered)
        raw = self.weight * (positive_hits - negative_hits)
        return max(-self.clamp, min(self.clamp, raw))

    def score_text(self, text: Optional[str]) -> int:
        """Score a text on the 0..100 index."""
        if not text:
            return NEUTRAL_SCORE
        raw = self.raw_score(text)
        return _round_half_up(((raw + self.clamp) / (2 * self.clamp)) * 100)

    def score_item(self, title: Optional[str], snippet: Optional[str] = None) -> int:
        """Score a feed item from its title and optional snippet."""
        return self.score_text(f"{title or ''} {snippet or ''}".strip())

    @staticmethod
    def aggregate(scores: Iterable[int]) -> int:
        """Rounded mean of per-item scores; 50 when there are none."""
        values = [float(s) for s in scores]
        if not values:
            return NEUTRAL_SCORE
        return _round_half_up(sum(values) / len(values))


_default_scorer = LexiconScorer()


def score_text(text: Optional[str]) -> int:
    """Score a text with the default market lexicon."""
    return _default_scorer.score_text(text)


def score_item(title: Optional[str], snippet: Optional[str] = None) -> int:
    return _default_scorer.score_item(title, snippet)


def aggregate(scores: Iterable[int]) -> int:
    """Aggregate per-item scores into a single 0..100 index."""
    return LexiconScorer.aggregate(scores)


def sentiment_label(score: int) -> str:
    """Band an index: 'Bullish tilt' (>= 60), 'Bearish tilt' (<= 40), else 'Neutral/Range'."""
    if score >= BULLISH_FLOOR:
        return BULLISH_LABEL
    if score <= BEARISH_CEILING:
        return BEARISH_LABEL
    return NEUTRAL_LABEL
