"""Tests for the lexical sentiment scorer."""

import pytest

from btc_dca.sentiment.lexicon import NEGATIVE_TERMS, POSITIVE_TERMS
from btc_dca.sentiment.scorer import LexiconScorer, aggregate, score_item, score_text, sentiment_label


class TestScoreText:
    """Test per-text scoring."""

    def test_empty_text_is_midpoint(self):
        """Empty or absent text scores 50."""
        assert score_text("") == 50
        assert score_text(None) == 50

    def test_positive_headline(self):
        """Two positive terms lift the score to 60."""
        # surge, all-time high
        assert score_text("BTC surges to new all-time high") == 60

    def test_negative_headline(self):
        """Five negative terms drop the score to 25."""
        # hack, hacked, liquidation, liquidations, crash
        assert score_text("Exchange hacked, massive liquidations, prices crash") == 25

    def test_no_lexicon_terms_is_neutral(self):
        """Text without lexicon terms scores 50."""
        assert score_text("Quarterly meeting scheduled for Thursday") == 50

    def test_balanced_hits_are_neutral(self):
        """Equal positive and negative hits cancel out."""
        assert score_text("rally then crash") == 50

    def test_term_counts_once_however_often_it_occurs(self):
        """A repeated term counts once."""
        assert score_text("bull bull bull") == 55

    def test_overlapping_terms_each_count(self):
        """Terms contained in one another each count."""
        # "bullish" contains both "bull" and "bullish"
        assert score_text("bullish") == 60

    def test_case_insensitive(self):
        """Matching ignores case."""
        assert score_text("BULLISH") == score_text("bullish")

    def test_clamped_at_upper_bound(self):
        """Many positive hits clamp at 100."""
        text = "surge soar bullish rally record ath inflow adoption approval growth gains climb"
        assert score_text(text) == 100

    def test_clamped_at_lower_bound(self):
        """Many negative hits clamp at 0."""
        text = "drop dump bearish selloff plunge crash fear banned lawsuit hacked exploit outflow"
        assert score_text(text) == 0

    def test_scores_stay_in_range(self):
        """Scores always fall within 0..100."""
        for text in ["", "hodl", "ban", " ".join(POSITIVE_TERMS), " ".join(NEGATIVE_TERMS)]:
            assert 0 <= score_text(text) <= 100

    def test_deterministic(self):
        """Scoring the same text twice gives the same score."""
        text = "ETF approval sparks rally despite recession fear"
        assert score_text(text) == score_text(text)


class TestScoreItem:
    """Test title + snippet scoring with absent parts."""

    def test_absent_parts(self):
        """Absent title and snippet score 50."""
        assert score_item(None, None) == 50
        assert score_item("", "") == 50

    def test_title_only(self):
        """A title alone is scored."""
        assert score_item("BTC rally", None) == 55

    def test_snippet_contributes(self):
        """Terms in the snippet count toward the score."""
        assert score_item("BTC update", "miners accumulate") == 55


class TestAggregate:
    """Test aggregation of per-item scores."""

    def test_empty_is_neutral(self):
        """No scores aggregate to 50."""
        assert aggregate([]) == 50

    def test_mean(self):
        """Aggregate is the mean of item scores."""
        assert aggregate([80, 20]) == 50
        assert aggregate([60, 60, 30]) == 50

    def test_half_rounds_up(self):
        """A mean ending in .5 rounds up."""
        assert aggregate([55, 60]) == 58
        assert aggregate([1, 2]) == 2

    def test_accepts_iterables(self):
        """Generators are accepted as input."""
        assert aggregate(s for s in [40, 45]) == 43


class TestLexiconScorer:
    """Test custom lexicons."""

    def test_custom_lexicon(self):
        """Custom terms, weight and clamp are honoured."""
        scorer = LexiconScorer(positive=["moon"], negative=["rekt"], weight=5, clamp=10)
        assert scorer.score_text("to the MOON") == 75
        assert scorer.score_text("got rekt") == 25
        assert scorer.raw_score("moon moon rekt") == 0

    def test_duplicate_terms_count_once(self):
        """Duplicate lexicon entries are collapsed case-insensitively."""
        scorer = LexiconScorer(positive=["gain", "GAIN"], negative=[])
        assert scorer.raw_score("big gain") == 2

    def test_invalid_clamp(self):
        """A non-positive clamp is refused."""
        with pytest.raises(ValueError):
            LexiconScorer(clamp=0)


class TestSentimentLabel:
    """Test banding of the index into labels."""

    @pytest.mark.parametrize("score, label", [
        (0, "Bearish tilt"),
        (40, "Bearish tilt"),
        (41, "Neutral/Range"),
        (50, "Neutral/Range"),
        (59, "Neutral/Range"),
        (60, "Bullish tilt"),
        (100, "Bullish tilt"),
    ])
    def test_band_boundaries(self, score, label):
        """40 and below is bearish, 60 and above bullish, neutral in between."""
        assert sentiment_label(score) == label

    def test_labels_scored_text(self):
        """Labels compose with text scoring."""
        assert sentiment_label(score_text("BTC surges to new all-time high")) == "Bullish tilt"
        assert sentiment_label(score_text("Exchange hacked, massive liquidations, prices crash")) == "Bearish tilt"
