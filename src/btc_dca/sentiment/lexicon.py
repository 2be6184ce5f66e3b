# src/btc_dca/sentiment/lexicon.py
"""
Market / crypto vocabulary used by the lexical sentiment scorer.

All terms are lowercase and matched by substring containment, so short
terms such as "ath" or "sue" also fire inside longer words.
"""

from typing import Tuple

POSITIVE_TERMS: Tuple[str, ...] = (
    "surge", "soar", "bull", "bullish", "rally", "record", "all-time high", "ath",
    "inflow", "adopt", "adoption", "approve", "approval", "sec ok",
    "growth", "gain", "gains", "climb", "spike", "breakout", "positive", "beat",
    "beats", "increase", "expansion", "pump", "accumulate", "hodl",
)

NEGATIVE_TERMS: Tuple[str, ...] = (
    "drop", "dump", "bear", "bearish", "selloff", "sell-off", "down", "plunge",
    "crash", "fear", "ban", "banned", "restrict", "lawsuit", "sue", "sues",
    "hack", "hacked", "exploit", "outflow", "liquidation", "liquidations",
    "recession", "decline", "decrease", "negative", "miss", "misses",
)

TERM_WEIGHT = 2
RAW_CLAMP = 20
NEUTRAL_SCORE = 50

# Index bands: >= BULLISH_FLOOR is bullish, <= BEARISH_CEILING is bearish.
BULLISH_FLOOR = 60
BEARISH_CEILING = 40
BULLISH_LABEL = "Bullish tilt"
BEARISH_LABEL = "Bearish tilt"
NEUTRAL_LABEL = "Neutral/Range"
