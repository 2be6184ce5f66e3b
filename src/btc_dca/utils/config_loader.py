# src/btc_dca/utils/config_loader.py

from pydantic import BaseModel, Field
from typing import List, Optional
from btc_dca.utils.config import load_config  # YAML loader


# -------------------
# Pydantic Configs
# -------------------
class LoggingConfig(BaseModel):
    level: str = "INFO"
    file: Optional[str] = None
    error_log: Optional[str] = None  # JSONL fallback/error records

class PriceSourceConfig(BaseModel):
    base_url: str = "https://api.coingecko.com/api/v3"
    coin_id: str = "bitcoin"
    vs_currency: str = "usd"
    timeout: float = Field(default=10.0, gt=0)
    max_days: int = Field(default=3650, ge=1)
    padding_days: int = Field(default=5, ge=0)

class FeedConfig(BaseModel):
    url: str
    name: Optional[str] = None

class SentimentConfig(BaseModel):
    feeds: List[FeedConfig] = Field(default_factory=lambda: [
        FeedConfig(url="https://bitcoinmagazine.com/.rss/full/"),
        FeedConfig(url="https://feeds.a.dj.com/rss/RSSMarketsMain.xml"),
        FeedConfig(url="https://www.coindesk.com/arc/outboundfeeds/rss/"),
        FeedConfig(url="https://news.bitcoin.com/feed/"),
        FeedConfig(url="https://cryptonews.com/news/feed"),
    ])
    per_feed_limit: int = Field(default=10, ge=1)
    max_items: int = Field(default=20, ge=1)
    feed_timeout: float = Field(default=10.0, gt=0)

class SimulationConfig(BaseModel):
    cadence: str = "weekly"
    amount: float = Field(default=100.0, gt=0)
    lookback_months: int = Field(default=12, ge=0)

class ApiConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    cache_max_age: int = Field(default=600, ge=0)

class AppConfig(BaseModel):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    price_source: PriceSourceConfig = Field(default_factory=PriceSourceConfig)
    sentiment: SentimentConfig = Field(default_factory=SentimentConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)


# -------------------
# Functions
# -------------------
def load_typed_config(config_path: str) -> AppConfig:
    """
    Load and validate the full config as a typed Pydantic model.
    Sections missing from the YAML file keep their defaults.

    Args:
        config_path (str): Path to main YAML config file.

    Returns:
        AppConfig: Typed configuration object.
    """
    raw_config = load_config(config_path)
    return AppConfig(**raw_config)

def default_config() -> AppConfig:
    """Configuration used when no YAML file is supplied."""
    return AppConfig()
