# src/btc_dca/api/dependencies.py
"""
Shared FastAPI dependencies.

The application config is read once from the YAML file named by the
BTC_DCA_CONFIG environment variable (built-in defaults when unset).
"""

import os
from functools import lru_cache

from fastapi import Depends

from btc_dca.data.price_loader import PriceLoader
from btc_dca.sentiment.sentiment_aggregator import SentimentAggregator
from btc_dca.monitoring.error_logging import configure_error_log
from btc_dca.utils.config_loader import AppConfig, default_config, load_typed_config
from btc_dca.utils.logger import configure_logging

CONFIG_ENV_VAR = "BTC_DCA_CONFIG"


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    config_path = os.environ.get(CONFIG_ENV_VAR)
    config = load_typed_config(config_path) if config_path else default_config()
    configure_logging(config.logging.level, config.logging.file)
    configure_error_log(config.logging.error_log)
    return config


def get_price_loader(config: AppConfig = Depends(get_app_config)) -> PriceLoader:
    return PriceLoader(config.price_source)


def get_sentiment_aggregator(config: AppConfig = Depends(get_app_config)) -> SentimentAggregator:
    return SentimentAggregator.from_config(config.sentiment)
