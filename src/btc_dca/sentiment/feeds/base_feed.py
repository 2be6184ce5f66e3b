# src/btc_dca/sentiment/feeds/base_feed.py
import abc
from typing import List, Any

from btc_dca.utils.logger import get_logger

logger = get_logger("feeds")


class BaseFeed(abc.ABC):
    """
    Abstract base class for all news feeds.
    Defines the common interface for fetching and validating data.
    """

    def __init__(self, source_name: str):
        """
        Args:
            source_name (str): Name of the data source
        """
        self.source_name = source_name

    @abc.abstractmethod
    def fetch_data(self) -> List[Any]:
        """
        Fetch data from the source.
        Returns:
            List[Any]: Scored items
        """
        pass

    @abc.abstractmethod
    def validate_data(self, data: List[Any]) -> bool:
        """
        Validate the fetched data.
        Args:
            data (List[Any]): Fetched items
        Returns:
            bool: True if data is usable, else False
        """
        pass

    def log_fetch(self, count: int):
        """
        Log the number of items fetched.
        Args:
            count (int)
        """
        logger.info(f"{self.source_name}: Fetched {count} items")
