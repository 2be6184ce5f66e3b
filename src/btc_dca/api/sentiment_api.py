"""
Sentiment API router.

Serves the aggregate headline sentiment index and the scored items behind
it. The endpoint never fails: if aggregation breaks, the neutral index (50)
with no items is returned. Responses carry shared-cache headers so a CDN
can serve repeated requests without re-fetching every feed.
"""

from fastapi import APIRouter, Depends, Response

from btc_dca.api.dependencies import get_app_config, get_sentiment_aggregator
from btc_dca.config.api_models import SentimentResponse
from btc_dca.monitoring.error_logging import ErrorComponent, ErrorLogger, FallbackReason
from btc_dca.sentiment.sentiment_aggregator import SentimentAggregator, SentimentResult
from btc_dca.utils.config_loader import AppConfig
from btc_dca.utils.logger import get_logger

# ------------------------------------------------------------
# Router & Logger Setup
# ------------------------------------------------------------
router = APIRouter()
logger = get_logger("sentiment_api")


# ------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------
@router.get("", response_model=SentimentResponse)
def get_sentiment(
    response: Response,
    aggregator: SentimentAggregator = Depends(get_sentiment_aggregator),
    config: AppConfig = Depends(get_app_config),
) -> SentimentResponse:
    """
    Aggregate sentiment across the configured news feeds.

    Returns:
        SentimentResponse: 0..100 index and up to max_items scored headlines.
    """
    max_age = config.api.cache_max_age
    response.headers["Cache-Control"] = f"s-maxage={max_age}, stale-while-revalidate={max_age}"

    try:
        result = aggregator.run()
    except Exception as e:
        ErrorLogger(ErrorComponent.SENTIMENT_API).log_fallback(
            reason=FallbackReason.UNKNOWN,
            exception=e,
            fallback_action="Returning neutral sentiment",
        )
        result = SentimentResult.neutral()

    logger.info(f"Sentiment served: score={result.score}, items={len(result.items)}")
    return SentimentResponse(**result.to_dict())
