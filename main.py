"""
Central CLI entrypoint for the BTC DCA & sentiment engine.

Usage:
    python main.py <command> [options]

Supported commands:
    simulate        Simulate recurring purchases against daily prices
    sentiment       Compute the headline sentiment index from news feeds
    serve           Start the API server

Examples:
    python main.py simulate --start 2024-01-01 --end 2024-12-31 --cadence weekly --amount 100
    python main.py simulate --cadence monthly --amount 250 --csv out/timeline.csv
    python main.py sentiment --config configs/app_config.yaml
    python main.py serve --host 0.0.0.0 --port 8000
"""

import argparse
import os
import sys
from typing import Optional

# Allow running from a source checkout without installation
sys.path.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from btc_dca.api.dependencies import CONFIG_ENV_VAR
from btc_dca.api.main_api import start_api
from btc_dca.data.price_loader import PriceLoader
from btc_dca.exceptions import InvalidInputError
from btc_dca.monitoring.error_logging import configure_error_log
from btc_dca.sentiment.sentiment_aggregator import SentimentAggregator
from btc_dca.simulation.export import export_timeline_csv
from btc_dca.simulation.service import default_date_range, run_simulation
from btc_dca.utils.config_loader import AppConfig, default_config, load_typed_config
from btc_dca.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def validate_config_path(config_path: str) -> None:
    """
    Validates whether the given config path exists and is a file.

    Args:
        config_path (str): Path to the config file.

    Raises:
        FileNotFoundError: If the config file does not exist.
    """
    if not config_path or not os.path.isfile(config_path):
        logger.error(f"Config file not found: {config_path}")
        raise FileNotFoundError(f"Config file not found: {config_path}")


def load_app_config(config_path: Optional[str]) -> AppConfig:
    """Typed config from the given YAML file, or the built-in defaults."""
    if config_path is None:
        config = default_config()
    else:
        validate_config_path(config_path)
        config = load_typed_config(config_path)
    configure_logging(config.logging.level, config.logging.file)
    configure_error_log(config.logging.error_log)
    return config


def run_simulate_command(args: argparse.Namespace, config: AppConfig) -> int:
    default_start, default_end = default_date_range(lookback_months=config.simulation.lookback_months)
    start = args.start or default_start.isoformat()
    end = args.end or default_end.isoformat()
    cadence = args.cadence or config.simulation.cadence
    amount = args.amount if args.amount is not None else config.simulation.amount

    loader = PriceLoader(config.price_source)
    try:
        prices = loader.fetch_prices(start, end)
        result = run_simulation(start, end, cadence, amount, prices)
    except InvalidInputError as e:
        logger.error(f"Invalid simulation input: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 2

    summary = result.summary
    if loader.last_fetch_was_mock:
        print("(price API unavailable: using mock price series)")
    print(f"Purchases:       {len(result.timeline)}")
    print(f"Total invested:  {summary.total_invested:,.2f}")
    print(f"Total units:     {summary.total_units:.8f}")
    print(f"Current value:   {summary.current_value:,.2f}")
    print(f"P&L:             {summary.profit_and_loss:+,.2f} ({summary.profit_and_loss_percent:+.2f}%)")
    print(f"Latest price:    {summary.latest_price:,.2f}")

    if args.csv:
        export_timeline_csv(result, args.csv)
        print(f"Timeline written to {args.csv}")
    return 0


def run_sentiment_command(args: argparse.Namespace, config: AppConfig) -> int:
    result = SentimentAggregator.from_config(config.sentiment).run()
    print(f"Sentiment index: {result.score}/100 ({result.label})")
    for item in result.items:
        published = item.published_at.strftime("%Y-%m-%d %H:%M") if item.published_at else "----"
        print(f"  [{item.score:3d}] {published}  {item.source}: {item.title}")
    return 0


def main(argv: Optional[list] = None) -> int:
    """
    Parse CLI arguments and dispatch commands.
    """
    parser = argparse.ArgumentParser(description="BTC DCA & Sentiment CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- Simulate ---
    simulate_parser = subparsers.add_parser("simulate", help="Run a DCA simulation")
    simulate_parser.add_argument("--start", help="First purchase date (YYYY-MM-DD)")
    simulate_parser.add_argument("--end", help="Last purchase date (YYYY-MM-DD)")
    simulate_parser.add_argument(
        "--cadence", choices=["weekly", "biweekly", "monthly"],
        help="Purchase interval"
    )
    simulate_parser.add_argument("--amount", type=float, help="Fiat amount per purchase")
    simulate_parser.add_argument("--csv", help="Write the timeline to this CSV file")
    simulate_parser.add_argument("--config", "-c", help="Path to app config YAML")

    # --- Sentiment ---
    sentiment_parser = subparsers.add_parser("sentiment", help="Compute the news sentiment index")
    sentiment_parser.add_argument("--config", "-c", help="Path to app config YAML")

    # --- Serve ---
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", help="Host to bind the server (default: api.host from config)")
    serve_parser.add_argument("--port", type=int, help="Port for the API (default: api.port from config)")
    serve_parser.add_argument("--config", "-c", help="Path to app config YAML")

    args = parser.parse_args(argv)

    try:
        config = load_app_config(args.config)

        if args.command == "serve":
            host = args.host or config.api.host
            port = args.port if args.port is not None else config.api.port
            if args.config:
                # the server process reads its config through the environment
                os.environ[CONFIG_ENV_VAR] = os.path.abspath(args.config)
            logger.info(f"Launching API server on {host}:{port}")
            start_api(host=host, port=port)
            return 0

        if args.command == "simulate":
            return run_simulate_command(args, config)

        elif args.command == "sentiment":
            return run_sentiment_command(args, config)

    except Exception as e:
        logger.exception(f"Fatal error during execution: {e}")
        raise

    return 0


if __name__ == "__main__":
    sys.exit(main())
