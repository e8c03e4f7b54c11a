"""Command-line entry point for the world monitor.

Usage:
    python main.py                      # Run the Telegram bot and poll loop
    python main.py --dev                # Notify on every check
    python main.py --interval 1         # Check every minute
    python main.py --once               # Print the current tier and exit
"""

import argparse
import asyncio
import logging
import sys

import structlog

from .bot import MonitorBot
from .config import MonitorConfig, load_config
from .errors import ConfigError, FetchError
from .extraction import KeywordAdjacencyExtractor
from .fetcher import StatusPageFetcher

logger = structlog.get_logger(__name__)


def configure_logging(level: str = "INFO") -> None:
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="FFXIV world status monitor")
    parser.add_argument("--config", default=None, help="YAML config file (default: WORLD_MONITOR_CONFIG)")
    parser.add_argument("--dev", action="store_true", help="Dev mode: notify on every check")
    parser.add_argument("--interval", type=float, default=None, help="Minutes between checks")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Fetch the status page once, print the tier and exit without contacting Telegram",
    )
    return parser


async def check_once(config: MonitorConfig) -> int:
    fetcher = StatusPageFetcher(
        config.status_url,
        timeout_seconds=config.fetch_timeout_seconds,
        user_agent=config.user_agent,
    )
    try:
        html = await fetcher.fetch()
    except FetchError as e:
        logger.error("Status page fetch failed", error=str(e))
        return 1
    finally:
        await fetcher.aclose()

    tier = KeywordAdjacencyExtractor().extract(html, config.world_name)
    availability = "available" if tier.is_available else "unavailable"
    print(f"{config.world_name}: {tier.value} (character creation {availability})")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {
        "dev_mode": True if args.dev else None,
        "check_interval_minutes": args.interval,
    }
    try:
        config = load_config(args.config, overrides=overrides, require_chat=not args.once)
    except ConfigError as e:
        configure_logging()
        logger.error("Configuration error", error=str(e), missing=e.missing or None)
        print(f"{e}\nPlease check your .env file or environment.", file=sys.stderr)
        return 1

    configure_logging(config.log_level)

    if args.once:
        return asyncio.run(check_once(config))

    logger.info(
        "Starting world monitor",
        world=config.world_name,
        interval_minutes=config.check_interval_minutes,
        mode=config.mode.value,
    )
    MonitorBot(config).run()
    return 0
