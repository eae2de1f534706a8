"""
Main entry point for RSS Discord.

Runs a single poll of the configured feed and exits.
"""

import argparse
import asyncio
import logging
import sys
from datetime import timedelta

import coloredlogs

from rss_discord.config import AppConfig, load_config
from rss_discord.discord import DiscordNotifier, redact_webhook_url
from rss_discord.errors import ConfigError
from rss_discord.pacing import FixedDelayPacer
from rss_discord.rss_parser import FeedParser
from rss_discord.runner import FeedRunner, RunOutcome, RunResult
from rss_discord.storage import TimestampStore

logger = logging.getLogger(__name__)


def build_runner(config: AppConfig) -> FeedRunner:
    """
    Wire the runner's collaborators from configuration.

    Parameters
    ----------
    config : AppConfig
        Validated application configuration.

    Returns
    -------
    FeedRunner
        A runner ready to be awaited once.
    """
    defaults = config.defaults

    parser = FeedParser(
        timeout=defaults.request_timeout,
        max_retries=defaults.max_retries,
        user_agent=defaults.user_agent,
        proxy_url=defaults.proxy,
    )
    notifier = DiscordNotifier(
        config.discord.webhook_url,
        timeout=defaults.request_timeout,
        user_agent=defaults.user_agent,
        proxy_url=defaults.proxy,
    )

    logger.debug(
        "Feed %s -> webhook %s",
        config.rss.feed_url,
        redact_webhook_url(config.discord.webhook_url),
    )

    return FeedRunner(
        feed_url=config.rss.feed_url,
        store=TimestampStore(config.timestamp_file),
        fetcher=parser,
        notifier=notifier,
        pacer=FixedDelayPacer(defaults.post_delay),
        grace_window=timedelta(seconds=defaults.grace_window),
    )


async def run_once(config: AppConfig) -> RunResult:
    """Run one poll and release HTTP resources afterwards."""
    async with build_runner(config) as runner:
        return await runner.run()


def setup_logging(verbose: bool = False) -> None:
    """
    Configure application logging.

    Parameters
    ----------
    verbose : bool
        If True, set log level to DEBUG.
    """
    level = logging.DEBUG if verbose else logging.INFO

    coloredlogs.install(
        level=level,
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Post new RSS feed entries to a Discord webhook",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error("Cannot load configuration: %s", e)
        logger.debug("Run outcome: %s", RunOutcome.ABORTED_CONFIG_ERROR.value)
        return 1

    result = asyncio.run(run_once(config))
    logger.debug("Run outcome: %s", result.outcome.value)

    return 0 if result.outcome.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
