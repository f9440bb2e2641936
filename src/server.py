"""Review bot runner.

Loads secrets from `.env` and presentation settings from `config.json`,
prepares the reviews domain and its tables, then runs the Discord bot
until it is stopped with SIGINT or SIGTERM.

Usage:
    python src/server.py                         # Uses ./config.json
    python src/server.py --config path/to.json   # Explicit settings file
"""

import argparse
import asyncio
import signal
import sys

import structlog
from dotenv import load_dotenv

logger = structlog.get_logger(__name__)


def _prepare_domain():
    """Initialize the reviews domain, activate it, and create its tables."""
    from reviews.domain import reviews
    from reviews.utils.db import setup_db

    reviews.init()
    reviews.domain_context().push()

    try:
        setup_db(reviews)
    except Exception:
        logger.exception("Database initialization failed")
        sys.exit(1)

    return reviews


async def run(settings, credentials):
    from bot.client import ReviewBot
    from purchases.gateway import set_gateway
    from purchases.gateway.tebex_adapter import TebexGateway

    gateway = TebexGateway(credentials.tebex_secret_key, credentials.tebex_webstore_id)
    set_gateway(gateway)

    bot = ReviewBot(settings, gateway, guild_id=credentials.guild_id)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows event loops have no signal handlers; Ctrl+C still raises
            pass

    runner = asyncio.create_task(bot.start(credentials.discord_token))
    stopper = asyncio.create_task(stop.wait())
    done, _ = await asyncio.wait({runner, stopper}, return_when=asyncio.FIRST_COMPLETED)

    if stopper in done:
        logger.info("Shutdown requested")
    else:
        stopper.cancel()

    await bot.close()

    if runner in done:
        runner.result()
    else:
        runner.cancel()

    logger.info("Bot stopped")


def main():
    parser = argparse.ArgumentParser(description="Review bot runner")
    parser.add_argument("--config", default="config.json", help="Path to the settings file")
    args = parser.parse_args()

    load_dotenv()

    # Importing the domain configures logging
    from bot.config import ConfigurationError, Credentials, load_settings
    from reviews.domain import reviews  # noqa: F401

    try:
        settings = load_settings(args.config)
        credentials = Credentials.from_env()
    except ConfigurationError as exc:
        logger.error("Invalid configuration", error=str(exc))
        sys.exit(1)

    _prepare_domain()

    asyncio.run(run(settings, credentials))


if __name__ == "__main__":
    main()
