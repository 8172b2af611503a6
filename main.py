#!/usr/bin/env python3
"""
CaseKeeper - Entry Point
========================

Moderation case tracker bot for a single Discord server.

Handles:
- Loading .env configuration
- Validating required settings before connecting
- Starting the bot and shutting down cleanly
"""

import asyncio
import sys

from dotenv import load_dotenv

from src.core.config import ConfigValidationError, get_config, validate_and_log_config
from src.core.logger import logger
from src.utils.error_handler import ErrorHandler


async def main() -> None:
    """
    Run the bot until it is stopped.

    Raises:
        SystemExit: If configuration is invalid or the bot fails to start.
    """
    load_dotenv()

    try:
        validate_and_log_config()
    except ConfigValidationError as e:
        logger.error("Configuration Invalid", [("Error", str(e))])
        sys.exit(1)

    from src.bot import CaseKeeperBot

    config = get_config()
    logger.tree("CASEKEEPER STARTING", [
        ("Server", config.server_name),
        ("Guild ID", str(config.guild_id)),
    ], emoji="📋")

    bot = CaseKeeperBot()
    try:
        async with bot:
            await bot.start(config.discord_token)
    except Exception as e:
        ErrorHandler.handle(e, location="main.main", critical=True)
        sys.exit(1)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (Ctrl+C)")
