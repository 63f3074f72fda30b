import asyncio
import logging
import os
import sys

import discord
from dotenv import load_dotenv

from bot import NumbersBot
from config.config import Config

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def configure_logging():
    """Root level from LOG_LEVEL, solver internals from SOLVER_LOG_LEVEL"""
    level = os.getenv('LOG_LEVEL', 'INFO').upper()
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    # discord.py's gateway chatter is only interesting when debugging it
    logging.getLogger('discord').setLevel(max(logging.getLogger().level, logging.INFO))

    solver_level = os.getenv('SOLVER_LOG_LEVEL')
    if solver_level:
        logging.getLogger('numbers_game').setLevel(solver_level.upper())


async def run_bot(config: Config):
    bot = NumbersBot(config)
    logger.info("Starting NumbersBot with discord.py %s (settings: %s)",
                discord.__version__, config.settings_path)
    async with bot:
        await bot.start(config.discord_token)


def main() -> int:
    load_dotenv()
    configure_logging()

    try:
        config = Config()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    try:
        asyncio.run(run_bot(config))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
