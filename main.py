import asyncio
import logging
import sys

from byteframes.app import App
from byteframes.config import get_settings


async def main():
    """Start the backend: open the database and seed the default scene."""
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level_value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )
    logger = logging.getLogger(__name__)

    app = App()
    try:
        await app.startup()
    except Exception as e:
        logger.critical("DB startup error: %s", e)
        sys.exit(1)

    try:
        logger.info("Configs: %s", await app.get_configs())
    finally:
        await app.shutdown()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.info("Backend stopped.")
        raise
