"""
Strawhat Discord Bot
====================

A Discord bot answering questions about One Piece anime episodes and manga
chapters: episode and chapter infoboxes, and conversions between the two.
Datasets are scraped from the fandom wiki and refreshed once a day.
"""

import os
import sys
from pathlib import Path


def resolve_base_dir() -> Path:
    """Determine the base directory of the project.
    Resolution order:
    1. STRAWHAT_HOME environment variable, if set.
    2. If running in a frozen/compiled context (e.g., PyInstaller, Nuitka), use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("STRAWHAT_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


BASE_DIR = resolve_base_dir()
os.chdir(BASE_DIR)

import asyncio

from dotenv import load_dotenv

from strawhat.bot.client import StrawhatClient
from strawhat.configuration.app_configuration import app_config
from strawhat.data.dataset_store import DatasetStore
from strawhat.registry.event_registry import EventRegistry
from strawhat.scheduler.refresh_scheduler import DataRefreshScheduler
from strawhat.util.logger import get_logger, handle_exception


logger = get_logger("main")


def load_environment() -> str:
    """Load environment variables and return the Discord bot token.

    Raises
    ------
    SystemExit
        If the required ``DISCORD_BOT_TOKEN`` variable is missing.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        logger.critical("'DISCORD_BOT_TOKEN' environment variable not set. Bot cannot start.")
        sys.exit(1)
    return token


def create_client(datasets: DatasetStore) -> StrawhatClient:
    return StrawhatClient(config=app_config, datasets=datasets)


async def prepare_datasets(scheduler: DataRefreshScheduler, datasets: DatasetStore) -> None:
    """Load the datasets, scraping new records first when configured to."""
    if not app_config.refresh_on_startup:
        datasets.reload()
        return

    logger.info("Refreshing datasets before startup…")
    try:
        await scheduler.run_once()
    except Exception as exc:
        logger.error("Startup dataset refresh failed, using data on disk: %s", exc)
        datasets.reload()


async def start_client(client: StrawhatClient, token: str) -> None:
    """Start the Discord client and handle lifecycle logging around the connection."""
    logger.info("Attempting to connect to Discord…")
    try:
        await client.start(token)
    except asyncio.CancelledError:
        logger.info("Discord client start cancelled; shutting down")
    finally:
        logger.info("Discord client start routine finished.")


async def shutdown_runtime(client: StrawhatClient, scheduler: DataRefreshScheduler) -> None:
    """Gracefully stop the refresh scheduler, REST client and Discord client."""
    try:
        await scheduler.shutdown()
    except Exception as exc:
        logger.exception("Error during scheduler shutdown: %s", exc)

    try:
        await client.command_registry.close()
    except Exception as exc:
        logger.exception("Error while closing the REST client: %s", exc)

    if not client.is_closed():
        await client.close()

    logger.info("Shutdown complete.")


async def async_main() -> int:
    """Bootstrap datasets, scheduler, events and client, returning an exit code."""
    token = load_environment()

    datasets = DatasetStore(app_config.data_directory)
    scheduler = DataRefreshScheduler(datasets, lambda: app_config.refresh_time)

    try:
        client = create_client(datasets)
    except Exception as exc:
        logger.critical("Failed to initialize Discord client: %s", exc)
        return 1

    await prepare_datasets(scheduler, datasets)
    scheduler.start()

    exit_code = 0
    try:
        loaded = await EventRegistry(client).load_folder(app_config.events_folder)
        logger.info("Attached %d event listeners", loaded)
        await start_client(client, token)
    except Exception as exc:
        logger.critical("Discord client runtime error: %s", exc)
        exit_code = 1
    finally:
        await shutdown_runtime(client, scheduler)

    return exit_code


def main() -> int:
    """Entrypoint that orchestrates the async runtime and returns the process code."""
    sys.excepthook = handle_exception
    logger.info("Starting %s v%s…", app_config.client_name, app_config.client_version)
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        return 1
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
