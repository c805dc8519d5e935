"""Daily scheduler refreshing the episode and chapter datasets.

Runs every scraper once a day at the configured wall-clock time, then reloads
the in-memory datasets so commands see the new records. Handles lifecycle
(start/shutdown) and standard error handling.
"""

from __future__ import annotations

import asyncio
import datetime
from typing import Callable, Sequence, Tuple

from strawhat.data.dataset_store import DatasetStore
from strawhat.scraper.chapter_scraper import ChapterScraper
from strawhat.scraper.episode_scraper import EpisodeScraper
from strawhat.scraper.wiki_scraper import WikiScraper
from strawhat.util.logger import get_logger

logger = get_logger("refresh_scheduler")


def seconds_until_next_run(now: datetime.datetime, hour: int, minute: int) -> float:
    """Seconds from ``now`` until the next ``hour:minute``; a run time equal to now is a day away."""
    next_run = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if next_run <= now:
        next_run += datetime.timedelta(days=1)
    return (next_run - now).total_seconds()


def default_scrapers(datasets: DatasetStore) -> list[WikiScraper]:
    return [EpisodeScraper(datasets.data_directory), ChapterScraper(datasets.data_directory)]


async def refresh_datasets(datasets: DatasetStore, scrapers: Sequence[WikiScraper]) -> int:
    """Bring every data file up to date and reload ``datasets``.

    Returns:
        int: Total number of new records.
    """
    total = 0
    for scraper in scrapers:
        total += await scraper.update_data_file()
    datasets.reload()
    return total


class DataRefreshScheduler:
    """
    Background task refreshing the datasets once a day.

    Args:
        datasets: Store reloaded after every refresh.
        get_refresh_time: Callable returning the ``(hour, minute)`` to run at.
        scrapers: Scrapers to run; defaults to the episode and chapter scrapers.
        clock: Returns the current local time.
    """

    name = "data_refresh"

    def __init__(
        self,
        datasets: DatasetStore,
        get_refresh_time: Callable[[], Tuple[int, int]],
        scrapers: Sequence[WikiScraper] | None = None,
        clock: Callable[[], datetime.datetime] = datetime.datetime.now,
    ) -> None:
        self._datasets = datasets
        self._get_refresh_time = get_refresh_time
        self._scrapers = list(scrapers) if scrapers is not None else default_scrapers(datasets)
        self._clock = clock
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> int:
        return await refresh_datasets(self._datasets, self._scrapers)

    def seconds_until_next_run(self) -> float:
        hour, minute = self._get_refresh_time()
        return seconds_until_next_run(self._clock(), hour, minute)

    async def _run_loop(self) -> None:
        """Infinite loop: sleep until the refresh time, refresh, repeat."""
        try:
            while True:
                delay = self.seconds_until_next_run()
                logger.info("[%s] Next dataset refresh in %.0fs", self.name, delay)
                await asyncio.sleep(delay)
                try:
                    new_records = await self.run_once()
                    logger.info("[%s] Refresh finished with %d new records", self.name, new_records)
                except asyncio.CancelledError:
                    raise
                except Exception as exc:
                    logger.error("[%s] Unexpected error during refresh: %s", self.name, exc)
        except asyncio.CancelledError:
            logger.info("[%s] Refresh loop cancelled", self.name)
            raise

    def start(self) -> None:
        """Start the background refresh task if not already running."""
        if self.running:
            logger.warning("[%s] Refresh task already running", self.name)
            return
        self._task = asyncio.create_task(self._run_loop())

    async def shutdown(self) -> None:
        """Cancel the refresh task and wait for it to finish."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("[%s] Scheduler shutdown complete", self.name)
