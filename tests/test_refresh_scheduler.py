import asyncio
import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from strawhat.scheduler.refresh_scheduler import DataRefreshScheduler, refresh_datasets, seconds_until_next_run


def test_seconds_until_later_today() -> None:
    now = datetime.datetime(2024, 5, 1, 22, 0, 0)

    assert seconds_until_next_run(now, 23, 30) == 90 * 60


def test_seconds_until_tomorrow_when_time_has_passed() -> None:
    now = datetime.datetime(2024, 5, 1, 0, 0, 30)

    assert seconds_until_next_run(now, 0, 0) == 24 * 3600 - 30


def test_run_time_equal_to_now_waits_a_full_day() -> None:
    now = datetime.datetime(2024, 5, 1, 12, 0, 0)

    assert seconds_until_next_run(now, 12, 0) == 24 * 3600


@pytest.mark.asyncio
async def test_refresh_datasets_runs_every_scraper_then_reloads() -> None:
    datasets = MagicMock()
    first = MagicMock(update_data_file=AsyncMock(return_value=2))
    second = MagicMock(update_data_file=AsyncMock(return_value=3))

    assert await refresh_datasets(datasets, [first, second]) == 5

    first.update_data_file.assert_awaited_once()
    second.update_data_file.assert_awaited_once()
    datasets.reload.assert_called_once()


@pytest.mark.asyncio
async def test_scheduler_uses_clock_and_configured_time() -> None:
    clock = MagicMock(return_value=datetime.datetime(2024, 5, 1, 5, 0, 0))
    scheduler = DataRefreshScheduler(MagicMock(), lambda: (6, 0), scrapers=[], clock=clock)

    assert scheduler.seconds_until_next_run() == 3600


@pytest.mark.asyncio
async def test_scheduler_loop_refreshes_and_survives_errors() -> None:
    datasets = MagicMock()
    scraper = MagicMock(update_data_file=AsyncMock(side_effect=[RuntimeError("wiki down"), 1, 1, 1]))
    scheduler = DataRefreshScheduler(datasets, lambda: (0, 0), scrapers=[scraper])
    scheduler.seconds_until_next_run = MagicMock(return_value=0)  # type: ignore[method-assign]

    scheduler.start()
    assert scheduler.running
    for _ in range(100):
        if scraper.update_data_file.await_count >= 2:
            break
        await asyncio.sleep(0)
    await scheduler.shutdown()

    assert scraper.update_data_file.await_count >= 2
    assert datasets.reload.called
    assert not scheduler.running


@pytest.mark.asyncio
async def test_start_twice_keeps_single_task() -> None:
    scheduler = DataRefreshScheduler(MagicMock(), lambda: (0, 0), scrapers=[])

    scheduler.start()
    task = scheduler._task
    scheduler.start()

    assert scheduler._task is task
    await scheduler.shutdown()
