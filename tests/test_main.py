import asyncio
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from strawhat import main


class FakeClient:
    def __init__(self, *args, **kwargs) -> None:
        self._start = AsyncMock(side_effect=asyncio.CancelledError())
        self._closed = False
        self.command_registry = SimpleNamespace(close=AsyncMock())

    async def start(self, token: str) -> None:
        await self._start(token)

    def is_closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        self._closed = True


class FakeEventRegistry:
    def __init__(self, client) -> None:
        self.client = client

    async def load_folder(self, folder) -> int:
        return 2


def test_resolve_base_dir_prefers_environment(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("STRAWHAT_HOME", str(tmp_path))

    assert main.resolve_base_dir() == tmp_path.resolve()


def test_load_environment_requires_token(monkeypatch) -> None:
    monkeypatch.delenv("DISCORD_BOT_TOKEN", raising=False)
    monkeypatch.setattr(main, "load_dotenv", lambda dotenv_path: None)

    with pytest.raises(SystemExit):
        main.load_environment()


@pytest.mark.asyncio
async def test_prepare_datasets_falls_back_to_disk(monkeypatch) -> None:
    monkeypatch.setattr(main.app_config, "_data", {"data": {"refresh_on_startup": True}})
    scheduler = MagicMock(run_once=AsyncMock(side_effect=RuntimeError("offline")))
    datasets = MagicMock()

    await main.prepare_datasets(scheduler, datasets)

    scheduler.run_once.assert_awaited_once()
    datasets.reload.assert_called_once()


@pytest.mark.asyncio
async def test_prepare_datasets_without_refresh(monkeypatch) -> None:
    monkeypatch.setattr(main.app_config, "_data", {"data": {"refresh_on_startup": False}})
    scheduler = MagicMock(run_once=AsyncMock())
    datasets = MagicMock()

    await main.prepare_datasets(scheduler, datasets)

    scheduler.run_once.assert_not_awaited()
    datasets.reload.assert_called_once()


@pytest.mark.asyncio
async def test_async_main_successful_shutdown(monkeypatch) -> None:
    client = FakeClient()
    scheduler = MagicMock(start=MagicMock(), shutdown=AsyncMock(), run_once=AsyncMock(return_value=0))
    monkeypatch.setattr(main, "load_environment", lambda: "token")
    monkeypatch.setattr(main, "create_client", lambda datasets: client)
    monkeypatch.setattr(main, "DataRefreshScheduler", lambda datasets, get_time: scheduler)
    monkeypatch.setattr(main, "EventRegistry", FakeEventRegistry)
    monkeypatch.setattr(main, "prepare_datasets", AsyncMock())

    exit_code = await main.async_main()

    assert exit_code == 0
    client._start.assert_awaited_once_with("token")
    scheduler.start.assert_called_once()
    scheduler.shutdown.assert_awaited_once()
    client.command_registry.close.assert_awaited_once()
    assert client.is_closed()


@pytest.mark.asyncio
async def test_async_main_returns_one_when_client_fails(monkeypatch) -> None:
    monkeypatch.setattr(main, "load_environment", lambda: "token")

    def broken_client(datasets):
        raise RuntimeError("bad intents")

    monkeypatch.setattr(main, "create_client", broken_client)

    assert await main.async_main() == 1


def test_main_maps_system_exit(monkeypatch) -> None:
    def exit_with_code():
        raise SystemExit(3)

    monkeypatch.setattr(main, "async_main", exit_with_code)
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)

    assert main.main() == 3
