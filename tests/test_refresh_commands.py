"""Tests for the command registration CLI."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from strawhat.registry.command_registry import CommandRegistry
from strawhat.scripts.refresh_commands import app

runner = CliRunner()


class _RecordingRest:
    instances: list["_RecordingRest"] = []

    def __init__(self, token: str, base_url: str, fail: bool = False) -> None:
        self.token = token
        self.fail = fail
        self.calls: list[tuple[str, list]] = []
        _RecordingRest.instances.append(self)

    async def put(self, route: str, body: list) -> list:
        if self.fail:
            raise RuntimeError("discord unavailable")
        self.calls.append((route, body))
        return body

    async def close(self) -> None:
        pass


@pytest.fixture(autouse=True)
def _token(monkeypatch):
    _RecordingRest.instances.clear()
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "cli-token")


def _registry(fail: bool = False) -> CommandRegistry:
    return CommandRegistry(
        application_id=10,
        home_guild_id=20,
        rest_factory=lambda token, base_url: _RecordingRest(token, base_url, fail),
    )


def test_registers_commands_in_home_guild() -> None:
    with patch("strawhat.scripts.refresh_commands.build_registry", return_value=_registry()):
        result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert "Registered 6 commands in the home guild." in result.output
    rest = _RecordingRest.instances[0]
    route, body = rest.calls[0]
    assert rest.token == "cli-token"
    assert route == "/applications/10/guilds/20/commands"
    assert {definition["name"] for definition in body} == {
        "episode_info",
        "chapter_info",
        "chapter_to_episode",
        "episode_to_chapter",
        "ping",
        "help",
    }


def test_global_de_registration_pushes_empty_list() -> None:
    with patch("strawhat.scripts.refresh_commands.build_registry", return_value=_registry()):
        result = runner.invoke(app, ["--global", "--de-reg"])

    assert result.exit_code == 0
    assert _RecordingRest.instances[0].calls == [("/applications/10/commands", [])]


def test_failed_request_exits_with_error() -> None:
    with patch("strawhat.scripts.refresh_commands.build_registry", return_value=_registry(fail=True)):
        result = runner.invoke(app, ["-g"])

    assert result.exit_code == 1


def test_missing_token_exits_with_error(monkeypatch) -> None:
    monkeypatch.delenv("DISCORD_BOT_TOKEN")

    with patch("strawhat.scripts.refresh_commands.load_dotenv"):
        result = runner.invoke(app, [])

    assert result.exit_code == 1
    assert _RecordingRest.instances == []
