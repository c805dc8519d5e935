"""Tests for the slash command registry: loading, capabilities, sync and dispatch."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from strawhat.registry import command_registry
from strawhat.registry.command_registry import (
    NO_HELP_TEXT,
    CapabilityError,
    CommandRecord,
    CommandRegistry,
    CommandTag,
    RegistrySyncError,
)
from strawhat.registry.rest_client import RestError

COMMAND_SOURCE = '''
from strawhat.registry.command_registry import CommandTag

CALLS = []


async def command_function(interaction, options, client, logger_id):
    CALLS.append((interaction, options, client, logger_id))


build_data = {{"name": "{name}", "description": "{name} command"}}
tags = [{tags}]
'''


def command_source(name: str, tags: str = "CommandTag.COMPLETE, CommandTag.UTILITY") -> str:
    return COMMAND_SOURCE.format(name=name, tags=tags)


class _FakeRest:
    def __init__(self, token: str, base_url: str, fail: bool = False) -> None:
        self.token = token
        self.base_url = base_url
        self.fail = fail
        self.calls: list[tuple[str, list]] = []
        self.closed = False

    async def put(self, route: str, body: list) -> list:
        self.calls.append((route, body))
        if self.fail:
            raise RestError("PUT", route, 500, "server error")
        return body

    async def close(self) -> None:
        self.closed = True


class _RestFactory:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.created: list[_FakeRest] = []

    def __call__(self, token: str, base_url: str) -> _FakeRest:
        rest = _FakeRest(token, base_url, self.fail)
        self.created.append(rest)
        return rest


@pytest.fixture()
def rest_factory() -> _RestFactory:
    return _RestFactory()


@pytest.fixture()
def registry(rest_factory: _RestFactory) -> CommandRegistry:
    return CommandRegistry(application_id=111, home_guild_id=222, rest_factory=rest_factory)


# --------------------------
# Loading
# --------------------------
@pytest.mark.asyncio
async def test_load_folder_accepts_valid_and_rejects_invalid(registry, tmp_path: Path, write_extension) -> None:
    write_extension(tmp_path, "ping.py", command_source("ping"))
    write_extension(tmp_path, "pong.py", command_source("pong"))
    write_extension(tmp_path, "no_tags.py", command_source("no_tags", tags=""))
    write_extension(tmp_path, "string_tags.py", command_source("string_tags", tags='"complete"'))
    write_extension(
        tmp_path,
        "no_description.py",
        """
        async def command_function(interaction, options, client, logger_id):
            pass

        build_data = {"name": "no_description"}
        tags = []
        """,
    )
    write_extension(tmp_path, "no_function.py", 'build_data = {"name": "x", "description": "y"}\n')

    loaded = await registry.load_folder(tmp_path)

    assert loaded == 2
    assert sorted(registry.keys()) == ["ping", "pong"]


@pytest.mark.asyncio
async def test_duplicate_command_name_is_rejected(registry, tmp_path: Path, write_extension, monkeypatch) -> None:
    write_extension(tmp_path, "first.py", command_source("same"))
    write_extension(tmp_path, "second.py", command_source("same"))
    mock_logger = MagicMock()
    monkeypatch.setattr(command_registry, "logger", mock_logger)

    assert await registry.load_folder(tmp_path) == 1
    assert registry.lookup("same").logger_id == "first.py"
    mock_logger.warning.assert_called_once()
    assert "second.py" in str(mock_logger.warning.call_args)


@pytest.mark.asyncio
async def test_unbuildable_command_does_not_stop_later_files(registry, tmp_path: Path, write_extension) -> None:
    write_extension(
        tmp_path,
        "a_bad.py",
        """
        import threading

        from strawhat.registry.command_registry import CommandTag


        async def command_function(interaction, options, client, logger_id):
            pass


        build_data = {"name": "bad", "description": "holds a lock", "lock": threading.Lock()}
        tags = [CommandTag.COMPLETE]
        """,
    )
    write_extension(tmp_path, "b_good.py", command_source("good"))

    assert await registry.load_folder(tmp_path) == 1
    assert registry.keys() == ["good"]


def test_record_defaults_and_tag_queries() -> None:
    build_data = {"name": "info", "description": "Info"}
    record = CommandRecord("info.py", AsyncMock(), build_data, [CommandTag.COMPLETE, CommandTag.GENERAL])
    build_data["name"] = "changed"

    assert record.name == "info"
    assert record.help_text == NO_HELP_TEXT
    assert record.has_autocomplete() is False
    assert record.has_tag(CommandTag.GENERAL)
    assert record.has_tags([CommandTag.COMPLETE, CommandTag.GENERAL])
    assert not record.has_tags([CommandTag.COMPLETE, CommandTag.INCOMPLETE])


# --------------------------
# Capabilities
# --------------------------
@pytest.mark.asyncio
async def test_operations_before_injection_raise_capability_error(registry, make_interaction) -> None:
    with pytest.raises(CapabilityError):
        await registry.execute(make_interaction("ping"))
    with pytest.raises(CapabilityError):
        await registry.dispatch_autocomplete(make_interaction("ping"))
    with pytest.raises(CapabilityError):
        await registry.sync_registry()
    with pytest.raises(CapabilityError):
        _ = registry.client


def test_inject_ready_client_caches_token_and_rest(registry, rest_factory, ready_client) -> None:
    registry.inject_client(ready_client)

    assert registry.is_client_cached()
    assert registry.is_token_cached()
    assert registry.is_rest_cached()
    assert rest_factory.created[0].token == "bot-token"


def test_inject_unready_client_caches_only_client(registry, rest_factory) -> None:
    client = MagicMock()
    client.is_ready.return_value = False

    registry.inject_client(client)

    assert registry.is_client_cached()
    assert not registry.is_token_cached()
    assert not registry.is_rest_cached()
    assert rest_factory.created == []


# --------------------------
# Remote synchronization
# --------------------------
@pytest.mark.asyncio
async def test_sync_pushes_registrable_commands_to_home_guild(
    registry, rest_factory, ready_client, tmp_path: Path, write_extension
) -> None:
    write_extension(tmp_path, "ping.py", command_source("ping"))
    write_extension(tmp_path, "secret.py", command_source("secret", tags="CommandTag.DO_NOT_REGISTER"))
    await registry.load_folder(tmp_path)
    registry.inject_client(ready_client)

    pushed = await registry.sync_registry()

    rest = rest_factory.created[0]
    assert [definition["name"] for definition in pushed] == ["ping"]
    assert rest.calls == [("/applications/111/guilds/222/commands", pushed)]
    assert "secret" in registry


@pytest.mark.asyncio
async def test_sync_with_token_uses_temporary_client_globally(registry, rest_factory) -> None:
    pushed = await registry.sync_registry(token="explicit", application=True)

    rest = rest_factory.created[0]
    assert pushed == []
    assert rest.token == "explicit"
    assert rest.calls == [("/applications/111/commands", [])]
    assert rest.closed is True


@pytest.mark.asyncio
async def test_repeated_sync_sends_identical_payload(registry, rest_factory, tmp_path: Path, write_extension) -> None:
    write_extension(tmp_path, "ping.py", command_source("ping"))
    await registry.load_folder(tmp_path)

    await registry.sync_registry(token="t")
    await registry.sync_registry(token="t")

    first, second = rest_factory.created
    assert first.calls == second.calls


@pytest.mark.asyncio
async def test_sync_failure_raises_registry_sync_error(tmp_path: Path) -> None:
    factory = _RestFactory(fail=True)
    registry = CommandRegistry(application_id=1, home_guild_id=2, rest_factory=factory)

    with pytest.raises(RegistrySyncError):
        await registry.sync_registry(token="t")
    assert factory.created[0].closed is True


@pytest.mark.asyncio
async def test_guild_sync_without_home_guild_fails(rest_factory) -> None:
    registry = CommandRegistry(application_id=1, home_guild_id=None, rest_factory=rest_factory)

    with pytest.raises(RegistrySyncError):
        await registry.sync_registry(token="t")
    assert rest_factory.created[0].calls == []


# --------------------------
# Dispatch
# --------------------------
@pytest.mark.asyncio
async def test_execute_passes_options_client_and_logger_id(
    registry, ready_client, tmp_path: Path, write_extension, make_interaction
) -> None:
    await registry.load_file(write_extension(tmp_path, "ping.py", command_source("ping")))
    registry.inject_client(ready_client)
    interaction = make_interaction("ping", [{"name": "count", "type": 4, "value": 3}])

    assert await registry.execute(interaction) is True

    record = registry.lookup("ping")
    calls = record._function.__globals__["CALLS"]
    received_interaction, options, client, logger_id = calls[-1]
    assert received_interaction is interaction
    assert options.get_integer("count") == 3
    assert client is ready_client
    assert logger_id == "ping.py"


@pytest.mark.asyncio
async def test_execute_unknown_command_returns_false(registry, ready_client, make_interaction, monkeypatch) -> None:
    registry.inject_client(ready_client)
    mock_logger = MagicMock()
    monkeypatch.setattr(command_registry, "logger", mock_logger)

    assert await registry.execute(make_interaction("missing")) is False
    mock_logger.error.assert_called_once_with("Failed to execute command: %s", "missing")


@pytest.mark.asyncio
async def test_execute_propagates_command_errors(registry, ready_client, tmp_path: Path, write_extension, make_interaction) -> None:
    write_extension(
        tmp_path,
        "explode.py",
        """
        from strawhat.registry.command_registry import CommandTag

        async def command_function(interaction, options, client, logger_id):
            raise ValueError("kaboom")

        build_data = {"name": "explode", "description": "Explodes"}
        tags = [CommandTag.USELESS]
        """,
    )
    await registry.load_folder(tmp_path)
    registry.inject_client(ready_client)

    with pytest.raises(ValueError):
        await registry.execute(make_interaction("explode"))


@pytest.mark.asyncio
async def test_dispatch_autocomplete(registry, ready_client, tmp_path: Path, write_extension, make_interaction) -> None:
    write_extension(tmp_path, "plain.py", command_source("plain"))
    write_extension(
        tmp_path,
        "suggest.py",
        """
        from strawhat.registry.command_registry import CommandTag

        async def command_function(interaction, options, client, logger_id):
            pass

        async def autocomplete(interaction, options, client, logger_id):
            await interaction.response.send_autocomplete_result(choices=[options.get_focused()])

        build_data = {"name": "suggest", "description": "Suggests"}
        tags = [CommandTag.COMPLETE]
        """,
    )
    await registry.load_folder(tmp_path)
    registry.inject_client(ready_client)

    interaction = make_interaction("suggest", [{"name": "q", "type": 3, "value": "4", "focused": True}])
    assert await registry.dispatch_autocomplete(interaction) is True
    interaction.response.send_autocomplete_result.assert_awaited_once_with(choices=["4"])

    assert await registry.dispatch_autocomplete(make_interaction("plain")) is False
    assert await registry.dispatch_autocomplete(make_interaction("missing")) is False


@pytest.mark.asyncio
async def test_commands_with_tags_requires_every_tag(registry, tmp_path: Path, write_extension) -> None:
    write_extension(tmp_path, "a.py", command_source("a", tags="CommandTag.COMPLETE, CommandTag.UTILITY"))
    write_extension(tmp_path, "b.py", command_source("b", tags="CommandTag.COMPLETE"))
    await registry.load_folder(tmp_path)

    names = [record.name for record in registry.commands_with_tags([CommandTag.COMPLETE, CommandTag.UTILITY])]

    assert names == ["a"]
