"""
Slash command registry.

Command extensions are Python files exporting::

    command_function   async (interaction, options, client, logger_id) -> None
    build_data         Discord application command JSON, needs "name" and "description"
    tags               non-empty list of CommandTag
    autocomplete       optional, async (interaction, options, client, logger_id) -> None
    help_text          optional str

The registry keeps the loaded commands keyed by name, pushes them to Discord
with a single bulk overwrite and dispatches incoming interactions to them.

Dependencies (the client, its token and a REST client bound to that token)
are injected at runtime with :meth:`CommandRegistry.inject_client`. Calling an
operation that needs one of them before it was injected raises
:class:`CapabilityError`: that is a startup ordering bug, not a runtime
condition to recover from.
"""

from __future__ import annotations

import copy
from enum import Enum
from types import ModuleType
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Sequence

from strawhat.registry.extension_registry import ExtensionRecord, ExtensionRegistry
from strawhat.registry.options import OptionResolver
from strawhat.registry.rest_client import (
    DEFAULT_API_BASE_URL,
    RestClient,
    application_commands_route,
    guild_commands_route,
)
from strawhat.util.logger import get_logger

logger = get_logger("command_registry")

NO_HELP_TEXT = "Apologies, no help text found!"

CommandFunction = Callable[[Any, OptionResolver, Any, str], Awaitable[Any]]
RestFactory = Callable[[str, str], RestClient]


class CommandTag(Enum):
    """Labels attached to every command extension.

    ``DO_NOT_REGISTER`` keeps a command out of the Discord registration while
    still loading it locally. ``INCOMPLETE`` marks commands meant for testers.
    """

    GENERAL = "general"
    ECONOMY = "economy"
    UTILITY = "utility"
    USELESS = "useless"
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    DO_NOT_REGISTER = "do-not-register"

    def __str__(self) -> str:
        return self.value


class CapabilityError(RuntimeError):
    """An operation ran before the dependency it needs was injected."""


class RegistrySyncError(Exception):
    """Pushing the command list to Discord failed."""


def command_name_of(interaction: Any) -> str | None:
    """Command name declared by a raw interaction payload."""
    data = getattr(interaction, "data", None) or {}
    return data.get("name")


class CommandRecord(ExtensionRecord):
    """A loaded slash command extension."""

    __slots__ = ("_function", "_autocomplete", "_build_data", "_tags", "_help_text")

    def __init__(
        self,
        logger_id: str,
        function: CommandFunction,
        build_data: Dict[str, Any],
        tags: Iterable[CommandTag],
        autocomplete: CommandFunction | None = None,
        help_text: str | None = None,
    ) -> None:
        super().__init__(logger_id)
        self._function = function
        self._autocomplete = autocomplete
        self._build_data = copy.deepcopy(build_data)
        self._tags = frozenset(tags)
        self._help_text = help_text or NO_HELP_TEXT

    @property
    def name(self) -> str:
        return self._build_data["name"]

    @property
    def description(self) -> str:
        return self._build_data["description"]

    @property
    def build_data(self) -> Dict[str, Any]:
        """Copy of the command's JSON definition."""
        return copy.deepcopy(self._build_data)

    @property
    def tags(self) -> frozenset[CommandTag]:
        return self._tags

    @property
    def help_text(self) -> str:
        return self._help_text

    def has_tag(self, tag: CommandTag) -> bool:
        return tag in self._tags

    def has_tags(self, tags: Iterable[CommandTag]) -> bool:
        """True when every tag in ``tags`` is present."""
        return all(tag in self._tags for tag in tags)

    def has_autocomplete(self) -> bool:
        return self._autocomplete is not None

    async def execute(self, interaction: Any, client: Any) -> None:
        await self._function(interaction, OptionResolver.from_interaction(interaction), client, self.logger_id)

    async def autocomplete(self, interaction: Any, client: Any) -> None:
        if self._autocomplete is None:
            return
        await self._autocomplete(interaction, OptionResolver.from_interaction(interaction), client, self.logger_id)


class CommandRegistry(ExtensionRegistry[str, CommandRecord]):
    """Registry of slash command extensions keyed by command name.

    Args:
        application_id: Discord application id used in registration routes.
        home_guild_id: Guild receiving guild-scoped registrations.
        api_base_url: Discord REST base URL.
        rest_factory: Builds a REST client from ``(token, base_url)``.
    """

    def __init__(
        self,
        application_id: int,
        home_guild_id: int | None = None,
        api_base_url: str = DEFAULT_API_BASE_URL,
        rest_factory: RestFactory = RestClient,
    ) -> None:
        super().__init__()
        self.application_id = application_id
        self.home_guild_id = home_guild_id
        self.api_base_url = api_base_url
        self._rest_factory = rest_factory

        self._client: Any = None
        self._token: str | None = None
        self._rest: RestClient | None = None

    # --------------------------
    # Loading hooks
    # --------------------------
    def verify(self, file_name: str, module: ModuleType) -> bool:
        command_function = getattr(module, "command_function", None)
        build_data = getattr(module, "build_data", None)
        tags = getattr(module, "tags", None)

        if command_function is None:
            logger.error("%s is missing command_function export", file_name)
            return False
        if not callable(command_function):
            logger.error("%s exports a command_function that is not callable", file_name)
            return False
        if build_data is None:
            logger.error("%s is missing build_data export", file_name)
            return False
        if not isinstance(build_data, dict):
            logger.error("%s exports build_data that is not a dict", file_name)
            return False
        if build_data.get("name") is None:
            logger.error("%s is missing .name property in build_data", file_name)
            return False
        if build_data.get("description") is None:
            logger.error("%s is missing .description property in build_data", file_name)
            return False
        if not isinstance(tags, (list, tuple)) or not tags:
            logger.error("%s is missing tags export", file_name)
            return False
        if not all(isinstance(tag, CommandTag) for tag in tags):
            logger.error("%s exports tags that are not CommandTag members", file_name)
            return False

        autocomplete = getattr(module, "autocomplete", None)
        if autocomplete is not None and not callable(autocomplete):
            logger.error("%s exports an autocomplete that is not callable", file_name)
            return False

        if build_data["name"] in self._records:
            logger.warning(
                'A slash command with the name "%s" has already been loaded (%s)', build_data["name"], file_name
            )
            return False

        return True

    def generate_record(self, file_name: str, module: ModuleType) -> CommandRecord:
        return CommandRecord(
            logger_id=file_name,
            function=module.command_function,
            build_data=module.build_data,
            tags=module.tags,
            autocomplete=getattr(module, "autocomplete", None),
            help_text=getattr(module, "help_text", None),
        )

    def generate_key(self, record: CommandRecord) -> str:
        return record.name

    # --------------------------
    # Dependency cache
    # --------------------------
    def inject_client(self, client: Any) -> None:
        """Cache ``client``; once it is ready also cache its token and a REST client."""
        self._client = client
        if not client.is_ready():
            logger.debug("Cached client before it was ready; token and REST client not cached")
            return

        token = getattr(getattr(client, "http", None), "token", None)
        if not token:
            logger.warning("Client reports ready but exposes no token; REST client not cached")
            return

        self._token = token
        self._rest = self._rest_factory(token, self.api_base_url)

    def is_client_cached(self) -> bool:
        return self._client is not None

    def is_token_cached(self) -> bool:
        return self._token is not None

    def is_rest_cached(self) -> bool:
        return self._rest is not None

    @property
    def client(self) -> Any:
        return self._require_client()

    async def close(self) -> None:
        """Close the cached REST client, if any."""
        if self._rest is not None:
            await self._rest.close()

    # --------------------------
    # Remote synchronization
    # --------------------------
    def registrable_definitions(self) -> List[Dict[str, Any]]:
        """Definitions of every loaded command not tagged ``DO_NOT_REGISTER``."""
        return [record.build_data for record in self._records.values() if not record.has_tag(CommandTag.DO_NOT_REGISTER)]

    def sync_route(self, application: bool) -> str:
        if not self.application_id:
            raise RegistrySyncError("No application id configured; cannot register commands")
        if application:
            return application_commands_route(self.application_id)
        if not self.home_guild_id:
            raise RegistrySyncError("No home guild id configured; cannot register guild commands")
        return guild_commands_route(self.application_id, self.home_guild_id)

    async def sync_registry(self, token: str | None = None, application: bool = False) -> List[Dict[str, Any]]:
        """Replace the remote command list with the loaded commands.

        Discord treats the request as the complete desired state: remote
        commands missing from the list are deleted, new ones created and the
        rest overwritten. Nothing is retried.

        Args:
            token: Bot token to use. Falls back to the cached token and REST
                client, which then must have been injected.
            application: Register globally instead of in the home guild.

        Returns:
            The list of definitions that was pushed.

        Raises:
            CapabilityError: No token given and none cached.
            RegistrySyncError: The request failed.
        """
        if token:
            rest = self._rest_factory(token, self.api_base_url)
            owns_rest = True
        else:
            self._require_token()
            rest = self._require_rest()
            owns_rest = False

        try:
            definitions = self.registrable_definitions()
            scope = "application" if application else "guild"
            try:
                route = self.sync_route(application)
            except RegistrySyncError as exc:
                logger.error("%s", exc)
                raise

            logger.info("Refreshing %d application (/) commands to %s...", len(definitions), scope)
            try:
                await rest.put(route, definitions)
            except Exception as exc:
                logger.error("Failed to refresh application (/) commands: %s", exc)
                raise RegistrySyncError(str(exc)) from exc

            logger.info("Successfully refreshed %d application (/) commands!", len(definitions))
            return definitions
        finally:
            if owns_rest:
                await rest.close()

    # --------------------------
    # Dispatch
    # --------------------------
    def get_command(self, interaction: Any) -> CommandRecord | None:
        name = command_name_of(interaction)
        return self.lookup(name) if name is not None else None

    async def execute(self, interaction: Any) -> bool:
        """Run the command named by ``interaction``.

        Returns:
            bool: False when no such command is loaded, True once it ran.
        """
        client = self._require_client()
        record = self.get_command(interaction)
        if record is None:
            logger.error("Failed to execute command: %s", command_name_of(interaction))
            return False

        await record.execute(interaction, client)
        return True

    async def dispatch_autocomplete(self, interaction: Any) -> bool:
        """Run the autocomplete handler of the command named by ``interaction``.

        Returns:
            bool: True if a handler ran, False for unknown commands or
            commands without autocomplete.
        """
        client = self._require_client()
        record = self.get_command(interaction)
        if record is None:
            logger.error("Failed to autocomplete command: %s", command_name_of(interaction))
            return False
        if not record.has_autocomplete():
            return False

        await record.autocomplete(interaction, client)
        return True

    def commands_with_tags(self, tags: Sequence[CommandTag]) -> List[CommandRecord]:
        return [record for record in self._records.values() if record.has_tags(tags)]

    # --------------------------
    # Validators
    # --------------------------
    def _require_client(self) -> Any:
        if not self.is_client_cached():
            message = "Tried to use function that requires cached discord client without first caching discord client"
            logger.critical(message)
            raise CapabilityError(message)
        return self._client

    def _require_token(self) -> str:
        if not self.is_token_cached():
            message = "Tried to use function that requires cached client token without first caching client token"
            logger.critical(message)
            raise CapabilityError(message)
        return self._token  # type: ignore[return-value]

    def _require_rest(self) -> RestClient:
        if not self.is_rest_cached():
            message = "Tried to use function that requires cached rest client without first caching rest client"
            logger.critical(message)
            raise CapabilityError(message)
        return self._rest  # type: ignore[return-value]
