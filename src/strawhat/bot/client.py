"""
Strawhat Discord client.

A plain :class:`discord.Client` carrying the objects extensions need: the
command registry, the episode/chapter datasets and the app configuration.
Slash commands are registered by :class:`CommandRegistry`, not by py-cord.
"""

from __future__ import annotations

import discord

from strawhat.configuration.app_configuration import AppConfig
from strawhat.data.dataset_store import DatasetStore
from strawhat.registry.command_registry import CommandRegistry


def build_intents() -> discord.Intents:
    """Strawhat only answers interactions, so no privileged intents are needed."""
    intents = discord.Intents.none()
    intents.guilds = True
    intents.emojis_and_stickers = True
    return intents


class StrawhatClient(discord.Client):
    """
    Discord client shared with every extension.

    Args:
        config: Loaded application configuration.
        datasets: Episode and chapter datasets.
        command_registry: Registry receiving this client on ready; built from
            ``config`` when omitted.
    """

    def __init__(
        self,
        config: AppConfig,
        datasets: DatasetStore,
        command_registry: CommandRegistry | None = None,
        **options,
    ) -> None:
        options.setdefault("intents", build_intents())
        super().__init__(**options)
        self.app_config = config
        self.datasets = datasets
        if command_registry is None:
            command_registry = CommandRegistry(
                application_id=config.application_id,
                home_guild_id=config.home_guild_id,
                api_base_url=config.api_base_url,
            )
        self.command_registry = command_registry
