"""Client ready: load the slash commands and set the presence."""

import discord

from strawhat.util.logger import get_logger

logger = get_logger("ready_event")


async def event_function(client, logger_id):
    config = client.app_config
    registry = client.command_registry

    registry.inject_client(client)
    await registry.load_folder(config.commands_folder)

    await client.change_presence(activity=discord.Game(name=config.presence))
    logger.info("%s is online!", config.client_name)


event_data = {
    "event": "ready",
    "once": True,
}
