"""Route slash command and autocomplete interactions to the command registry."""

import discord

from strawhat.registry.command_registry import command_name_of
from strawhat.registry.options import OptionResolver
from strawhat.util.embeds import embed_message
from strawhat.util.logger import get_logger

logger = get_logger("interaction_event")


async def send_ephemeral(interaction, message):
    """Reply with ``message`` visible only to the invoking user."""
    embed = embed_message(message)
    try:
        if interaction.response.is_done():
            await interaction.followup.send(embed=embed, ephemeral=True)
        else:
            await interaction.response.send_message(embed=embed, ephemeral=True)
    except discord.HTTPException as exc:
        logger.warning("Failed to send error reply: %s", exc)


async def process_command(client, logger_id, interaction):
    config = client.app_config
    user = interaction.user
    user_name = getattr(user, "global_name", None) or getattr(user, "name", "unknown")
    options = OptionResolver.from_interaction(interaction)
    logger.info("%s: /%s %s", user_name, command_name_of(interaction), options.describe())

    try:
        executed = await client.command_registry.execute(interaction)
    except Exception:
        logger.exception("[%s] Command /%s raised", logger_id, command_name_of(interaction))
        await send_ephemeral(interaction, config.message("command_error", "A :bug: showed up while running this command."))
        return

    if not executed:
        await send_ephemeral(interaction, config.message("unknown_command", "That command is not available right now."))


async def process_autocomplete(client, logger_id, interaction):
    try:
        await client.command_registry.dispatch_autocomplete(interaction)
    except Exception:
        logger.exception("[%s] Autocomplete for /%s raised", logger_id, command_name_of(interaction))


async def event_function(client, logger_id, interaction):
    if interaction.type == discord.InteractionType.application_command:
        await process_command(client, logger_id, interaction)
    elif interaction.type == discord.InteractionType.auto_complete:
        await process_autocomplete(client, logger_id, interaction)


event_data = {
    "event": "interaction",
    "once": False,
}
