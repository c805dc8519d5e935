"""/help: usage and description of the loaded commands."""

import discord

from strawhat.registry.command_registry import CommandTag
from strawhat.util.autocomplete import MAX_SUGGESTIONS
from strawhat.util.embeds import embed_message, standard_embed
from strawhat.util.format_utils import slash_command_syntax

QUERY_OPTION = "command"


def visible_commands(registry):
    """Loaded commands users can call, sorted by name."""
    records = [record for record in registry if not record.has_tag(CommandTag.DO_NOT_REGISTER)]
    return sorted(records, key=lambda record: record.name)


async def command_function(interaction, options, client, logger_id):
    registry = client.command_registry
    name = options.get_string(QUERY_OPTION)

    if not name:
        lines = [f"`{slash_command_syntax(record.build_data)}` {record.description}" for record in visible_commands(registry)]
        embed = standard_embed("Commands", "\n".join(lines) or "No commands loaded")
        await interaction.response.send_message(embed=embed)
        return

    record = registry.lookup(name.strip().lower())
    if record is None or record.has_tag(CommandTag.DO_NOT_REGISTER):
        await interaction.response.send_message(embed=embed_message(f"There is no command called `{name}`"), ephemeral=True)
        return

    embed = standard_embed(f"/{record.name}", f"{record.description}\n\n{record.help_text}")
    embed.add_field(name="Usage", value=f"`{slash_command_syntax(record.build_data)}`", inline=False)
    await interaction.response.send_message(embed=embed)


async def autocomplete(interaction, options, client, logger_id):
    typed = options.get_focused().strip().lower()
    names = [record.name for record in visible_commands(client.command_registry) if record.name.startswith(typed)]
    choices = [discord.OptionChoice(name=name, value=name) for name in names[:MAX_SUGGESTIONS]]
    await interaction.response.send_autocomplete_result(choices=choices)


build_data = {
    "name": "help",
    "description": "List the commands or explain one of them",
    "options": [
        {
            "type": 3,
            "name": QUERY_OPTION,
            "description": "The command you need help with",
            "required": False,
            "autocomplete": True,
        }
    ],
}

tags = [CommandTag.COMPLETE, CommandTag.UTILITY]

help_text = "Without an argument lists every command. With a command name shows its usage; `[ ]` marks required and `( )` optional options."
