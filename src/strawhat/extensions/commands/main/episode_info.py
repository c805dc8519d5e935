"""/episode_info: infobox of one anime episode."""

from strawhat.registry.command_registry import CommandTag
from strawhat.util.autocomplete import autocomplete_number
from strawhat.util.embeds import embed_message, episode_embed

QUERY_OPTION = "episode"


async def command_function(interaction, options, client, logger_id):
    datasets = client.datasets
    episode = options.get_integer(QUERY_OPTION) or 1
    if episode > datasets.max_episode:
        message = client.app_config.message("unknown_episode", "Sorry, I don't know that episode!")
        await interaction.response.send_message(embed=embed_message(message))
        return

    record = datasets.get_episode(max(episode, 1))
    await interaction.response.send_message(embed=episode_embed(record))


async def autocomplete(interaction, options, client, logger_id):
    await autocomplete_number(interaction, options.get_focused(), client.datasets.max_episode)


build_data = {
    "name": "episode_info",
    "description": "Get some info on this episode",
    "options": [
        {
            "type": 4,
            "name": QUERY_OPTION,
            "description": "The episode you want info on",
            "required": True,
            "autocomplete": True,
        }
    ],
}

tags = [CommandTag.COMPLETE, CommandTag.GENERAL]

help_text = "Shows the titles, air dates and adapted chapters of an episode. Filler episodes are marked in the title."
