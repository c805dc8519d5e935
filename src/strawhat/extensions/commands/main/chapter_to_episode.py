"""/chapter_to_episode: first anime episode adapting a chapter."""

from strawhat.registry.command_registry import CommandTag
from strawhat.util.autocomplete import autocomplete_number
from strawhat.util.embeds import base_embed, embed_message, episode_embed
from strawhat.util.format_utils import extract_episode_from_chapter

QUERY_OPTION = "chapter"


async def command_function(interaction, options, client, logger_id):
    datasets = client.datasets
    chapter = options.get_integer(QUERY_OPTION) or 1
    if chapter > datasets.max_chapter:
        message = client.app_config.message("unknown_chapter", "Sorry, I don't know that chapter!")
        await interaction.response.send_message(embed=embed_message(message))
        return

    chapter_record = datasets.get_chapter(max(chapter, 1))
    episode, found = extract_episode_from_chapter(chapter_record)
    episode_record = datasets.get_episode(episode) if found else None
    if episode_record is None:
        embed = base_embed(False)
        embed.description = "Episode equivalent is not available yet"
        await interaction.response.send_message(embed=embed)
        return

    related = chapter_record.chapter_info.episodes
    embed = episode_embed(
        episode_record,
        related_name="All Related Episodes",
        related_value=", ".join(related) if related else "No episodes related yet",
        mark_filler=False,
    )
    await interaction.response.send_message(embed=embed)


async def autocomplete(interaction, options, client, logger_id):
    await autocomplete_number(interaction, options.get_focused(), client.datasets.max_chapter)


build_data = {
    "name": "chapter_to_episode",
    "description": "Convert the chapter to episode",
    "options": [
        {
            "type": 4,
            "name": QUERY_OPTION,
            "description": "The chapter you want to convert",
            "required": True,
            "autocomplete": True,
        }
    ],
}

tags = [CommandTag.COMPLETE, CommandTag.GENERAL]

help_text = "Finds the first anime episode that adapts the given chapter."
