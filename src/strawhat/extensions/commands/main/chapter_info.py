"""/chapter_info: infobox of one manga chapter."""

from strawhat.registry.command_registry import CommandTag
from strawhat.util.autocomplete import autocomplete_number
from strawhat.util.embeds import chapter_embed, embed_message

QUERY_OPTION = "chapter"


async def command_function(interaction, options, client, logger_id):
    datasets = client.datasets
    chapter = options.get_integer(QUERY_OPTION) or 1
    if chapter > datasets.max_chapter:
        message = client.app_config.message("unknown_chapter", "Sorry, I don't know that chapter!")
        await interaction.response.send_message(embed=embed_message(message))
        return

    record = datasets.get_chapter(max(chapter, 1))
    await interaction.response.send_message(embed=chapter_embed(record))


async def autocomplete(interaction, options, client, logger_id):
    await autocomplete_number(interaction, options.get_focused(), client.datasets.max_chapter)


build_data = {
    "name": "chapter_info",
    "description": "Get some info on this chapter",
    "options": [
        {
            "type": 4,
            "name": QUERY_OPTION,
            "description": "The chapter you want info on",
            "required": True,
            "autocomplete": True,
        }
    ],
}

tags = [CommandTag.COMPLETE, CommandTag.GENERAL]

help_text = "Shows the titles, release date, magazine issue and related anime episodes of a chapter."
