"""/episode_to_chapter: chapter and pages an episode starts with."""

from strawhat.registry.command_registry import CommandTag
from strawhat.util.autocomplete import autocomplete_number
from strawhat.util.embeds import base_embed, chapter_embed, chapter_link, embed_message
from strawhat.util.format_utils import extract_chapter_from_episode
from strawhat.util.logger import get_logger

logger = get_logger("episode_to_chapter")

QUERY_OPTION = "episode"


async def command_function(interaction, options, client, logger_id):
    datasets = client.datasets
    if datasets.max_episode == 0:
        message = client.app_config.message("unknown_episode", "Sorry, I don't know that episode!")
        await interaction.response.send_message(embed=embed_message(message))
        return

    # Out of range requests snap to the first or last known episode
    episode = min(max(options.get_integer(QUERY_OPTION) or 1, 1), datasets.max_episode)
    episode_record = datasets.get_episode(episode)
    statistics = episode_record.statistics

    embed = base_embed(False)
    if statistics.no_chapters:
        embed.description = "This episode has no chapters associated with it"
        await interaction.response.send_message(embed=embed)
        return

    span = extract_chapter_from_episode(episode_record)
    chapter_record = datasets.get_chapter(span.chapter) if span.extracted else None
    if chapter_record is None:
        logger.warning("[%s] Unable to find chapter equivalent of episode %d", logger_id, episode)
        embed.title = statistics.chapters[0] if statistics.chapters else f"Episode {episode}"
        embed.description = "Unable to find info on this chapter"
        await interaction.response.send_message(embed=embed)
        return

    embed = chapter_embed(
        chapter_record,
        description=f"**This Chapter:** {chapter_link(span.chapter, span.begin_page, span.end_page)}",
        related_name="All Related Chapters",
        related_value=", ".join(statistics.chapters),
        footer_suffix=f" (Ep. {statistics.episode} is filler)" if statistics.is_filler else "",
    )
    await interaction.response.send_message(embed=embed)


async def autocomplete(interaction, options, client, logger_id):
    await autocomplete_number(interaction, options.get_focused(), client.datasets.max_episode)


build_data = {
    "name": "episode_to_chapter",
    "description": "Convert the episode to chapter",
    "options": [
        {
            "type": 4,
            "name": QUERY_OPTION,
            "description": "The episode you want to convert",
            "required": True,
            "autocomplete": True,
        }
    ],
}

tags = [CommandTag.COMPLETE, CommandTag.UTILITY]

help_text = "Finds the chapter, with its page range, that the given episode starts adapting."
