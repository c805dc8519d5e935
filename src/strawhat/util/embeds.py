"""
Embed builders for Strawhat replies.

Colors and the default footer come from :data:`app_config`. The record embeds
mirror the wiki infobox of an episode or chapter.
"""

from __future__ import annotations

import discord

from strawhat.configuration.app_configuration import app_config
from strawhat.datatypes.chapter_datatypes import ChapterRecord
from strawhat.datatypes.episode_datatypes import EpisodeRecord

EPISODE_WATCH_URL = "https://animekai.to/watch/one-piece-dk6r#ep={episode}"
CHAPTER_READ_URL = "https://mangafire.to/read/one-piecee.dkw/en/chapter-{chapter}"

# Zero-width filler so inline fields wrap into rows of three
BLANK_FIELD = "\u200b"


def default_footer() -> str:
    return f"{app_config.client_name} v{app_config.client_version}"


def main_color() -> discord.Color:
    return discord.Color(app_config.embed_color)


def standard_embed(title: str, message: str, footer: str | None = None) -> discord.Embed:
    """Embed with a title, description, main color and footer."""
    embed = discord.Embed(title=title, description=message, color=main_color())
    embed.set_footer(text=footer or default_footer())
    return embed


def embed_message(message: str) -> discord.Embed:
    """Plain embed holding a single message."""
    return discord.Embed(description=message, color=main_color())


def base_embed(default_footer_enabled: bool = True) -> discord.Embed:
    embed = discord.Embed(color=main_color())
    if default_footer_enabled:
        embed.set_footer(text=default_footer())
    return embed


def episode_link(episode: int) -> str:
    return f"[{episode}]({EPISODE_WATCH_URL.format(episode=episode)})"


def chapter_link(chapter: int, begin_page: int | str, end_page: int | str) -> str:
    url = CHAPTER_READ_URL.format(chapter=chapter)
    return f"[{chapter} (p. {begin_page}-{end_page})]({url})"


def _episode_footer(episode: EpisodeRecord) -> str:
    release = episode.latest_english_release
    if release is None:
        return ""
    if release.airdate:
        return f"{release.distributor} Airdate: {release.airdate}"
    return release.distributor


def _add_release_fields(embed: discord.Embed, episode: EpisodeRecord, related_name: str, related_value: str) -> None:
    info = episode.japanese_info
    remastered = info.is_remastered
    embed.add_field(name="Japanese Title", value=info.kanji or "Unknown", inline=True)
    embed.add_field(name="Released", value=info.airdate or "Unknown", inline=True)
    if remastered:
        embed.add_field(name=BLANK_FIELD, value=BLANK_FIELD, inline=True)
    embed.add_field(name=related_name, value=related_value, inline=remastered)
    if remastered:
        embed.add_field(name="Remastered", value=info.remaster_airdate, inline=True)
        embed.add_field(name=BLANK_FIELD, value=BLANK_FIELD, inline=True)


def episode_embed(
    episode: EpisodeRecord,
    related_name: str = "Related Chapters",
    related_value: str | None = None,
    mark_filler: bool = True,
) -> discord.Embed:
    """Infobox embed for one episode."""
    release = episode.latest_english_release
    title = release.title if release else f"Episode {episode.episode}"
    if mark_filler and episode.statistics.is_filler:
        title += " (Filler)"

    embed = base_embed(False)
    embed.title = title
    embed.description = f"**This Episode:** {episode_link(episode.episode)}"
    if episode.image_url:
        embed.set_thumbnail(url=episode.image_url)

    if related_value is None:
        related_value = ", ".join(episode.statistics.chapters) or "No chapters listed"
    _add_release_fields(embed, episode, related_name, related_value)

    footer = _episode_footer(episode)
    if footer:
        embed.set_footer(text=footer)
    return embed


def chapter_embed(
    chapter: ChapterRecord,
    description: str | None = None,
    related_name: str = "Related Episodes",
    related_value: str | None = None,
    footer_suffix: str = "",
) -> discord.Embed:
    """Infobox embed for one chapter."""
    info = chapter.chapter_info
    embed = base_embed(False)
    embed.title = info.viz_title or f"Chapter {info.chapter}"
    embed.description = description or f"**This Chapter:** {chapter_link(info.chapter, 1, info.pages or '?')}"
    if chapter.image_url:
        embed.set_thumbnail(url=chapter.image_url)

    if related_value is None:
        related_value = ", ".join(info.episodes) if info.episodes else "No episodes related yet"
    embed.add_field(name="Japanese Title", value=info.japanese_title or "Unknown", inline=True)
    embed.add_field(name="Released", value=info.release_date or "Unknown", inline=True)
    embed.add_field(name=related_name, value=related_value, inline=False)
    embed.set_footer(text=f"{info.wsj_issue}: Vol. {info.volume} Ch. {info.chapter}{footer_suffix}")
    return embed
