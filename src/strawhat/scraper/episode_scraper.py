from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List

from strawhat.data.dataset_store import EPISODE_DATA_FILE
from strawhat.datatypes.episode_datatypes import EnglishRelease, EpisodeRecord, EpisodeStatistics, JapaneseInfo
from strawhat.scraper.wiki_scraper import WikiScraper, parse_infobox
from strawhat.util.format_utils import is_episode_filler

EPISODE_URL_BASE = "https://onepiece.fandom.com/wiki/Episode_"


def _value_after(lines: List[str], index: int) -> str:
    return lines[index + 1] if index + 1 < len(lines) else ""


def parse_japanese_info(lines: List[str]) -> JapaneseInfo:
    info = JapaneseInfo()
    for i, line in enumerate(lines):
        if line == "Kanji":
            info.kanji = _value_after(lines, i)
        elif line == "Romaji":
            info.romaji = _value_after(lines, i)
        elif line == "Airdate":
            info.airdate = _value_after(lines, i)
        elif line == "Remaster Airdate":
            info.remaster_airdate = _value_after(lines, i)
    return info


def parse_english_info(lines: List[str]) -> List[EnglishRelease]:
    """One release per "Title" label; the line before it names the distributor."""
    releases = []
    for i, line in enumerate(lines):
        if line != "Title":
            continue
        distributor = lines[i - 1] if i > 0 else ""
        airdate = lines[i + 3] if i + 3 < len(lines) and lines[i + 2] == "Airdate" else None
        releases.append(EnglishRelease(distributor=distributor, title=_value_after(lines, i), airdate=airdate))
    return releases


def split_chapters(chapters_string: str) -> List[str]:
    """Split ``"Chapter 1 (p. 1-19)Chapter 2 (p. 1-5)"`` at every "Chapter"."""
    chapters = []
    start = chapters_string.find("Chapter")
    while start != -1:
        end = chapters_string.find("Chapter", start + 1)
        chapters.append(chapters_string[start : end if end != -1 else len(chapters_string)].strip())
        start = end
    return chapters


def parse_statistics(lines: List[str], episode: int) -> EpisodeStatistics:
    statistics = EpisodeStatistics(is_filler=is_episode_filler(episode), episode=episode)

    if "Chapters" in lines:
        chapters_string = _value_after(lines, lines.index("Chapters"))
        if "filler" in chapters_string.lower():
            statistics.no_chapters = True
            statistics.chapters.append(chapters_string)
            return statistics

        statistics.chapters = split_chapters(chapters_string)
        if not statistics.chapters:
            statistics.chapters.append(re.sub(r"\)(\d)", r"), \1", chapters_string))
            statistics.chapter_trouble = True
        return statistics

    statistics.chapters.append("Assumed filler" if statistics.is_filler else "No chapters listed")
    statistics.no_chapters = True
    statistics.chapter_trouble = True
    return statistics


class EpisodeScraper(WikiScraper[EpisodeRecord]):
    """Scrapes anime episode pages into ``episode_data.json``."""

    name = "EpisodeScraper"

    def __init__(self, data_directory: Path, url_base: str = EPISODE_URL_BASE) -> None:
        super().__init__(Path(data_directory) / EPISODE_DATA_FILE, url_base)

    def parse(self, html: str, number: int) -> EpisodeRecord:
        image_url, groups = parse_infobox(html)
        return EpisodeRecord(
            image_url=image_url,
            japanese_info=parse_japanese_info(groups.get("Japanese Information", [])),
            english_info=parse_english_info(groups.get("English Information", [])),
            statistics=parse_statistics(groups.get("Statistics", []), number),
        )

    def record_from_dict(self, data: Dict[str, Any]) -> EpisodeRecord:
        return EpisodeRecord.from_dict(data)

    def record_number(self, record: EpisodeRecord) -> int:
        return record.episode

    def image_url_of(self, record: EpisodeRecord) -> str:
        return record.image_url
