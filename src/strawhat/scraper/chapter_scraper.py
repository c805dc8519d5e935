from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List

from strawhat.data.dataset_store import CHAPTER_DATA_FILE
from strawhat.datatypes.chapter_datatypes import ChapterInfo, ChapterRecord
from strawhat.scraper.wiki_scraper import WikiScraper, first_int, parse_infobox

CHAPTER_URL_BASE = "https://onepiece.fandom.com/wiki/Chapter_"

# ")E" in "Episode 1 (p. 1-5)Episode 2" marks where the next episode starts
_EPISODE_BOUNDARY = re.compile(r"\)([a-zA-Z])")


def split_episodes(episodes_string: str) -> List[str]:
    return [part for part in _EPISODE_BOUNDARY.sub(r")#%\1", episodes_string).split("#%") if part]


def parse_chapter_info(lines: List[str]) -> ChapterInfo:
    info = ChapterInfo()
    for i, line in enumerate(lines):
        value = lines[i + 1] if i + 1 < len(lines) else ""
        if line == "Volume":
            info.volume = value
        elif line == "Chapter":
            info.chapter = first_int(value)
        elif line == "Japanese Title":
            info.japanese_title = value
        elif line == "Romanized Title":
            info.romanized_title = value
        elif line == "Viz Title":
            info.viz_title = value
        elif line == "Pages":
            info.pages = value
        elif line == "Release Date":
            info.release_date = value.replace("[ref]", "")
        elif line == "WSJ Issue":
            info.wsj_issue = value
        elif line == "Anime":
            info.episodes = split_episodes(value)
    return info


class ChapterScraper(WikiScraper[ChapterRecord]):
    """Scrapes manga chapter pages into ``chapter_data.json``."""

    name = "ChapterScraper"

    def __init__(self, data_directory: Path, url_base: str = CHAPTER_URL_BASE) -> None:
        super().__init__(Path(data_directory) / CHAPTER_DATA_FILE, url_base)

    def parse(self, html: str, number: int) -> ChapterRecord:
        image_url, groups = parse_infobox(html)
        info = parse_chapter_info(groups.get("Chapter Info", []))
        if not info.chapter:
            info.chapter = number
        return ChapterRecord(image_url=image_url, chapter_info=info)

    def record_from_dict(self, data: Dict[str, Any]) -> ChapterRecord:
        return ChapterRecord.from_dict(data)

    def record_number(self, record: ChapterRecord) -> int:
        return record.chapter

    def image_url_of(self, record: ChapterRecord) -> str:
        return record.image_url
