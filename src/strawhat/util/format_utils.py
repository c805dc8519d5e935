import re
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from strawhat.datatypes.chapter_datatypes import ChapterRecord
from strawhat.datatypes.episode_datatypes import EpisodeRecord
from strawhat.util.logger import get_logger

logger = get_logger("format_utils")

# Canon-free episodes, inclusive ranges
FILLER_EPISODES = "54-60, 98-99, 102, 131-143, 196-206, 220-225, 279-283, 291-292, 303, 317-319, 326-336, 382-384, 406-407, 426-429, 457-458, 492, 542, 575-578, 590, 626-627, 747-750, 780-782, 895-896, 907, 1029-1030"

_NUMBER = re.compile(r"\d+")


def parse_episode_ranges(ranges: str) -> frozenset[int]:
    """Expand ``"1-3, 7"`` into ``{1, 2, 3, 7}``."""
    episodes = set()
    for part in ranges.split(","):
        bounds = [int(value) for value in part.strip().split("-") if value]
        if len(bounds) == 2:
            episodes.update(range(bounds[0], bounds[1] + 1))
        elif len(bounds) == 1:
            episodes.add(bounds[0])
    return frozenset(episodes)


FILLER_EPISODE_SET = parse_episode_ranges(FILLER_EPISODES)


def is_episode_filler(episode: int) -> bool:
    return episode in FILLER_EPISODE_SET


@dataclass(slots=True)
class ChapterSpan:
    """Chapter and page span an episode starts with."""

    chapter: int = -1
    begin_page: int = -1
    end_page: int = -1
    extracted: bool = False


def extract_chapter_from_episode(episode: EpisodeRecord) -> ChapterSpan:
    """Read the first adapted chapter from an episode's chapter list.

    The first chapter string looks like ``"Chapter 5 (p. 2-19)"``; its first
    three numbers are the chapter, first page and last page.
    """
    span = ChapterSpan()
    if episode.statistics.no_chapters or not episode.statistics.chapters:
        return span

    chapter_string = episode.statistics.chapters[0]
    numbers = _NUMBER.findall(chapter_string)
    if len(numbers) < 3:
        logger.error('Trouble extracting chapter from chapter string: "%s"', chapter_string)
        return span

    span.chapter, span.begin_page, span.end_page = (int(value) for value in numbers[:3])
    span.extracted = True
    return span


def extract_episode_from_chapter(chapter: ChapterRecord) -> Tuple[int, bool]:
    """First episode adapting ``chapter`` as ``(episode, found)``."""
    if not chapter.chapter_info.episodes:
        return -1, False

    episode_string = chapter.chapter_info.episodes[0]
    match = _NUMBER.search(episode_string)
    if match is None:
        logger.error('Trouble extracting episode from episode string: "%s"', episode_string)
        return -1, False
    return int(match.group()), True


def slash_command_syntax(build_data: Dict[str, Any]) -> str:
    """Usage line for a command: ``/name [required] (optional)``."""
    syntax = f"/{build_data['name']}"
    for option in build_data.get("options") or []:
        if option.get("required"):
            syntax += f" [{option['name']}]"
        else:
            syntax += f" ({option['name']})"
    return syntax
