"""
Episode record data structures.

An :class:`EpisodeRecord` mirrors the infobox of one anime episode page on the
wiki. Records are stored as JSON in ``episode_data.json``; ``to_dict`` and
``from_dict`` convert in both directions.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


@dataclass(slots=True)
class JapaneseInfo:
    kanji: str = ""
    romaji: str = ""
    airdate: str = ""
    remaster_airdate: str | None = None

    @property
    def is_remastered(self) -> bool:
        return self.remaster_airdate is not None


@dataclass(slots=True)
class EnglishRelease:
    """One English release of an episode (a distributor's dub or sub)."""

    distributor: str
    title: str
    airdate: str | None = None


@dataclass(slots=True)
class EpisodeStatistics:
    """Statistics section of an episode.

    Attributes:
        chapters: Chapter strings as shown on the wiki, e.g. "Chapter 1 (p. 1-19)".
        is_filler: Episode belongs to a known filler range.
        no_chapters: Episode adapts no chapter.
        chapter_trouble: Chapter list could not be parsed cleanly.
        episode: Episode number.
    """

    chapters: List[str] = field(default_factory=list)
    is_filler: bool = False
    no_chapters: bool = False
    chapter_trouble: bool = False
    episode: int = 0


@dataclass(slots=True)
class EpisodeRecord:
    image_url: str = ""
    japanese_info: JapaneseInfo = field(default_factory=JapaneseInfo)
    english_info: List[EnglishRelease] = field(default_factory=list)
    statistics: EpisodeStatistics = field(default_factory=EpisodeStatistics)

    @property
    def episode(self) -> int:
        return self.statistics.episode

    @property
    def latest_english_release(self) -> EnglishRelease | None:
        return self.english_info[-1] if self.english_info else None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EpisodeRecord":
        japanese = data.get("japanese_info") or {}
        statistics = data.get("statistics") or {}
        return cls(
            image_url=data.get("image_url", ""),
            japanese_info=JapaneseInfo(
                kanji=japanese.get("kanji", ""),
                romaji=japanese.get("romaji", ""),
                airdate=japanese.get("airdate", ""),
                remaster_airdate=japanese.get("remaster_airdate"),
            ),
            english_info=[
                EnglishRelease(
                    distributor=release.get("distributor", ""),
                    title=release.get("title", ""),
                    airdate=release.get("airdate"),
                )
                for release in data.get("english_info") or []
            ],
            statistics=EpisodeStatistics(
                chapters=list(statistics.get("chapters") or []),
                is_filler=bool(statistics.get("is_filler", False)),
                no_chapters=bool(statistics.get("no_chapters", False)),
                chapter_trouble=bool(statistics.get("chapter_trouble", False)),
                episode=int(statistics.get("episode", 0)),
            ),
        )
