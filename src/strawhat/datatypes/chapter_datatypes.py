"""Chapter record data structures, stored as JSON in ``chapter_data.json``."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


@dataclass(slots=True)
class ChapterInfo:
    volume: str = ""
    chapter: int = 0
    japanese_title: str = ""
    romanized_title: str = ""
    viz_title: str = ""
    pages: str = ""
    release_date: str = ""
    wsj_issue: str = ""
    episodes: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ChapterRecord:
    image_url: str = ""
    chapter_info: ChapterInfo = field(default_factory=ChapterInfo)

    @property
    def chapter(self) -> int:
        return self.chapter_info.chapter

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChapterRecord":
        info = data.get("chapter_info") or {}
        return cls(
            image_url=data.get("image_url", ""),
            chapter_info=ChapterInfo(
                volume=str(info.get("volume", "")),
                chapter=int(info.get("chapter", 0) or 0),
                japanese_title=info.get("japanese_title", ""),
                romanized_title=info.get("romanized_title", ""),
                viz_title=info.get("viz_title", ""),
                pages=str(info.get("pages", "")),
                release_date=info.get("release_date", ""),
                wsj_issue=info.get("wsj_issue", ""),
                episodes=list(info.get("episodes") or []),
            ),
        )
