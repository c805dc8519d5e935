"""
In-memory access to the episode and chapter datasets.

The datasets live as JSON lists in the data directory and are rewritten by the
scrapers. :class:`DatasetStore` reads them once and serves 1-based lookups
until :meth:`DatasetStore.reload` is called after a refresh.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

from strawhat.datatypes.chapter_datatypes import ChapterRecord
from strawhat.datatypes.episode_datatypes import EpisodeRecord
from strawhat.util.logger import get_logger

logger = get_logger("dataset_store")

EPISODE_DATA_FILE = "episode_data.json"
CHAPTER_DATA_FILE = "chapter_data.json"


def read_json_list(path: Path) -> list:
    """Return the JSON list stored at ``path`` or an empty list."""
    if not path.exists():
        logger.warning("Data file %s not present", path)
        return []
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read data file %s: %s", path, exc)
        return []
    if not isinstance(data, list):
        logger.error("Data file %s does not contain a list", path)
        return []
    return data


def write_json_list(path: Path, data: list) -> None:
    """Write ``data`` to ``path`` through a temporary file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)
    tmp_path.replace(path)


class DatasetStore:
    """Episode and chapter records loaded from ``data_directory``."""

    def __init__(self, data_directory: Path) -> None:
        self.data_directory = Path(data_directory)
        self._episodes: List[EpisodeRecord] = []
        self._chapters: List[ChapterRecord] = []

    @property
    def episode_path(self) -> Path:
        return self.data_directory / EPISODE_DATA_FILE

    @property
    def chapter_path(self) -> Path:
        return self.data_directory / CHAPTER_DATA_FILE

    def reload(self) -> None:
        """Re-read both data files from disk."""
        self._episodes = [EpisodeRecord.from_dict(item) for item in read_json_list(self.episode_path)]
        self._chapters = [ChapterRecord.from_dict(item) for item in read_json_list(self.chapter_path)]
        logger.info("Loaded %d episodes and %d chapters", len(self._episodes), len(self._chapters))

    @property
    def episodes(self) -> List[EpisodeRecord]:
        return list(self._episodes)

    @property
    def chapters(self) -> List[ChapterRecord]:
        return list(self._chapters)

    @property
    def max_episode(self) -> int:
        return len(self._episodes)

    @property
    def max_chapter(self) -> int:
        return len(self._chapters)

    def get_episode(self, episode: int) -> EpisodeRecord | None:
        """Episode ``episode`` (1-based) or None when out of range."""
        if 1 <= episode <= len(self._episodes):
            return self._episodes[episode - 1]
        return None

    def get_chapter(self, chapter: int) -> ChapterRecord | None:
        """Chapter ``chapter`` (1-based) or None when out of range."""
        if 1 <= chapter <= len(self._chapters):
            return self._chapters[chapter - 1]
        return None
