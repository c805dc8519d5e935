"""
Pytest configuration and fixtures for Strawhat tests.
"""

import sys
import textwrap
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

import discord  # noqa: E402


@pytest.fixture()
def write_extension():
    """Write a dedented Python source file and return its path."""

    def _write(folder: Path, file_name: str, source: str) -> Path:
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / file_name
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write


def build_interaction(name, options=None, interaction_type=discord.InteractionType.application_command):
    """Interaction double carrying raw ``data`` and an async response API."""
    response = MagicMock()
    response.send_message = AsyncMock()
    response.send_autocomplete_result = AsyncMock()
    response.defer = AsyncMock()
    response.is_done = MagicMock(return_value=False)

    return SimpleNamespace(
        type=interaction_type,
        data={"name": name, "options": options or []},
        response=response,
        followup=SimpleNamespace(send=AsyncMock()),
        user=SimpleNamespace(global_name="Luffy", name="luffy"),
        original_response=AsyncMock(),
        edit_original_response=AsyncMock(),
    )


@pytest.fixture()
def make_interaction():
    return build_interaction


@pytest.fixture()
def ready_client():
    """Client double that is ready and exposes a token."""
    client = MagicMock()
    client.is_ready.return_value = True
    client.http.token = "bot-token"
    return client


def build_episode(episode, chapters=None, is_filler=False, no_chapters=False, remaster_airdate=None):
    from strawhat.datatypes.episode_datatypes import EnglishRelease, EpisodeRecord, EpisodeStatistics, JapaneseInfo

    return EpisodeRecord(
        image_url=f"https://img.test/episode_{episode}.png/",
        japanese_info=JapaneseInfo(
            kanji=f"第{episode}話",
            romaji=f"Dai {episode} wa",
            airdate="October 20, 1999",
            remaster_airdate=remaster_airdate,
        ),
        english_info=[
            EnglishRelease(distributor="4Kids", title=f"4Kids Episode {episode}"),
            EnglishRelease(distributor="Funimation", title=f"Episode Title {episode}", airdate="June 6, 2009"),
        ],
        statistics=EpisodeStatistics(
            chapters=list(chapters if chapters is not None else [f"Chapter {episode} (p. 1-19)"]),
            is_filler=is_filler,
            no_chapters=no_chapters,
            episode=episode,
        ),
    )


def build_chapter(chapter, episodes=None):
    from strawhat.datatypes.chapter_datatypes import ChapterInfo, ChapterRecord

    return ChapterRecord(
        image_url=f"https://img.test/chapter_{chapter}.png/",
        chapter_info=ChapterInfo(
            volume="1",
            chapter=chapter,
            japanese_title=f"第{chapter}話",
            romanized_title=f"Romanized {chapter}",
            viz_title=f"Viz Title {chapter}",
            pages="19",
            release_date="July 22, 1997",
            wsj_issue="Issue 34 1997",
            episodes=list(episodes if episodes is not None else [f"Episode {chapter}"]),
        ),
    )


@pytest.fixture()
def episode_factory():
    return build_episode


@pytest.fixture()
def chapter_factory():
    return build_chapter


@pytest.fixture()
def dataset_store(tmp_path: Path):
    """Store with three episodes and three chapters written to disk."""
    from strawhat.data.dataset_store import DatasetStore, write_json_list

    store = DatasetStore(tmp_path / "data")
    episodes = [
        build_episode(1),
        build_episode(2, chapters=["Chapter 2 (p. 2-19)", "Chapter 3 (p. 1-10)"], remaster_airdate="2012"),
        build_episode(3, chapters=["Filler"], is_filler=True, no_chapters=True),
    ]
    chapters = [build_chapter(1), build_chapter(2, episodes=[]), build_chapter(3, episodes=["Episode 9 (p. 1-5)"])]
    write_json_list(store.episode_path, [episode.to_dict() for episode in episodes])
    write_json_list(store.chapter_path, [chapter.to_dict() for chapter in chapters])
    store.reload()
    return store
