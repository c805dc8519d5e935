"""
Base class for the fandom wiki scrapers.

Every episode and chapter has its own wiki page with a "portable infobox".
A scraper fetches consecutive pages starting after the last record it already
stored, stops at the first page without data, and appends the new records to
its JSON data file.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Generic, List, Tuple, TypeVar

import aiohttp
from bs4 import BeautifulSoup

from strawhat.data.dataset_store import read_json_list, write_json_list
from strawhat.util.logger import get_logger

logger = get_logger("wiki_scraper")

NO_PICTURE_URL = "https://static.wikia.nocookie.net/onepiece/images/d/d5/NoPicAvailable.png/"
INFOBOX_TEXT_SELECTOR = ", ".join(
    [
        ".pi-header",
        ".pi-section-tab",
        ".pi-data-label",
        ".pi-data-value",
        ".pi-smart-data-label",
        ".pi-smart-data-value",
    ]
)
REQUEST_HEADERS = {"User-Agent": "Mozilla/5.0 (compatible; StrawhatBot/1.0)"}

RecordT = TypeVar("RecordT")


def clean_text(text: str) -> str:
    return " ".join(text.replace("â€™", "'").split())


def parse_infobox(html: str) -> Tuple[str, Dict[str, List[str]]]:
    """Extract the image URL and the text lines of every infobox group.

    Returns:
        ``(image_url, {group title: [label, value, label, value, ...]})``.
        The image URL is cut right before its ``revision`` path segment.
    """
    soup = BeautifulSoup(html, "html.parser")

    image_url = ""
    image = soup.select_one(".portable-infobox .pi-image-thumbnail")
    if image is not None and image.get("src"):
        src = str(image["src"])
        if "revision" in src:
            image_url = src[: src.index("revision")]
        else:
            logger.warning('Link does not contain "revision": %s', src)
            image_url = src

    groups: Dict[str, List[str]] = {}
    for section in soup.select(".portable-infobox section.pi-group"):
        title_element = section.find("h2")
        if title_element is None:
            continue
        lines = [
            clean_text(element.get_text())
            for element in section.select(INFOBOX_TEXT_SELECTOR)
            if element is not title_element
        ]
        groups[clean_text(title_element.get_text())] = [line for line in lines if line]

    return image_url, groups


def first_int(text: str, default: int = 0) -> int:
    match = re.search(r"\d+", text)
    return int(match.group()) if match else default


class WikiScraper(ABC, Generic[RecordT]):
    """Scrapes consecutive numbered wiki pages into a JSON data file.

    Args:
        data_file: JSON file holding the records scraped so far.
        url_base: Page URL without the trailing number.
    """

    name: str = "wiki"

    def __init__(self, data_file: Path, url_base: str) -> None:
        self.data_file = Path(data_file)
        self.url_base = url_base

    # --------------------------
    # Hooks
    # --------------------------
    @abstractmethod
    def parse(self, html: str, number: int) -> RecordT:
        """Build a record from the page of entry ``number``."""

    @abstractmethod
    def record_from_dict(self, data: Dict[str, Any]) -> RecordT:
        """Rebuild a stored record."""

    @abstractmethod
    def record_number(self, record: RecordT) -> int:
        """Episode or chapter number of ``record``."""

    @abstractmethod
    def image_url_of(self, record: RecordT) -> str:
        """Image URL of ``record``; pages without a picture have no data yet."""

    # --------------------------
    # Scraping
    # --------------------------
    def is_available(self, record: RecordT) -> bool:
        image_url = self.image_url_of(record)
        return image_url not in ("", NO_PICTURE_URL)

    async def fetch(self, session: aiohttp.ClientSession, number: int) -> str:
        async with session.get(f"{self.url_base}{number}") as response:
            return await response.text()

    async def scrape(self, session: aiohttp.ClientSession, number: int) -> Tuple[RecordT, bool]:
        """Scrape one page; returns the record and whether it had data."""
        logger.info("[%s] Scraping %d...", self.name, number)
        record = self.parse(await self.fetch(session, number), number)
        available = self.is_available(record)
        if not available:
            logger.warning("[%s] Data for %d is not available!", self.name, number)
        return record, available

    async def scrape_from(self, session: aiohttp.ClientSession, start: int, end: int | None = None) -> List[RecordT]:
        """Scrape ``start..end`` (inclusive), stopping at the first page without data."""
        records: List[RecordT] = []
        number = start
        while end is None or number <= end:
            record, available = await self.scrape(session, number)
            if not available:
                break
            records.append(record)
            number += 1
        return records

    # --------------------------
    # Data file
    # --------------------------
    def load_records(self) -> List[RecordT]:
        return [self.record_from_dict(item) for item in read_json_list(self.data_file)]

    def write_records(self, records: List[RecordT]) -> None:
        logger.info("[%s] Writing %d records to %s", self.name, len(records), self.data_file)
        write_json_list(self.data_file, [record.to_dict() for record in records])  # type: ignore[attr-defined]

    async def update_data_file(self) -> int:
        """Append every page published since the last stored record.

        Network failures are logged and leave the data file untouched.

        Returns:
            int: Number of new records written.
        """
        logger.info("[%s] Updating data file...", self.name)
        records = self.load_records() if self.data_file.exists() else []
        start = self.record_number(records[-1]) + 1 if records else 1
        if records:
            logger.info("[%s] Last entry recorded is %d", self.name, start - 1)
        else:
            logger.info("[%s] Data file does not exist, creating one...", self.name)

        try:
            async with aiohttp.ClientSession(headers=REQUEST_HEADERS) as session:
                new_records = await self.scrape_from(session, start)
        except aiohttp.ClientError as exc:
            logger.error("[%s] Scraping failed, keeping existing data: %s", self.name, exc)
            return 0

        if new_records or not self.data_file.exists():
            self.write_records(records + new_records)
        logger.info("[%s] Data is up to date! (%d new)", self.name, len(new_records))
        return len(new_records)
