"""
Wiki scrapers keeping the episode and chapter datasets current.

- **wiki_scraper.py**: Shared infobox parsing, page fetching with aiohttp and
  the incremental data file update.
- **episode_scraper.py**: Anime episode pages.
- **chapter_scraper.py**: Manga chapter pages.
"""
