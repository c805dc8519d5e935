"""
Scheduled background tasks.

- **refresh_scheduler.py**: Daily dataset refresh. Runs the wiki scrapers at
  the configured time and reloads the in-memory datasets.
"""
