"""
Utility functions and helpers for Strawhat.

- **logger.py**: Centralized logging configuration with colored console output
  through prompt_toolkit, a per-session log file and silenced library noise.

- **autocomplete.py**: Numeric autocomplete suggestions bounded by the size of
  a dataset, plus the helper answering Discord autocomplete requests.

- **embeds.py**: Embed builders for episode and chapter replies.

- **format_utils.py**: Filler episode ranges, chapter/episode cross-reference
  parsing and command usage strings.
"""
