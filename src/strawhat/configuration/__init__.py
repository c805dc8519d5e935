"""
Configuration management for Strawhat.

- **app_configuration.py**: YAML configuration loader for global settings:
  client identity, home guild, extension folders, dataset directory and
  refresh time, Discord API base URL and user-facing messages. Falls back to
  defaults on missing or malformed config files.
"""
