"""
Strawhat: a Discord bot for One Piece episode and chapter lookups.

- **bot/**: The py-cord client shared with every extension.
- **configuration/**: YAML application configuration.
- **registry/**: File-based command and event registries, option parsing and
  the Discord REST client used for command registration.
- **extensions/**: The slash commands and gateway event handlers.
- **datatypes/** and **data/**: Episode/chapter records and their JSON store.
- **scraper/** and **scheduler/**: Wiki scrapers and the daily refresh.
- **scripts/**: Command registration CLI.
- **util/**: Logging, embeds, autocomplete and formatting helpers.
"""
