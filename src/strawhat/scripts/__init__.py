"""
Command line tools shipped with Strawhat.

- **refresh_commands.py**: Registers the slash commands with Discord, in the
  home guild or globally, or removes all of them.
"""
