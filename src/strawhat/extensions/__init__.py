"""
Extensions loaded at runtime by the registries.

- **commands/**: Slash command files, one command per file, loaded by
  :class:`~strawhat.registry.command_registry.CommandRegistry` once the client
  is ready.
- **events/**: Gateway event files loaded by
  :class:`~strawhat.registry.event_registry.EventRegistry` at startup.
"""
