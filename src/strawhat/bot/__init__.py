"""
Discord client wiring.

- **client.py**: :class:`StrawhatClient`, the py-cord client that carries the
  command registry, the datasets and the app configuration to every extension.
"""
