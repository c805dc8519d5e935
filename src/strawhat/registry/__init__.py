"""
Extension loading and command registration for Strawhat.

- **extension_registry.py**: Generic registry that walks a folder tree, imports
  every extension file, verifies and wraps it into a record and stores it under
  a unique key. Per-file failures are logged and never abort the scan.

- **command_registry.py**: Slash command registry with runtime dependency
  injection (client, token, REST client), full-replace synchronization with
  Discord's application command endpoints, and interaction dispatch.

- **event_registry.py**: Event listener registry attaching each loaded
  extension to the client's event bus.

- **rest_client.py**: aiohttp client for the bulk command overwrite routes.

- **options.py**: Typed access to raw interaction options.
"""
