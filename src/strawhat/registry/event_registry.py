"""
Event listener registry.

Event extensions are Python files exporting::

    event_function   async (client, logger_id, *event_args) -> None
    event_data       {"event": "<py-cord event name>", "once": bool}

As soon as an event extension is stored it is attached to the client's event
bus, either for every dispatch or for the first one only.
"""

from __future__ import annotations

from types import ModuleType
from typing import Any, Awaitable, Callable, Dict

from strawhat.registry.extension_registry import ExtensionRecord, ExtensionRegistry
from strawhat.util.logger import get_logger

logger = get_logger("event_registry")

EventFunction = Callable[..., Awaitable[Any]]


def listener_name(event: str) -> str:
    """py-cord listener name for an event (``ready`` -> ``on_ready``)."""
    return event if event.startswith("on_") else f"on_{event}"


class EventRecord(ExtensionRecord):
    """A loaded event extension."""

    __slots__ = ("_function", "_event", "_once")

    def __init__(self, logger_id: str, function: EventFunction, event: str, once: bool) -> None:
        super().__init__(logger_id)
        self._function = function
        self._event = event
        self._once = once

    @property
    def event(self) -> str:
        return self._event

    @property
    def once(self) -> bool:
        return self._once

    @property
    def event_data(self) -> Dict[str, Any]:
        return {"event": self._event, "once": self._once}

    def listen(self, client: Any) -> Callable[..., Awaitable[None]]:
        """Attach this extension to ``client``'s event bus.

        Returns:
            The listener coroutine function registered on the client.
        """

        async def listener(*args: Any) -> None:
            await self.execute(client, *args)

        listener.__name__ = listener_name(self._event)
        client.listen(listener_name(self._event), once=self._once)(listener)
        return listener

    async def execute(self, client: Any, *args: Any) -> None:
        """Call the event function directly, bypassing the event bus."""
        await self._function(client, self.logger_id, *args)


class EventRegistry(ExtensionRegistry[str, EventRecord]):
    """Registry of event extensions keyed by event name.

    Args:
        client: The client whose event bus receives the listeners.
    """

    def __init__(self, client: Any) -> None:
        super().__init__()
        if client is None:
            raise ValueError("EventRegistry needs a client to attach listeners to")
        self.client = client

    def verify(self, file_name: str, module: ModuleType) -> bool:
        event_function = getattr(module, "event_function", None)
        event_data = getattr(module, "event_data", None)

        if event_function is None:
            logger.error("%s is missing event_function export", file_name)
            return False
        if not callable(event_function):
            logger.error("%s exports an event_function that is not callable", file_name)
            return False
        if event_data is None:
            logger.error("%s is missing event_data export", file_name)
            return False
        if not isinstance(event_data, dict):
            logger.error("%s exports event_data that is not a dict", file_name)
            return False
        if event_data.get("event") is None:
            logger.error("%s is missing .event property in event_data", file_name)
            return False
        if event_data.get("once") is None:
            logger.error("%s is missing .once property in event_data", file_name)
            return False
        if not isinstance(event_data["once"], bool):
            logger.error("%s has a non boolean .once property in event_data", file_name)
            return False

        if str(event_data["event"]) in self._records:
            logger.warning('An event file with the event "%s" has already been loaded (%s)', event_data["event"], file_name)
            return False

        return True

    def generate_record(self, file_name: str, module: ModuleType) -> EventRecord:
        return EventRecord(
            logger_id=file_name,
            function=module.event_function,
            event=str(module.event_data["event"]),
            once=module.event_data["once"],
        )

    def generate_key(self, record: EventRecord) -> str:
        return record.event

    def on_load(self, record: EventRecord) -> None:
        record.listen(self.client)
        logger.debug("Listening to %s (%s, once=%s)", record.event, record.logger_id, record.once)

    def get_event(self, event: str) -> EventRecord | None:
        return self.lookup(event)
