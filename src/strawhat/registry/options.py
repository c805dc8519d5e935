"""Read access to the options of a raw application-command interaction."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

# Discord option types that carry nested options instead of a value
SUB_COMMAND = 1
SUB_COMMAND_GROUP = 2


def flatten_options(options: List[Mapping[str, Any]] | None) -> List[Dict[str, Any]]:
    """Flatten sub command (group) nesting into a single list of value options."""
    flat: List[Dict[str, Any]] = []
    for option in options or []:
        if option.get("type") in (SUB_COMMAND, SUB_COMMAND_GROUP):
            flat.extend(flatten_options(option.get("options")))
        else:
            flat.append(dict(option))
    return flat


def sub_command_path(options: List[Mapping[str, Any]] | None) -> List[str]:
    path: List[str] = []
    for option in options or []:
        if option.get("type") in (SUB_COMMAND, SUB_COMMAND_GROUP):
            path.append(str(option.get("name")))
            path.extend(sub_command_path(option.get("options")))
            break
    return path


class OptionResolver:
    """Typed getters over ``interaction.data["options"]``.

    Commands and autocomplete handlers receive one of these next to the
    interaction. Getters return ``None`` for options the user left out unless
    ``required=True``, which raises ``KeyError`` instead.
    """

    def __init__(self, data: Mapping[str, Any] | None) -> None:
        data = data or {}
        raw_options = data.get("options") or []
        self._options = {option["name"]: option for option in flatten_options(raw_options)}
        self.sub_command = sub_command_path(raw_options)

    @classmethod
    def from_interaction(cls, interaction: Any) -> "OptionResolver":
        return cls(getattr(interaction, "data", None))

    @property
    def data(self) -> List[Dict[str, Any]]:
        return list(self._options.values())

    def get(self, name: str, required: bool = False) -> Any:
        option = self._options.get(name)
        if option is None:
            if required:
                raise KeyError(f"Required option {name!r} is missing")
            return None
        return option.get("value")

    def get_integer(self, name: str, required: bool = False) -> int | None:
        value = self.get(name, required)
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    def get_number(self, name: str, required: bool = False) -> float | None:
        value = self.get(name, required)
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    def get_string(self, name: str, required: bool = False) -> str | None:
        value = self.get(name, required)
        return None if value is None else str(value)

    def get_boolean(self, name: str, required: bool = False) -> bool | None:
        value = self.get(name, required)
        return None if value is None else bool(value)

    def get_focused(self) -> str:
        """Raw text of the option the user is typing in, or an empty string."""
        for option in self._options.values():
            if option.get("focused"):
                value = option.get("value")
                return "" if value is None else str(value)
        return ""

    def describe(self) -> str:
        """``name:value`` pairs, used when logging an invocation."""
        return " ".join(f"{option['name']}:{option.get('value')}" for option in self._options.values())
