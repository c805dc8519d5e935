"""Numeric autocomplete suggestions for episode and chapter options."""

from __future__ import annotations

import re
from typing import Any, List

import discord

from strawhat.util.logger import get_logger

logger = get_logger("autocomplete")

MAX_SUGGESTIONS = 25
DEFAULT_SUGGESTIONS = list(range(1, MAX_SUGGESTIONS + 1))

_DIGITS = re.compile(r"\d+", re.ASCII)


def generate_suggestions(prefix: str, maximum: int, limit: int = MAX_SUGGESTIONS) -> List[int]:
    """Turn what the user typed so far into candidate numbers.

    ``prefix`` is expanded depth first by appending the digits 0-9 in
    ascending order; any value above ``maximum`` is dropped together with all
    of its longer expansions. The typed number itself comes first.

    Empty, zero or non-numeric input yields ``1..25``. A typed number already
    above ``maximum`` yields nothing.

    >>> generate_suggestions("12", 130)
    [12, 120, 121, 122, 123, 124, 125, 126, 127, 128, 129]
    """
    text = (prefix or "").strip()
    if not _DIGITS.fullmatch(text) or int(text) == 0:
        return DEFAULT_SUGGESTIONS[:limit]

    number = int(text)
    if number > maximum:
        return []

    suggestions: List[int] = []
    _expand(number, maximum, limit, suggestions)
    return suggestions


def _expand(number: int, maximum: int, limit: int, collected: List[int]) -> None:
    # Stopping at ``limit`` keeps the same prefix as a full walk truncated afterwards
    if len(collected) >= limit:
        return
    collected.append(number)
    for digit in range(10):
        candidate = number * 10 + digit
        if candidate > maximum:
            # larger digits only produce larger values
            break
        _expand(candidate, maximum, limit, collected)
        if len(collected) >= limit:
            return


async def respond_with_suggestions(interaction: Any, suggestions: List[int]) -> None:
    """Send ``suggestions`` as autocomplete choices for an integer option."""
    choices = [discord.OptionChoice(name=str(number), value=number) for number in suggestions]
    await interaction.response.send_autocomplete_result(choices=choices)


async def autocomplete_number(interaction: Any, typed: str, maximum: int) -> None:
    """Answer an autocomplete request for a number in ``1..maximum``."""
    suggestions = generate_suggestions(typed, maximum)
    logger.debug("Autocomplete %r (max %d) -> %d suggestions", typed, maximum, len(suggestions))
    await respond_with_suggestions(interaction, suggestions)
