"""
Register the slash commands with Discord.

Usage::

    strawhat-refresh-commands              # home guild
    strawhat-refresh-commands --global     # every guild
    strawhat-refresh-commands --de-reg     # remove all registered commands
"""

from __future__ import annotations

import asyncio
import os

import typer
from dotenv import load_dotenv

from strawhat.configuration.app_configuration import app_config
from strawhat.registry.command_registry import CapabilityError, CommandRegistry, RegistrySyncError
from strawhat.util.logger import get_logger

logger = get_logger("refresh_commands")

app = typer.Typer(
    name="strawhat-refresh-commands",
    help="Register the Strawhat slash commands with Discord",
    add_completion=False,
)


def build_registry() -> CommandRegistry:
    return CommandRegistry(
        application_id=app_config.application_id,
        home_guild_id=app_config.home_guild_id,
        api_base_url=app_config.api_base_url,
    )


async def refresh(registry: CommandRegistry, token: str, application: bool, de_register: bool) -> int:
    """Load the commands (unless de-registering) and push them in one request.

    Returns:
        int: Number of command definitions pushed.
    """
    if not de_register:
        await registry.load_folder(app_config.commands_folder)
    definitions = await registry.sync_registry(token=token, application=application)
    return len(definitions)


@app.command()
def main(
    application: bool = typer.Option(False, "--global", "-g", help="Register globally instead of in the home guild"),
    de_register: bool = typer.Option(False, "--de-reg", "-d", help="Remove every registered command"),
) -> None:
    """Replace the registered slash commands with the ones in the commands folder."""
    load_dotenv()
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        logger.critical("'DISCORD_BOT_TOKEN' environment variable not set. Cannot register commands.")
        raise typer.Exit(code=1)

    scope = "globally" if application else "in the home guild"
    try:
        count = asyncio.run(refresh(build_registry(), token, application, de_register))
    except (RegistrySyncError, CapabilityError) as exc:
        typer.echo(f"Command refresh failed: {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Registered {count} commands {scope}.")


if __name__ == "__main__":
    app()
