"""/ping: round trip and websocket latency."""

from strawhat.registry.command_registry import CommandTag
from strawhat.util.embeds import standard_embed


async def command_function(interaction, options, client, logger_id):
    # Defer first so the reply timestamp measures the round trip
    await interaction.response.defer()

    reply = await interaction.original_response()
    client_ping = round((reply.created_at - interaction.created_at).total_seconds() * 1000)
    websocket_ping = round(client.latency * 1000)

    message = f"**Client Ping:** {client_ping}ms\n**Websocket Ping:** {websocket_ping}ms"
    await interaction.edit_original_response(embed=standard_embed("Pong!", message))


build_data = {
    "name": "ping",
    "description": "Get client and websocket ping",
}

tags = [CommandTag.COMPLETE, CommandTag.UTILITY]

help_text = "Replies with the time the reply took to arrive and the current websocket heartbeat latency."
