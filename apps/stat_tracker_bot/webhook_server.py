"""
Webhook entry point: serves Discord interactions over HTTP with aiohttp.

Each request is verified, parsed, dispatched and answered on its own; nothing
is kept between requests apart from the store's HTTP session and the display
name cache.
"""

import json
import logging

from enum import Enum
from typing import Optional

from aiohttp import web

from apps.stat_tracker_bot.bot_config import get_bot_config, make_channel_check
from apps.stat_tracker_bot.common.constants import (
    INTERACTION_TYPE_APPLICATION_COMMAND,
    INTERACTION_TYPE_PING,
    RESPONSE_TYPE_CHANNEL_MESSAGE_WITH_SOURCE,
    RESPONSE_TYPE_PONG,
)
from apps.stat_tracker_bot.common.dispatch import dispatch_command
from apps.stat_tracker_bot.common.interaction import (
    InteractionPayloadError,
    parse_interaction,
)
from apps.stat_tracker_bot.common.signature import (
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    verify_signature,
)
from apps.stat_tracker_bot.common.user_cache import (
    DisplayNameResolver,
    RestUserLookup,
    no_lookup,
)
from apps.stat_tracker_bot.handlers import CommandTable, HandlerContext, build_command_table
from libs.db.database import close_store_client, get_store_client
from libs.points.repository import PointsRepository

logger = logging.getLogger(__name__)


class InteractionState(Enum):
    UNVERIFIED = "unverified"
    VERIFIED = "verified"
    DISPATCHED = "dispatched"
    RESPONDED = "responded"


class InteractionWebhook:
    """Turns signed interaction requests into interaction responses."""

    def __init__(self, public_key: str, command_table: CommandTable, context: HandlerContext) -> None:
        self.public_key = public_key
        self.command_table = command_table
        self.context = context

    async def handle(self, request: web.Request) -> web.Response:
        if request.method != "POST":
            return web.Response(status=405, text="Method not allowed")

        state = InteractionState.UNVERIFIED
        body = await request.read()
        signature = request.headers.get(SIGNATURE_HEADER)
        timestamp = request.headers.get(TIMESTAMP_HEADER)

        if not verify_signature(self.public_key, signature, timestamp, body):
            logger.warning(f"Rejected interaction with invalid signature from {request.remote}")
            return web.Response(status=401, text="Unauthorized")
        state = InteractionState.VERIFIED

        try:
            interaction = parse_interaction(json.loads(body))
        except (json.JSONDecodeError, UnicodeDecodeError, InteractionPayloadError) as e:
            logger.warning(f"Rejected malformed interaction payload: {e}")
            return web.Response(status=400, text="Bad request")

        if interaction.type == INTERACTION_TYPE_PING:
            logger.debug(f"Interaction {interaction.id}: {state.value} -> ping")
            return web.json_response({"type": RESPONSE_TYPE_PONG})

        if interaction.type != INTERACTION_TYPE_APPLICATION_COMMAND or interaction.invocation is None:
            logger.warning(f"Unsupported interaction type {interaction.type}")
            return web.Response(status=400, text="Bad request")

        state = InteractionState.DISPATCHED
        reply = await dispatch_command(interaction.invocation, self.command_table, self.context)

        state = InteractionState.RESPONDED
        logger.debug(f"Interaction {interaction.id}: {state.value}")
        return web.json_response({
            "type": RESPONSE_TYPE_CHANNEL_MESSAGE_WITH_SOURCE,
            "data": reply.to_dict(),
        })


async def health(request: web.Request) -> web.Response:
    return web.Response(text="ok")


def create_app(
    public_key: Optional[str] = None,
    context: Optional[HandlerContext] = None,
    command_table: Optional[CommandTable] = None,
) -> web.Application:
    """
    Build the aiohttp application.

    Missing collaborators are created from the environment configuration.
    """
    bot_config = get_bot_config()
    public_key = public_key or bot_config.require_public_key()

    user_lookup = None
    if context is None:
        if bot_config.token:
            user_lookup = RestUserLookup(bot_config.token)
            resolver = DisplayNameResolver(user_lookup)
        else:
            logger.warning("DISCORD_BOT_TOKEN not set, leaderboard names fall back to mentions")
            resolver = DisplayNameResolver(no_lookup)
        context = HandlerContext(
            repository=PointsRepository(get_store_client()),
            resolve_display_name=resolver,
        )

    if command_table is None:
        command_table = build_command_table(make_channel_check(bot_config.allowed_channel_ids))

    webhook = InteractionWebhook(public_key, command_table, context)

    app = web.Application()
    app.router.add_route("*", "/", webhook.handle)
    app.router.add_route("*", "/interactions", webhook.handle)
    app.router.add_get("/healthz", health)

    async def on_cleanup(app: web.Application) -> None:
        logger.info("Webhook server shutting down, closing HTTP sessions...")
        if user_lookup is not None:
            await user_lookup.close()
        await close_store_client()

    app.on_cleanup.append(on_cleanup)
    return app


def main():
    """Main entry point for the webhook server."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    bot_config = get_bot_config()
    logger.info(f"Starting interaction webhook on {bot_config.webhook_host}:{bot_config.webhook_port}...")
    web.run_app(create_app(), host=bot_config.webhook_host, port=bot_config.webhook_port)


if __name__ == "__main__":
    main()
