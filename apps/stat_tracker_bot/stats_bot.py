"""
Gateway entry point: a connected discord.py bot serving the stat tracker slash commands.
"""

import logging
import os
import signal

import discord

from discord.ext import commands

from apps.stat_tracker_bot.bot_config import BotConfig, get_bot_config, make_channel_check
from apps.stat_tracker_bot.commands import setup_stat_commands
from apps.stat_tracker_bot.common.user_cache import DisplayNameResolver, gateway_user_lookup
from apps.stat_tracker_bot.handlers import HandlerContext, build_command_table
from apps.stat_tracker_bot.health_check import READINESS_FILE
from libs.db.database import close_store_client, get_store_client
from libs.points.repository import PointsRepository

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def get_prefix(bot, message):
    """Return empty prefix list (only slash commands)."""
    return []


def _remove_readiness_file() -> None:
    """Remove readiness file so healthcheck fails after shutdown."""
    try:
        os.remove(READINESS_FILE)
    except OSError:
        pass


async def sync_commands(bot: commands.Bot, dev_guild_id) -> None:
    """Sync slash commands to the development guild if set, otherwise globally."""
    if dev_guild_id:
        logger.info(f"Force-syncing commands to development guild {dev_guild_id}...")
        dev_guild = discord.Object(id=dev_guild_id)

        # Drop stale guild registrations, then mirror the global commands
        bot.tree.clear_commands(guild=dev_guild)
        bot.tree.copy_global_to(guild=dev_guild)
        synced = await bot.tree.sync(guild=dev_guild)

        if synced:
            command_names = [cmd.name for cmd in synced]
            logger.info(f"Synced {len(synced)} commands to guild: {', '.join(command_names)}")
        else:
            logger.warning("No commands were synced to development guild")
    else:
        logger.info("Syncing commands globally...")
        synced = await bot.tree.sync()
        if synced:
            command_names = [cmd.name for cmd in synced]
            logger.info(f"Synced {len(synced)} commands globally: {', '.join(command_names)}")


class StatTrackerBot(commands.Bot):
    """Bot that releases the database HTTP session when it closes."""

    async def close(self) -> None:
        logger.info("Bot closing, releasing database HTTP session...")
        _remove_readiness_file()
        await close_store_client()
        await super().close()


def create_bot(bot_config: BotConfig) -> commands.Bot:
    """Build the bot, its command table and its handler context."""
    intents = discord.Intents.default()

    bot = StatTrackerBot(
        command_prefix=get_prefix,
        intents=intents,
        description="Stat Tracker Discord Bot"
    )

    command_table = build_command_table(make_channel_check(bot_config.allowed_channel_ids))
    context = HandlerContext(
        repository=PointsRepository(get_store_client()),
        resolve_display_name=DisplayNameResolver(gateway_user_lookup(bot)),
    )
    setup_stat_commands(bot.tree, command_table, context)

    @bot.event
    async def on_ready():
        """Called when the bot is ready and connected to Discord."""
        logger.info(f"{bot.user} has connected to Discord!")
        logger.info(f"Bot is in {len(bot.guilds)} guild(s)")

        try:
            await sync_commands(bot, bot_config.dev_guild_id)
        except discord.HTTPException as e:
            logger.warning(f"HTTP error while syncing commands: {e}", exc_info=True)

        await bot.change_presence(activity=discord.Game(name="/track to keep score"))

        try:
            open(READINESS_FILE, "a").close()
            logger.info("Bot is fully ready - healthcheck file created")
        except OSError as e:
            logger.warning(f"Could not create readiness file: {e}")

    @bot.event
    async def on_disconnect():
        """Mark the bot unhealthy while disconnected."""
        logger.info("Bot disconnected")
        _remove_readiness_file()

    @bot.event
    async def on_resumed():
        try:
            open(READINESS_FILE, "a").close()
        except OSError as e:
            logger.warning(f"Could not create readiness file: {e}")

    return bot


def main():
    """Main entry point for the gateway bot."""
    def handle_shutdown_signal(signum: int, frame) -> None:
        logger.info("Received signal %s, removing readiness file and exiting.", signum)
        _remove_readiness_file()
        raise SystemExit(0)

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            signal.signal(sig, handle_shutdown_signal)
        except (ValueError, OSError):
            # SIGINT not available in all contexts (e.g. threads), skip
            pass

    bot_config = get_bot_config()
    token = bot_config.require_token()

    try:
        logger.info("Starting Discord bot...")
        create_bot(bot_config).run(token, log_handler=None)
    except Exception as e:
        logger.error(f"Failed to start bot: {e}", exc_info=True)
        _remove_readiness_file()
        raise


if __name__ == "__main__":
    main()
