"""
Operational commands: create the database schema and register slash commands with Discord.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from typing import Any, Dict, List, Optional

import aiohttp

from apps.stat_tracker_bot.bot_config import get_bot_config
from apps.stat_tracker_bot.common.constants import COMMAND_DEFINITIONS, DISCORD_API_BASE
from libs.db.database import D1Client, StoreError
from libs.points.schema import initialize_database

logger = logging.getLogger(__name__)


def commands_url(application_id: str, guild_id: Optional[int] = None) -> str:
    """Bulk-overwrite endpoint for global or guild application commands."""
    if guild_id:
        return f"{DISCORD_API_BASE}/applications/{application_id}/guilds/{guild_id}/commands"
    return f"{DISCORD_API_BASE}/applications/{application_id}/commands"


async def register_commands(
    bot_token: str,
    application_id: str,
    guild_id: Optional[int] = None,
    session: Optional[aiohttp.ClientSession] = None,
) -> List[Dict[str, Any]]:
    """
    Replace the application's slash commands with COMMAND_DEFINITIONS.

    Returns the command objects Discord reports back.

    Raises:
        aiohttp.ClientResponseError: If Discord rejects the request
    """
    url = commands_url(application_id, guild_id)
    headers = {"Authorization": f"Bot {bot_token}"}

    owns_session = session is None
    if session is None:
        session = aiohttp.ClientSession()
    try:
        async with session.put(url, json=COMMAND_DEFINITIONS, headers=headers) as response:
            response.raise_for_status()
            return await response.json()
    finally:
        if owns_session:
            await session.close()


async def init_db_main() -> int:
    client = D1Client()
    try:
        print("Initializing database tables...")
        await initialize_database(client)
        print("Database tables initialized")
        return 0
    except StoreError as e:
        print(f"Failed to initialize database: {e}", file=sys.stderr)
        return 1
    finally:
        await client.close()


async def register_commands_main(guild_id: Optional[int]) -> int:
    bot_config = get_bot_config()
    try:
        token = bot_config.require_token()
        application_id = bot_config.require_application_id()
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    target = f"guild {guild_id}" if guild_id else "all guilds (global)"
    print(f"Started refreshing {len(COMMAND_DEFINITIONS)} application (/) commands for {target}.")
    try:
        registered = await register_commands(token, application_id, guild_id)
    except aiohttp.ClientError as e:
        print(f"Failed to register commands: {e}", file=sys.stderr)
        return 1

    print(f"Successfully reloaded {len(registered)} application (/) commands.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Stat tracker bot management commands")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create tables and seed the stat categories")

    register_parser = subparsers.add_parser(
        "register-commands", help="Register slash commands with Discord"
    )
    register_parser.add_argument(
        "--guild-id",
        type=int,
        default=None,
        help="Register to one guild instead of globally (defaults to DISCORD_DEV_GUILD_ID)",
    )
    register_parser.add_argument(
        "--global",
        dest="force_global",
        action="store_true",
        help="Register globally even if DISCORD_DEV_GUILD_ID is set",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    args = build_parser().parse_args(argv)

    if args.command == "init-db":
        return asyncio.run(init_db_main())

    guild_id = None
    if not args.force_global:
        guild_id = args.guild_id or get_bot_config().dev_guild_id
    return asyncio.run(register_commands_main(guild_id))


if __name__ == "__main__":
    sys.exit(main())
