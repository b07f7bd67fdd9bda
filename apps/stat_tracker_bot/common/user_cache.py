"""
Best-effort Discord display name lookup with an in-memory TTL cache.

Provides:
- DisplayNameResolver: cache in front of any async user lookup
- Gateway lookup through a connected discord.py client
- REST lookup through the Discord HTTP API (webhook mode)
"""

import asyncio
import logging

from typing import Awaitable, Callable, Optional

import aiohttp
import discord

from cachetools import TTLCache

from apps.stat_tracker_bot.common.constants import DISCORD_API_BASE

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 1000
DEFAULT_CACHE_TTL_SECONDS = 3600

UserLookup = Callable[[str], Awaitable[Optional[str]]]


class DisplayNameResolver:
    """Resolve a Discord user ID to a display name, caching hits."""

    def __init__(
        self,
        lookup: UserLookup,
        maxsize: int = DEFAULT_CACHE_SIZE,
        ttl: float = DEFAULT_CACHE_TTL_SECONDS,
    ) -> None:
        self._lookup = lookup
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)

    async def __call__(self, user_id: str) -> Optional[str]:
        cached = self._cache.get(user_id)
        if cached is not None:
            return cached

        try:
            name = await self._lookup(user_id)
        except (discord.DiscordException, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.warning(f"Could not resolve display name for {user_id}: {e}")
            return None

        if name:
            self._cache[user_id] = name
        return name

    def clear(self) -> None:
        self._cache.clear()


def gateway_user_lookup(client: discord.Client) -> UserLookup:
    """Lookup that uses the gateway client's user cache, then the API."""
    async def lookup(user_id: str) -> Optional[str]:
        user = client.get_user(int(user_id))
        if user is None:
            user = await client.fetch_user(int(user_id))
        return user.global_name or user.name

    return lookup


class RestUserLookup:
    """Lookup that calls ``GET /users/{id}`` with the bot token."""

    def __init__(self, bot_token: str, session: Optional[aiohttp.ClientSession] = None) -> None:
        self._bot_token = bot_token
        self._session = session

    async def __call__(self, user_id: str) -> Optional[str]:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()

        async with self._session.get(
            f"{DISCORD_API_BASE}/users/{user_id}",
            headers={"Authorization": f"Bot {self._bot_token}"},
        ) as response:
            if response.status != 200:
                logger.info(f"User lookup for {user_id} returned HTTP {response.status}")
                return None
            data = await response.json()

        return data.get("global_name") or data.get("username")

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None


async def no_lookup(user_id: str) -> Optional[str]:
    """Lookup used when no bot token is configured."""
    return None
