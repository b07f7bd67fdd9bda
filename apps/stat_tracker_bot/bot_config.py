"""
Stat tracker bot configuration from environment variables.
"""

from __future__ import annotations

import logging
import os

from pathlib import Path
from typing import Optional, Set

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

APPS_DIR = Path(__file__).parent.parent
ROOT_DIR = APPS_DIR.parent
ENV_FILE = ROOT_DIR / ".env"

if ENV_FILE.exists():
    try:
        load_dotenv(dotenv_path=ENV_FILE, override=False)
        logger.info(f"Loaded .env from {ENV_FILE}")
    except OSError as e:
        logger.error(f"Failed to load {ENV_FILE}: {e}", exc_info=True)
else:
    logger.info("No .env file found")

DEFAULT_WEBHOOK_HOST = "0.0.0.0"
DEFAULT_WEBHOOK_PORT = 8080


def _parse_id_set(value: str) -> Set[int]:
    return {int(part.strip()) for part in value.split(",") if part.strip()}


class BotConfig:
    """Discord bot settings loaded from environment variables."""

    def __init__(self) -> None:
        self.token: Optional[str] = os.getenv("DISCORD_BOT_TOKEN")
        self.public_key: Optional[str] = os.getenv("DISCORD_PUBLIC_KEY")
        self.application_id: Optional[str] = os.getenv("DISCORD_APPLICATION_ID")

        self.allowed_channel_ids: Set[int] = _parse_id_set(os.getenv("DISCORD_ALLOWED_CHANNEL_IDS", ""))

        dev_guild_id_str = os.getenv("DISCORD_DEV_GUILD_ID")
        self.dev_guild_id: Optional[int] = int(dev_guild_id_str) if dev_guild_id_str else None

        self.webhook_host: str = os.getenv("WEBHOOK_HOST", DEFAULT_WEBHOOK_HOST)
        self.webhook_port: int = int(os.getenv("WEBHOOK_PORT", str(DEFAULT_WEBHOOK_PORT)))

    def require_token(self) -> str:
        if not self.token:
            raise ValueError("DISCORD_BOT_TOKEN environment variable is required")
        return self.token

    def require_public_key(self) -> str:
        if not self.public_key:
            raise ValueError("DISCORD_PUBLIC_KEY environment variable is required")
        return self.public_key

    def require_application_id(self) -> str:
        if not self.application_id:
            raise ValueError("DISCORD_APPLICATION_ID environment variable is required")
        return self.application_id

    def __repr__(self) -> str:
        return (
            f"BotConfig("
            f"token=***, "
            f"public_key={self.public_key!r}, "
            f"application_id={self.application_id!r}, "
            f"allowed_channel_ids={self.allowed_channel_ids}, "
            f"dev_guild_id={self.dev_guild_id}, "
            f"webhook_host={self.webhook_host!r}, "
            f"webhook_port={self.webhook_port})"
        )


_bot_config: Optional[BotConfig] = None


def get_bot_config() -> BotConfig:
    """Get or create the singleton config instance."""
    global _bot_config
    if _bot_config is None:
        _bot_config = BotConfig()
    return _bot_config


def make_channel_check(allowed_channel_ids: Set[int]):
    """Return a check that allows every channel when the allowlist is empty."""
    def check_channel_permission(invocation) -> bool:
        if not allowed_channel_ids:
            return True
        if invocation.channel_id is None:
            return False
        return int(invocation.channel_id) in allowed_channel_ids

    return check_channel_permission
