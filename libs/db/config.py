"""
Remote database (Cloudflare D1) configuration from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


LIBS_DIR = Path(__file__).parent.parent
ROOT_DIR = LIBS_DIR.parent
ENV_FILE = ROOT_DIR / ".env"

if ENV_FILE.exists():
    load_dotenv(dotenv_path=ENV_FILE, override=False)

DEFAULT_API_BASE = "https://api.cloudflare.com/client/v4"


class StoreConfig:
    """D1 HTTP API credentials from environment variables."""

    def __init__(self) -> None:
        self.api_token: Optional[str] = os.getenv("CLOUDFLARE_API_TOKEN")
        self.account_id: Optional[str] = os.getenv("CLOUDFLARE_ACCOUNT_ID")
        self.database_id: Optional[str] = os.getenv("CLOUDFLARE_DATABASE_ID")
        self.api_base: str = os.getenv("CLOUDFLARE_API_BASE", DEFAULT_API_BASE).rstrip("/")

    def missing_variables(self) -> List[str]:
        """Names of required variables that are not set."""
        missing = []
        if not self.api_token:
            missing.append("CLOUDFLARE_API_TOKEN")
        if not self.account_id:
            missing.append("CLOUDFLARE_ACCOUNT_ID")
        if not self.database_id:
            missing.append("CLOUDFLARE_DATABASE_ID")
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_variables()

    @property
    def query_url(self) -> str:
        return f"{self.api_base}/accounts/{self.account_id}/d1/database/{self.database_id}/query"

    def __repr__(self) -> str:
        return (
            f"StoreConfig(api_base={self.api_base!r}, account_id={self.account_id!r}, "
            f"database_id={self.database_id!r}, api_token=***)"
        )


_store_config: Optional[StoreConfig] = None


def get_store_config() -> StoreConfig:
    """Get or create the singleton config instance."""
    global _store_config
    if _store_config is None:
        _store_config = StoreConfig()
    return _store_config
