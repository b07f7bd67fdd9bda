"""
Shared remote database configuration and client for the stat tracker project.

This package provides the HTTP client for the Cloudflare D1 query API used by
both bot hosting modes and the operational CLI.
"""

from libs.db.config import get_store_config, StoreConfig
from libs.db.database import (
    D1Client,
    QueryResult,
    WriteResult,
    StoreError,
    StoreConfigError,
    StoreTransportError,
    StoreQueryError,
    get_store_client,
    close_store_client,
)

__all__ = [
    'get_store_config',
    'StoreConfig',
    'D1Client',
    'QueryResult',
    'WriteResult',
    'StoreError',
    'StoreConfigError',
    'StoreTransportError',
    'StoreQueryError',
    'get_store_client',
    'close_store_client',
]
