"""
Cloudflare D1 client over the HTTP query API, shared across services using aiohttp.

Every statement is one POST to the database's ``/query`` endpoint with the SQL
and its positional bind values. Failures surface as ``StoreError`` subclasses;
nothing is retried.
"""

from __future__ import annotations

import asyncio
import logging

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import aiohttp

from libs.db.config import StoreConfig, get_store_config

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base error for any failed store call."""


class StoreConfigError(StoreError, ValueError):
    """Required store credentials are missing."""


class StoreTransportError(StoreError, ConnectionError):
    """The query endpoint could not be reached or answered with a non-2xx status."""


class StoreQueryError(StoreError):
    """The store executed the request but reported ``success: false``."""


@dataclass
class QueryResult:
    """Rows and metadata for a single executed statement."""
    results: List[Dict[str, Any]] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)
    success: bool = True


@dataclass
class WriteResult:
    """Outcome of a write statement."""
    success: bool
    changes: int
    meta: Dict[str, Any] = field(default_factory=dict)


class D1Client:
    """Executes parameterized SQL against a D1 database."""

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.config = config or get_store_config()
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        """Run one statement and return its rows and metadata."""
        missing = self.config.missing_variables()
        if missing:
            raise StoreConfigError(
                f"Missing Cloudflare configuration. Please set {', '.join(missing)} environment variables."
            )

        headers = {
            "Authorization": f"Bearer {self.config.api_token}",
            "Content-Type": "application/json",
        }
        body = {"sql": sql, "params": list(params)}

        session = await self._get_session()
        try:
            async with session.post(self.config.query_url, json=body, headers=headers) as response:
                if response.status < 200 or response.status >= 300:
                    raise StoreTransportError(
                        f"Cloudflare API error: {response.status} {response.reason}"
                    )
                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise StoreTransportError(f"Cloudflare API returned a non-JSON body: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise StoreTransportError(f"Failed to reach Cloudflare API: {e!r}") from e

        if not isinstance(data, dict):
            raise StoreTransportError(
                f"Cloudflare API returned an unexpected body: {type(data).__name__}"
            )

        if not data.get("success"):
            errors = data.get("errors") or []
            message = errors[0].get("message") if errors and isinstance(errors[0], dict) else None
            raise StoreQueryError(f"Database query failed: {message or 'Unknown error'}")

        # The endpoint returns one result block per statement; we only send one
        result_blocks = data.get("result") or [{}]
        first_block = result_blocks[0] or {}
        return QueryResult(
            results=first_block.get("results") or [],
            meta=first_block.get("meta") or {},
            success=True,
        )

    async def all(self, sql: str, *params: Any) -> List[Dict[str, Any]]:
        """Return every row produced by the statement."""
        result = await self.execute(sql, params)
        return result.results

    async def first(self, sql: str, *params: Any) -> Optional[Dict[str, Any]]:
        """Return the first row, or None when the statement produced no rows."""
        result = await self.execute(sql, params)
        return result.results[0] if result.results else None

    async def run(self, sql: str, *params: Any) -> WriteResult:
        """Execute a write statement and report how many rows it changed."""
        result = await self.execute(sql, params)
        return WriteResult(
            success=result.success,
            changes=int(result.meta.get("changes") or 0),
            meta=result.meta,
        )

    async def batch(self, statements: Sequence[Tuple[str, Sequence[Any]]]) -> List[QueryResult]:
        """Run statements one after another, one request each, stopping at the first failure."""
        results = []
        for sql, params in statements:
            results.append(await self.execute(sql, params))
        return results


_store_client: Optional[D1Client] = None


def get_store_client() -> D1Client:
    """
    Get or create the process-wide D1 client.
    The HTTP session is opened on the first query and reused afterwards.
    """
    global _store_client
    if _store_client is None:
        _store_client = D1Client()
    return _store_client


async def close_store_client() -> None:
    """Close the process-wide client's HTTP session if open."""
    global _store_client
    if _store_client is not None:
        await _store_client.close()
        _store_client = None
        logger.info("Closed database HTTP session")
