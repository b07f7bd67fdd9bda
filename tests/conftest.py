"""Shared fixtures: an in-memory SQLite store that speaks the D1 client interface."""
from __future__ import annotations

import sqlite3

import pytest

from libs.db.database import StoreQueryError, WriteResult
from libs.points.repository import PointsRepository
from libs.points.schema import CREATE_TABLE_STATEMENTS, DEFAULT_CATEGORIES, SEED_CATEGORY_SQL
from apps.stat_tracker_bot.common.interaction import CommandInvocation, CommandOption, InteractionUser
from apps.stat_tracker_bot.common.constants import OPTION_TYPE_INTEGER, OPTION_TYPE_STRING, OPTION_TYPE_USER
from apps.stat_tracker_bot.handlers import HandlerContext


class SQLiteStore:
    """Runs statements against sqlite3 with the same all/first/run surface as D1Client."""

    def __init__(self, initialize: bool = True) -> None:
        self.conn = sqlite3.connect(":memory:")
        self.conn.row_factory = sqlite3.Row
        self.statements = []
        if initialize:
            for statement in CREATE_TABLE_STATEMENTS:
                self.conn.execute(statement)
            for category in DEFAULT_CATEGORIES:
                self.conn.execute(SEED_CATEGORY_SQL, (category,))
            self.conn.commit()

    def _execute(self, sql, params):
        self.statements.append((sql, params))
        try:
            cursor = self.conn.execute(sql, params)
        except sqlite3.Error as e:
            raise StoreQueryError(f"Database query failed: {e}") from e
        rows = [dict(row) for row in cursor.fetchall()]
        self.conn.commit()
        return rows, cursor.rowcount

    async def all(self, sql, *params):
        rows, _ = self._execute(sql, params)
        return rows

    async def first(self, sql, *params):
        rows, _ = self._execute(sql, params)
        return rows[0] if rows else None

    async def run(self, sql, *params):
        _, changes = self._execute(sql, params)
        return WriteResult(success=True, changes=max(changes, 0))

    def scalar(self, sql, *params):
        return self.conn.execute(sql, params).fetchone()[0]


@pytest.fixture
def store():
    sqlite_store = SQLiteStore()
    yield sqlite_store
    sqlite_store.conn.close()


@pytest.fixture
def repository(store):
    return PointsRepository(store)


@pytest.fixture
def context(repository):
    return HandlerContext(repository=repository)


def make_user(user_id: str, username: str | None = None) -> InteractionUser:
    return InteractionUser(id=user_id, username=username or f"user{user_id}")


def make_invocation(name: str, actor: InteractionUser | None = None, **options) -> CommandInvocation:
    """Build an invocation; InteractionUser values become user options, ints integer options."""
    parsed = {}
    for key, value in options.items():
        if isinstance(value, InteractionUser):
            parsed[key] = CommandOption(key, OPTION_TYPE_USER, value.id, value)
        elif isinstance(value, int):
            parsed[key] = CommandOption(key, OPTION_TYPE_INTEGER, value)
        else:
            parsed[key] = CommandOption(key, OPTION_TYPE_STRING, value)
    return CommandInvocation(
        name=name,
        options=parsed,
        actor=actor or make_user("100", "actor"),
        channel_id="555",
    )
