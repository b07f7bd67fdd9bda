"""
Points repository: users, categories, balances and the transaction log.

All statements go through a store exposing ``all``/``first``/``run`` (see
``libs.db.database.D1Client``). Values are always bound, never interpolated.
"""

import logging

from typing import List, Optional

from libs.points.models import (
    CategoryNotFoundError,
    LeaderboardEntry,
    StatLine,
    TransactionRecord,
)

logger = logging.getLogger(__name__)

DEFAULT_LEADERBOARD_LIMIT = 10
DEFAULT_HISTORY_LIMIT = 20


class PointsRepository:
    """Read and write point balances for Discord users."""

    def __init__(self, store) -> None:
        self.store = store

    # =========================================================================
    # Users and categories
    # =========================================================================

    async def ensure_user(self, external_id: str, username: Optional[str] = None) -> None:
        """Insert the user if absent; refresh the cached username when one is given."""
        if username:
            await self.store.run(
                """
                INSERT INTO users (discord_id, username) VALUES (?, ?)
                ON CONFLICT(discord_id) DO UPDATE SET username = excluded.username
                """,
                external_id, username,
            )
        else:
            await self.store.run(
                "INSERT OR IGNORE INTO users (discord_id) VALUES (?)",
                external_id,
            )

    async def get_user_key(self, external_id: str) -> Optional[int]:
        row = await self.store.first(
            "SELECT user_id FROM users WHERE discord_id = ?",
            external_id,
        )
        return int(row["user_id"]) if row else None

    async def list_categories(self) -> List[str]:
        rows = await self.store.all("SELECT name FROM point_categories ORDER BY name")
        return [str(row["name"]) for row in rows]

    async def resolve_category(self, name: str) -> int:
        """Return the category key for an exact name, or raise CategoryNotFoundError."""
        row = await self.store.first(
            "SELECT id FROM point_categories WHERE name = ?",
            name,
        )
        if not row:
            raise CategoryNotFoundError(name, await self.list_categories())
        return int(row["id"])

    # =========================================================================
    # Writes
    # =========================================================================

    async def add_points(
        self,
        receiver_id: str,
        giver_id: str,
        category_name: str,
        signed_amount: int,
        reason: Optional[str] = None,
        receiver_name: Optional[str] = None,
        giver_name: Optional[str] = None,
    ) -> None:
        """
        Apply a signed delta to the receiver's balance and log the transaction.

        The balance upsert and the transaction insert are separate statements.
        If the second one fails the balance stays updated without a log entry.
        """
        category_key = await self.resolve_category(category_name)

        await self.ensure_user(receiver_id, receiver_name)
        await self.ensure_user(giver_id, giver_name)

        receiver_key = await self.get_user_key(receiver_id)
        giver_key = await self.get_user_key(giver_id)
        if receiver_key is None or giver_key is None:
            raise RuntimeError("Failed to create or find users")

        await self.store.run(
            """
            INSERT INTO user_points (user_id, category_id, points)
            VALUES (?, ?, ?)
            ON CONFLICT(user_id, category_id)
            DO UPDATE SET points = points + excluded.points
            """,
            receiver_key, category_key, signed_amount,
        )

        await self.store.run(
            """
            INSERT INTO point_transactions (receiver_id, giver_id, category_id, amount, reason)
            VALUES (?, ?, ?, ?, ?)
            """,
            receiver_key, giver_key, category_key, signed_amount, reason,
        )

        logger.info(f"Added {signed_amount} {category_name} points to {receiver_id} (giver: {giver_id})")

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_stats(self, external_id: str) -> List[StatLine]:
        """Every balance row for the user, ordered by category name."""
        rows = await self.store.all(
            """
            SELECT
                pc.name AS category_name,
                up.points
            FROM user_points up
            JOIN point_categories pc ON up.category_id = pc.id
            JOIN users u ON up.user_id = u.user_id
            WHERE u.discord_id = ?
            ORDER BY pc.name
            """,
            external_id,
        )
        return [StatLine.from_row(row) for row in rows]

    async def get_leaderboard(
        self,
        category_name: Optional[str] = None,
        limit: int = DEFAULT_LEADERBOARD_LIMIT,
    ) -> List[LeaderboardEntry]:
        """
        Positive balances ranked by points, highest first.

        Without a category, balances from every category compete in one list
        on their raw point values.
        """
        query = """
            SELECT
                u.discord_id AS user_id,
                u.username,
                pc.name AS category_name,
                up.points
            FROM user_points up
            JOIN point_categories pc ON up.category_id = pc.id
            JOIN users u ON up.user_id = u.user_id
            WHERE up.points > 0
        """
        params: list = []

        if category_name:
            query += " AND pc.name = ?"
            params.append(category_name)

        query += " ORDER BY up.points DESC LIMIT ?"
        params.append(limit)

        rows = await self.store.all(query, *params)
        return [LeaderboardEntry.from_row(row) for row in rows]

    async def get_history(
        self,
        external_id: str,
        category_name: Optional[str] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> List[TransactionRecord]:
        """Transactions received by the user, newest first."""
        query = """
            SELECT
                pt.amount,
                pt.reason,
                pt.created_at,
                pc.name AS category_name,
                giver.discord_id AS giver_id
            FROM point_transactions pt
            JOIN point_categories pc ON pt.category_id = pc.id
            JOIN users receiver ON pt.receiver_id = receiver.user_id
            JOIN users giver ON pt.giver_id = giver.user_id
            WHERE receiver.discord_id = ?
        """
        params: list = [external_id]

        if category_name:
            query += " AND pc.name = ?"
            params.append(category_name)

        query += " ORDER BY pt.created_at DESC, pt.id DESC LIMIT ?"
        params.append(limit)

        rows = await self.store.all(query, *params)
        return [TransactionRecord.from_row(row) for row in rows]
