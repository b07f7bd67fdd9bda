"""
Table definitions and category seeding for the points database.
"""

import logging

from typing import Tuple

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: Tuple[str, ...] = (
    "malewife",
    "manipulate",
    "mansplain",
    "gaslight",
    "gatekeep",
    "girlboss",
)

CREATE_TABLE_STATEMENTS: Tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS users (
        user_id INTEGER PRIMARY KEY AUTOINCREMENT,
        discord_id TEXT NOT NULL UNIQUE,
        username TEXT,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS point_categories (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT UNIQUE NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS user_points (
        user_id INTEGER NOT NULL,
        category_id INTEGER NOT NULL,
        points BIGINT NOT NULL DEFAULT 0,
        PRIMARY KEY (user_id, category_id),
        FOREIGN KEY (user_id) REFERENCES users (user_id),
        FOREIGN KEY (category_id) REFERENCES point_categories (id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS point_transactions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        receiver_id INTEGER NOT NULL,
        giver_id INTEGER NOT NULL,
        category_id INTEGER NOT NULL,
        amount INTEGER NOT NULL,
        reason TEXT,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (receiver_id) REFERENCES users (user_id),
        FOREIGN KEY (giver_id) REFERENCES users (user_id),
        FOREIGN KEY (category_id) REFERENCES point_categories (id)
    )
    """,
)

SEED_CATEGORY_SQL = "INSERT OR IGNORE INTO point_categories (name) VALUES (?)"


async def initialize_database(store) -> None:
    """
    Create the points tables if they do not exist and seed the fixed categories.

    Safe to run repeatedly: tables use IF NOT EXISTS and categories are
    inserted with INSERT OR IGNORE.
    """
    for statement in CREATE_TABLE_STATEMENTS:
        await store.run(statement)

    for category in DEFAULT_CATEGORIES:
        await store.run(SEED_CATEGORY_SQL, category)

    logger.info(f"Database tables initialized with {len(DEFAULT_CATEGORIES)} categories")
