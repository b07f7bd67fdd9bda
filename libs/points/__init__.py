"""
Point tracking data layer shared by the bot's hosting modes.
"""

from libs.points.models import (
    SYSTEM_USER_ID,
    CategoryNotFoundError,
    StatLine,
    LeaderboardEntry,
    TransactionRecord,
)
from libs.points.repository import PointsRepository
from libs.points.schema import DEFAULT_CATEGORIES, initialize_database

__all__ = [
    'SYSTEM_USER_ID',
    'CategoryNotFoundError',
    'StatLine',
    'LeaderboardEntry',
    'TransactionRecord',
    'PointsRepository',
    'DEFAULT_CATEGORIES',
    'initialize_database',
]
