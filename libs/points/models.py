"""
Row types returned by the points repository.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

SYSTEM_USER_ID = "system"


class CategoryNotFoundError(ValueError):
    """Raised when a category name is not one of the stored categories."""

    def __init__(self, name: str, available: list) -> None:
        self.name = name
        self.available = available
        super().__init__(f"Category '{name}' not found. Available: {', '.join(available)}")


@dataclass
class StatLine:
    category_name: str
    points: int

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "StatLine":
        return cls(category_name=str(row["category_name"]), points=int(row["points"]))


@dataclass
class LeaderboardEntry:
    """
    One ranked balance.

    Attributes:
        user_id: Discord user ID of the balance owner
        username: Cached display name, or None if never seen
        category_name: Category the balance belongs to
        points: Balance value (always positive)
    """
    user_id: str
    username: Optional[str]
    category_name: str
    points: int

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "LeaderboardEntry":
        return cls(
            user_id=str(row["user_id"]),
            username=row.get("username"),
            category_name=str(row["category_name"]),
            points=int(row["points"]),
        )


@dataclass
class TransactionRecord:
    """A single point change received by a user."""
    amount: int
    reason: Optional[str]
    created_at: str
    category_name: str
    giver_id: str

    @property
    def is_system(self) -> bool:
        return self.giver_id == SYSTEM_USER_ID

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "TransactionRecord":
        return cls(
            amount=int(row["amount"]),
            reason=row.get("reason"),
            created_at=str(row["created_at"]),
            category_name=str(row["category_name"]),
            giver_id=str(row["giver_id"]),
        )
