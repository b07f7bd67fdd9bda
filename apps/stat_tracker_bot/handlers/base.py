"""
Types shared by the command handlers.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional

from apps.stat_tracker_bot.common.interaction import CommandInvocation
from apps.stat_tracker_bot.common.reply import CommandReply
from libs.points.repository import PointsRepository


@dataclass
class HandlerContext:
    """
    Collaborators a handler may use.

    Attributes:
        repository: Points data access
        resolve_display_name: Optional best-effort user ID -> name lookup
    """
    repository: PointsRepository
    resolve_display_name: Optional[Callable[[str], Awaitable[Optional[str]]]] = None


CommandHandler = Callable[[CommandInvocation, HandlerContext], Awaitable[CommandReply]]
CommandTable = Dict[str, CommandHandler]
