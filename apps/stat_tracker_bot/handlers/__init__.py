"""
Command handlers shared by the gateway bot and the webhook server.

Each handler takes a ``CommandInvocation`` and a ``HandlerContext`` and returns
a ``CommandReply``; none of them touch the transport.
"""

from typing import Callable, Optional

from apps.stat_tracker_bot.common.decorators import command_wrapper
from apps.stat_tracker_bot.common.interaction import CommandInvocation
from apps.stat_tracker_bot.handlers.base import CommandHandler, CommandTable, HandlerContext
from apps.stat_tracker_bot.handlers.history import handle_history
from apps.stat_tracker_bot.handlers.leaderboard import handle_leaderboard
from apps.stat_tracker_bot.handlers.track import handle_track
from apps.stat_tracker_bot.handlers.whois import handle_whois

COMMAND_HANDLERS = {
    "track": handle_track,
    "whois": handle_whois,
    "leaderboard": handle_leaderboard,
    "history": handle_history,
}


def build_command_table(
    channel_check: Optional[Callable[[CommandInvocation], bool]] = None,
) -> CommandTable:
    """
    Build the name -> handler table used for dispatch.

    Every handler is wrapped so it logs, honors the channel check and turns
    unexpected exceptions into the generic error reply.
    """
    return {
        name: command_wrapper(name, channel_check=channel_check)(handler)
        for name, handler in COMMAND_HANDLERS.items()
    }


__all__ = [
    'CommandHandler',
    'CommandTable',
    'HandlerContext',
    'COMMAND_HANDLERS',
    'build_command_table',
    'handle_track',
    'handle_whois',
    'handle_leaderboard',
    'handle_history',
]
