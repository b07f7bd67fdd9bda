"""
Command dispatch shared by both hosting modes.
"""

import logging
import time

from apps.stat_tracker_bot.common.decorators import handle_command_errors
from apps.stat_tracker_bot.common.interaction import CommandInvocation
from apps.stat_tracker_bot.common.reply import CommandReply, error_reply


logger = logging.getLogger(__name__)


def unknown_command_reply(name: str) -> CommandReply:
    return error_reply(f"Unknown command: {name}")


async def dispatch_command(invocation: CommandInvocation, command_table, context) -> CommandReply:
    """
    Route an invocation to its handler by exact command name.

    Unknown names get a user-visible error reply. Handler exceptions are turned
    into the generic error reply and never reach the caller.
    """
    handler = command_table.get(invocation.name)
    if handler is None:
        logger.warning(f"No command matching {invocation.name} was found.")
        return unknown_command_reply(invocation.name)

    start_time = time.time()
    try:
        return await handler(invocation, context)
    except Exception as e:
        return handle_command_errors(invocation.name, start_time, e, invocation)
