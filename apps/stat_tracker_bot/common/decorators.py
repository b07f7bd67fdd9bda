"""
Command decorators for the stat tracker bot.
"""

import inspect
import logging
import time
from functools import wraps
from typing import Any, Awaitable, Callable, Optional

from apps.stat_tracker_bot.common.interaction import CommandInvocation
from apps.stat_tracker_bot.common.logging import (
    log_command_data,
    log_command_completion,
)
from apps.stat_tracker_bot.common.reply import CommandReply, error_reply
from libs.db.database import StoreConfigError, StoreQueryError, StoreTransportError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "There was an error while executing this command!"
CHANNEL_NOT_ALLOWED_MESSAGE = "This bot can only be used in the designated channel."


def handle_command_errors(
    command_name: str,
    start_time: float,
    error: Exception,
    invocation: Optional[CommandInvocation] = None,
) -> CommandReply:
    """Log an unhandled command error by kind and build the generic user-facing reply."""
    exc_info = (type(error), error, error.__traceback__)

    if isinstance(error, StoreConfigError):
        logger.error(f"Configuration error in {command_name}: {error}", exc_info=exc_info)
    elif isinstance(error, StoreTransportError):
        logger.error(f"Database connection error in {command_name}: {error}", exc_info=exc_info)
    elif isinstance(error, StoreQueryError):
        logger.error(f"Database query error in {command_name}: {error}", exc_info=exc_info)
    else:
        logger.error(f"Unexpected error in {command_name}: {error}", exc_info=exc_info)

    log_command_completion(command_name, start_time, success=False, invocation=invocation)
    return error_reply(GENERIC_ERROR_MESSAGE)


def command_wrapper(
    command_name: str,
    channel_check: Optional[Callable[[CommandInvocation], bool]] = None,
):
    """
    Decorator that handles channel checks, logging and error handling for a handler.

    The wrapped handler never raises: any exception becomes the generic
    ephemeral error reply.

    Args:
        command_name: Name of the command for logging
        channel_check: Optional function to check if channel is allowed
    """
    def decorator(func: Callable[..., Awaitable[CommandReply]]) -> Callable[..., Awaitable[CommandReply]]:
        @wraps(func)
        async def wrapper(invocation: CommandInvocation, *args: Any, **kwargs: Any) -> CommandReply:
            command_start_time = time.time()
            log_command_data(invocation)

            try:
                if channel_check and not channel_check(invocation):
                    log_command_completion(
                        command_name, command_start_time,
                        success=False, invocation=invocation
                    )
                    return error_reply(CHANNEL_NOT_ALLOWED_MESSAGE)

                reply = await func(invocation, *args, **kwargs)
                log_command_completion(
                    command_name, command_start_time,
                    success=reply.success, invocation=invocation
                )
                return reply

            except Exception as e:
                return handle_command_errors(command_name, command_start_time, e, invocation)

        wrapper.__signature__ = inspect.signature(func)
        return wrapper
    return decorator
