"""
Command logging utilities for the stat tracker bot.
"""

import logging
import time
from typing import Optional

from apps.stat_tracker_bot.common.interaction import CommandInvocation

logger = logging.getLogger(__name__)


def _user_info(invocation: CommandInvocation) -> str:
    actor = invocation.actor
    name = actor.display_name or "unknown"
    return f"{name} ({actor.id})"


def log_command_data(invocation: CommandInvocation) -> None:
    """Log command invocation with user, channel, and parameters."""
    channel_info = f"({invocation.channel_id})" if invocation.channel_id else "DM"

    params = ", ".join(
        [f"{k}={v}" for k, v in invocation.log_params().items() if v is not None]
    )
    params_str = f" | Params: {params}" if params else ""

    logger.info(
        f"Command: {invocation.name} | User: {_user_info(invocation)} | Channel: {channel_info}{params_str}"
    )


def get_command_latency_ms(start_time: float) -> float:
    """Calculate elapsed time in milliseconds since start_time."""
    return (time.time() - start_time) * 1000


def log_command_completion(
    command_name: str,
    start_time: float,
    success: bool = True,
    invocation: Optional[CommandInvocation] = None,
) -> None:
    """Log command completion status with latency and user info."""
    status = "SUCCESS" if success else "FAILED"
    latency_ms = get_command_latency_ms(start_time)

    user_info = ""
    params_str = ""
    if invocation is not None:
        user_info = f" | User: {_user_info(invocation)}"
        params = {k: v for k, v in invocation.log_params().items() if v is not None}
        if params:
            params_str = " | Params: " + ", ".join([f"{k}={v}" for k, v in params.items()])

    logger.info(
        f"Command: {command_name} | Status: {status} | Latency: {latency_ms:.2f}ms{user_info}{params_str}"
    )
