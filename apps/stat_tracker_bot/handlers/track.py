"""
/track - add or subtract points in a category for another user.
"""

import logging

from apps.stat_tracker_bot.common.constants import (
    OPERATION_ADD,
    OPERATION_VALID_VALUES,
    SUCCESS_COLOR,
    TRACK_MAX_AMOUNT,
    TRACK_MIN_AMOUNT,
)
from apps.stat_tracker_bot.common.interaction import CommandInvocation
from apps.stat_tracker_bot.common.reply import (
    CommandReply,
    EmbedPayload,
    embed_reply,
    error_reply,
)
from apps.stat_tracker_bot.common.shared import get_category_emoji
from apps.stat_tracker_bot.common.validation import (
    validate_choice_parameter,
    validate_int_range,
)
from apps.stat_tracker_bot.handlers.base import HandlerContext
from libs.db.database import StoreError
from libs.points.models import CategoryNotFoundError

logger = logging.getLogger(__name__)

MISSING_PARAMETERS_MESSAGE = "Missing required parameters!"
SELF_TRACK_MESSAGE = "You cannot track stats for yourself!"
TRACK_FAILED_MESSAGE = "Failed to update stats. Please try again."


async def handle_track(invocation: CommandInvocation, context: HandlerContext) -> CommandReply:
    """Apply a signed point change to the target user and confirm it."""
    try:
        target = invocation.get_user("user")
        stat = invocation.get_string("stat")
        operation = invocation.get_string("operation")
        amount = invocation.get_integer("amount")

        if target is None or not stat or not operation or amount is None:
            return error_reply(MISSING_PARAMETERS_MESSAGE)

        operation = validate_choice_parameter("operation", operation, OPERATION_VALID_VALUES)
        validate_int_range("amount", amount, TRACK_MIN_AMOUNT, TRACK_MAX_AMOUNT)
    except ValueError as e:
        return error_reply(str(e))

    actor = invocation.actor
    if target.id == actor.id:
        return error_reply(SELF_TRACK_MESSAGE)

    is_add = operation == OPERATION_ADD
    signed_amount = amount if is_add else -amount
    giver_name = actor.display_name or "System"
    reason = f"{'Added' if is_add else 'Subtracted'} by {giver_name}"

    try:
        await context.repository.add_points(
            target.id,
            actor.id,
            stat,
            signed_amount,
            reason,
            receiver_name=target.display_name,
            giver_name=None if actor.is_system else actor.display_name,
        )
    except CategoryNotFoundError as e:
        return error_reply(str(e))
    except StoreError as e:
        logger.error(f"Error in track command: {e}", exc_info=True)
        return error_reply(TRACK_FAILED_MESSAGE)

    action_text = "added" if is_add else "subtracted"
    direction = "to" if is_add else "from"
    plural = "s" if amount > 1 else ""
    embed = EmbedPayload(
        title="✅ Stats Updated",
        description=(
            f"{actor.mention} {action_text} {amount} {get_category_emoji(stat)} {stat} "
            f"point{plural} {direction} {target.mention}"
        ),
        color=SUCCESS_COLOR,
    ).stamp()
    return embed_reply(embed)
