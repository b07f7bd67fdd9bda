"""
/leaderboard - rank users by points, optionally within one category.
"""

import logging

from typing import Optional

from apps.stat_tracker_bot.common.constants import (
    CATEGORY_NAMES,
    CATEGORY_VALID_VALUES,
    DEFAULT_RESULT_LIMIT,
    LEADERBOARD_COLOR,
    MAX_RESULT_LIMIT,
    MIN_RESULT_LIMIT,
)
from apps.stat_tracker_bot.common.interaction import CommandInvocation
from apps.stat_tracker_bot.common.reply import (
    CommandReply,
    EmbedPayload,
    embed_reply,
    error_reply,
)
from apps.stat_tracker_bot.common.shared import (
    get_category_emoji,
    get_rank_medal,
    title_case,
)
from apps.stat_tracker_bot.common.validation import (
    validate_choice_parameter,
    validate_optional_limit,
)
from apps.stat_tracker_bot.handlers.base import HandlerContext
from libs.points.models import LeaderboardEntry
from libs.db.database import StoreError

logger = logging.getLogger(__name__)


async def _entry_label(entry: LeaderboardEntry, context: HandlerContext) -> str:
    """Cached username, then a live lookup, then a raw mention."""
    name: Optional[str] = entry.username
    if not name and context.resolve_display_name is not None:
        name = await context.resolve_display_name(entry.user_id)
    return name or f"<@{entry.user_id}>"


async def handle_leaderboard(invocation: CommandInvocation, context: HandlerContext) -> CommandReply:
    try:
        category = invocation.get_string("category")
        if category:
            category = validate_choice_parameter(
                "category", category, CATEGORY_VALID_VALUES, CATEGORY_NAMES
            )
        limit = validate_optional_limit(
            invocation.get_integer("limit"), DEFAULT_RESULT_LIMIT, MIN_RESULT_LIMIT, MAX_RESULT_LIMIT
        )
    except ValueError as e:
        return error_reply(str(e))

    try:
        entries = await context.repository.get_leaderboard(category, limit)
    except StoreError as e:
        logger.error(f"Error in leaderboard command: {e}", exc_info=True)
        return error_reply("Sorry, there was an error retrieving the leaderboard.")

    if not entries:
        filter_text = f" for {category}" if category else ""
        return embed_reply(EmbedPayload(
            title="🏆 Leaderboard",
            description=f"No users found{filter_text}!",
            color=LEADERBOARD_COLOR,
        ))

    lines = []
    for rank, entry in enumerate(entries, 1):
        medal = get_rank_medal(rank)
        label = await _entry_label(entry, context)
        if category:
            lines.append(f"{medal} **#{rank}** {label} - {entry.points} points")
        else:
            emoji = get_category_emoji(entry.category_name)
            lines.append(f"{medal} **#{rank}** {label} - {entry.points} {emoji} {entry.category_name}")

    title = f"🏆 {title_case(category)} Leaderboard" if category else "🏆 Overall Leaderboard"
    return embed_reply(EmbedPayload(
        title=title,
        description="\n".join(lines),
        color=LEADERBOARD_COLOR,
    ).stamp())
