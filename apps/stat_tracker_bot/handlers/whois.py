"""
/whois - show every tracked stat for a user.
"""

import logging

from apps.stat_tracker_bot.common.constants import STATS_COLOR
from apps.stat_tracker_bot.common.interaction import CommandInvocation
from apps.stat_tracker_bot.common.reply import (
    CommandReply,
    EmbedPayload,
    embed_reply,
    error_reply,
)
from apps.stat_tracker_bot.common.shared import get_category_emoji, title_case
from apps.stat_tracker_bot.handlers.base import HandlerContext
from libs.db.database import StoreError

logger = logging.getLogger(__name__)

WHOIS_TITLE = "📊 User Stats"


async def handle_whois(invocation: CommandInvocation, context: HandlerContext) -> CommandReply:
    target = invocation.get_user("user")
    if target is None:
        return error_reply("User parameter required!")

    try:
        stats = await context.repository.get_stats(target.id)
    except StoreError as e:
        logger.error(f"Error in whois command: {e}", exc_info=True)
        return error_reply("Sorry, there was an error retrieving the stats.")

    if not stats:
        return embed_reply(EmbedPayload(
            title=WHOIS_TITLE,
            description=f"{target.mention} has no tracked stats yet!",
            color=STATS_COLOR,
        ))

    lines = [
        f"{get_category_emoji(stat.category_name)} **{title_case(stat.category_name)}**: {stat.points}"
        for stat in stats
    ]
    description = f"**User:** {target.mention}\n\n" + "\n".join(lines)

    return embed_reply(EmbedPayload(
        title=WHOIS_TITLE,
        description=description,
        color=STATS_COLOR,
    ).stamp())
