"""
/history - recent point changes received by a user.
"""

import logging

from apps.stat_tracker_bot.common.constants import (
    CATEGORY_NAMES,
    CATEGORY_VALID_VALUES,
    DEFAULT_RESULT_LIMIT,
    HISTORY_COLOR,
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
    format_signed,
    format_timestamp,
    get_category_emoji,
    title_case,
    truncate_field_value,
)
from apps.stat_tracker_bot.common.validation import (
    validate_choice_parameter,
    validate_optional_limit,
)
from apps.stat_tracker_bot.handlers.base import HandlerContext
from libs.db.database import StoreError
from libs.points.models import TransactionRecord

logger = logging.getLogger(__name__)


def format_transaction(record: TransactionRecord) -> str:
    """Render one transaction as a short multi-line block."""
    giver_text = "System" if record.is_system else f"<@{record.giver_id}>"
    text = (
        f"{get_category_emoji(record.category_name)} **{format_signed(record.amount)}** {record.category_name}\n"
        f"   From: {giver_text} • {format_timestamp(record.created_at)}\n"
    )
    if record.reason:
        text += f"   *{record.reason}*\n"
    return text


async def handle_history(invocation: CommandInvocation, context: HandlerContext) -> CommandReply:
    try:
        target = invocation.get_user("user")
        if target is None:
            return error_reply("User parameter required!")

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
        records = await context.repository.get_history(target.id, category, limit)
    except StoreError as e:
        logger.error(f"Error in history command: {e}", exc_info=True)
        return error_reply("Sorry, there was an error retrieving the history.")

    title = f"📜 {title_case(category)} History" if category else "📜 Point History"

    if not records:
        filter_text = f" for {category}" if category else ""
        return embed_reply(EmbedPayload(
            title=title,
            description=f"**User:** {target.mention}\n\n{target.mention} has no transaction history{filter_text}!",
            color=HISTORY_COLOR,
        ))

    if category:
        summary = f"Showing recent {category} transactions"
    else:
        summary = f"Showing {len(records)} most recent transactions"

    transaction_list = "\n".join(format_transaction(record) for record in records)

    embed = EmbedPayload(
        title=title,
        description=f"**User:** {target.mention}\n\n{summary}",
        color=HISTORY_COLOR,
    ).stamp()
    embed.add_field("Recent Transactions", truncate_field_value(transaction_list))
    return embed_reply(embed)
