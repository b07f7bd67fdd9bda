"""
Shared formatting utilities for stat tracker replies.
"""

from datetime import datetime, timezone

from apps.stat_tracker_bot.common.constants import (
    CATEGORY_EMOJIS,
    DEFAULT_CATEGORY_EMOJI,
    DEFAULT_RANK_MARKER,
    EMBED_FIELD_VALUE_MAX_LENGTH,
    RANK_MEDALS,
)


def get_category_emoji(category_name: str) -> str:
    return CATEGORY_EMOJIS.get(category_name, DEFAULT_CATEGORY_EMOJI)


def get_rank_medal(rank: int) -> str:
    """Medal for ranks 1-3, generic marker beyond."""
    return RANK_MEDALS.get(rank, DEFAULT_RANK_MARKER)


def title_case(name: str) -> str:
    """Uppercase the first character only ("gaslight" -> "Gaslight")."""
    return name[:1].upper() + name[1:]


def format_timestamp(created_at: str) -> str:
    """
    Render a stored ``YYYY-MM-DD HH:MM:SS`` UTC timestamp as a Discord timestamp tag.

    Discord shows the tag in each viewer's local time. Values that do not parse
    are returned unchanged.
    """
    try:
        parsed = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
    except ValueError:
        return created_at
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return f"<t:{int(parsed.timestamp())}:f>"


def format_signed(amount: int) -> str:
    return f"+{amount}" if amount >= 0 else str(amount)


def truncate_field_value(value: str, max_length: int = EMBED_FIELD_VALUE_MAX_LENGTH) -> str:
    """Cut a field value to Discord's limit, ending on a whole line where possible."""
    if len(value) <= max_length:
        return value
    cut = value[: max_length - 1]
    last_newline = cut.rfind("\n")
    if last_newline > 0:
        cut = cut[:last_newline]
    return cut + "…"
