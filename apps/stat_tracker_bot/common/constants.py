"""
Constants and configuration mappings used across the stat tracker commands.
"""

from discord import app_commands

from libs.points.schema import DEFAULT_CATEGORIES

# =============================================================================
# Visual Branding
# =============================================================================

STATS_COLOR = 0x0099FF
LEADERBOARD_COLOR = 0xFFD700
HISTORY_COLOR = 0x9932CC
SUCCESS_COLOR = 0x00FF00
ERROR_COLOR = 0xFF0000

# =============================================================================
# Discord Limits
# =============================================================================

EPHEMERAL_FLAG = 64
EMBED_FIELD_VALUE_MAX_LENGTH = 1024

DISCORD_API_BASE = "https://discord.com/api/v10"

# =============================================================================
# Interaction Types
# =============================================================================

INTERACTION_TYPE_PING = 1
INTERACTION_TYPE_APPLICATION_COMMAND = 2

RESPONSE_TYPE_PONG = 1
RESPONSE_TYPE_CHANNEL_MESSAGE_WITH_SOURCE = 4

OPTION_TYPE_STRING = 3
OPTION_TYPE_INTEGER = 4
OPTION_TYPE_USER = 6

# =============================================================================
# Command Limits
# =============================================================================

TRACK_MIN_AMOUNT = 1
TRACK_MAX_AMOUNT = 10

DEFAULT_RESULT_LIMIT = 10
MIN_RESULT_LIMIT = 1
MAX_RESULT_LIMIT = 25

# =============================================================================
# Categories
# =============================================================================

CATEGORY_NAMES = list(DEFAULT_CATEGORIES)
CATEGORY_VALID_VALUES = set(DEFAULT_CATEGORIES)

CATEGORY_EMOJIS = {
    "malewife": "👨‍🍳",
    "manipulate": "😈",
    "mansplain": "🤓",
    "gaslight": "🔥",
    "gatekeep": "🐠",
    "girlboss": "💅",
}
DEFAULT_CATEGORY_EMOJI = "📈"

CATEGORY_CHOICES = [
    app_commands.Choice(name=name, value=name) for name in CATEGORY_NAMES
]

# =============================================================================
# Operations
# =============================================================================

OPERATION_ADD = "add"
OPERATION_SUBTRACT = "subtract"
OPERATION_VALID_VALUES = {OPERATION_ADD, OPERATION_SUBTRACT}

OPERATION_CHOICES = [
    app_commands.Choice(name="add", value=OPERATION_ADD),
    app_commands.Choice(name="subtract", value=OPERATION_SUBTRACT),
]

# =============================================================================
# Ranking
# =============================================================================

RANK_MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}
DEFAULT_RANK_MARKER = "📊"

# =============================================================================
# Command Surface (Discord application command JSON)
# =============================================================================

_CATEGORY_JSON_CHOICES = [{"name": name, "value": name} for name in CATEGORY_NAMES]

COMMAND_DEFINITIONS = [
    {
        "name": "track",
        "description": "adds or subtracts a stat for a user",
        "options": [
            {"type": OPTION_TYPE_USER, "name": "user", "description": "the user to track", "required": True},
            {
                "type": OPTION_TYPE_STRING,
                "name": "stat",
                "description": "the stat to track",
                "required": True,
                "choices": _CATEGORY_JSON_CHOICES,
            },
            {
                "type": OPTION_TYPE_STRING,
                "name": "operation",
                "description": "the operation to perform on the stat",
                "required": True,
                "choices": [
                    {"name": OPERATION_ADD, "value": OPERATION_ADD},
                    {"name": OPERATION_SUBTRACT, "value": OPERATION_SUBTRACT},
                ],
            },
            {
                "type": OPTION_TYPE_INTEGER,
                "name": "amount",
                "description": "the amount to track",
                "required": True,
                "min_value": TRACK_MIN_AMOUNT,
                "max_value": TRACK_MAX_AMOUNT,
            },
        ],
    },
    {
        "name": "whois",
        "description": "Display stats for a user",
        "options": [
            {"type": OPTION_TYPE_USER, "name": "user", "description": "The user to check stats for", "required": True},
        ],
    },
    {
        "name": "leaderboard",
        "description": "View the top users by points",
        "options": [
            {
                "type": OPTION_TYPE_STRING,
                "name": "category",
                "description": "Show leaderboard for specific category (optional)",
                "required": False,
                "choices": _CATEGORY_JSON_CHOICES,
            },
            {
                "type": OPTION_TYPE_INTEGER,
                "name": "limit",
                "description": f"Number of top users to show (default: {DEFAULT_RESULT_LIMIT}, max: {MAX_RESULT_LIMIT})",
                "required": False,
                "min_value": MIN_RESULT_LIMIT,
                "max_value": MAX_RESULT_LIMIT,
            },
        ],
    },
    {
        "name": "history",
        "description": "View the point history for a user",
        "options": [
            {"type": OPTION_TYPE_USER, "name": "user", "description": "The user to check history for", "required": True},
            {
                "type": OPTION_TYPE_STRING,
                "name": "category",
                "description": "Filter by specific category (optional)",
                "required": False,
                "choices": _CATEGORY_JSON_CHOICES,
            },
            {
                "type": OPTION_TYPE_INTEGER,
                "name": "limit",
                "description": f"Number of recent transactions to show (default: {DEFAULT_RESULT_LIMIT}, max: {MAX_RESULT_LIMIT})",
                "required": False,
                "min_value": MIN_RESULT_LIMIT,
                "max_value": MAX_RESULT_LIMIT,
            },
        ],
    },
]
