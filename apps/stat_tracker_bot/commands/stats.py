"""
Slash commands for the gateway bot.

Each callback converts the discord.py interaction into a ``CommandInvocation``,
runs it through the shared command table and sends the reply.
"""

import logging
from typing import Optional, Union

import discord
from discord import app_commands

from apps.stat_tracker_bot.common.constants import (
    CATEGORY_CHOICES,
    MAX_RESULT_LIMIT,
    MIN_RESULT_LIMIT,
    OPERATION_CHOICES,
    OPTION_TYPE_INTEGER,
    OPTION_TYPE_STRING,
    OPTION_TYPE_USER,
    TRACK_MAX_AMOUNT,
    TRACK_MIN_AMOUNT,
)
from apps.stat_tracker_bot.common.dispatch import dispatch_command
from apps.stat_tracker_bot.common.interaction import (
    CommandOption,
    InteractionUser,
    build_invocation,
)
from apps.stat_tracker_bot.handlers import CommandTable, HandlerContext

logger = logging.getLogger(__name__)

DiscordUser = Union[discord.User, discord.Member]


def to_interaction_user(user: DiscordUser) -> InteractionUser:
    """Convert a discord.py user or member into the shared user type."""
    return InteractionUser(
        id=str(user.id),
        username=user.name,
        global_name=user.global_name,
        nick=getattr(user, "nick", None),
    )


def _string_option(name: str, value: Optional[str]) -> CommandOption:
    return CommandOption(name=name, type=OPTION_TYPE_STRING, value=value)


def _integer_option(name: str, value: Optional[int]) -> CommandOption:
    return CommandOption(name=name, type=OPTION_TYPE_INTEGER, value=value)


def _user_option(name: str, user: DiscordUser) -> CommandOption:
    return CommandOption(name=name, type=OPTION_TYPE_USER, value=str(user.id), user=to_interaction_user(user))


def setup_stat_commands(
    tree: app_commands.CommandTree,
    command_table: CommandTable,
    context: HandlerContext,
) -> None:
    """
    Register /track, /whois, /leaderboard and /history on the command tree.

    Args:
        tree: The bot's command tree to register the commands with
        command_table: Handler table built once at start-up
        context: Repository and display name lookup passed to every handler
    """

    async def run(interaction: discord.Interaction, name: str, *options: CommandOption) -> None:
        invocation = build_invocation(
            name,
            to_interaction_user(interaction.user),
            list(options),
            channel_id=interaction.channel_id,
            guild_id=interaction.guild_id,
        )
        reply = await dispatch_command(invocation, command_table, context)

        kwargs = {"ephemeral": reply.ephemeral}
        if reply.content:
            kwargs["content"] = reply.content
        if reply.embeds:
            kwargs["embeds"] = reply.to_discord_embeds()

        try:
            if not interaction.response.is_done():
                await interaction.response.send_message(**kwargs)
            else:
                await interaction.followup.send(**kwargs)
        except discord.HTTPException as e:
            logger.error(f"Failed to send reply for {name}: {e}", exc_info=True)

    @tree.command(name="track", description="adds or subtracts a stat for a user")
    @app_commands.describe(
        user="the user to track",
        stat="the stat to track",
        operation="the operation to perform on the stat",
        amount="the amount to track",
    )
    @app_commands.choices(stat=CATEGORY_CHOICES, operation=OPERATION_CHOICES)
    async def track(
        interaction: discord.Interaction,
        user: discord.User,
        stat: str,
        operation: str,
        amount: app_commands.Range[int, TRACK_MIN_AMOUNT, TRACK_MAX_AMOUNT],
    ):
        """Add or subtract points for a user."""
        await run(
            interaction, "track",
            _user_option("user", user),
            _string_option("stat", stat),
            _string_option("operation", operation),
            _integer_option("amount", amount),
        )

    @tree.command(name="whois", description="Display stats for a user")
    @app_commands.describe(user="The user to check stats for")
    async def whois(interaction: discord.Interaction, user: discord.User):
        """Display stats for a user."""
        await run(interaction, "whois", _user_option("user", user))

    @tree.command(name="leaderboard", description="View the top users by points")
    @app_commands.describe(
        category="Show leaderboard for specific category (optional)",
        limit=f"Number of top users to show (default: 10, max: {MAX_RESULT_LIMIT})",
    )
    @app_commands.choices(category=CATEGORY_CHOICES)
    async def leaderboard(
        interaction: discord.Interaction,
        category: Optional[str] = None,
        limit: Optional[app_commands.Range[int, MIN_RESULT_LIMIT, MAX_RESULT_LIMIT]] = None,
    ):
        """View the top users by points."""
        await run(
            interaction, "leaderboard",
            _string_option("category", category),
            _integer_option("limit", limit),
        )

    @tree.command(name="history", description="View the point history for a user")
    @app_commands.describe(
        user="The user to check history for",
        category="Filter by specific category (optional)",
        limit=f"Number of recent transactions to show (default: 10, max: {MAX_RESULT_LIMIT})",
    )
    @app_commands.choices(category=CATEGORY_CHOICES)
    async def history(
        interaction: discord.Interaction,
        user: discord.User,
        category: Optional[str] = None,
        limit: Optional[app_commands.Range[int, MIN_RESULT_LIMIT, MAX_RESULT_LIMIT]] = None,
    ):
        """View the point history for a user."""
        await run(
            interaction, "history",
            _user_option("user", user),
            _string_option("category", category),
            _integer_option("limit", limit),
        )
