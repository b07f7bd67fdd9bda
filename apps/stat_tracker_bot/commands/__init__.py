"""
Commands module for the gateway bot.

Contains the slash command registrations for /track, /whois, /leaderboard and /history.
"""

from apps.stat_tracker_bot.commands.stats import setup_stat_commands, to_interaction_user

__all__ = [
    'setup_stat_commands',
    'to_interaction_user',
]
