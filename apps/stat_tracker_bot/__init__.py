"""
Stat tracker Discord bot package.

This package provides slash commands for tracking per-user points in a fixed
set of categories, served either by a connected gateway bot or by an HTTP
interactions webhook.
"""

def main():
    """Main entry point for the gateway bot."""
    from apps.stat_tracker_bot.stats_bot import main as _main
    _main()


def webhook_main():
    """Main entry point for the interactions webhook server."""
    from apps.stat_tracker_bot.webhook_server import main as _main
    _main()

__all__ = ['main', 'webhook_main']
