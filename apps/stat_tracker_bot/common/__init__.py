"""
Common utilities module for the stat tracker bot.

This module provides centralized access to shared functionality:
- Typed interaction payloads and replies
- Signature verification
- Command dispatch, logging and error handling
- Input validation
- Display name lookup and caching
- Reply formatting helpers
"""

# Interaction payloads
from apps.stat_tracker_bot.common.interaction import (
    Interaction,
    InteractionUser,
    InteractionPayloadError,
    CommandOption,
    CommandInvocation,
    SYSTEM_USER,
    parse_interaction,
    build_invocation,
)

# Replies
from apps.stat_tracker_bot.common.reply import (
    CommandReply,
    EmbedPayload,
    EmbedField,
    embed_reply,
    error_reply,
)

# Signature verification
from apps.stat_tracker_bot.common.signature import (
    verify_signature,
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
)

# Command logging
from apps.stat_tracker_bot.common.logging import (
    log_command_data,
    log_command_completion,
    get_command_latency_ms,
)

# Command decorators and dispatch
from apps.stat_tracker_bot.common.decorators import (
    command_wrapper,
    handle_command_errors,
    GENERIC_ERROR_MESSAGE,
)
from apps.stat_tracker_bot.common.dispatch import dispatch_command

# Input validation
from apps.stat_tracker_bot.common.validation import (
    validate_int_range,
    validate_optional_limit,
    validate_choice_parameter,
)

# Display names
from apps.stat_tracker_bot.common.user_cache import (
    DisplayNameResolver,
    RestUserLookup,
    gateway_user_lookup,
    no_lookup,
)

# Shared formatting utilities
from apps.stat_tracker_bot.common.shared import (
    get_category_emoji,
    get_rank_medal,
    title_case,
    format_timestamp,
    format_signed,
)

__all__ = [
    # Interaction
    'Interaction',
    'InteractionUser',
    'InteractionPayloadError',
    'CommandOption',
    'CommandInvocation',
    'SYSTEM_USER',
    'parse_interaction',
    'build_invocation',
    # Replies
    'CommandReply',
    'EmbedPayload',
    'EmbedField',
    'embed_reply',
    'error_reply',
    # Signature
    'verify_signature',
    'SIGNATURE_HEADER',
    'TIMESTAMP_HEADER',
    # Logging
    'log_command_data',
    'log_command_completion',
    'get_command_latency_ms',
    # Decorators and dispatch
    'command_wrapper',
    'handle_command_errors',
    'GENERIC_ERROR_MESSAGE',
    'dispatch_command',
    # Validation
    'validate_int_range',
    'validate_optional_limit',
    'validate_choice_parameter',
    # Display names
    'DisplayNameResolver',
    'RestUserLookup',
    'gateway_user_lookup',
    'no_lookup',
    # Formatting
    'get_category_emoji',
    'get_rank_medal',
    'title_case',
    'format_timestamp',
    'format_signed',
]
