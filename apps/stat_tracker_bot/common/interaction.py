"""
Typed interaction payloads.

Raw webhook JSON is validated once here and turned into ``Interaction`` and
``CommandInvocation`` objects; handlers only ever see the typed accessors.
The gateway mode builds the same ``CommandInvocation`` from discord.py objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from apps.stat_tracker_bot.common.constants import (
    INTERACTION_TYPE_APPLICATION_COMMAND,
    OPTION_TYPE_USER,
)
from libs.points.models import SYSTEM_USER_ID


class InteractionPayloadError(ValueError):
    """The interaction payload does not have the expected shape."""


@dataclass(frozen=True)
class InteractionUser:
    """A Discord user referenced by an interaction."""
    id: str
    username: Optional[str] = None
    global_name: Optional[str] = None
    nick: Optional[str] = None

    @property
    def display_name(self) -> Optional[str]:
        """Best available human-readable name, or None if only the ID is known."""
        return self.nick or self.global_name or self.username

    @property
    def mention(self) -> str:
        return f"<@{self.id}>"

    @property
    def is_system(self) -> bool:
        return self.id == SYSTEM_USER_ID

    @classmethod
    def from_dict(cls, user: Dict[str, Any], member: Optional[Dict[str, Any]] = None) -> "InteractionUser":
        if not isinstance(user, dict) or not user.get("id"):
            raise InteractionPayloadError("User object is missing an id")
        nick = member.get("nick") if isinstance(member, dict) else None
        return cls(
            id=str(user["id"]),
            username=user.get("username"),
            global_name=user.get("global_name"),
            nick=nick,
        )


SYSTEM_USER = InteractionUser(id=SYSTEM_USER_ID, username="System")


@dataclass(frozen=True)
class CommandOption:
    """One named option of a slash command."""
    name: str
    type: Optional[int]
    value: Any
    user: Optional[InteractionUser] = None


@dataclass(frozen=True)
class CommandInvocation:
    """
    A normalized slash command call.

    Attributes:
        name: Command name as registered with Discord
        options: Options keyed by name
        actor: The user who invoked the command (or the system sentinel)
        channel_id: Channel the command was used in, if known
        guild_id: Guild the command was used in, if known
    """
    name: str
    options: Dict[str, CommandOption] = field(default_factory=dict)
    actor: InteractionUser = SYSTEM_USER
    channel_id: Optional[str] = None
    guild_id: Optional[str] = None

    def has_option(self, name: str) -> bool:
        option = self.options.get(name)
        return option is not None and option.value is not None

    def get_string(self, name: str) -> Optional[str]:
        option = self.options.get(name)
        if option is None or option.value is None:
            return None
        return str(option.value)

    def get_integer(self, name: str) -> Optional[int]:
        option = self.options.get(name)
        if option is None or option.value is None:
            return None
        if isinstance(option.value, bool):
            raise InteractionPayloadError(f"Option '{name}' must be an integer")
        try:
            return int(option.value)
        except (TypeError, ValueError) as e:
            raise InteractionPayloadError(f"Option '{name}' must be an integer") from e

    def get_user(self, name: str) -> Optional[InteractionUser]:
        option = self.options.get(name)
        if option is None or option.value is None:
            return None
        if option.user is not None:
            return option.user
        return InteractionUser(id=str(option.value))

    def log_params(self) -> Dict[str, Any]:
        """Option values suitable for command logging."""
        return {name: option.value for name, option in self.options.items()}


@dataclass(frozen=True)
class Interaction:
    """A verified inbound interaction."""
    type: int
    id: Optional[str] = None
    token: Optional[str] = None
    application_id: Optional[str] = None
    invocation: Optional[CommandInvocation] = None


def _parse_actor(payload: Dict[str, Any]) -> InteractionUser:
    member = payload.get("member")
    if isinstance(member, dict) and isinstance(member.get("user"), dict):
        return InteractionUser.from_dict(member["user"], member)
    if isinstance(payload.get("user"), dict):
        return InteractionUser.from_dict(payload["user"])
    return SYSTEM_USER


def _parse_option_user(
    option: Dict[str, Any],
    resolved_users: Dict[str, Any],
    resolved_members: Dict[str, Any],
) -> Optional[InteractionUser]:
    if isinstance(option.get("user"), dict):
        return InteractionUser.from_dict(option["user"], option.get("member"))

    user_id = str(option.get("value"))
    if user_id in resolved_users:
        return InteractionUser.from_dict(resolved_users[user_id], resolved_members.get(user_id))
    return None


def _parse_options(data: Dict[str, Any]) -> Dict[str, CommandOption]:
    raw_options = data.get("options") or []
    if not isinstance(raw_options, list):
        raise InteractionPayloadError("data.options must be a list")

    resolved = data.get("resolved") or {}
    if not isinstance(resolved, dict):
        raise InteractionPayloadError("data.resolved must be an object")
    resolved_users = resolved.get("users") or {}
    resolved_members = resolved.get("members") or {}
    if not isinstance(resolved_users, dict) or not isinstance(resolved_members, dict):
        raise InteractionPayloadError("data.resolved.users and data.resolved.members must be objects")

    options: Dict[str, CommandOption] = {}
    for raw in raw_options:
        if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
            raise InteractionPayloadError("Each option must be an object with a name")

        option_type = raw.get("type")
        user = None
        if option_type == OPTION_TYPE_USER or "user" in raw:
            user = _parse_option_user(raw, resolved_users, resolved_members)

        options[raw["name"]] = CommandOption(
            name=raw["name"],
            type=option_type,
            value=raw.get("value"),
            user=user,
        )
    return options


def parse_interaction(payload: Any) -> Interaction:
    """
    Validate a raw interaction payload and convert it to typed objects.

    Raises:
        InteractionPayloadError: If required fields are missing or malformed
    """
    if not isinstance(payload, dict):
        raise InteractionPayloadError("Interaction payload must be a JSON object")

    interaction_type = payload.get("type")
    if not isinstance(interaction_type, int) or isinstance(interaction_type, bool):
        raise InteractionPayloadError("Interaction payload is missing an integer type")

    invocation = None
    if interaction_type == INTERACTION_TYPE_APPLICATION_COMMAND:
        data = payload.get("data")
        if not isinstance(data, dict) or not isinstance(data.get("name"), str):
            raise InteractionPayloadError("Command interaction is missing data.name")

        channel_id = payload.get("channel_id")
        guild_id = payload.get("guild_id")
        invocation = CommandInvocation(
            name=data["name"],
            options=_parse_options(data),
            actor=_parse_actor(payload),
            channel_id=str(channel_id) if channel_id is not None else None,
            guild_id=str(guild_id) if guild_id is not None else None,
        )

    return Interaction(
        type=interaction_type,
        id=payload.get("id"),
        token=payload.get("token"),
        application_id=payload.get("application_id"),
        invocation=invocation,
    )


def build_invocation(
    name: str,
    actor: InteractionUser,
    options: List[CommandOption],
    channel_id: Optional[int] = None,
    guild_id: Optional[int] = None,
) -> CommandInvocation:
    """Build an invocation from already-parsed values (gateway mode)."""
    return CommandInvocation(
        name=name,
        options={option.name: option for option in options if option.value is not None},
        actor=actor,
        channel_id=str(channel_id) if channel_id is not None else None,
        guild_id=str(guild_id) if guild_id is not None else None,
    )
