"""
Transport-neutral command replies.

Handlers return a ``CommandReply``; the webhook server serializes it with
``to_dict()`` and the gateway bot converts it with ``to_discord_embeds()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import discord

from apps.stat_tracker_bot.common.constants import EPHEMERAL_FLAG, ERROR_COLOR


@dataclass
class EmbedField:
    name: str
    value: str
    inline: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value, "inline": self.inline}


@dataclass
class EmbedPayload:
    """Embed contents: title, description, color, optional timestamp and fields."""
    title: str
    description: str
    color: int
    timestamp: Optional[str] = None
    fields: List[EmbedField] = field(default_factory=list)

    def add_field(self, name: str, value: str, inline: bool = False) -> "EmbedPayload":
        self.fields.append(EmbedField(name=name, value=value, inline=inline))
        return self

    def stamp(self) -> "EmbedPayload":
        """Set the timestamp to now (UTC)."""
        self.timestamp = datetime.now(timezone.utc).isoformat()
        return self

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "color": self.color,
        }
        if self.timestamp:
            data["timestamp"] = self.timestamp
        if self.fields:
            data["fields"] = [f.to_dict() for f in self.fields]
        return data


@dataclass
class CommandReply:
    """Either plain content or one or more embeds, optionally ephemeral."""
    content: Optional[str] = None
    embeds: List[EmbedPayload] = field(default_factory=list)
    ephemeral: bool = False
    success: bool = True

    @property
    def text(self) -> str:
        """All user-visible text in the reply, for logging and tests."""
        parts = [self.content] if self.content else []
        for embed in self.embeds:
            parts.extend([embed.title, embed.description])
            parts.extend(f"{f.name}\n{f.value}" for f in embed.fields)
        return "\n".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape for the ``data`` member of an interaction response."""
        data: Dict[str, Any] = {}
        if self.content is not None:
            data["content"] = self.content
        if self.embeds:
            data["embeds"] = [embed.to_dict() for embed in self.embeds]
        if self.ephemeral:
            data["flags"] = EPHEMERAL_FLAG
        return data

    def to_discord_embeds(self) -> List[discord.Embed]:
        return [discord.Embed.from_dict(embed.to_dict()) for embed in self.embeds]


def embed_reply(embed: EmbedPayload, ephemeral: bool = False) -> CommandReply:
    return CommandReply(embeds=[embed], ephemeral=ephemeral)


def error_reply(description: str, title: str = "❌ Error") -> CommandReply:
    """An ephemeral red error embed."""
    return CommandReply(
        embeds=[EmbedPayload(title=title, description=description, color=ERROR_COLOR)],
        ephemeral=True,
        success=False,
    )
