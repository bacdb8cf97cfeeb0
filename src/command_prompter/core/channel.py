from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol


class SentMessage(Protocol):
    """Handle of a message the bot posted. Only its identity matters to the collectors."""


class ReplyMessage(Protocol):
    @property
    def content(self) -> str: ...


class PromptChannel(Protocol):
    """
    Request/reply transport used to converse with the invoking user.

    The timeout is enforced here, not by the collectors.
    """

    async def send(self, text: str) -> SentMessage:
        """Post a message to the channel, preserving markdown and line breaks."""

    async def await_reply(self, author_id: str, timeout_seconds: Optional[float]) -> Optional[ReplyMessage]:
        """
        Wait for the next message from `author_id` in this channel.

        Returns None when `timeout_seconds` elapses first. `None` for the timeout means
        wait forever.
        """


@dataclass(frozen=True, slots=True)
class PromptContext:
    channel: PromptChannel
    author_id: str
    channel_id: str
    guild_id: Optional[str] = None
    content: str = ""
    # Platform message that triggered the command, e.g. a discord.Message.
    raw: Any = None
