from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterable, Optional

from command_prompter.core.channel import PromptContext


@dataclass(frozen=True)
class FakeMessage:
    content: str
    author_id: str


class ScriptedChannel:
    """
    PromptChannel that replays scripted replies.

    A None entry, or running out of entries, behaves like a reply timeout.
    """

    def __init__(self, replies: Iterable[Optional[str]] = ()) -> None:
        self._replies = deque(replies)
        self.sent: list[str] = []
        self.waits: list[tuple[str, Optional[float]]] = []

    async def send(self, text: str) -> FakeMessage:
        self.sent.append(text)
        return FakeMessage(content=text, author_id="bot")

    async def await_reply(self, author_id: str, timeout_seconds: Optional[float]) -> Optional[FakeMessage]:
        self.waits.append((author_id, timeout_seconds))
        if not self._replies:
            return None
        content = self._replies.popleft()
        if content is None:
            return None
        return FakeMessage(content=content, author_id=author_id)


def make_context(channel: ScriptedChannel, *, author_id: str = "user-1") -> PromptContext:
    return PromptContext(
        channel=channel,
        author_id=author_id,
        channel_id="channel-1",
        guild_id="guild-1",
        content="~command",
    )
