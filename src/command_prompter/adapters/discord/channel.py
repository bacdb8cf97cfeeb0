from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

import aiohttp
import discord
from discord.ext import commands

from command_prompter.core.channel import PromptContext

logger = logging.getLogger(__name__)

T = TypeVar("T")

_RETRYABLE_DISCORD_HTTP_ERRORS: tuple[type[BaseException], ...] = (
    aiohttp.ClientConnectorError,
    aiohttp.ClientOSError,
    aiohttp.ServerDisconnectedError,
    asyncio.TimeoutError,
    ConnectionResetError,
)


async def _retry_async(
    operation: str,
    *,
    attempts: int,
    base_delay_seconds: float,
    make_call: Callable[[], Awaitable[T]],
    log_context: str,
) -> T:
    last_error: BaseException | None = None
    for attempt in range(1, attempts + 1):
        try:
            return await make_call()
        except _RETRYABLE_DISCORD_HTTP_ERRORS as exc:
            last_error = exc
            if attempt >= attempts:
                break
            delay_seconds = base_delay_seconds * (2 ** (attempt - 1))
            logger.warning(
                "discord.http_retry operation=%s attempt=%s/%s delay_seconds=%s %s error=%s",
                operation,
                attempt,
                attempts,
                delay_seconds,
                log_context,
                type(exc).__name__,
            )
            await asyncio.sleep(delay_seconds)

    assert last_error is not None
    raise last_error


class DiscordPromptChannel:
    """PromptChannel over one Discord text channel or thread."""

    def __init__(
        self,
        *,
        bot: commands.Bot,
        channel: discord.abc.Messageable,
        send_attempts: int = 3,
        send_base_delay_seconds: float = 0.5,
    ) -> None:
        self._bot = bot
        self._channel = channel
        self._send_attempts = send_attempts
        self._send_base_delay_seconds = send_base_delay_seconds

    @property
    def channel_id(self) -> str:
        return str(getattr(self._channel, "id", ""))

    async def send(self, text: str) -> discord.Message:
        return await _retry_async(
            "send_prompt",
            attempts=self._send_attempts,
            base_delay_seconds=self._send_base_delay_seconds,
            make_call=lambda: self._channel.send(text),
            log_context=f"platform=discord channel_id={self.channel_id}",
        )

    async def await_reply(self, author_id: str, timeout_seconds: Optional[float]) -> Optional[discord.Message]:
        channel_id = getattr(self._channel, "id", None)

        def _is_reply(message: discord.Message) -> bool:
            return (
                message.author is not None
                and str(message.author.id) == author_id
                and getattr(message.channel, "id", None) == channel_id
            )

        try:
            return await self._bot.wait_for("message", check=_is_reply, timeout=timeout_seconds)
        except asyncio.TimeoutError:
            return None


def context_from_message(channel: DiscordPromptChannel, message: discord.Message) -> PromptContext:
    return PromptContext(
        channel=channel,
        author_id=str(message.author.id),
        channel_id=str(message.channel.id),
        guild_id=str(message.guild.id) if message.guild is not None else None,
        content=message.content or "",
        raw=message,
    )
