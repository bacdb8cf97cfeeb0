from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import discord

from command_prompter.args.spec import ArgumentSpec
from command_prompter.core.channel import PromptContext, ReplyMessage, SentMessage
from command_prompter.core.models import CancelReason, CollectionResult, ValidationResult

logger = logging.getLogger(__name__)

CANCEL_KEYWORD = "cancel"
FINISH_KEYWORD = "finish"

# Echoed input at or above this length is not repeated back.
MAX_ECHO_CHARS = 1850

ABSENT = ValidationResult.reject()


def matches_keyword(content: str, keyword: str) -> bool:
    return content.strip().lower() == keyword


def escape_echo(raw: str) -> str:
    """Make user text safe to quote back: no markdown, no pings."""
    escaped = discord.utils.escape_markdown(raw).replace("@", "@\u200b")
    if len(escaped) >= MAX_ECHO_CHARS:
        return "[too long to show]"
    return escaped


def format_seconds(seconds: float) -> str:
    return str(int(seconds)) if float(seconds).is_integer() else str(seconds)


def default_result(spec: ArgumentSpec) -> CollectionResult:
    return CollectionResult(value=spec.default, cancelled=CancelReason.NONE, prompts=(), answers=())


class Dialogue:
    """Prompt/reply bookkeeping for one collection call."""

    def __init__(self, *, spec: ArgumentSpec, context: PromptContext) -> None:
        self._spec = spec
        self._context = context
        self.prompts: list[SentMessage] = []
        self.answers: list[ReplyMessage] = []

    async def ask(self, text: str, *, attempt: int) -> None:
        sent = await self._context.channel.send(text)
        self.prompts.append(sent)
        logger.debug(
            "args.prompt_sent key=%s attempt=%s author_id=%s channel_id=%s",
            self._spec.key,
            attempt,
            self._context.author_id,
            self._context.channel_id,
        )

    async def wait_for_reply(self) -> Optional[str]:
        """Return the reply content, or None if the wait timed out."""
        timeout = self._spec.wait_timeout
        reply = await self._context.channel.await_reply(self._context.author_id, timeout)
        if reply is None:
            logger.debug(
                "args.reply_timeout key=%s author_id=%s channel_id=%s timeout_seconds=%s",
                self._spec.key,
                self._context.author_id,
                self._context.channel_id,
                timeout,
            )
            return None
        self.answers.append(reply)
        logger.debug(
            "args.reply_received key=%s author_id=%s channel_id=%s",
            self._spec.key,
            self._context.author_id,
            self._context.channel_id,
        )
        return reply.content or ""

    def result(
        self,
        *,
        value: Any = None,
        cancelled: CancelReason = CancelReason.NONE,
        collected: Sequence[Any] = (),
    ) -> CollectionResult:
        logger.info(
            "args.collected key=%s cancelled=%s prompts=%s answers=%s author_id=%s channel_id=%s",
            self._spec.key,
            cancelled.value,
            len(self.prompts),
            len(self.answers),
            self._context.author_id,
            self._context.channel_id,
        )
        return CollectionResult(
            value=value,
            cancelled=cancelled,
            prompts=tuple(self.prompts),
            answers=tuple(self.answers),
            collected=tuple(collected),
        )


def limit_reached(attempts: int, prompt_limit: Optional[int]) -> bool:
    return prompt_limit is not None and attempts >= prompt_limit
