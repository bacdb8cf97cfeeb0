from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from command_prompter.args.spec import ArgumentSpec, ArgumentSpecError
from command_prompter.collectors.obtain import obtain
from command_prompter.core.channel import PromptContext, ReplyMessage, SentMessage
from command_prompter.core.models import CancelReason

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(r"""\s*(?:(["'])(.*?)\1|(\S+))\s*""", re.DOTALL)
_QUOTED_PATTERN = re.compile(r"""(["'])(.*)\1""", re.DOTALL)


def split_arguments(content: str, count: Optional[int] = None) -> list[str]:
    """
    Split raw command text into argument tokens.

    Tokens are whitespace separated; single or double quotes keep spaces together.
    With `count`, at most `count` tokens are returned and the last one holds the
    rest of the text.
    """
    if count is not None and count < 1:
        raise ValueError("count must be at least 1.")

    text = content.strip()
    tokens: list[str] = []
    pos = 0
    while pos < len(text) and (count is None or len(tokens) < count - 1):
        match = _TOKEN_PATTERN.match(text, pos)
        if match is None or match.end() == pos:
            break
        tokens.append(match.group(2) if match.group(1) else match.group(3))
        pos = match.end()

    if pos < len(text):
        rest = text[pos:]
        quoted = _QUOTED_PATTERN.fullmatch(rest)
        tokens.append(quoted.group(2) if quoted else rest)
    return tokens


@dataclass(frozen=True, slots=True)
class ArgumentCollectorResult:
    values: Optional[dict[str, Any]]
    cancelled: CancelReason
    prompts: Sequence[SentMessage]
    answers: Sequence[ReplyMessage]


class ArgumentCollector:
    """Obtains all arguments of a command, one after another."""

    def __init__(self, specs: Sequence[ArgumentSpec]) -> None:
        specs = tuple(specs)
        seen: set[str] = set()
        has_optional = False
        for i, spec in enumerate(specs):
            if spec.key in seen:
                raise ArgumentSpecError(f'Argument key "{spec.key}" is used more than once.')
            seen.add(spec.key)
            if spec.infinite and i != len(specs) - 1:
                raise ArgumentSpecError("No other argument may come after an infinite argument.")
            if spec.required and has_optional:
                raise ArgumentSpecError("Required arguments may not come after optional arguments.")
            has_optional = has_optional or not spec.required
        self._specs = specs

    @property
    def specs(self) -> Sequence[ArgumentSpec]:
        return self._specs

    def split(self, content: str) -> list[str]:
        if not self._specs or self._specs[-1].infinite:
            return split_arguments(content)
        return split_arguments(content, len(self._specs))

    async def obtain(
        self,
        context: PromptContext,
        provided: Optional[Sequence[str]] = None,
        prompt_limit: Optional[int] = None,
    ) -> ArgumentCollectorResult:
        provided = list(provided or ())
        values: dict[str, Any] = {}
        prompts: list[SentMessage] = []
        answers: list[ReplyMessage] = []

        for i, spec in enumerate(self._specs):
            if spec.infinite:
                raw: Any = provided[i:]
            else:
                raw = provided[i] if i < len(provided) else None

            result = await obtain(spec, context, raw, prompt_limit)
            prompts.extend(result.prompts)
            answers.extend(result.answers)

            if result.cancelled is not CancelReason.NONE:
                logger.info(
                    "args.command_cancelled key=%s cancelled=%s author_id=%s channel_id=%s",
                    spec.key,
                    result.cancelled.value,
                    context.author_id,
                    context.channel_id,
                )
                return ArgumentCollectorResult(
                    values=None,
                    cancelled=result.cancelled,
                    prompts=tuple(prompts),
                    answers=tuple(answers),
                )
            values[spec.key] = result.value

        return ArgumentCollectorResult(
            values=values,
            cancelled=CancelReason.NONE,
            prompts=tuple(prompts),
            answers=tuple(answers),
        )
