from __future__ import annotations

from typing import Any, Optional, Sequence

from command_prompter.args.spec import ArgumentSpec
from command_prompter.collectors.base import (
    ABSENT,
    CANCEL_KEYWORD,
    FINISH_KEYWORD,
    Dialogue,
    default_result,
    escape_echo,
    format_seconds,
    limit_reached,
    matches_keyword,
)
from command_prompter.core.channel import PromptContext
from command_prompter.core.models import CancelReason, CollectionResult, ValidationResult


class MultiValueCollector:
    """
    Obtains an ordered sequence of values for an infinite argument.

    Pre-supplied tokens are checked one by one and only rejected tokens are asked
    for again. Without tokens the user keeps replying until `finish` or `cancel`.
    The prompt limit applies to each value separately.
    """

    def __init__(self, spec: ArgumentSpec) -> None:
        self._spec = spec

    @property
    def spec(self) -> ArgumentSpec:
        return self._spec

    async def collect(
        self,
        context: PromptContext,
        values: Optional[Sequence[str]] = None,
        prompt_limit: Optional[int] = None,
    ) -> CollectionResult:
        spec = self._spec
        if not any(values or ()) and spec.default is not None:
            return default_result(spec)

        dialogue = Dialogue(spec=spec, context=context)
        tokens = list(values or ())
        results: list[Any] = []
        index = 0

        while True:
            value: Optional[str] = tokens[index] if index < len(tokens) and tokens[index] else None
            validation = await spec.validate(value, context) if value else ABSENT
            attempts = 0

            while not validation.accepted:
                if limit_reached(attempts, prompt_limit):
                    return dialogue.result(cancelled=CancelReason.PROMPT_LIMIT, collected=results)
                attempts += 1

                if value:
                    await dialogue.ask(self._replacement_text(value, validation), attempt=attempts)
                elif not results:
                    await dialogue.ask(self._opening_text(), attempt=attempts)

                reply = await dialogue.wait_for_reply()
                if reply is None:
                    return dialogue.result(cancelled=CancelReason.TIMEOUT, collected=results)
                value = reply

                if matches_keyword(value, FINISH_KEYWORD):
                    if results:
                        return dialogue.result(value=tuple(results), collected=results)
                    return dialogue.result(cancelled=CancelReason.USER)
                if matches_keyword(value, CANCEL_KEYWORD):
                    return dialogue.result(cancelled=CancelReason.USER)

                validation = await spec.validate(value, context)

            results.append(await spec.parse(value, context))

            if tokens:
                index += 1
                if index >= len(tokens):
                    return dialogue.result(value=tuple(results), collected=results)

    def _deadline_note(self, suffix: str = "") -> str:
        timeout = self._spec.wait_timeout
        if timeout is None:
            return ""
        return f" The command will automatically be cancelled in {format_seconds(timeout)} seconds{suffix}."

    def _replacement_text(self, value: str, validation: ValidationResult) -> str:
        if validation.reason:
            headline = validation.reason
        else:
            headline = f'You provided an invalid {self._spec.label}, "{escape_echo(value)}". Please try again!'
        instructions = (
            "Respond with `cancel` to cancel the command, or `finish` to finish entry up to this point."
            + self._deadline_note()
        )
        return f"{headline}\n{instructions}"

    def _opening_text(self) -> str:
        instructions = (
            "Respond with `cancel` to cancel the command, or `finish` to finish your entry."
            + self._deadline_note(", unless you respond")
        )
        return f"{self._spec.prompt}\n{instructions}"
