from __future__ import annotations

from typing import Any, Optional

from command_prompter.args.spec import ArgumentSpec
from command_prompter.collectors.base import (
    ABSENT,
    CANCEL_KEYWORD,
    Dialogue,
    default_result,
    format_seconds,
    limit_reached,
    matches_keyword,
)
from command_prompter.core.channel import PromptContext
from command_prompter.core.models import CancelReason, CollectionResult, ValidationResult


class SingleValueCollector:
    """
    Obtains one value for an argument, prompting until it is valid.

    Ends on success, a `cancel` reply, a reply timeout, or when `prompt_limit`
    prompts have been sent without a valid answer.
    """

    def __init__(self, spec: ArgumentSpec) -> None:
        self._spec = spec

    @property
    def spec(self) -> ArgumentSpec:
        return self._spec

    async def collect(
        self,
        context: PromptContext,
        value: Optional[str] = None,
        prompt_limit: Optional[int] = None,
    ) -> CollectionResult:
        spec = self._spec
        if not value:
            if spec.default is not None:
                return default_result(spec)
            value = None

        dialogue = Dialogue(spec=spec, context=context)
        validation = await spec.validate(value, context) if value is not None else ABSENT
        attempts = 0

        while not validation.accepted:
            if limit_reached(attempts, prompt_limit):
                return dialogue.result(cancelled=CancelReason.PROMPT_LIMIT)
            attempts += 1
            await dialogue.ask(self._prompt_text(value, validation), attempt=attempts)

            reply = await dialogue.wait_for_reply()
            if reply is None:
                return dialogue.result(cancelled=CancelReason.TIMEOUT)
            value = reply
            if matches_keyword(value, CANCEL_KEYWORD):
                return dialogue.result(cancelled=CancelReason.USER)

            validation = await spec.validate(value, context)

        parsed: Any = await spec.parse(value, context)
        return dialogue.result(value=parsed)

    def _prompt_text(self, value: Optional[str], validation: ValidationResult) -> str:
        spec = self._spec
        if value is None:
            headline = f"**{spec.prompt}**"
        elif validation.reason:
            headline = validation.reason
        else:
            headline = f"You provided an invalid **{spec.label}**! Please try again!"

        instructions = "Respond with `cancel` to cancel the command."
        timeout = spec.wait_timeout
        if timeout is not None:
            instructions += f" The command will automatically be cancelled in {format_seconds(timeout)} seconds."
        return f"{headline}\n{instructions}"
