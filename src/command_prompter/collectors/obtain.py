from __future__ import annotations

from typing import Optional, Sequence, Union

from command_prompter.args.spec import ArgumentSpec
from command_prompter.collectors.infinite import MultiValueCollector
from command_prompter.collectors.single import SingleValueCollector
from command_prompter.core.channel import PromptContext
from command_prompter.core.models import CollectionResult


async def obtain(
    spec: ArgumentSpec,
    context: PromptContext,
    value: Union[str, Sequence[str], None] = None,
    prompt_limit: Optional[int] = None,
) -> CollectionResult:
    """Obtain the value(s) of `spec`, picking the collector from `spec.infinite`."""
    if prompt_limit is not None and prompt_limit < 0:
        raise ValueError("prompt_limit must not be negative.")

    if spec.infinite:
        values = [value] if isinstance(value, str) else value
        return await MultiValueCollector(spec).collect(context, values, prompt_limit)

    if value is not None and not isinstance(value, str):
        raise TypeError(f"Argument {spec.key!r} takes a single value, got {type(value).__name__}.")
    return await SingleValueCollector(spec).collect(context, value, prompt_limit)
