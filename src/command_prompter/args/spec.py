from __future__ import annotations

import inspect
import math
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from command_prompter.args.types import TypeHandler, TypeRegistry
from command_prompter.core.channel import PromptContext
from command_prompter.core.models import ValidationResult

DEFAULT_WAIT_SECONDS: float = 30

Validator = Callable[[str, PromptContext, "ArgumentSpec"], Any]
Parser = Callable[[str, PromptContext, "ArgumentSpec"], Any]


class ArgumentSpecError(ValueError):
    """An argument declaration is inconsistent. Raised at registration time, never mid-dialogue."""


class UnknownTypeError(ArgumentSpecError, LookupError):
    def __init__(self, type_id: str) -> None:
        super().__init__(f'Argument type "{type_id}" isn\'t registered.')
        self.type_id = type_id


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


@dataclass(frozen=True, slots=True)
class ArgumentSpec:
    """
    Immutable description of one expected command input.

    Exactly one way of validating/parsing is available after construction: the bound
    type handler, or the custom validator and parser pair. A custom function set next
    to a type overrides that half only.
    """

    key: str
    prompt: str
    label: str = ""
    type: Optional[TypeHandler] = None
    min: Optional[float] = None
    max: Optional[float] = None
    # None means the argument is required.
    default: Any = None
    infinite: bool = False
    validator: Optional[Validator] = None
    parser: Optional[Parser] = None
    wait: float = DEFAULT_WAIT_SECONDS

    def __post_init__(self) -> None:
        if not isinstance(self.key, str):
            raise TypeError("Argument key must be a string.")
        if not self.key:
            raise ArgumentSpecError("Argument key must not be empty.")
        if not isinstance(self.label, str):
            raise TypeError("Argument label must be a string.")
        if not isinstance(self.prompt, str):
            raise TypeError("Argument prompt must be a string.")
        if not self.prompt:
            raise ArgumentSpecError("Argument prompt must not be empty.")
        if self.validator is not None and not callable(self.validator):
            raise TypeError("Argument validate must be a function.")
        if self.parser is not None and not callable(self.parser):
            raise TypeError("Argument parse must be a function.")
        if self.type is None and (self.validator is None or self.parser is None):
            raise ArgumentSpecError(
                'Argument must have either "type" or both "validate" and "parse" specified.'
            )
        if self.type is not None and not all(
            callable(getattr(self.type, name, None)) for name in ("validate", "parse")
        ):
            raise TypeError("Argument type must provide validate and parse.")
        for name in ("min", "max"):
            bound = getattr(self, name)
            if bound is not None and not _is_number(bound):
                raise TypeError(f"Argument {name} must be a number.")
        if not isinstance(self.infinite, bool):
            raise TypeError("Argument infinite must be a boolean.")
        if not _is_number(self.wait) or math.isnan(self.wait):
            raise TypeError("Argument wait must be a number.")
        if not self.label:
            object.__setattr__(self, "label", self.key)

    @classmethod
    def create(
        cls,
        registry: TypeRegistry,
        *,
        key: str,
        prompt: str,
        type: Optional[str] = None,
        label: Optional[str] = None,
        min: Optional[float] = None,
        max: Optional[float] = None,
        default: Any = None,
        infinite: bool = False,
        validate: Optional[Validator] = None,
        parse: Optional[Parser] = None,
        wait: float = DEFAULT_WAIT_SECONDS,
    ) -> ArgumentSpec:
        """Build a spec from a declaration that names its type by registry id."""
        handler: Optional[TypeHandler] = None
        if type is not None:
            if not isinstance(type, str):
                raise TypeError("Argument type must be a registered type id.")
            if type not in registry:
                raise UnknownTypeError(type)
            handler = registry.get(type)
        return cls(
            key=key,
            prompt=prompt,
            label="" if label is None else label,
            type=handler,
            min=min,
            max=max,
            default=default,
            infinite=infinite,
            validator=validate,
            parser=parse,
            wait=wait,
        )

    @property
    def required(self) -> bool:
        return self.default is None

    @property
    def wait_timeout(self) -> Optional[float]:
        """Reply timeout in seconds, or None to wait forever."""
        if self.wait > 0 and not math.isinf(self.wait):
            return float(self.wait)
        return None

    async def validate(self, raw: str, context: PromptContext) -> ValidationResult:
        if self.validator is not None:
            outcome: Union[bool, str, None, ValidationResult] = await _resolve(self.validator(raw, context, self))
        else:
            assert self.type is not None
            outcome = await _resolve(self.type.validate(raw, context, self))
        return ValidationResult.coerce(outcome)

    async def parse(self, raw: str, context: PromptContext) -> Any:
        if self.parser is not None:
            parsed = await _resolve(self.parser(raw, context, self))
        else:
            assert self.type is not None
            parsed = await _resolve(self.type.parse(raw, context, self))
        if parsed is None:
            raise ValueError(f"Parser for argument \"{self.key}\" returned None for an accepted value.")
        return parsed
