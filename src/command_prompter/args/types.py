from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Awaitable, Dict, Iterable, Protocol, Union

from command_prompter.core.channel import PromptContext
from command_prompter.core.models import ValidationResult

if TYPE_CHECKING:
    from command_prompter.args.spec import ArgumentSpec

ValidatorOutcome = Union[bool, str, None, ValidationResult]


class TypeHandler(Protocol):
    """
    Pluggable validate/parse capability bound to a type id.

    `validate` returns True/False, a rejection reason string, or a ValidationResult.
    `parse` must never return None for an accepted value; raise instead when the value
    can no longer be resolved. Either method may be a coroutine.
    """

    id: str

    def validate(
        self, raw: str, context: PromptContext, spec: ArgumentSpec
    ) -> Union[ValidatorOutcome, Awaitable[ValidatorOutcome]]: ...

    def parse(self, raw: str, context: PromptContext, spec: ArgumentSpec) -> Any: ...


_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

_TRUTHY = frozenset({"true", "t", "yes", "y", "on", "enable", "enabled", "1", "+"})
_FALSY = frozenset({"false", "f", "no", "n", "off", "disable", "disabled", "0", "-"})


def _check_number_bounds(number: float, spec: ArgumentSpec) -> ValidationResult:
    if spec.min is not None and number < spec.min:
        return ValidationResult.reject(f"Please enter a number above or exactly {spec.min}.")
    if spec.max is not None and number > spec.max:
        return ValidationResult.reject(f"Please enter a number below or exactly {spec.max}.")
    return ValidationResult.accept()


class StringType:
    id = "string"

    def validate(self, raw: str, context: PromptContext, spec: ArgumentSpec) -> ValidationResult:
        if not raw:
            return ValidationResult.reject()
        if spec.min is not None and len(raw) < spec.min:
            return ValidationResult.reject(f"Please keep the {spec.label} above or exactly {spec.min} characters.")
        if spec.max is not None and len(raw) > spec.max:
            return ValidationResult.reject(f"Please keep the {spec.label} below or exactly {spec.max} characters.")
        return ValidationResult.accept()

    def parse(self, raw: str, context: PromptContext, spec: ArgumentSpec) -> str:
        return raw


class IntegerType:
    id = "integer"

    def validate(self, raw: str, context: PromptContext, spec: ArgumentSpec) -> ValidationResult:
        text = raw.strip()
        if not _INTEGER_PATTERN.match(text):
            return ValidationResult.reject()
        return _check_number_bounds(int(text), spec)

    def parse(self, raw: str, context: PromptContext, spec: ArgumentSpec) -> int:
        return int(raw.strip())


class FloatType:
    id = "float"

    def validate(self, raw: str, context: PromptContext, spec: ArgumentSpec) -> ValidationResult:
        try:
            number = float(raw)
        except ValueError:
            return ValidationResult.reject()
        # nan/inf parse fine but are not useful command input
        if number != number or number in (float("inf"), float("-inf")):
            return ValidationResult.reject()
        return _check_number_bounds(number, spec)

    def parse(self, raw: str, context: PromptContext, spec: ArgumentSpec) -> float:
        return float(raw)


class BooleanType:
    id = "boolean"

    def validate(self, raw: str, context: PromptContext, spec: ArgumentSpec) -> bool:
        lowered = raw.strip().lower()
        return lowered in _TRUTHY or lowered in _FALSY

    def parse(self, raw: str, context: PromptContext, spec: ArgumentSpec) -> bool:
        lowered = raw.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
        raise ValueError(f"Unknown boolean value: {raw!r}")


class TypeRegistry:
    """Plain lookup table of type handlers by id."""

    def __init__(self, handlers: Iterable[TypeHandler] = ()) -> None:
        self._handlers: Dict[str, TypeHandler] = {}
        for handler in handlers:
            self.register(handler)

    def register(self, handler: TypeHandler) -> None:
        type_id = getattr(handler, "id", None)
        if not isinstance(type_id, str) or not type_id:
            raise TypeError("Type handler must have a non-empty string id.")
        if type_id in self._handlers:
            raise ValueError(f"Type handler {type_id!r} is already registered.")
        self._handlers[type_id] = handler

    def has(self, type_id: str) -> bool:
        return type_id in self._handlers

    def get(self, type_id: str) -> TypeHandler:
        return self._handlers[type_id]

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._handlers

    def ids(self) -> list[str]:
        return sorted(self._handlers)


def default_registry() -> TypeRegistry:
    return TypeRegistry([StringType(), IntegerType(), FloatType(), BooleanType()])
