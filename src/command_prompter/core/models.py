from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Union

from command_prompter.core.channel import ReplyMessage, SentMessage


class CancelReason(str, Enum):
    NONE = "none"
    USER = "user"
    TIMEOUT = "timeout"
    PROMPT_LIMIT = "promptLimit"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """
    Outcome of validating one raw value.

    A rejection may carry a reason; when present it is shown to the user verbatim
    instead of the generic invalid-input message.
    """

    accepted: bool
    reason: Optional[str] = None

    @classmethod
    def accept(cls) -> ValidationResult:
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: Optional[str] = None) -> ValidationResult:
        return cls(accepted=False, reason=reason or None)

    @classmethod
    def coerce(cls, outcome: Union[bool, str, None, ValidationResult]) -> ValidationResult:
        if isinstance(outcome, ValidationResult):
            return outcome
        if isinstance(outcome, str):
            return cls.reject(outcome)
        return cls.accept() if outcome else cls.reject()


@dataclass(frozen=True, slots=True)
class CollectionResult:
    value: Any
    cancelled: CancelReason
    prompts: Sequence[SentMessage]
    answers: Sequence[ReplyMessage]
    # Values accepted before termination (infinite arguments only).
    collected: Sequence[Any] = ()

    @property
    def ok(self) -> bool:
        return self.cancelled is CancelReason.NONE
