"""Interactive acquisition of command arguments over a chat channel."""

from command_prompter.args import ArgumentSpec, ArgumentSpecError, TypeRegistry, UnknownTypeError, default_registry
from command_prompter.collectors import ArgumentCollector, MultiValueCollector, SingleValueCollector, obtain
from command_prompter.core.channel import PromptChannel, PromptContext
from command_prompter.core.models import CancelReason, CollectionResult, ValidationResult

__all__ = [
    "ArgumentCollector",
    "ArgumentSpec",
    "ArgumentSpecError",
    "CancelReason",
    "CollectionResult",
    "MultiValueCollector",
    "PromptChannel",
    "PromptContext",
    "SingleValueCollector",
    "TypeRegistry",
    "UnknownTypeError",
    "ValidationResult",
    "default_registry",
    "obtain",
]
