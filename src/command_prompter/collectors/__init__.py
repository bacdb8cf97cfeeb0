"""Dialogue state machines that obtain argument values from users."""

from command_prompter.collectors.arguments import ArgumentCollector, ArgumentCollectorResult, split_arguments
from command_prompter.collectors.infinite import MultiValueCollector
from command_prompter.collectors.obtain import obtain
from command_prompter.collectors.single import SingleValueCollector

__all__ = [
    "ArgumentCollector",
    "ArgumentCollectorResult",
    "MultiValueCollector",
    "SingleValueCollector",
    "obtain",
    "split_arguments",
]
