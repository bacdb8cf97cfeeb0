"""Argument declarations and type handlers."""

from command_prompter.args.spec import ArgumentSpec, ArgumentSpecError, UnknownTypeError
from command_prompter.args.types import TypeHandler, TypeRegistry, default_registry

__all__ = [
    "ArgumentSpec",
    "ArgumentSpecError",
    "TypeHandler",
    "TypeRegistry",
    "UnknownTypeError",
    "default_registry",
]
