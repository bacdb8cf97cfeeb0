"""Discord adapter contracts and implementations."""

from command_prompter.adapters.discord.bot_adapter import DiscordBotAdapter, build_registry
from command_prompter.adapters.discord.channel import DiscordPromptChannel, context_from_message
from command_prompter.adapters.discord.moderation_cog import ModerationCog
from command_prompter.adapters.discord.types import MemberType

__all__ = [
    "DiscordBotAdapter",
    "DiscordPromptChannel",
    "MemberType",
    "ModerationCog",
    "build_registry",
    "context_from_message",
]
