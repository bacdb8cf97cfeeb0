from __future__ import annotations

import asyncio
import logging

import discord
from discord.ext import commands

from command_prompter.adapters.discord.interfaces import DiscordAdapter
from command_prompter.adapters.discord.moderation_cog import ModerationCog
from command_prompter.adapters.discord.types import MemberType
from command_prompter.args import TypeRegistry, default_registry
from command_prompter.config.models import AppConfig

logger = logging.getLogger(__name__)


def _build_intents() -> discord.Intents:
    intents = discord.Intents.none()
    intents.guilds = True
    intents.guild_messages = True
    intents.members = True
    intents.message_content = True
    return intents


def build_registry() -> TypeRegistry:
    registry = default_registry()
    registry.register(MemberType())
    return registry


class _PrompterBot(commands.Bot):
    def __init__(self, *, config: AppConfig, registry: TypeRegistry) -> None:
        super().__init__(command_prefix=config.discord.command_prefix, intents=_build_intents())

        self._moderation_cog = ModerationCog(
            bot=self,
            registry=registry,
            settings=config.discord,
            dry_run=config.app.dry_run,
        )

    async def setup_hook(self) -> None:
        await self.add_cog(self._moderation_cog)

    async def on_ready(self) -> None:
        user = self.user
        logger.info(
            "discord.ready user_id=%s user=%s",
            str(user.id) if user is not None else None,
            str(user) if user is not None else None,
        )


class DiscordBotAdapter(DiscordAdapter):
    def __init__(self, *, config: AppConfig, registry: TypeRegistry | None = None) -> None:
        self._config = config
        self._registry = registry if registry is not None else build_registry()

        self._bot = _PrompterBot(config=self._config, registry=self._registry)

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    async def start(self) -> None:
        logger.info(
            "discord.adapter_starting dry_run=%s command_prefix=%s prompt_limit=%s",
            self._config.app.dry_run,
            self._config.discord.command_prefix,
            self._config.discord.prompt_limit,
        )
        await self._bot.start(self._config.discord.token)

    async def run_for(self, *, seconds: float, ready_timeout_seconds: float = 30) -> None:
        logger.info(
            "discord.adapter_starting dry_run=%s command_prefix=%s run_for_seconds=%s",
            self._config.app.dry_run,
            self._config.discord.command_prefix,
            seconds,
        )

        await self._bot.login(self._config.discord.token)
        connect_task = asyncio.create_task(self._bot.connect(reconnect=True))
        try:
            await asyncio.wait_for(self._bot.wait_until_ready(), timeout=ready_timeout_seconds)
            await asyncio.sleep(seconds)
        finally:
            await self.stop()
            if not connect_task.done():
                connect_task.cancel()
            try:
                await connect_task
            except asyncio.CancelledError:
                logger.info("discord.connect_task_cancelled")

    async def stop(self) -> None:
        if not self._bot.is_closed():
            await self._bot.close()
