from __future__ import annotations

import logging

import discord
from discord.ext import commands

from command_prompter.adapters.discord.channel import DiscordPromptChannel, context_from_message
from command_prompter.args import ArgumentSpec, TypeRegistry
from command_prompter.collectors import ArgumentCollector
from command_prompter.config.models import DiscordSettings
from command_prompter.core.models import CancelReason

logger = logging.getLogger(__name__)

CLEAR_NICKNAME = "clear"


class ModerationCog(commands.Cog):
    """Moderation commands whose arguments are asked for interactively when missing."""

    def __init__(self, *, bot: commands.Bot, registry: TypeRegistry, settings: DiscordSettings, dry_run: bool) -> None:
        self._bot = bot
        self._settings = settings
        self._dry_run = dry_run
        self._nickname_args = ArgumentCollector(
            [
                ArgumentSpec.create(
                    registry,
                    key="member",
                    prompt="Please provide me a member to assign nicknames for!",
                    type="member",
                ),
                ArgumentSpec.create(
                    registry,
                    key="nickname",
                    prompt="Please provide me a nickname to assign!",
                    type="string",
                    max=32,
                    default=CLEAR_NICKNAME,
                ),
            ]
        )

    def _prompt_channel(self, ctx: commands.Context) -> DiscordPromptChannel:
        return DiscordPromptChannel(
            bot=self._bot,
            channel=ctx.channel,
            send_attempts=self._settings.send_retry_attempts,
            send_base_delay_seconds=self._settings.send_retry_base_delay_seconds,
        )

    @commands.command(
        name="nickname",
        aliases=["nick"],
        help='Assigns a nickname to a member. Use "clear" or leave it blank to remove the nickname.',
    )
    @commands.guild_only()
    @commands.has_permissions(manage_nicknames=True)
    async def nickname(self, ctx: commands.Context, *, raw: str = "") -> None:
        context = context_from_message(self._prompt_channel(ctx), ctx.message)
        try:
            result = await self._nickname_args.obtain(
                context,
                self._nickname_args.split(raw),
                self._settings.prompt_limit,
            )
        except commands.MemberNotFound as exc:
            logger.info("discord.nickname_member_gone guild_id=%s argument=%s", context.guild_id, exc.argument)
            await ctx.send("That member is no longer in this server.")
            return
        if result.cancelled is not CancelReason.NONE:
            await ctx.send("Cancelled command.")
            return

        member: discord.Member = result.values["member"]
        nickname: str = result.values["nickname"]
        clearing = nickname.strip().lower() == CLEAR_NICKNAME

        if self._dry_run:
            logger.info(
                "discord.dry_run_nickname guild_id=%s member_id=%s clearing=%s",
                context.guild_id,
                member.id,
                clearing,
            )
            return

        try:
            await member.edit(nick=None if clearing else nickname)
        except discord.Forbidden:
            logger.warning("discord.nickname_forbidden guild_id=%s member_id=%s", context.guild_id, member.id)
            await ctx.send("I don't have permission to change that member's nickname.")
            return

        logger.info("discord.nickname_changed guild_id=%s member_id=%s clearing=%s", context.guild_id, member.id, clearing)
        if clearing:
            await ctx.send(f"**{discord.utils.escape_markdown(member.display_name)}**'s nickname has been cleared!")
        else:
            await ctx.send(
                f"The nickname **{discord.utils.escape_markdown(nickname)}** has been assigned to "
                f"**{discord.utils.escape_markdown(member.name)}**!"
            )

    @nickname.error
    async def _nickname_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        if isinstance(error, commands.CheckFailure):
            await ctx.send("You need the Manage Nicknames permission in a server to use this command.")
            return
        logger.error(
            "discord.command_failed command=%s guild_id=%s channel_id=%s",
            ctx.command,
            str(ctx.guild.id) if ctx.guild is not None else None,
            str(ctx.channel.id),
            exc_info=error,
        )
