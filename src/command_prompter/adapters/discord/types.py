from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Optional, Union

import discord
from discord.ext import commands

from command_prompter.core.channel import PromptContext
from command_prompter.core.models import ValidationResult

if TYPE_CHECKING:
    from command_prompter.args.spec import ArgumentSpec

logger = logging.getLogger(__name__)

_MEMBER_ID_PATTERN = re.compile(r"^(?:<@!?)?(\d{15,21})>?$")
_MAX_LISTED_MEMBERS = 15


async def _member_by_id(guild: discord.Guild, member_id: int) -> Optional[discord.Member]:
    member = guild.get_member(member_id)
    if member is not None:
        return member
    try:
        return await guild.fetch_member(member_id)
    except discord.NotFound:
        return None
    except discord.HTTPException:
        logger.warning("discord.member_fetch_failed guild_id=%s member_id=%s", guild.id, member_id)
        return None


def _members_by_name(guild: discord.Guild, raw: str) -> list[discord.Member]:
    lowered = raw.lower()
    found = [m for m in guild.members if lowered in m.name.lower() or lowered in m.display_name.lower()]
    if len(found) <= 1:
        return found
    exact = [m for m in found if lowered in (m.name.lower(), m.display_name.lower())]
    return exact if len(exact) == 1 else found


class MemberType:
    """A member of the guild the command was invoked in, by mention, id, or name."""

    id = "member"

    async def validate(
        self, raw: str, context: PromptContext, spec: ArgumentSpec
    ) -> Union[bool, ValidationResult]:
        guild = getattr(context.raw, "guild", None)
        if guild is None or not raw.strip():
            return False

        match = _MEMBER_ID_PATTERN.match(raw.strip())
        if match:
            return await _member_by_id(guild, int(match.group(1))) is not None

        found = _members_by_name(guild, raw.strip())
        if len(found) == 1:
            return True
        if not found:
            return False
        if len(found) > _MAX_LISTED_MEMBERS:
            return ValidationResult.reject("Multiple members found. Please be more specific.")
        names = ", ".join(discord.utils.escape_markdown(str(m)) for m in found)
        return ValidationResult.reject(f"Multiple members found, please be more specific: {names}")

    async def parse(self, raw: str, context: PromptContext, spec: ArgumentSpec) -> discord.Member:
        """Resolve the member again; raises MemberNotFound if it left since validation."""
        guild = context.raw.guild
        match = _MEMBER_ID_PATTERN.match(raw.strip())
        if match:
            member = await _member_by_id(guild, int(match.group(1)))
        else:
            found = _members_by_name(guild, raw.strip())
            member = found[0] if len(found) == 1 else None
        if member is None:
            raise commands.MemberNotFound(raw)
        return member
