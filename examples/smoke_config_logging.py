from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Optional

from command_prompter.args import ArgumentSpec, default_registry
from command_prompter.collectors import ArgumentCollector
from command_prompter.config import YamlConfigLoader
from command_prompter.config.models import ConfigLoadRequest
from command_prompter.core.channel import PromptContext
from command_prompter.logging import init_logging


@dataclass(frozen=True)
class ConsoleLine:
    content: str


class ConsolePromptChannel:
    """Prompts on stdout and reads replies from stdin, for trying argument specs locally."""

    async def send(self, text: str) -> ConsoleLine:
        print(text, flush=True)
        return ConsoleLine(text)

    async def await_reply(self, author_id: str, timeout_seconds: Optional[float]) -> Optional[ConsoleLine]:
        try:
            line = await asyncio.wait_for(asyncio.to_thread(sys.stdin.readline), timeout_seconds)
        except asyncio.TimeoutError:
            return None
        return ConsoleLine(line.rstrip("\n"))


async def main() -> None:
    config = await YamlConfigLoader().load(ConfigLoadRequest(yaml_path="examples/config.yaml", dotenv_path=None))
    init_logging(config.logging)

    logger = logging.getLogger("smoke")
    logger.info("smoke.config_loaded dry_run=%s prefix=%s", config.app.dry_run, config.discord.command_prefix)

    registry = default_registry()
    collector = ArgumentCollector(
        [
            ArgumentSpec.create(registry, key="title", prompt="What should the poll be called?", type="string", max=50),
            ArgumentSpec.create(
                registry, key="options", label="option", prompt="Which options?", type="integer", min=1, infinite=True
            ),
        ]
    )
    logger.info("smoke.registry types=%s", ",".join(registry.ids()))

    raw = " ".join(sys.argv[1:])
    context = PromptContext(channel=ConsolePromptChannel(), author_id="console", channel_id="console", content=raw)
    result = await collector.obtain(context, collector.split(raw), config.discord.prompt_limit)
    logger.info(
        "smoke.arguments values=%s cancelled=%s prompts=%s",
        result.values,
        result.cancelled.value,
        len(result.prompts),
    )


if __name__ == "__main__":
    asyncio.run(main())
