"""Runtime configuration models and loading."""

from command_prompter.config.interfaces import ConfigLoader
from command_prompter.config.loader import YamlConfigLoader
from command_prompter.config.models import AppConfig, ConfigLoadRequest

__all__ = ["AppConfig", "ConfigLoadRequest", "ConfigLoader", "YamlConfigLoader"]
