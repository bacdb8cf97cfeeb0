from __future__ import annotations

import logging
import os
import typing
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

from command_prompter.config.models import AppConfig, ConfigLoadRequest

logger = logging.getLogger(__name__)

KeyPath = tuple[str, ...]


def _is_section(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def _is_container(annotation: Any) -> bool:
    return typing.get_origin(annotation) in (list, dict, tuple, set)


def settings_key_paths(model: type[BaseModel], parent: KeyPath = ()) -> dict[KeyPath, bool]:
    """
    Every configuration key path under `model`, mapped to whether an env var may set it.

    Sections and container fields are listed but cannot be overridden as a whole.
    """
    paths: dict[KeyPath, bool] = {}
    for name, field in model.model_fields.items():
        path = parent + (name,)
        if _is_section(field.annotation):
            paths[path] = False
            paths.update(settings_key_paths(field.annotation, path))
        else:
            paths[path] = not _is_container(field.annotation)
    return paths


def _merge_into(target: MutableMapping[str, Any], layer: Mapping[str, Any]) -> None:
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, MutableMapping):
            _merge_into(current, value)
        else:
            target[key] = value


class YamlConfigLoader:
    """
    Build an AppConfig from model defaults, a YAML file, and `APP__SECTION__KEY` variables.

    Later layers win. A .env file only fills variables that are not already set.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = environ

    async def load(self, request: ConfigLoadRequest = ConfigLoadRequest()) -> AppConfig:
        layered: dict[str, Any] = {}
        _merge_into(layered, self._yaml_layer(Path(request.yaml_path)))

        if request.dotenv_path is not None and Path(request.dotenv_path).exists():
            load_dotenv(dotenv_path=request.dotenv_path, override=False)

        environ = os.environ if self._environ is None else self._environ
        _merge_into(layered, self._env_layer(environ, request.env_prefix))
        return AppConfig.model_validate(layered)

    @staticmethod
    def _yaml_layer(path: Path) -> dict[str, Any]:
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        document = yaml.safe_load(path.read_text(encoding="utf-8"))
        if document is None:
            return {}
        if not isinstance(document, dict):
            raise ValueError(f"Top-level YAML must be a mapping, got: {type(document).__name__}")
        return document

    @staticmethod
    def _env_layer(environ: Mapping[str, str], prefix: str) -> dict[str, Any]:
        """Nest matching variables by key path; pydantic coerces the string values."""
        known = settings_key_paths(AppConfig)
        layer: dict[str, Any] = {}
        for name in sorted(environ):
            if not name.startswith(prefix):
                continue
            path = tuple(part.lower() for part in name[len(prefix) :].split("__") if part)
            dotted = ".".join(path)
            if not path:
                raise ValueError(f"Invalid environment variable override name: {name}")
            if path not in known:
                raise KeyError(f"Unknown configuration key path: {dotted}")
            if not known[path]:
                raise TypeError(f"Only scalar settings can be set from the environment, '{dotted}' is not one.")

            node = layer
            for section in path[:-1]:
                node = node.setdefault(section, {})
            node[path[-1]] = environ[name]
            logger.debug("config.env_override key=%s", dotted)
        return layer
