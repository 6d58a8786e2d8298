"""
Environment-aware configuration.

Values come from ``<config_path>/<env>.yaml``; any environment variable with
the same key (including ones loaded from ``.env``) takes precedence. Secrets
are expected to live only in the environment.
"""

from __future__ import annotations

import os
import typing
from pathlib import Path
from typing import Any, TypeVar

import yaml
from dotenv import load_dotenv
from pydantic import TypeAdapter, ValidationError

from companion.components.configuration.configuration_interface import (
    ConfigurationInterface,
)

T = TypeVar("T")

_MISSING = object()


def _is_list_type(value_type: Any) -> bool:
    return value_type is list or typing.get_origin(value_type) is list


class Configuration(ConfigurationInterface):
    def __init__(self, env: str, config_path: str | Path) -> None:
        load_dotenv()

        self.env = env
        self.config_file = Path(config_path) / f"{env}.yaml"
        self._values: dict[str, Any] = self._load_file()

    def _load_file(self) -> dict[str, Any]:
        if not self.config_file.exists():
            return {}
        raw = yaml.safe_load(self.config_file.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Configuration file {self.config_file} must be a mapping")
        return raw

    def get_configuration(
        self, key: str, value_type: type[T], default: Any = None
    ) -> T:
        value: Any = os.environ.get(key, _MISSING)
        if value is _MISSING:
            value = self._values.get(key, _MISSING)
        if value is _MISSING or value is None:
            return default

        # Env vars carry lists as comma-separated strings
        if _is_list_type(value_type) and isinstance(value, str):
            value = [item.strip() for item in value.split(",") if item.strip()]

        try:
            return TypeAdapter(value_type).validate_python(value)
        except ValidationError as e:
            raise ValueError(f"Invalid value for configuration key {key}: {e}") from e
