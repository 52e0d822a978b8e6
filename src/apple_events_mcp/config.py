"""HTTP-mode configuration.

The config file is JSON (``config.json``) or YAML; JSON documents are valid
YAML, so both go through the same :func:`yaml.safe_load` path.  ``${VAR}``
references are expanded from the environment before parsing, which keeps the
API key out of the file if desired::

    {"port": 3030, "apiKey": "${APPLE_EVENTS_API_KEY}"}
"""

from __future__ import annotations

import os
import secrets
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_CONFIG_PATH = Path("config.json")
DEFAULT_PORT = 3030
DEFAULT_HOST = "0.0.0.0"


class ConfigError(Exception):
    """The config file is missing, unparsable or invalid."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)


class ServerConfig(BaseModel):
    """Settings for the HTTP transport."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    port: int = DEFAULT_PORT
    api_key: str = Field(alias="apiKey")
    host: str = DEFAULT_HOST
    store_path: Path | None = Field(default=None, alias="storePath")

    @field_validator("port")
    @classmethod
    def _port_in_range(cls, value: int) -> int:
        if not 1 <= value <= 65535:
            raise ValueError(f"Invalid port: {value}. Must be between 1 and 65535")
        return value

    @field_validator("api_key")
    @classmethod
    def _api_key_present(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("apiKey must not be empty in config.json")
        return value


class ConfigLoader:
    """Load and validate a config file into a :class:`ServerConfig`."""

    def __init__(self, path: Path = DEFAULT_CONFIG_PATH) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> ServerConfig:
        """Read the file, expand environment variables and validate.

        Raises:
            ConfigError: The file is missing or unreadable, is not a mapping,
                or fails validation (port out of range, empty ``apiKey``).
        """
        if not self._path.exists():
            raise ConfigError(
                f"Config file not found: {self._path}. "
                'Create a config.json with {"port": 3030, "apiKey": "your-key"}',
                self._path,
            )
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}", self._path) from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Config parse error: {exc}", self._path) from exc

        if not isinstance(data, dict):
            raise ConfigError("Config file must contain an object", self._path)

        try:
            return ServerConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(_first_error(exc), self._path) from exc


def generate_api_key() -> str:
    """Return a fresh API key: 32 random bytes, hex encoded."""
    return secrets.token_hex(32)


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    if error["type"] == "value_error":
        # Our own validators; pydantic prefixes "Value error, ".
        return str(error["ctx"]["error"])
    field = ".".join(str(part) for part in error["loc"]) or "config"
    return f"Invalid {field}: {error['msg']}"
