"""Tests for HTTP-mode configuration loading."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import pytest

from apple_events_mcp.config import (
    DEFAULT_HOST,
    ConfigError,
    ConfigLoader,
    ServerConfig,
    generate_api_key,
)

if TYPE_CHECKING:
    from pathlib import Path


def _write(tmp_path: Path, text: str, name: str = "config.json") -> Path:
    path = tmp_path / name
    path.write_text(text)
    return path


class TestConfigLoader:
    def test_load_json(self, tmp_path: Path) -> None:
        path = _write(tmp_path, '{"port": 8080, "apiKey": "secret"}')
        config = ConfigLoader(path).load()

        assert config.port == 8080
        assert config.api_key == "secret"
        assert config.host == DEFAULT_HOST
        assert config.store_path is None

    def test_load_yaml(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "port: 9000\napiKey: secret\nhost: 127.0.0.1\n", "config.yaml")
        config = ConfigLoader(path).load()

        assert config.port == 9000
        assert config.host == "127.0.0.1"

    def test_port_defaults(self, tmp_path: Path) -> None:
        config = ConfigLoader(_write(tmp_path, '{"apiKey": "secret"}')).load()
        assert config.port == 3030

    def test_store_path(self, tmp_path: Path) -> None:
        path = _write(tmp_path, '{"apiKey": "k", "storePath": "/tmp/events.json"}')
        assert str(ConfigLoader(path).load().store_path) == "/tmp/events.json"

    def test_env_expansion(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEST_APPLE_EVENTS_KEY", "from-env")
        path = _write(tmp_path, '{"apiKey": "${TEST_APPLE_EVENTS_KEY}"}')

        assert ConfigLoader(path).load().api_key == "from-env"

    def test_missing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        with pytest.raises(ConfigError, match="Config file not found") as exc_info:
            ConfigLoader(path).load()
        assert exc_info.value.path == path
        assert '"apiKey": "your-key"' in exc_info.value.message

    @pytest.mark.parametrize("port", [0, 65536, -1])
    def test_port_out_of_range(self, tmp_path: Path, port: int) -> None:
        path = _write(tmp_path, f'{{"port": {port}, "apiKey": "k"}}')
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader(path).load()
        assert exc_info.value.message == f"Invalid port: {port}. Must be between 1 and 65535"

    @pytest.mark.parametrize("key", ['""', '"   "'])
    def test_empty_api_key(self, tmp_path: Path, key: str) -> None:
        path = _write(tmp_path, f'{{"apiKey": {key}}}')
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader(path).load()
        assert exc_info.value.message == "apiKey must not be empty in config.json"

    def test_missing_api_key(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="apiKey"):
            ConfigLoader(_write(tmp_path, '{"port": 3030}')).load()

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="must contain an object"):
            ConfigLoader(_write(tmp_path, "[1, 2]")).load()

    def test_unparsable(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="parse error"):
            ConfigLoader(_write(tmp_path, '{"port": [}')).load()


class TestServerConfig:
    def test_populate_by_field_name(self) -> None:
        config = ServerConfig(api_key="k", port=1)
        assert config.api_key == "k"


class TestGenerateApiKey:
    def test_format(self) -> None:
        key = generate_api_key()
        assert re.fullmatch(r"[0-9a-f]{64}", key)

    def test_unique(self) -> None:
        assert generate_api_key() != generate_api_key()
