"""Tests for reading ``.specrun.yaml``."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from specrun.config import CONFIG_FILENAME, config_path, load_config, resolve_profile
from specrun.exceptions import ConfigError
from specrun.models import AuthConfig, Config, ProfileConfig


class TestConfigPath:
    def test_defaults_to_working_directory(self, isolated_config: Path) -> None:
        assert config_path() == isolated_config / CONFIG_FILENAME

    def test_env_override(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPECRUN_CONFIG", str(isolated_config / "other.yaml"))
        assert config_path() == isolated_config / "other.yaml"


class TestLoadConfig:
    def test_loads_profiles(self, write_config: Callable[[dict], Path]) -> None:
        write_config(
            {
                "products": {
                    "spec_file": "products.yaml",
                    "server_url": "https://api.catalog.test/v1",
                    "auth": {"type": "bearer", "command": "pass show catalog"},
                },
                "orders": {"spec_file": "https://example.com/orders.json"},
            }
        )
        config = load_config()

        assert config.names() == ["orders", "products"]
        products = config.profiles["products"]
        assert products.server_url == "https://api.catalog.test/v1"
        assert products.auth == AuthConfig(type="bearer", command="pass show catalog")
        assert config.profiles["orders"].auth == AuthConfig()

    def test_unknown_profile_keys_are_kept(self, write_config: Callable[[dict], Path]) -> None:
        write_config({"products": {"spec_file": "products.yaml", "team": "catalog"}})
        assert load_config().profiles["products"].model_extra == {"team": "catalog"}

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "profiles.yaml"
        path.write_text("products:\n  spec_file: products.yaml\n")
        assert load_config(path).names() == ["products"]

    def test_missing_file(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config()

    def test_empty_file(self, isolated_config: Path) -> None:
        (isolated_config / CONFIG_FILENAME).write_text("  \n")
        with pytest.raises(ConfigError, match="is empty"):
            load_config()

    def test_invalid_yaml(self, isolated_config: Path) -> None:
        (isolated_config / CONFIG_FILENAME).write_text("products: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config()

    def test_not_a_mapping(self, isolated_config: Path) -> None:
        (isolated_config / CONFIG_FILENAME).write_text("- products\n")
        with pytest.raises(ConfigError, match="must map profile names"):
            load_config()

    def test_profile_without_spec_file(self, write_config: Callable[[dict], Path]) -> None:
        write_config({"products": {"server_url": "https://api.catalog.test"}})
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config()


class TestResolveProfile:
    @pytest.fixture
    def config(self) -> Config:
        return Config(
            profiles={
                "products": ProfileConfig(
                    spec_file="products.yaml", server_url="https://api.catalog.test/v1"
                )
            }
        )

    def test_returns_profile(self, config: Config, isolated_config: Path) -> None:
        assert resolve_profile(config, "products").spec_file == "products.yaml"

    def test_unknown_profile(self, config: Config) -> None:
        with pytest.raises(ConfigError, match="^unknown profile staging$"):
            resolve_profile(config, "staging")

    def test_server_url_env_override(
        self, config: Config, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SPECRUN_SERVER_URL", "http://localhost:8080")
        profile = resolve_profile(config, "products")
        assert profile.server_url == "http://localhost:8080"
        # The loaded config is left untouched
        assert config.profiles["products"].server_url == "https://api.catalog.test/v1"
