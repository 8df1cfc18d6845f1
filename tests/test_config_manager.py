"""
Test cases for the configuration management system.
Tests config loading, merging, environment overrides and typed access.
"""

import os
import json
from unittest.mock import patch

import pytest

from config_manager import (
    ConfigManager,
    AppConfig,
    AnalyticsConfig,
    PathsConfig,
    PROJECT_ROOT,
    resolve_data_dir,
)


class TestConfigManager:
    """Test the ConfigManager class functionality."""

    def test_defaults_when_file_missing(self, tmp_path):
        """Missing config file falls back to built-in defaults."""
        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(tmp_path / "missing.json"))

        analytics = manager.get_analytics_config()
        assert analytics.rate_limit_max_requests == 100
        assert analytics.rate_limit_window_seconds == 60
        assert analytics.default_dashboard_days == 30
        assert analytics.top_pages_limit == 10
        assert manager.get_paths_config().data_dir == "data"

    def test_load_config_from_file(self, tmp_path):
        """File values are merged over defaults section by section."""
        config_file = tmp_path / "portfolio_config.json"
        config_file.write_text(json.dumps({
            "app": {"port": 8080},
            "analytics": {"rate_limit_max_requests": 5},
            "paths": {"data_dir": "/srv/analytics"}
        }), encoding="utf-8")

        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(config_file))

        app_config = manager.get_app_config()
        assert app_config.port == 8080
        # untouched keys keep their defaults
        assert app_config.host == "127.0.0.1"
        assert manager.get_analytics_config().rate_limit_max_requests == 5
        assert manager.get_analytics_config().default_dashboard_days == 30
        assert manager.get_paths_config().data_dir == "/srv/analytics"

    def test_invalid_json_keeps_defaults(self, tmp_path):
        config_file = tmp_path / "broken.json"
        config_file.write_text("{not json", encoding="utf-8")

        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(config_file))

        assert manager.get_app_config().port == 5500

    def test_override_with_env_variables(self, tmp_path):
        """Environment variables win over file and defaults."""
        env_vars = {
            "APP_HOST": "0.0.0.0",
            "APP_PORT": "9000",
            "APP_DEBUG": "true",
            "ANALYTICS_RATE_LIMIT": "10",
            "ANALYTICS_RATE_WINDOW": "30",
            "ANALYTICS_DEFAULT_DAYS": "7",
            "ANALYTICS_TOP_PAGES": "3",
            "DATA_DIR": "/tmp/analytics-data",
        }

        with patch.dict(os.environ, env_vars, clear=True):
            manager = ConfigManager(str(tmp_path / "missing.json"))

        assert manager.get_app_config() == AppConfig(host="0.0.0.0", port=9000, debug=True)
        assert manager.get_analytics_config() == AnalyticsConfig(
            rate_limit_max_requests=10,
            rate_limit_window_seconds=30,
            default_dashboard_days=7,
            top_pages_limit=3,
        )
        assert manager.get_paths_config() == PathsConfig(data_dir="/tmp/analytics-data")

    @pytest.mark.parametrize("value,expected", [("true", True), ("TRUE", True), ("false", False), ("no", False)])
    def test_debug_flag_parsing(self, tmp_path, value, expected):
        with patch.dict(os.environ, {"APP_DEBUG": value}, clear=True):
            manager = ConfigManager(str(tmp_path / "missing.json"))
        assert manager.get_app_config().debug is expected


class TestResolveDataDir:
    """Relative data directories are anchored at the project root."""

    def test_relative_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert resolve_data_dir("data") == PROJECT_ROOT / "data"

    def test_absolute_path_unchanged(self, tmp_path):
        assert resolve_data_dir(str(tmp_path / "analytics")) == tmp_path / "analytics"
