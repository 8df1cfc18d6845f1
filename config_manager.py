"""
Configuration management for the portfolio analytics backend.
Handles loading, validating, and providing access to application settings.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass

PROJECT_ROOT = Path(__file__).parent


@dataclass
class AppConfig:
    """Application configuration settings."""
    host: str
    port: int
    debug: bool


@dataclass
class AnalyticsConfig:
    """Analytics tracking and dashboard settings."""
    rate_limit_max_requests: int
    rate_limit_window_seconds: int
    default_dashboard_days: int
    top_pages_limit: int


@dataclass
class PathsConfig:
    """Path configuration settings."""
    data_dir: str


class ConfigManager:
    """Manages application configuration loading and access."""

    def __init__(self, config_file: str = "portfolio_config.json"):
        self.config_file = Path(config_file)
        self._config: Optional[Dict[str, Any]] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables."""
        # Start with default config
        self._config = self._get_default_config()

        # Load base config from file
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                    # Merge file config with defaults
                    self._merge_config(file_config)
            except (json.JSONDecodeError, FileNotFoundError):
                # Keep default config if file is invalid or not found
                pass

        # Override with environment variables
        self._override_with_env()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "app": {
                "host": "127.0.0.1",
                "port": 5500,
                "debug": False
            },
            "analytics": {
                "rate_limit_max_requests": 100,
                "rate_limit_window_seconds": 60,
                "default_dashboard_days": 30,
                "top_pages_limit": 10
            },
            "paths": {
                "data_dir": "data"
            }
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        for section, values in file_config.items():
            if section in self._config:
                if isinstance(values, dict):
                    self._config[section].update(values)
                else:
                    self._config[section] = values
            else:
                self._config[section] = values

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        # App settings
        if os.getenv("APP_HOST"):
            self._config["app"]["host"] = os.getenv("APP_HOST")

        if os.getenv("APP_PORT"):
            self._config["app"]["port"] = int(os.getenv("APP_PORT"))

        if os.getenv("APP_DEBUG"):
            self._config["app"]["debug"] = os.getenv("APP_DEBUG").lower() == "true"

        # Analytics settings
        if os.getenv("ANALYTICS_RATE_LIMIT"):
            self._config["analytics"]["rate_limit_max_requests"] = int(os.getenv("ANALYTICS_RATE_LIMIT"))

        if os.getenv("ANALYTICS_RATE_WINDOW"):
            self._config["analytics"]["rate_limit_window_seconds"] = int(os.getenv("ANALYTICS_RATE_WINDOW"))

        if os.getenv("ANALYTICS_DEFAULT_DAYS"):
            self._config["analytics"]["default_dashboard_days"] = int(os.getenv("ANALYTICS_DEFAULT_DAYS"))

        if os.getenv("ANALYTICS_TOP_PAGES"):
            self._config["analytics"]["top_pages_limit"] = int(os.getenv("ANALYTICS_TOP_PAGES"))

        # Paths
        if os.getenv("DATA_DIR"):
            self._config["paths"]["data_dir"] = os.getenv("DATA_DIR")

    def get_app_config(self) -> AppConfig:
        """Get application configuration."""
        app_config = self._config["app"]
        return AppConfig(
            host=app_config["host"],
            port=app_config["port"],
            debug=app_config["debug"]
        )

    def get_analytics_config(self) -> AnalyticsConfig:
        """Get analytics configuration."""
        analytics_config = self._config["analytics"]
        return AnalyticsConfig(
            rate_limit_max_requests=analytics_config["rate_limit_max_requests"],
            rate_limit_window_seconds=analytics_config["rate_limit_window_seconds"],
            default_dashboard_days=analytics_config["default_dashboard_days"],
            top_pages_limit=analytics_config["top_pages_limit"]
        )

    def get_paths_config(self) -> PathsConfig:
        """Get paths configuration."""
        paths_config = self._config["paths"]
        return PathsConfig(
            data_dir=paths_config["data_dir"]
        )


# Global configuration instance
config_manager = ConfigManager()


def get_app_config() -> AppConfig:
    """Get application configuration."""
    return config_manager.get_app_config()


def get_analytics_config() -> AnalyticsConfig:
    """Get analytics configuration."""
    return config_manager.get_analytics_config()


def get_paths_config() -> PathsConfig:
    """Get paths configuration."""
    return config_manager.get_paths_config()



def resolve_data_dir(data_dir: str) -> Path:
    """Resolve a configured data directory; relative paths are taken from the project root."""
    path = Path(data_dir)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path
