"""
Configuration management for the Paper Swipe app.
Handles loading, validating, and providing access to application settings.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass


@dataclass
class FeedConfig:
    """Upstream paper service settings."""
    base_url: str
    batch_limit: int
    timeout: float


@dataclass
class SessionConfig:
    """Swipe session behaviour settings."""
    lock_duration_ms: int
    recommendation_interval: int
    storage_file: str


@dataclass
class AppConfig:
    """Application configuration settings."""
    host: str
    port: int
    debug: bool


class ConfigManager:
    """Manages application configuration loading and access."""

    def __init__(self, config_file: str = "swipe_config.json"):
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
                    self._merge_config(file_config)
            except (json.JSONDecodeError, FileNotFoundError):
                # Keep default config if file is invalid or not found
                pass

        # Override with environment variables
        self._override_with_env()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "feed": {
                "base_url": "http://localhost:8000",
                "batch_limit": 5,
                "timeout": 10.0
            },
            "session": {
                "lock_duration_ms": 500,
                "recommendation_interval": 5,
                "storage_file": "user_data/session_storage.json"
            },
            "app": {
                "host": "0.0.0.0",
                "port": 22582,
                "debug": False
            }
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        if not isinstance(file_config, dict):
            return
        for section, values in file_config.items():
            if section in self._config and isinstance(values, dict):
                self._config[section].update(values)

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        # Feed settings
        if os.getenv("PAPER_API_BASE_URL"):
            self._config["feed"]["base_url"] = os.getenv("PAPER_API_BASE_URL")

        if os.getenv("FEED_BATCH_LIMIT"):
            self._config["feed"]["batch_limit"] = int(os.getenv("FEED_BATCH_LIMIT"))

        if os.getenv("FEED_TIMEOUT"):
            self._config["feed"]["timeout"] = float(os.getenv("FEED_TIMEOUT"))

        # Session settings
        if os.getenv("LOCK_DURATION_MS"):
            self._config["session"]["lock_duration_ms"] = int(os.getenv("LOCK_DURATION_MS"))

        if os.getenv("RECOMMENDATION_INTERVAL"):
            self._config["session"]["recommendation_interval"] = int(os.getenv("RECOMMENDATION_INTERVAL"))

        if os.getenv("SESSION_STORAGE_FILE"):
            self._config["session"]["storage_file"] = os.getenv("SESSION_STORAGE_FILE")

        # App settings
        if os.getenv("APP_HOST"):
            self._config["app"]["host"] = os.getenv("APP_HOST")

        if os.getenv("APP_PORT"):
            self._config["app"]["port"] = int(os.getenv("APP_PORT"))

        if os.getenv("APP_DEBUG"):
            self._config["app"]["debug"] = os.getenv("APP_DEBUG").lower() == "true"

    def get_feed_config(self) -> FeedConfig:
        """Get upstream feed configuration."""
        feed_config = self._config["feed"]
        return FeedConfig(
            base_url=feed_config["base_url"],
            batch_limit=int(feed_config["batch_limit"]),
            timeout=float(feed_config["timeout"])
        )

    def get_session_config(self) -> SessionConfig:
        """Get swipe session configuration."""
        session_config = self._config["session"]
        return SessionConfig(
            lock_duration_ms=int(session_config["lock_duration_ms"]),
            recommendation_interval=int(session_config["recommendation_interval"]),
            storage_file=session_config["storage_file"]
        )

    def get_app_config(self) -> AppConfig:
        """Get application configuration."""
        app_config = self._config["app"]
        return AppConfig(
            host=app_config["host"],
            port=app_config["port"],
            debug=app_config["debug"]
        )

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return self._config.copy()

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def save_config(self) -> None:
        """Save current configuration to file."""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)


# Global configuration instance
config_manager = ConfigManager()


def get_feed_config() -> FeedConfig:
    """Get upstream feed configuration."""
    return config_manager.get_feed_config()


def get_session_config() -> SessionConfig:
    """Get swipe session configuration."""
    return config_manager.get_session_config()


def get_app_config() -> AppConfig:
    """Get application configuration."""
    return config_manager.get_app_config()


def reload_config() -> None:
    """Reload configuration."""
    config_manager.reload()


def save_config() -> None:
    """Save configuration."""
    config_manager.save_config()
