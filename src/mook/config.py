"""
Configuration Management for mook

Handles loading, saving, and managing configuration for the hook engine.
"""

import json
import logging
import os
import threading
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "MOOK_LOG_LEVEL"


@dataclass
class MookConfig:
    """Main configuration class for mook."""

    # Core settings
    debug: bool = False

    # Logging settings
    log_level: str = "WARNING"

    # Concurrency settings
    thread_safe: bool = True  # per-target locks around hook/unhook

    def __post_init__(self):
        """Normalize values loaded from files or the environment."""
        self.log_level = str(self.log_level).upper()
        if self.debug:
            self.log_level = "DEBUG"


class Config:
    """Global configuration singleton."""

    _instance: Optional[MookConfig] = None
    _lock = threading.RLock()
    _config_file: Optional[Path] = None

    @classmethod
    def initialize(cls, config_path: Optional[Path] = None, **kwargs) -> MookConfig:
        """Initialize configuration from file or kwargs."""
        with cls._lock:
            if config_path:
                cls._config_file = config_path
                cls._instance = cls.load_config(config_path)
            else:
                cls._instance = MookConfig(**kwargs)
            return cls._instance

    @classmethod
    def get_instance(cls) -> MookConfig:
        """Get the configuration instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = MookConfig()
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the current configuration; the next access recreates defaults."""
        with cls._lock:
            cls._instance = None
            cls._config_file = None

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        instance = cls.get_instance()
        return getattr(instance, key, default)

    @classmethod
    def set(cls, key: str, value: Any) -> None:
        """Set a configuration value."""
        instance = cls.get_instance()
        if hasattr(instance, key):
            setattr(instance, key, value)

    @classmethod
    def get_log_level(cls) -> str:
        """Get the effective log level."""
        # Check environment variable first
        level = os.environ.get(LOG_LEVEL_ENV)
        if level:
            return level.upper()

        # Fall back to config
        return cls.get("log_level", "WARNING")

    @classmethod
    def load_config(cls, config_path: Path) -> MookConfig:
        """Load configuration from a JSON file; unknown keys are ignored."""
        if config_path.exists():
            try:
                with open(config_path) as f:
                    data = json.load(f)
                known = {field.name for field in fields(MookConfig)}
                return MookConfig(**{k: v for k, v in data.items() if k in known})
            except (OSError, ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Error loading config from {config_path}: {e}")

        return MookConfig()

    @classmethod
    def save_config(cls, config_path: Optional[Path] = None) -> bool:
        """Save current configuration to file."""
        instance = cls.get_instance()
        path = config_path or cls._config_file

        if not path:
            path = Path.cwd() / ".mook.json"

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                json.dump(asdict(instance), f, indent=2)
            return True
        except OSError as e:
            logger.warning(f"Error saving config to {path}: {e}")
            return False

    @classmethod
    def to_dict(cls) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(cls.get_instance())

    @classmethod
    def update(cls, updates: Dict[str, Any]) -> None:
        """Update multiple configuration values."""
        instance = cls.get_instance()
        for key, value in updates.items():
            if hasattr(instance, key):
                setattr(instance, key, value)


# Convenience functions
def load_config(config_path: Optional[Path] = None) -> MookConfig:
    """Load configuration from file or use defaults."""
    return Config.initialize(config_path)


def save_config(config: MookConfig, config_path: Path) -> bool:
    """Save configuration to file."""
    Config._instance = config
    return Config.save_config(config_path)


def get_config() -> MookConfig:
    """Get the current configuration."""
    return Config.get_instance()
