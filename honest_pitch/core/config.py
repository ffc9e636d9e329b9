"""Configuration management for Honest Pitch components.

Each section is stored as ``<section>.json`` in the configuration directory
and passed as keyword arguments to the component it configures, so only
keys that appear in the section defaults are ever kept.
"""

from typing import Dict, Any, Optional
import json
import os
from pathlib import Path

from ..logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_DIR = os.path.join("~", ".config", "honest_pitch")

DEFAULT_CONFIGS: Dict[str, Dict[str, Any]] = {
    "pitch_estimator": {
        "min_lag": 50,
        "correlation_threshold": 0.1,
        "min_frequency": 85.0,
        "max_frequency": 750.0,
    },
    "audio_input": {
        "sample_rate": 44100,
        "frame_size": 4096,
        "channels": 1,
    },
    "history": {
        "window_seconds": 15.0,
    },
    "display": {
        "width": 1024,
        "height": 640,
        "graph_height": 400,
        "fps": 60,
        # Recent points listed by the terminal display
        "max_history": 8,
    },
}


class ConfigManager:
    """Configuration manager for Honest Pitch components."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory to store configuration files, or None for
                ~/.config/honest_pitch
        """
        self.config_dir = Path(os.path.expanduser(config_dir or DEFAULT_CONFIG_DIR))
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.default_configs = {
            name: dict(section) for name, section in DEFAULT_CONFIGS.items()
        }
        self.configs = {
            name: self.load_config(name, defaults)
            for name, defaults in self.default_configs.items()
        }

    def config_path(self, name: str) -> Path:
        return self.config_dir / f"{name}.json"

    def load_config(self, name: str, default_config: Dict[str, Any]) -> Dict[str, Any]:
        """Load a section, writing the defaults if the file does not exist yet.

        Unreadable files fall back to the defaults. Keys missing from the file
        take their default value and unknown keys are dropped with a warning.
        """
        config_file = self.config_path(name)

        if not config_file.exists():
            config = dict(default_config)
            self.save_config(name, config)
            return config

        try:
            with open(config_file, "r") as f:
                stored = json.load(f)
            if not isinstance(stored, dict):
                raise ValueError("configuration must be a JSON object")
        except (OSError, ValueError) as e:
            logger.error(f"Error loading configuration from {config_file}: {e}")
            return dict(default_config)

        unknown = sorted(set(stored) - set(default_config))
        if unknown:
            logger.warning(f"Ignoring unknown keys in {config_file}: {', '.join(unknown)}")

        logger.info(f"Loaded configuration from {config_file}")
        return {key: stored.get(key, default) for key, default in default_config.items()}

    def save_config(self, name: str, config: Dict[str, Any]) -> bool:
        """Write a section to its JSON file.

        Returns:
            True if saved successfully, False otherwise
        """
        config_file = self.config_path(name)

        try:
            with open(config_file, "w") as f:
                json.dump(config, f, indent=2)
            logger.info(f"Saved configuration to {config_file}")
            return True
        except (OSError, TypeError) as e:
            logger.error(f"Error saving configuration to {config_file}: {e}")
            return False

    def get_config(self, name: str) -> Dict[str, Any]:
        """Copy of a section, or an empty dict for unknown sections."""
        return dict(self.configs.get(name, {}))

    def update_config(self, name: str, updates: Dict[str, Any]) -> bool:
        """Apply updates to a section and save it.

        Returns:
            False for an unknown section or key, or if saving failed
        """
        if name not in self.configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        unknown = sorted(set(updates) - set(self.default_configs[name]))
        if unknown:
            logger.error(f"Unknown {name} settings: {', '.join(unknown)}")
            return False

        self.configs[name].update(updates)
        return self.save_config(name, self.configs[name])

    def reset_config(self, name: str) -> bool:
        """Restore a section's defaults and save it."""
        if name not in self.default_configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        self.configs[name] = dict(self.default_configs[name])
        return self.save_config(name, self.configs[name])
