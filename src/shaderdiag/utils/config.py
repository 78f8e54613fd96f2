import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from ..parsing.message import MessagePolicy

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "warnings_as_errors": False,
    "suppress_warnings": False,
    # Names of the concatenated source strings, in the order given to the compiler
    "sources": [],
}


class ConfigManager:
    """
    Persists user preferences in ~/.shaderdiag/config.json.
    Missing keys fall back to DEFAULT_CONFIG.
    """
    def __init__(self):
        self.config_dir = Path.home() / ".shaderdiag"
        self.config_file = self.config_dir / "config.json"
        self.config = self.load_config()

    def load_config(self) -> Dict[str, Any]:
        self.config_dir.mkdir(parents=True, exist_ok=True)

        config = dict(DEFAULT_CONFIG)
        if not self.config_file.exists():
            return config

        try:
            with open(self.config_file, "r") as f:
                user_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable config %s: %s", self.config_file, e)
            return config

        if not isinstance(user_config, dict):
            logger.warning("Ignoring config %s: expected a JSON object", self.config_file)
            return config

        config.update(user_config)
        return config

    def save_config(self):
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self.config, f, indent=4)

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def set(self, key: str, value: Any):
        self.config[key] = value
        self.save_config()

    def get_flag(self, key: str) -> bool:
        """A boolean setting; anything that is not a JSON true/false means the default."""
        value = self.get(key, DEFAULT_CONFIG[key])
        if not isinstance(value, bool):
            logger.warning("Ignoring %s=%r in %s: expected true or false", key, value, self.config_file)
            return DEFAULT_CONFIG[key]
        return value

    def sources(self) -> List[str]:
        value = self.get("sources", [])
        if not isinstance(value, list) or not all(isinstance(name, str) for name in value):
            logger.warning("Ignoring sources=%r in %s: expected a list of names", value, self.config_file)
            return []
        return list(value)

    def policy(self) -> MessagePolicy:
        return MessagePolicy(
            warnings_as_errors=self.get_flag("warnings_as_errors"),
            suppress_warnings=self.get_flag("suppress_warnings"),
        )
