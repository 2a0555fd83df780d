import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from tmark.errors import ConfigError

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "TMARK_HOME"


class Config:
    """Locate the tmark home directory and read its settings"""

    DEFAULT_CONFIG = {
        "tmux_binary": "tmux",
        "session_prefix": "",
        "fuzzy_threshold": 60,
        "show_missing": True,
    }

    def __init__(self, home: Optional[Path] = None):
        explicit = home or os.environ.get(HOME_ENV_VAR)
        try:
            if explicit:
                # An explicitly configured home must already exist
                self.config_dir = Path(explicit).expanduser()
            else:
                self.config_dir = Path.home() / ".tmark"
                self.config_dir.mkdir(exist_ok=True)
        except (OSError, RuntimeError) as e:
            raise ConfigError(f"Cannot use tmark home directory: {e}") from e
        self.config_path = self.config_dir / "config.json"
        self.config = self.load()

    def load(self) -> Dict[str, Any]:
        """Load configuration from file"""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    user_config = json.load(f)
                if not isinstance(user_config, dict):
                    raise ValueError("top-level value must be an object")
                return {**self.DEFAULT_CONFIG, **user_config}
            except (OSError, ValueError) as e:
                logger.warning("Ignoring unreadable config %s: %s", self.config_path, e)
        return self.DEFAULT_CONFIG.copy()

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value"""
        return self.config.get(key, default)

    @property
    def store_dir(self) -> Path:
        return self.config_dir
