"""Configuration loader for toyotactl

Loads configuration from multiple sources with the following priority:
1. Environment variables (highest priority)
2. .env file in the working directory, then the user's config directory
3. Hardcoded defaults (lowest priority)

Every variable is namespaced with the TOYOTACTL_ prefix, e.g.
TOYOTACTL_API_GATEWAY_KEY.
"""

import logging
import os
from pathlib import Path
from typing import Any, List, Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "TOYOTACTL_"
USER_ENV_PATH = "~/.config/toyotactl/.env"

_TRUE_VALUES = ("true", "1", "yes", "on")


class ConfigLoader:
    """Handles loading configuration from various sources"""

    def __init__(self, env_path: Optional[str] = None, prefix: str = ENV_PREFIX):
        """Initialize the config loader

        Args:
            env_path: Optional path to a single .env file. Defaults to '.env'
                     in the current directory, then the user config directory.
            prefix: Prefix prepended to every variable name looked up
        """
        if env_path:
            self.env_paths: List[Path] = [Path(env_path)]
        else:
            self.env_paths = [Path(".env"), Path(USER_ENV_PATH).expanduser()]
        self.prefix = prefix
        self._load_env_files()

    def _load_env_files(self):
        """Load the first .env file that exists; real environment wins"""
        for path in self.env_paths:
            if path.exists():
                load_dotenv(dotenv_path=path, override=False)
                logger.debug(f"Loaded environment variables from {path}")
                return
        logger.debug("No .env file found, using environment variables and defaults only")

    def get(self, env_var: str, default: Any) -> Any:
        """Get a configuration value with priority: env > default

        Args:
            env_var: Variable name to check (without prefix)
            default: Default value; its type decides how the variable is parsed

        Returns:
            The configuration value from environment or default
        """
        env_value = os.getenv(f"{self.prefix}{env_var}")
        if env_value is None:
            if isinstance(default, str) and default.startswith("~/"):
                return str(Path(default).expanduser())
            return default
        return self._coerce(env_var, env_value, default)

    @staticmethod
    def _coerce(env_var: str, env_value: str, default: Any) -> Any:
        # bool first: bool is a subclass of int
        if isinstance(default, bool):
            return env_value.strip().lower() in _TRUE_VALUES

        for kind in (int, float):
            if isinstance(default, kind):
                try:
                    return kind(env_value)
                except ValueError:
                    logger.warning(
                        f"Failed to parse {env_var}={env_value} as {kind.__name__}, using default: {default}"
                    )
                    return default

        if isinstance(default, str) and env_value.startswith("~/"):
            return str(Path(env_value).expanduser())
        return env_value


_config_loader = None


def get_config_loader() -> ConfigLoader:
    """Get or create the global ConfigLoader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
