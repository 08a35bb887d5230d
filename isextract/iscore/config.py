# -*- coding:utf-8 -*-
# Author: Kei Choi(hanul93@gmail.com)

"""
isextract Configuration Module

This module handles configuration management including .env file loading.
Configuration is automatically loaded when the module is imported.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from . import isconst

# Module logger
logger = logging.getLogger(__name__)

# Default paths
DEFAULT_ENV_PATH = Path.home() / ".isextract" / ".env"


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    """Read a non-negative integer from the environment.

    Args:
        name: Environment variable name
        default: Value used when the variable is unset or invalid
        minimum: Smallest accepted value

    Returns:
        Parsed integer or default
    """
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default

    try:
        value = int(raw, 0)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default

    if value < minimum:
        logger.warning("Ignoring %s=%d: must be >= %d", name, value, minimum)
        return default

    return value


@dataclass
class Config:
    """isextract configuration container.

    Attributes:
        max_entries: Safety bound on entries produced per image (ISEXTRACT_MAX_ENTRIES)
        resync_limit: Maximum bytes one resynchronization may scan, 0 = to end of buffer
                      (ISEXTRACT_RESYNC_LIMIT)
        zero_length_cap: Cap of the recovery scan for zero-length entries
                         (ISEXTRACT_ZERO_LENGTH_CAP)
        workers: Worker threads for batch extraction, 0 = CPU count (ISEXTRACT_WORKERS)
        env_loaded: Whether .env file was successfully loaded
    """

    max_entries: int = isconst.IS_DEFAULT_MAX_ENTRIES
    resync_limit: int = isconst.IS_DEFAULT_RESYNC_LIMIT
    zero_length_cap: int = isconst.IS_DEFAULT_ZERO_LENGTH_CAP
    workers: int = 0
    env_loaded: bool = False

    @property
    def worker_count(self) -> int:
        """Get the effective number of batch workers.

        Returns:
            Configured workers, or the CPU count when unset
        """
        return self.workers if self.workers > 0 else (os.cpu_count() or 4)

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "Config":
        """Create Config from environment variables.

        Args:
            env_path: Optional path to .env file. If None, uses DEFAULT_ENV_PATH.

        Returns:
            Config instance populated from environment variables
        """
        env_loaded = False

        # Try to load .env file
        if env_path is None:
            env_path = DEFAULT_ENV_PATH

        try:
            if env_path.exists():
                load_dotenv(env_path)
                env_loaded = True
                logger.debug("Loaded .env from %s", env_path)
        except OSError as e:
            logger.warning("Failed to load .env from %s: %s", env_path, e)

        # Read configuration from environment
        return cls(
            max_entries=_env_int("ISEXTRACT_MAX_ENTRIES", isconst.IS_DEFAULT_MAX_ENTRIES, minimum=1),
            resync_limit=_env_int("ISEXTRACT_RESYNC_LIMIT", isconst.IS_DEFAULT_RESYNC_LIMIT),
            zero_length_cap=_env_int("ISEXTRACT_ZERO_LENGTH_CAP", isconst.IS_DEFAULT_ZERO_LENGTH_CAP),
            workers=_env_int("ISEXTRACT_WORKERS", 0),
            env_loaded=env_loaded,
        )


# Global configuration instance
_config: Optional[Config] = None


def init(env_path: Optional[Path] = None) -> Config:
    """Initialize isextract configuration.

    This function loads the .env file and creates the global configuration.
    It is automatically called when the module is imported.

    Args:
        env_path: Optional path to .env file. If None, uses DEFAULT_ENV_PATH.

    Returns:
        Config instance
    """
    global _config
    _config = Config.from_env(env_path)
    return _config


def get_config() -> Config:
    """Get the current configuration.

    Returns:
        Current Config instance. If not initialized, initializes with defaults.
    """
    global _config
    if _config is None:
        _config = init()
    return _config


def reload_config(env_path: Optional[Path] = None) -> Config:
    """Reload configuration from .env file.

    Args:
        env_path: Optional path to .env file. If None, uses DEFAULT_ENV_PATH.

    Returns:
        New Config instance
    """
    return init(env_path)


# Auto-initialize on module import
init()
