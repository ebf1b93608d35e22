"""Configuration module for streamhost."""

from streamhost.config.loader import get_config_path, load_config
from streamhost.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]
