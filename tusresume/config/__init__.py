"""Configuration for the tus client."""

from tusresume.config.client_config import ClientConfig
from tusresume.config.config import ConfigManager
from tusresume.config.profiles import (
    ProfileAlreadyExist,
    ProfileManager,
    ProfileNotFound,
)

__all__ = [
    "ClientConfig",
    "ConfigManager",
    "ProfileManager",
    "ProfileNotFound",
    "ProfileAlreadyExist",
]
