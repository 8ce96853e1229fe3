"""Resolve client configuration from profile, environment, and overrides."""

from __future__ import annotations

import logging
import os
from typing import Any

from tusresume.config.client_config import ClientConfig
from tusresume.config.profiles import ProfileManager

logger = logging.getLogger(__name__)

_ENV_MAP: dict[str, str] = {
    "upload_creation_url": "TUSRESUME_UPLOAD_CREATION_URL",
    "connect_timeout": "TUSRESUME_CONNECT_TIMEOUT",
    "resuming_enabled": "TUSRESUME_RESUMING_ENABLED",
    "supports_cookies": "TUSRESUME_SUPPORTS_COOKIES",
    "remove_fingerprint_on_success": "TUSRESUME_REMOVE_FINGERPRINT_ON_SUCCESS",
}

_BOOL_FIELDS = {
    "resuming_enabled",
    "supports_cookies",
    "remove_fingerprint_on_success",
}

YES_CONFIRMATION = {"1", "true", "yes", "y"}


class ConfigManager:
    """Build effective client configuration from profile, env, and overrides."""

    def __init__(
        self, profile_manager: ProfileManager, profile: str | None = None
    ) -> None:
        """Initialise ConfigManager.

        Args:
            profile_manager: ProfileManager instance
            profile: Name of the profile to load as the base configuration.
        """
        self.profile_manager = profile_manager
        self.profile = profile

    def _read_env_overrides(self) -> dict[str, Any]:
        """Read configuration overrides from environment variables.

        Values that cannot be parsed are skipped.
        """
        overrides: dict[str, Any] = {}

        for field_name, env_var_name in _ENV_MAP.items():
            env_value = os.getenv(env_var_name)
            if env_value is None:
                continue

            if field_name == "connect_timeout":
                try:
                    overrides[field_name] = float(env_value)
                except ValueError:
                    logger.warning("Ignoring invalid %s=%r", env_var_name, env_value)
                    continue
            elif field_name in _BOOL_FIELDS:
                overrides[field_name] = env_value.lower() in YES_CONFIRMATION
            else:
                overrides[field_name] = env_value

        return overrides

    def resolve_effective_config(
        self, overrides: dict[str, Any] | None = None
    ) -> ClientConfig:
        """Resolve the effective client configuration.

        Args:
            overrides: Explicit values which take precedence over everything.

        Returns:
            The resolved ``ClientConfig``.

        Raises:
            pydantic.ValidationError: If a resolved value is invalid.
        """
        base_config = self.profile_manager.get_profile(self.profile)

        return ClientConfig.model_validate(
            {
                **base_config.model_dump(),
                **self._read_env_overrides(),
                **(overrides or {}),
            }
        )
