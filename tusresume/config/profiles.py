"""API for handling tus client profiles stored on disk."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from tusresume.config.client_config import ClientConfig


class ProfileNotFound(Exception):
    """Raised when a requested profile cannot be found on disk."""


class ProfileAlreadyExist(Exception):
    """Raised when attempting to create a profile that already exists."""


class ProfileManager:
    """Manage client profiles stored as YAML files."""

    def __init__(self, home_path: Path | None = None) -> None:
        """Initialise ProfileManager."""
        self._home_path = home_path or Path.home()

    @property
    def home_path(self) -> Path:
        """Return the home path used for resolving configuration."""
        return self._home_path

    def _profiles_dir(self) -> Path:
        return self._home_path / ".tusresume" / "profiles"

    def _get_profile_path(self, profile: str) -> Path:
        profiles_dir = self._profiles_dir()
        profiles_dir.mkdir(parents=True, exist_ok=True)
        return profiles_dir / f"{profile}.yaml"

    def list_profiles(self) -> list[str]:
        """List available profile names, without the ``.yaml`` suffix."""
        profiles_dir = self._profiles_dir()
        if not profiles_dir.exists():
            return []
        return sorted(
            path.stem
            for path in profiles_dir.iterdir()
            if path.is_file() and path.suffix == ".yaml"
        )

    def get_profile(self, profile: str | None = None) -> ClientConfig:
        """Load a profile from disk.

        Args:
            profile: Name of the profile, or None for the defaults.

        Raises:
            ProfileNotFound: If the profile YAML file does not exist.
        """
        if profile is None:
            return ClientConfig()

        profile_path = self._get_profile_path(profile)
        try:
            with profile_path.open("r") as profile_file:
                profile_data = yaml.safe_load(profile_file) or {}
        except FileNotFoundError as exc:
            raise ProfileNotFound(f"Profile {profile!r} not found.") from exc

        return ClientConfig(**profile_data)

    def create_profile(self, profile: str) -> None:
        """Create a new profile with default values.

        Raises:
            ProfileAlreadyExist: If a profile with that name already exists.
        """
        profile_path = self._get_profile_path(profile)
        try:
            with profile_path.open("x") as profile_file:
                yaml.safe_dump(ClientConfig().model_dump(), profile_file)
        except FileExistsError as exc:
            raise ProfileAlreadyExist(f"Profile {profile!r} already exists.") from exc

    def update_profile(self, profile: str, updates: dict[str, Any]) -> ClientConfig:
        """Update an existing profile. ``None`` values are ignored.

        Raises:
            ProfileNotFound: If the profile YAML file does not exist.
        """
        current = self.get_profile(profile)
        filtered_updates = {
            name: value for name, value in updates.items() if value is not None
        }
        new_config = ClientConfig(**{**current.model_dump(), **filtered_updates})

        with self._get_profile_path(profile).open("w") as profile_file:
            yaml.safe_dump(new_config.model_dump(), profile_file)

        return new_config
