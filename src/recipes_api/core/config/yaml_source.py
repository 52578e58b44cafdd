"""Custom YAML settings source with environment-based file merging."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic_settings import PydanticBaseSettingsSource


if TYPE_CHECKING:
    from pydantic.fields import FieldInfo


# Overrides the config directory lookup, mainly for deployments that ship
# the YAML files outside the source tree
CONFIG_DIR_ENV_VAR = "RECIPES_API_CONFIG_DIR"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge override into base dict.

    Args:
        base: Base dictionary to merge into.
        override: Dictionary with values to override.

    Returns:
        New dictionary with merged values.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class MultiYamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load and merge multiple YAML files based on APP_ENV.

    This settings source loads configuration from YAML files in two stages:
    1. Load all base YAML files from config/base/
    2. Deep-merge environment-specific overrides from config/environments/{APP_ENV}/
    """

    def __init__(self, settings_cls: type[Any]) -> None:
        super().__init__(settings_cls)
        self._config_dir = self._find_config_dir()
        self._app_env = os.getenv("APP_ENV", "development")
        self._yaml_data: dict[str, Any] = {}
        self._load_yaml_files()

    def _find_config_dir(self) -> Path:
        """Find the config directory relative to the project root."""
        override = os.getenv(CONFIG_DIR_ENV_VAR)
        if override:
            return Path(override)

        # src/recipes_api/core/config/yaml_source.py -> project root
        current = Path(__file__).resolve()
        project_root = current.parents[4]
        return project_root / "config"

    def _load_yaml_files(self) -> None:
        """Load base configs, then merge environment-specific overrides."""
        merged: dict[str, Any] = {}

        for directory in (
            self._config_dir / "base",
            self._config_dir / "environments" / self._app_env,
        ):
            if not directory.exists():
                continue
            for yaml_file in sorted(directory.glob("*.yaml")):
                with yaml_file.open(encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
                    merged = deep_merge(merged, data)

        self._yaml_data = merged

    def get_field_value(
        self,
        _field: FieldInfo,
        field_name: str,
    ) -> tuple[Any, str, bool]:
        """Get the value for a specific field from YAML data."""
        value = self._yaml_data.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, Any]:
        """Return all YAML configuration data."""
        return self._yaml_data
