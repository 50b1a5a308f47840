"""Configuration management built on top of the policy primitives."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Literal

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .policies import Policies, load_policies

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent

_ENV_OVERRIDE_PREFIX = "TREEWEAVE_SETTINGS__"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries."""

    result = dict(base)
    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _apply_env_overrides(base: Dict[str, Any]) -> Dict[str, Any]:
    """Apply overrides from TREEWEAVE_SETTINGS__* environment variables."""

    result = dict(base)
    for key, value in os.environ.items():
        if not key.startswith(_ENV_OVERRIDE_PREFIX):
            continue
        path = key[len(_ENV_OVERRIDE_PREFIX) :].lower().split("__")
        cursor = result
        for part in path[:-1]:
            nested = cursor.get(part)
            nested = dict(nested) if isinstance(nested, dict) else {}
            cursor[part] = nested
            cursor = nested
        cursor[path[-1]] = value
    return result


class Settings(BaseSettings):
    """Primary configuration object for treeweave.

    Precedence (highest first): explicit keyword arguments, environment
    variables prefixed with ``TREEWEAVE_`` (handled by :class:`BaseSettings`),
    nested overrides via ``TREEWEAVE_SETTINGS__`` variables, the
    environment-specific YAML file (e.g. ``production.yaml``), ``default.yaml``
    and finally the class defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="TREEWEAVE_",
        validate_assignment=True,
        extra="ignore",
    )

    environment: Literal["development", "testing", "production"] = Field(
        default="development",
        description="Active runtime environment",
    )
    config_dir: Path = Field(default=DEFAULT_CONFIG_DIR)
    log_level: str = Field(default="INFO")
    log_file: Path | None = Field(
        default=None,
        description="Optional rotating log file; stderr only when unset.",
    )
    policies: Policies = Field(default_factory=Policies)

    @model_validator(mode="before")
    @classmethod
    def _bootstrap_from_files(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        """Load YAML files and merge with provided overrides."""

        config_dir = Path(values.get("config_dir") or DEFAULT_CONFIG_DIR)
        environment = values.get("environment") or os.getenv("TREEWEAVE_ENVIRONMENT", "development")
        base_config = _load_yaml_file(config_dir / "default.yaml")
        env_config = _load_yaml_file(config_dir / f"{environment}.yaml")
        merged = _deep_merge(base_config, env_config)
        hydrated = _apply_env_overrides(merged)

        explicit = {k: v for k, v in values.items() if v is not None}
        policies_data = explicit.pop("policies", None)
        combined = _deep_merge(hydrated, explicit)

        if isinstance(policies_data, Policies):
            combined["policies"] = policies_data
            return combined

        file_policies = combined.pop("policies", None) or {}
        if policies_data:
            file_policies = _deep_merge(dict(file_policies), dict(policies_data))
        combined["policies"] = load_policies(file_policies)
        return combined


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a singleton settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
