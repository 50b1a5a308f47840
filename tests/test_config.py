"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from treeweave.config.policies import ForestAssemblyPolicy, Policies, load_policies
from treeweave.config.settings import DEFAULT_CONFIG_DIR, Settings


def write_yaml(path: Path, payload: dict) -> None:
    path.write_text(yaml.safe_dump(payload), encoding="utf-8")


def test_policy_defaults():
    policy = ForestAssemblyPolicy()

    assert policy.cycle_strategy == "ignore"
    assert policy.track_ambiguity is False
    assert policy.max_nodes == 100_000


def test_policy_rejects_unknown_strategy():
    with pytest.raises(ValidationError):
        ForestAssemblyPolicy(cycle_strategy="repair")
    with pytest.raises(ValidationError):
        ForestAssemblyPolicy(max_nodes=0)


def test_load_policies_from_dict():
    policies = load_policies({"forest_assembly": {"cycle_strategy": "raise"}})

    assert isinstance(policies, Policies)
    assert policies.forest_assembly.cycle_strategy == "raise"


def test_load_policies_requires_version():
    with pytest.raises(ValidationError):
        load_policies({"policy_version": ""})


def test_settings_without_files_use_defaults(tmp_path: Path):
    settings = Settings(config_dir=tmp_path)

    assert settings.environment == "development"
    assert settings.log_level == "INFO"
    assert settings.log_file is None
    assert settings.policies.forest_assembly == ForestAssemblyPolicy()


def test_environment_yaml_overrides_default_yaml(tmp_path: Path):
    write_yaml(
        tmp_path / "default.yaml",
        {"log_level": "WARNING", "policies": {"forest_assembly": {"max_nodes": 50}}},
    )
    write_yaml(
        tmp_path / "production.yaml",
        {"policies": {"forest_assembly": {"cycle_strategy": "raise"}}},
    )

    settings = Settings(config_dir=tmp_path, environment="production")

    assert settings.log_level == "WARNING"
    assert settings.policies.forest_assembly.max_nodes == 50
    assert settings.policies.forest_assembly.cycle_strategy == "raise"


def test_nested_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    write_yaml(tmp_path / "default.yaml", {"policies": {"forest_assembly": {"max_nodes": 50}}})
    monkeypatch.setenv("TREEWEAVE_SETTINGS__POLICIES__FOREST_ASSEMBLY__TRACK_AMBIGUITY", "true")

    settings = Settings(config_dir=tmp_path)

    assert settings.policies.forest_assembly.track_ambiguity is True
    assert settings.policies.forest_assembly.max_nodes == 50


def test_explicit_policies_win_over_files(tmp_path: Path):
    write_yaml(
        tmp_path / "default.yaml",
        {"policies": {"forest_assembly": {"max_nodes": 50, "cycle_strategy": "raise"}}},
    )

    settings = Settings(
        config_dir=tmp_path,
        policies={"forest_assembly": {"cycle_strategy": "ignore"}},
    )

    assert settings.policies.forest_assembly.cycle_strategy == "ignore"
    assert settings.policies.forest_assembly.max_nodes == 50


def test_bundled_testing_config_enables_ambiguity_tracking():
    settings = Settings(config_dir=DEFAULT_CONFIG_DIR, environment="testing")

    assert settings.log_level == "DEBUG"
    assert settings.policies.forest_assembly.track_ambiguity is True


def test_default_config_dir_ships_inside_the_package():
    import treeweave

    package_dir = Path(treeweave.__file__).resolve().parent
    assert DEFAULT_CONFIG_DIR.is_relative_to(package_dir)
    assert (DEFAULT_CONFIG_DIR / "default.yaml").is_file()
    assert (DEFAULT_CONFIG_DIR / "testing.yaml").is_file()
