"""End-to-end smoke tests for the Typer-based treeweave CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from treeweave.__main__ import main as module_main
from treeweave.cli.common import CLIError, merge_overrides, parse_override
from treeweave.cli.main import app


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def cli_env(tmp_path: Path) -> dict[str, str]:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return {"TREEWEAVE_CONFIG_DIR": str(config_dir)}


def write_records(path: Path, records: list[dict]) -> Path:
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


@pytest.fixture()
def org_chart(tmp_path: Path) -> Path:
    return write_records(
        tmp_path / "org.json",
        [
            {"id": 1, "label": "Company"},
            {"id": 2, "parent_id": 1, "label": "Engineering"},
            {"id": 3, "parent_id": 2, "label": "Platform"},
            {"id": 4, "parent_id": 99, "label": "Contractors"},
        ],
    )


@pytest.fixture()
def looped(tmp_path: Path) -> Path:
    return write_records(
        tmp_path / "loop.json",
        [
            {"id": "a", "parent_id": "b"},
            {"id": "b", "parent_id": "a"},
            {"id": "c"},
        ],
    )


def test_parse_override_builds_nested_mapping() -> None:
    assert parse_override("policies.forest_assembly.max_nodes=10") == {
        "policies": {"forest_assembly": {"max_nodes": 10}}
    }
    assert parse_override("log_level=DEBUG") == {"log_level": "DEBUG"}


def test_merge_overrides_is_deep() -> None:
    merged = merge_overrides(
        [
            parse_override("policies.forest_assembly.max_nodes=10"),
            parse_override("policies.forest_assembly.cycle_strategy=raise"),
        ]
    )

    assert merged == {"policies": {"forest_assembly": {"max_nodes": 10, "cycle_strategy": "raise"}}}


def test_show_renders_forest(runner: CliRunner, cli_env: dict[str, str], org_chart: Path) -> None:
    result = runner.invoke(app, ["show", str(org_chart)], env=cli_env)

    assert result.exit_code == 0, result.output
    for label in ("Company", "Engineering", "Platform", "Contractors"):
        assert label in result.output


def test_show_respects_max_depth(runner: CliRunner, cli_env: dict[str, str], org_chart: Path) -> None:
    result = runner.invoke(app, ["show", str(org_chart), "--max-depth", "1"], env=cli_env)

    assert result.exit_code == 0, result.output
    assert "Engineering" in result.output
    assert "Platform" not in result.output
    assert "1 more" in result.output


def test_show_lists_cycles(runner: CliRunner, cli_env: dict[str, str], looped: Path) -> None:
    result = runner.invoke(app, ["show", str(looped)], env=cli_env)

    assert result.exit_code == 0, result.output
    assert "Cycle left out of the forest" in result.output


def test_validate_passes_for_well_formed_forest(
    runner: CliRunner, cli_env: dict[str, str], org_chart: Path
) -> None:
    result = runner.invoke(app, ["validate", str(org_chart)], env=cli_env)

    assert result.exit_code == 0, result.output
    assert "well formed" in result.output


def test_validate_fails_on_cycle(runner: CliRunner, cli_env: dict[str, str], looped: Path) -> None:
    result = runner.invoke(app, ["validate", str(looped)], env=cli_env)

    assert result.exit_code == 1
    assert "cycle-detected" in result.output


def test_raise_strategy_exits_with_code_two(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    cli_env: dict[str, str],
    looped: Path,
) -> None:
    for key, value in cli_env.items():
        monkeypatch.setenv(key, value)

    code = module_main(
        ["-o", "policies.forest_assembly.cycle_strategy=raise", "validate", str(looped)]
    )

    captured = capsys.readouterr()
    assert code == 2
    assert "Error:" in captured.out
    assert "Traceback" not in captured.out + captured.err


def test_console_script_exits_with_code_two_on_cli_error(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    cli_env: dict[str, str],
    tmp_path: Path,
) -> None:
    for key, value in cli_env.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setattr("sys.argv", ["treeweave", "show", str(tmp_path / "absent.json")])

    with pytest.raises(SystemExit) as excinfo:
        app(prog_name="treeweave")

    assert excinfo.value.code == 2
    assert "Path does not exist" in capsys.readouterr().out


def test_module_entry_point_reports_usage_errors(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], cli_env: dict[str, str]
) -> None:
    for key, value in cli_env.items():
        monkeypatch.setenv(key, value)

    assert module_main(["show"]) == 2
    assert "Missing argument" in capsys.readouterr().err


def test_missing_file_surfaces_cli_error(
    runner: CliRunner, cli_env: dict[str, str], tmp_path: Path
) -> None:
    result = runner.invoke(app, ["show", str(tmp_path / "absent.json")], env=cli_env)

    assert isinstance(result.exception, CLIError)


def test_module_entry_point_maps_cli_error_to_exit_code(
    monkeypatch: pytest.MonkeyPatch, cli_env: dict[str, str], tmp_path: Path
) -> None:
    for key, value in cli_env.items():
        monkeypatch.setenv(key, value)

    assert module_main(["show", str(tmp_path / "absent.json")]) == 2


def test_verbose_prints_context(runner: CliRunner, cli_env: dict[str, str], org_chart: Path) -> None:
    result = runner.invoke(app, ["-v", "show", str(org_chart)], env=cli_env)

    assert result.exit_code == 0, result.output
    assert "Cycle strategy" in result.output
