import json

import pytest
from typer.testing import CliRunner

from tapguard.runner.cli import EXIT_BAD_INPUT, EXIT_INVALID, app

runner = CliRunner()


@pytest.fixture
def snapshot(tmp_path, ui_tree):
    path = tmp_path / "tree.json"
    path.write_text(json.dumps({"success": True, "rootElement": ui_tree.to_dict(include_children=True)}))
    return path


@pytest.fixture
def config(tmp_path):
    path = tmp_path / "tapguard.yaml"
    path.write_text("logging:\n  level: WARNING\n")
    return path


def _run(*args):
    return runner.invoke(app, [str(a) for a in args])


def test_validate_valid_target(snapshot, config):
    result = _run("validate", snapshot, "#login-button", "--config", config)
    assert result.exit_code == 0
    assert "is valid for tap" in result.output


def test_validate_json_output_for_missing_target(snapshot, config):
    result = _run("validate", snapshot, "identifier:login", "--format", "json", "--config", config)
    assert result.exit_code == EXIT_INVALID
    assert '"code": "ELEMENT_NOT_FOUND"' in result.output
    assert '"target": "#login-button"' in result.output


def test_validate_compact_output(snapshot, config):
    result = _run("validate", snapshot, "#login", "-f", "compact", "--config", config)
    assert result.exit_code == EXIT_INVALID
    assert "Element not found: Element not found: #login (Did you mean: #login-button?)" in result.output


def test_validate_markdown_for_disabled_target(snapshot, config):
    result = _run("validate", snapshot, "#disabled-button", "--config", config)
    assert result.exit_code == EXIT_INVALID
    assert "Element is disabled" in result.output


def test_validate_respects_action(snapshot, config):
    assert _run("validate", snapshot, "#disabled-button", "-a", "assertExists", "--config", config).exit_code == 0
    result = _run("validate", snapshot, "#login-button", "-a", "assertNotExists", "-f", "compact", "--config", config)
    assert result.exit_code == EXIT_INVALID
    assert "still exists" in result.output


def test_bad_input_exits_with_usage_code(snapshot, tmp_path, config):
    assert _run("validate", snapshot, "login-button", "--config", config).exit_code == EXIT_BAD_INPUT
    assert _run("validate", snapshot, "coordinates:a,b", "--config", config).exit_code == EXIT_BAD_INPUT
    assert _run("validate", tmp_path / "missing.json", "#x", "--config", config).exit_code == EXIT_BAD_INPUT


def test_suggest(snapshot, config):
    result = _run("suggest", snapshot, "#login", "--config", config)
    assert result.exit_code == 0
    assert "login-button" in result.output

    empty = _run("suggest", snapshot, "#zzzzzzzzzzzz", "--config", config)
    assert empty.exit_code == 0
    assert "No elements resemble" in empty.output


def test_hittable(snapshot, config):
    ok = _run("hittable", snapshot, "#login-button", "--config", config)
    assert ok.exit_code == 0
    assert "Element is hittable" in ok.output

    off = _run("hittable", snapshot, "#not-hittable-button", "--config", config)
    assert off.exit_code == EXIT_INVALID
    assert "not_hittable" in off.output

    missing = _run("hittable", snapshot, "#nope", "--config", config)
    assert missing.exit_code == EXIT_INVALID
    assert "Element not found" in missing.output


def test_explicit_config_must_exist(snapshot, tmp_path):
    result = _run("validate", snapshot, "#login-button", "--config", tmp_path / "nope.yaml")
    assert result.exit_code == EXIT_BAD_INPUT
    assert "Config file not found" in result.output
