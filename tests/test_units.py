from __future__ import annotations

import io
import json
import sys
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from shapeschema import __version__
from shapeschema.cli.app import app
from shapeschema.cli.renderers import ConvertJsonRenderer, ConvertPlainRenderer, run_events
from shapeschema.config.load import ConfigError, load_config
from shapeschema.core.convert import convert_events
from shapeschema.core.events import CommandStarted
from shapeschema.core.list_shapes import list_shapes_events
from shapeschema.plugins.registry import (
    ShapeResolutionError,
    discover_shapes,
    project_on_path,
    resolve_shape,
)
from shapeschema.shapes import Kind


def _write_config(tmp_path: Path, text: str) -> Path:
    config_path = tmp_path / "shapeschema.yaml"
    config_path.write_text(text, encoding="utf-8")
    return config_path


def test_load_config_missing_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Missing config"):
        load_config(tmp_path)


def test_load_config_reads_defaults(tmp_path: Path) -> None:
    _write_config(tmp_path, "version: v1\nroot: pkg.mod:shape\n")

    config = load_config(tmp_path)

    assert config.root == "pkg.mod:shape"
    assert config.definitions_key == "definitions"
    assert config.check_schema is True
    assert config.output.path is None
    assert config.output.indent == 2


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("", "Config is empty"),
        ("- a\n- b\n", "YAML mapping"),
        ("version: v2\nroot: a:b\n", "version v1"),
        ("version: v1\n", "One of 'root' or 'shapes'"),
        ("version: v1\nroot: a:b\nshapes:\n  A: a:b\n", "not both"),
        ("version: v1\nshapes:\n  A: a:b\ndefinitions:\n  A: a:c\n", "both shapes and definitions"),
        ("version: v1\nroot: a:b\nunknown: 1\n", "unknown"),
        ("version: [v1\n", "Failed to parse YAML"),
    ],
)
def test_load_config_rejects_invalid_files(tmp_path: Path, text: str, message: str) -> None:
    _write_config(tmp_path, text)

    with pytest.raises(ConfigError, match=message):
        load_config(tmp_path)


def test_load_config_accepts_explicit_path(tmp_path: Path) -> None:
    (tmp_path / "conf").mkdir()
    config_path = tmp_path / "conf" / "other.yaml"
    config_path.write_text("version: v1\nroot: a:b\n", encoding="utf-8")

    assert load_config(tmp_path, Path("conf/other.yaml")).root == "a:b"


def test_resolve_shape_by_module_reference(sample_project: Path) -> None:
    with project_on_path(sample_project):
        assert resolve_shape("sample_shapes:address").kind == Kind.OBJECT

    assert str(sample_project) not in sys.path


@pytest.mark.parametrize(
    ("ref", "message"),
    [
        ("no_such_module_xyz:shape", "Cannot load shape"),
        ("sample_shapes:missing", "Cannot load shape"),
        ("sample_shapes:not_a_shape", "is not a shape"),
        ("no-such-entry-point", "Unknown shape"),
    ],
)
def test_resolve_shape_errors(sample_project: Path, ref: str, message: str) -> None:
    with project_on_path(sample_project), pytest.raises(ShapeResolutionError, match=message):
        resolve_shape(ref)

    assert str(sample_project) not in sys.path


def test_discover_shapes_lists_entry_points() -> None:
    shapes = discover_shapes()

    assert isinstance(shapes, list)
    assert all(set(shape) == {"name", "ref"} for shape in shapes)


def test_list_shapes_events_complete() -> None:
    events = list(list_shapes_events())

    assert events[0].command == "list-shapes"
    assert events[-1].ok is True


def test_event_to_dict_serializes_paths() -> None:
    event = CommandStarted(
        command="convert",
        project_dir=Path("project"),
        config_path=Path("project") / "shapeschema.yaml",
    )
    payload = event.to_dict()

    assert payload["type"] == "CommandStarted"
    assert payload["project_dir"] == "project"
    assert payload["config_path"] == str(Path("project") / "shapeschema.yaml")


@pytest.mark.integration
def test_json_renderer_reports_document(sample_project: Path) -> None:
    buffer = io.StringIO()
    renderer = ConvertJsonRenderer(Console(file=buffer, width=40))

    exit_code = run_events(convert_events(sample_project, out=None), renderer)

    assert exit_code == 0
    payload = json.loads(buffer.getvalue())
    assert payload["ok"] is True
    assert payload["stages"]["write_output"] == "success"
    assert payload["output"].endswith("user.schema.json")
    assert sorted(payload["definitions"]) == ["Address", "shape1"]
    assert payload["errors"] == []


@pytest.mark.integration
def test_plain_renderer_reports_failure(tmp_path: Path) -> None:
    buffer = io.StringIO()
    out = io.StringIO()
    renderer = ConvertPlainRenderer(Console(file=buffer, width=200), Console(file=out))

    exit_code = run_events(convert_events(tmp_path), renderer)

    assert exit_code == 2
    text = buffer.getvalue()
    assert "Load config FAIL" in text
    assert "CONVERT FAIL" in text
    assert out.getvalue() == ""


def test_cli_version() -> None:
    result = CliRunner().invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.integration
def test_cli_convert_exit_code(sample_project: Path) -> None:
    runner = CliRunner()

    ok = runner.invoke(app, ["convert", "--project", str(sample_project), "--json"])
    failed = runner.invoke(app, ["convert", "--project", str(sample_project / "missing"), "--json"])

    assert ok.exit_code == 0
    assert json.loads(ok.output)["ok"] is True
    assert failed.exit_code == 2
