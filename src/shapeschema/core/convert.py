from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from shapeschema.config.load import DEFAULT_CONFIG, ConfigError, load_config
from shapeschema.config.model import Config
from shapeschema.core import events as ev
from shapeschema.core.stages import STAGE_LABELS
from shapeschema.plugins.registry import (
    ShapeResolutionError,
    project_on_path,
    resolve_shape,
    resolve_shapes,
)
from shapeschema.schema import (
    ConversionError,
    ConversionOptions,
    SchemaCheckError,
    check_document,
    to_json_schema,
)

_LABELS = STAGE_LABELS["convert"]


def convert_events(
    project_dir: Path,
    *,
    config_path: Path | None = None,
    out: Path | None = None,
    dialect: str | None = None,
    unused_definitions: bool | None = None,
    check_schema: bool | None = None,
) -> Iterable[ev.ShapeschemaEvent]:
    project_dir = project_dir.resolve()
    config_path = config_path or DEFAULT_CONFIG
    if not config_path.is_absolute():
        config_path = project_dir / config_path

    yield ev.CommandStarted(
        command="convert",
        project_dir=project_dir,
        config_path=config_path,
        options={
            "out": str(out) if out else None,
            "dialect": dialect,
            "unused_definitions": unused_definitions,
            "check_schema": check_schema,
        },
    )

    yield _stage_started("load_config")
    started = time.perf_counter()
    try:
        config = load_config(project_dir, config_path)
    except ConfigError as exc:
        yield from _stage_failed("load_config", started, "config_error", str(exc))
        return
    yield _stage_completed("load_config", started)

    yield _stage_started("resolve_shapes")
    started = time.perf_counter()
    try:
        with project_on_path(project_dir):
            source, definitions = _resolve_config_shapes(config)
    except ShapeResolutionError as exc:
        yield from _stage_failed(
            "resolve_shapes",
            started,
            "shape_error",
            str(exc),
            hint="Shape references use 'package.module:attribute'.",
        )
        return
    roots = [config.root] if config.root else list(config.shapes)
    yield ev.ShapesResolved(command="convert", roots=roots, definitions=list(definitions))
    yield _stage_completed("resolve_shapes", started)

    yield _stage_started("convert")
    started = time.perf_counter()
    try:
        options = ConversionOptions(
            definitions=definitions,
            definitions_key=config.definitions_key,
            base_path=config.base_path,
            dialect=dialect or config.dialect,
            unused_definitions=config.unused_definitions if unused_definitions is None else unused_definitions,
            const_as_enum=config.const_as_enum,
        )
    except ValidationError as exc:
        yield from _stage_failed("convert", started, "options_error", str(exc))
        return
    try:
        document = to_json_schema(source, options)
    except ConversionError as exc:
        yield from _stage_failed("convert", started, "conversion_error", str(exc))
        return
    yield ev.SchemaConverted(command="convert", keys=list(document))
    names = list(document.get(options.definitions_key, {}))
    if names:
        yield ev.DefinitionsCollected(
            command="convert",
            definitions_key=options.definitions_key,
            names=names,
        )
    yield _stage_completed("convert", started)

    yield _stage_started("check_schema")
    started = time.perf_counter()
    if not (config.check_schema if check_schema is None else check_schema):
        yield _stage_completed("check_schema", started, status="skipped")
    else:
        try:
            check_document(document)
        except SchemaCheckError as exc:
            yield from _stage_failed("check_schema", started, "schema_invalid", str(exc))
            return
        yield ev.SchemaChecked(command="convert", dialect=document.get("$schema"))
        yield _stage_completed("check_schema", started)

    yield _stage_started("write_output")
    started = time.perf_counter()
    try:
        text = _stable_json_text(document, indent=config.output.indent, sort_keys=config.output.sort_keys)
    except (TypeError, ValueError) as exc:
        yield from _stage_failed("write_output", started, "serialize_error", str(exc))
        return
    output_path = _resolve_output_path(project_dir, config, out)
    if output_path is None:
        yield ev.DocumentEmitted(command="convert", text=text)
        yield _stage_completed("write_output", started, status="skipped")
    else:
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(text, encoding="utf-8")
        except OSError as exc:
            yield from _stage_failed("write_output", started, "write_error", str(exc))
            return
        yield ev.OutputWritten(command="convert", path=output_path, bytes=len(text.encode("utf-8")))
        yield _stage_completed("write_output", started)

    yield ev.CommandCompleted(command="convert", ok=True, exit_code=0)


def _resolve_config_shapes(config: Config) -> tuple[Any, dict[str, Any]]:
    definitions = resolve_shapes(config.definitions)
    if config.root:
        return resolve_shape(config.root), definitions
    return resolve_shapes(config.shapes), definitions


def _resolve_output_path(project_dir: Path, config: Config, override: Path | None) -> Path | None:
    path = override or (Path(config.output.path) if config.output.path else None)
    if path is None:
        return None
    if not path.is_absolute():
        path = project_dir / path
    return path


def _stable_json_text(data: dict[str, Any], *, indent: int, sort_keys: bool) -> str:
    payload = json.dumps(data, sort_keys=sort_keys, indent=indent, ensure_ascii=False)
    return f"{payload}\n"


def _stage_started(stage_id: str) -> ev.StageStarted:
    return ev.StageStarted(command="convert", stage_id=stage_id, label=_LABELS[stage_id])


def _stage_completed(stage_id: str, started: float, status: str = "success") -> ev.StageCompleted:
    return ev.StageCompleted(
        command="convert",
        stage_id=stage_id,
        duration_ms=_elapsed_ms(started),
        status=status,
    )


def _stage_failed(
    stage_id: str,
    started: float,
    error_code: str,
    message: str,
    hint: str | None = None,
) -> Iterable[ev.ShapeschemaEvent]:
    yield ev.StageFailed(
        command="convert",
        stage_id=stage_id,
        duration_ms=_elapsed_ms(started),
        error_code=error_code,
        message=message,
        hint=hint,
    )
    yield ev.CommandCompleted(command="convert", ok=False, exit_code=2)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
