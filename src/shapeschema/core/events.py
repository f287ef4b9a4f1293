from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ShapeschemaEvent:
    ts: float = field(default_factory=time.perf_counter)
    level: str = "INFO"
    command: str = ""
    type: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _serialize(asdict(self))


@dataclass(frozen=True)
class CommandStarted(ShapeschemaEvent):
    type: str = "CommandStarted"
    project_dir: Path | None = None
    config_path: Path | None = None
    options: dict[str, Any] | None = None


@dataclass(frozen=True)
class CommandCompleted(ShapeschemaEvent):
    type: str = "CommandCompleted"
    ok: bool = True
    exit_code: int = 0


@dataclass(frozen=True)
class StageStarted(ShapeschemaEvent):
    type: str = "StageStarted"
    stage_id: str = ""
    label: str = ""


@dataclass(frozen=True)
class StageCompleted(ShapeschemaEvent):
    type: str = "StageCompleted"
    stage_id: str = ""
    duration_ms: float = 0.0
    status: str = "success"


@dataclass(frozen=True)
class StageFailed(ShapeschemaEvent):
    type: str = "StageFailed"
    stage_id: str = ""
    duration_ms: float = 0.0
    error_code: str = ""
    message: str = ""
    hint: str | None = None


@dataclass(frozen=True)
class ShapesResolved(ShapeschemaEvent):
    type: str = "ShapesResolved"
    roots: list[str] = field(default_factory=list)
    definitions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SchemaConverted(ShapeschemaEvent):
    type: str = "SchemaConverted"
    keys: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DefinitionsCollected(ShapeschemaEvent):
    type: str = "DefinitionsCollected"
    definitions_key: str = ""
    names: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SchemaChecked(ShapeschemaEvent):
    type: str = "SchemaChecked"
    dialect: str | None = None


@dataclass(frozen=True)
class OutputWritten(ShapeschemaEvent):
    type: str = "OutputWritten"
    path: Path | None = None
    bytes: int = 0


@dataclass(frozen=True)
class DocumentEmitted(ShapeschemaEvent):
    type: str = "DocumentEmitted"
    text: str = ""


@dataclass(frozen=True)
class ShapesDiscovered(ShapeschemaEvent):
    type: str = "ShapesDiscovered"
    shapes: list[dict[str, str]] = field(default_factory=list)


def _serialize(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {key: _serialize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_serialize(item) for item in value]
    return value
