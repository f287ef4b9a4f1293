from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shapeschema import __version__
from shapeschema.core import events as ev
from shapeschema.core.stages import CONVERT_STAGES

RULE_WIDTH = 64
RULE_LINE = "-" * RULE_WIDTH


def run_events(events: Iterable[ev.ShapeschemaEvent], renderer: "Renderer") -> int:
    exit_code = 0
    for event in events:
        renderer.handle(event)
        if isinstance(event, ev.CommandCompleted):
            exit_code = event.exit_code
    renderer.close()
    return exit_code


class Renderer:
    def handle(self, event: ev.ShapeschemaEvent) -> None:  # noqa: D401
        """Handle a single event."""

    def close(self) -> None:
        return None


class ConvertRichRenderer(Renderer):
    """Progress goes to ``console``; an emitted document goes to ``out``."""

    def __init__(self, console: Console, out: Console):
        self.console = console
        self.out = out
        self._stages: dict[str, str] = {}
        self._elapsed: dict[str, float] = {}
        self._definitions: list[str] = []
        self._written: ev.OutputWritten | None = None
        self._failure: ev.StageFailed | None = None

    def handle(self, event: ev.ShapeschemaEvent) -> None:
        if isinstance(event, ev.CommandStarted):
            _print_header(self.console, event)
            return
        if isinstance(event, ev.StageCompleted):
            self._stages[event.stage_id] = event.status
            self._elapsed[event.stage_id] = event.duration_ms
            return
        if isinstance(event, ev.StageFailed):
            self._stages[event.stage_id] = "failed"
            self._elapsed[event.stage_id] = event.duration_ms
            self._failure = event
            return
        if isinstance(event, ev.DefinitionsCollected):
            self._definitions = list(event.names)
            return
        if isinstance(event, ev.OutputWritten):
            self._written = event
            return
        if isinstance(event, ev.DocumentEmitted):
            self.out.print(event.text, markup=False, highlight=False, soft_wrap=True, end="")
            return
        if isinstance(event, ev.CommandCompleted):
            self._render_summary(event)

    def _render_summary(self, event: ev.CommandCompleted) -> None:
        table = Table(show_header=True, box=box.MINIMAL)
        table.add_column("Stage", style="bold")
        table.add_column("Status")
        table.add_column("Time", justify="right")
        for stage_id, label in CONVERT_STAGES:
            status = self._stages.get(stage_id, "pending")
            elapsed = self._elapsed.get(stage_id)
            table.add_row(label, _status_badge(status), _format_duration(elapsed) if elapsed is not None else "")
        self.console.print(table)
        if self._definitions:
            self.console.print(f"Definitions: {', '.join(self._definitions)}")
        if self._written and self._written.path:
            self.console.print(f"Wrote {self._written.path} ({_format_bytes(self._written.bytes)})")
        if self._failure:
            self.console.print(_failure_panel(self._failure))
        overall = "success" if event.ok else "failed"
        self.console.print(Text.assemble(Text("Convert status: "), _status_badge(overall)))


class ConvertPlainRenderer(Renderer):
    def __init__(self, console: Console, out: Console):
        self.console = console
        self.out = out

    def handle(self, event: ev.ShapeschemaEvent) -> None:
        if isinstance(event, ev.CommandStarted):
            _print_header(self.console, event)
            return
        if isinstance(event, ev.StageStarted):
            index = _stage_index(event.stage_id, CONVERT_STAGES)
            self.console.print(f"[{index}/{len(CONVERT_STAGES)}] {event.label} START")
            return
        if isinstance(event, ev.StageCompleted):
            self.console.print(f"{_stage_label(event.stage_id, CONVERT_STAGES)}: {_status_word(event.status)}")
            return
        if isinstance(event, ev.StageFailed):
            label = _stage_label(event.stage_id, CONVERT_STAGES)
            self.console.print(f"{label} FAIL: {event.message}", markup=False)
            if event.hint:
                self.console.print(f"Hint: {event.hint}")
            return
        if isinstance(event, ev.ShapesResolved):
            self.console.print(f"Roots: {', '.join(event.roots)}")
            return
        if isinstance(event, ev.DefinitionsCollected):
            self.console.print(f"Definitions ({event.definitions_key}): {', '.join(event.names)}")
            return
        if isinstance(event, ev.OutputWritten):
            self.console.print(f"Wrote {event.path} ({_format_bytes(event.bytes)})")
            return
        if isinstance(event, ev.DocumentEmitted):
            self.out.print(event.text, markup=False, highlight=False, soft_wrap=True, end="")
            return
        if isinstance(event, ev.CommandCompleted):
            self.console.print("CONVERT OK" if event.ok else "CONVERT FAIL")


class ConvertJsonRenderer(Renderer):
    def __init__(self, console: Console):
        self.console = console
        self._stages: dict[str, str] = {}
        self._errors: list[dict[str, Any]] = []
        self._definitions: list[str] = []
        self._output: str | None = None
        self._document: Any = None

    def handle(self, event: ev.ShapeschemaEvent) -> None:
        if isinstance(event, ev.StageCompleted):
            self._stages[event.stage_id] = event.status
            return
        if isinstance(event, ev.StageFailed):
            self._stages[event.stage_id] = "failed"
            self._errors.append(
                {"stage": event.stage_id, "code": event.error_code, "message": event.message}
            )
            return
        if isinstance(event, ev.DefinitionsCollected):
            self._definitions = list(event.names)
            return
        if isinstance(event, ev.OutputWritten):
            self._output = str(event.path) if event.path else None
            return
        if isinstance(event, ev.DocumentEmitted):
            self._document = json.loads(event.text)
            return
        if isinstance(event, ev.CommandCompleted):
            payload = {
                "ok": event.ok,
                "stages": self._stages,
                "definitions": self._definitions,
                "output": self._output,
                "document": self._document,
                "errors": self._errors,
            }
            self.console.print(
                json.dumps(payload, indent=2, sort_keys=True),
                markup=False,
                highlight=False,
                soft_wrap=True,
            )


class ListShapesRichRenderer(Renderer):
    def __init__(self, console: Console):
        self.console = console

    def handle(self, event: ev.ShapeschemaEvent) -> None:
        if isinstance(event, ev.CommandStarted):
            _print_header(self.console, event)
            return
        if isinstance(event, ev.ShapesDiscovered):
            table = Table(title="shapes", box=box.ROUNDED, title_justify="left")
            table.add_column("NAME", style="bold")
            table.add_column("REF")
            for shape in event.shapes:
                table.add_row(shape["name"], shape["ref"])
            self.console.print(table)


class ListShapesPlainRenderer(Renderer):
    def __init__(self, console: Console):
        self.console = console

    def handle(self, event: ev.ShapeschemaEvent) -> None:
        if isinstance(event, ev.CommandStarted):
            _print_header(self.console, event)
            return
        if isinstance(event, ev.ShapesDiscovered):
            self.console.print("shapes:")
            for shape in event.shapes:
                self.console.print(f"- {shape['name']}: {shape['ref']}")


class ListShapesJsonRenderer(Renderer):
    def __init__(self, console: Console):
        self.console = console
        self._shapes: list[dict[str, str]] = []

    def handle(self, event: ev.ShapeschemaEvent) -> None:
        if isinstance(event, ev.ShapesDiscovered):
            self._shapes = event.shapes
        if isinstance(event, ev.CommandCompleted):
            self.console.print(
                json.dumps({"ok": event.ok, "shapes": self._shapes}, indent=2, sort_keys=True),
                markup=False,
                highlight=False,
                soft_wrap=True,
            )


def _format_duration(elapsed_ms: float) -> str:
    if elapsed_ms < 1000:
        return f"{elapsed_ms:.0f}ms"
    seconds = elapsed_ms / 1000
    if seconds < 10:
        return f"{seconds:.2f}s"
    return f"{seconds:.1f}s"


def _format_bytes(num: int) -> str:
    size = float(num)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024 or unit == "GB":
            if unit == "B":
                return f"{size:.0f} {unit}"
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


def _print_header(console: Console, event: ev.CommandStarted) -> None:
    if event.config_path is None:
        console.print(f"shapeschema v{__version__}\n{RULE_LINE}")
        return
    project = event.project_dir or Path(".")
    console.print(f"shapeschema v{__version__} | project: {project} | config: {event.config_path}\n{RULE_LINE}")


def _stage_label(stage_id: str, mapping: list[tuple[str, str]]) -> str:
    for key, label in mapping:
        if key == stage_id:
            return label
    return stage_id


def _stage_index(stage_id: str, mapping: list[tuple[str, str]]) -> int:
    for index, (key, _label) in enumerate(mapping, start=1):
        if key == stage_id:
            return index
    return 0


def _status_word(status: str) -> str:
    return {
        "success": "OK",
        "failed": "FAIL",
        "skipped": "SKIP",
    }.get(status, status.upper())


def _status_badge(status: str) -> Text:
    normalized = status.strip().lower()
    label = {
        "success": "ok",
        "failed": "fail",
        "skipped": "skip",
    }.get(normalized, normalized)
    style = {
        "success": "bold black on green3",
        "failed": "bold white on red3",
        "skipped": "bold white on grey35",
    }.get(normalized, "bold white on grey35")
    return Text(f" {label} ", style=style)


def _failure_panel(event: ev.StageFailed) -> Panel:
    lines = [f"stage: {event.stage_id}", f"error: {event.message}"]
    if event.hint:
        lines.append(f"hint: {event.hint}")
    return Panel(Text("\n".join(lines)), title="Convert failed", box=box.ROUNDED, title_align="left")
