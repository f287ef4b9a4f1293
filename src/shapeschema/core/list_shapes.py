from __future__ import annotations

import time
from typing import Iterable

from shapeschema.core import events as ev
from shapeschema.core.stages import STAGE_LABELS
from shapeschema.plugins.registry import discover_shapes


def list_shapes_events() -> Iterable[ev.ShapeschemaEvent]:
    yield ev.CommandStarted(command="list-shapes")

    started = time.perf_counter()
    yield ev.StageStarted(
        command="list-shapes",
        stage_id="discover_shapes",
        label=STAGE_LABELS["list-shapes"]["discover_shapes"],
    )
    shapes = discover_shapes()
    yield ev.ShapesDiscovered(command="list-shapes", shapes=shapes)
    duration_ms = _elapsed_ms(started)
    yield ev.StageCompleted(
        command="list-shapes",
        stage_id="discover_shapes",
        duration_ms=duration_ms,
        status="success",
    )

    yield ev.CommandCompleted(command="list-shapes", ok=True, exit_code=0)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
