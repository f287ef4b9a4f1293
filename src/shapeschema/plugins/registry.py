from __future__ import annotations

import importlib
import sys
from contextlib import contextmanager
from importlib.metadata import EntryPoint, entry_points
from pathlib import Path
from typing import Iterator

from shapeschema.shapes import Shape

SHAPES_GROUP = "shapeschema.shapes"


class ShapeResolutionError(RuntimeError):
    pass


@contextmanager
def project_on_path(project_dir: Path) -> Iterator[None]:
    """Make modules in ``project_dir`` importable while resolving references."""
    entry = str(project_dir)
    sys.path.insert(0, entry)
    importlib.invalidate_caches()
    try:
        yield
    finally:
        sys.path.remove(entry)


def resolve_shape(ref: str) -> Shape:
    """Load a shape from ``module:attr`` or from a ``shapeschema.shapes`` entry point name."""
    if ":" in ref:
        ep = EntryPoint(name=ref, value=ref, group=SHAPES_GROUP)
    else:
        ep = _find_entry_point(ref)
    try:
        shape = ep.load()
    except (ImportError, AttributeError) as exc:
        raise ShapeResolutionError(f"Cannot load shape {ref!r}: {exc}") from exc
    if not isinstance(shape, Shape):
        raise ShapeResolutionError(f"{ref!r} is not a shape: {type(shape).__name__}")
    return shape


def resolve_shapes(refs: dict[str, str]) -> dict[str, Shape]:
    return {name: resolve_shape(ref) for name, ref in refs.items()}


def discover_shapes() -> list[dict[str, str]]:
    return [{"name": ep.name, "ref": ep.value} for ep in entry_points(group=SHAPES_GROUP)]


def _find_entry_point(name: str) -> EntryPoint:
    for ep in entry_points(group=SHAPES_GROUP):
        if ep.name == name:
            return ep
    raise ShapeResolutionError(f"Unknown shape: {name}")
