from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from shapeschema.schema.errors import InvalidNodeError
from shapeschema.schema.kinds import build_schema
from shapeschema.schema.options import ConversionOptions
from shapeschema.shapes import Shape

SYNTHETIC_NAME_PREFIX = "shape"


@dataclass
class DefinitionEntry:
    name: str
    shape: Shape
    schema: dict[str, Any] | None = None


def to_json_schema(
    source: Shape | Mapping[str, Shape],
    options: ConversionOptions | None = None,
    **overrides: Any,
) -> dict[str, Any]:
    """Convert a shape, or a mapping of names to shapes, to a JSON Schema document.

    A mapping registers every name as a definition before anything is converted,
    so roots that reference each other resolve to ``$ref`` instead of inline
    copies. The returned document then only carries the definitions container.
    """
    if options is None:
        options = ConversionOptions(**overrides)
    elif overrides:
        options = ConversionOptions(**{**dict(options), **overrides})

    converter = Converter(options)
    for name, shape in options.definitions.items():
        converter.add_definition(name, shape)

    if isinstance(source, Shape):
        schema = converter.convert(source)
    elif isinstance(source, Mapping):
        schema = {}
        for name, shape in source.items():
            converter.add_definition(name, shape)
        for shape in source.values():
            converter.convert(shape)
    else:
        raise InvalidNodeError(source)

    if options.unused_definitions:
        for shape in options.definitions.values():
            converter.convert(shape)

    definitions = converter.collect_definitions()
    if definitions:
        schema[options.definitions_key] = definitions
    if options.dialect is not None:
        schema["$schema"] = options.dialect
    return schema


class Converter:
    """Walks a shape graph once, naming shapes that are pre-registered or cyclic.

    Shapes are tracked by identity. Shared shapes that are neither named nor part
    of a cycle are expanded again at every occurrence.
    """

    def __init__(self, options: ConversionOptions | None = None):
        self.options = options or ConversionOptions()
        self.definitions_path = self.options.definitions_path
        self._results: dict[int, DefinitionEntry] = {}
        self._definitions: dict[int, str] = {}
        # Keeps every identity-keyed shape alive so ids are not reused mid-run.
        self._shapes: dict[int, Shape] = {}
        self._active: dict[int, Shape] = {}
        self._names: set[str] = set()
        self._nameless_counter = 0

    @property
    def results(self) -> list[DefinitionEntry]:
        return list(self._results.values())

    def add_definition(self, name: str, shape: Shape) -> None:
        """Add or replace the explicit definition name of a shape."""
        if not isinstance(shape, Shape):
            raise InvalidNodeError(shape)
        key = id(shape)
        self._shapes[key] = shape
        self._definitions[key] = name
        self._names.add(name)

    def convert(self, shape: Shape) -> dict[str, Any]:
        if not isinstance(shape, Shape):
            raise InvalidNodeError(shape)

        key = id(shape)
        entry = self._results.get(key)
        name = self._definitions.get(key)

        if name is not None:
            if entry is not None:
                return self._ref(entry.name)
            entry = self._add_entry(name, shape)
        elif key in self._active:
            # Cyclic dependency
            if entry is None:
                entry = self._add_entry(self._next_name(), shape)
            return self._ref(entry.name)

        self._active[key] = shape
        try:
            schema = build_schema(shape, self)
        finally:
            del self._active[key]

        entry = entry or self._results.get(key)
        if entry is None:
            return schema

        entry.schema = schema
        return self._ref(entry.name)

    def collect_definitions(self) -> dict[str, Any]:
        return {entry.name: entry.schema for entry in self._results.values()}

    def _add_entry(self, name: str, shape: Shape) -> DefinitionEntry:
        entry = DefinitionEntry(name=name, shape=shape)
        self._results[id(shape)] = entry
        self._shapes[id(shape)] = shape
        return entry

    def _next_name(self) -> str:
        while True:
            self._nameless_counter += 1
            name = f"{SYNTHETIC_NAME_PREFIX}{self._nameless_counter}"
            if name not in self._names:
                break
        self._names.add(name)
        return name

    def _ref(self, name: str) -> dict[str, Any]:
        return {"$ref": self.definitions_path + name}
