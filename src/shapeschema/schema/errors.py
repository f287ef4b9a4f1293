from __future__ import annotations

from typing import Any


class ConversionError(RuntimeError):
    pass


class InvalidNodeError(ConversionError):
    def __init__(self, value: Any):
        super().__init__(f"Expected a shape, got {type(value).__name__}: {value!r}")
        self.value = value


class UnrepresentableKindError(ConversionError):
    def __init__(self, kind: str):
        super().__init__(f"Shapes of kind {kind!r} cannot be represented in JSON Schema.")
        self.kind = kind


class SchemaCheckError(RuntimeError):
    pass
