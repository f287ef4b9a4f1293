"""Shape graph consumed by the JSON Schema converter.

Shapes describe constraints on a value. They do not validate data here; the
converter only reads the kind tag, kind-specific children, the ordered check
list, annotations and :meth:`Shape.accepts_missing`.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class Kind(str, Enum):
    NEVER = "never"
    ANY = "any"
    CONST = "const"
    BOOLEAN = "boolean"
    NUMBER = "number"
    BIGINT = "bigint"
    STRING = "string"
    SYMBOL = "symbol"
    ENUM = "enum"
    UNION = "union"
    INTERSECTION = "intersection"
    OBJECT = "object"
    RECORD = "record"
    ARRAY = "array"
    SET = "set"
    MAP = "map"
    DATE = "date"
    INSTANCE = "instance"
    PROMISE = "promise"
    REPLACE = "replace"
    DENY = "deny"
    EXCLUDE = "exclude"
    LAZY = "lazy"
    PIPE = "pipe"
    CATCH = "catch"
    TRANSFORM = "transform"


@dataclass(frozen=True)
class Check:
    kind: str
    param: Any = None


class Shape:
    """Base node. Subclasses set ``kind`` and expose their children as attributes."""

    kind: Kind = Kind.ANY

    def __init__(self) -> None:
        self.checks: list[Check] = []
        self.annotations: dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} kind={self.kind.value}>"

    def accepts_missing(self) -> bool:
        return False

    def annotate(self, **annotations: Any) -> Shape:
        shape = self._clone()
        shape.annotations = {**self.annotations, **annotations}
        return shape

    def describe(self, description: str) -> Shape:
        return self.annotate(description=description)

    def title(self, title: str) -> Shape:
        return self.annotate(title=title)

    def optional(self) -> ReplaceShape:
        return ReplaceShape(self, MISSING, MISSING)

    def nullable(self) -> ReplaceShape:
        return ReplaceShape(self, None, None)

    def nullish(self) -> ReplaceShape:
        return self.nullable().optional()

    def replace(self, input_value: Any, output_value: Any) -> ReplaceShape:
        return ReplaceShape(self, input_value, output_value)

    def deny(self, value: Any) -> DenyShape:
        return DenyShape(self, value)

    def exclude(self, shape: Shape) -> ExcludeShape:
        return ExcludeShape(self, shape)

    def catch(self, fallback: Any = None) -> CatchShape:
        return CatchShape(self, fallback)

    def to(self, shape: Shape) -> PipeShape:
        return PipeShape(self, shape)

    def transform(self, callback: Callable[[Any], Any]) -> TransformShape:
        return TransformShape(self, callback)

    def _clone(self) -> Shape:
        shape = copy.copy(self)
        shape.checks = list(self.checks)
        shape.annotations = dict(self.annotations)
        return shape

    def _with_check(self, kind: str, param: Any) -> Shape:
        shape = self._clone()
        shape.checks.append(Check(kind, param))
        return shape


class NeverShape(Shape):
    kind = Kind.NEVER


class AnyShape(Shape):
    kind = Kind.ANY

    def accepts_missing(self) -> bool:
        return True


class ConstShape(Shape):
    kind = Kind.CONST

    def __init__(self, value: Any) -> None:
        super().__init__()
        self.value = value

    def accepts_missing(self) -> bool:
        return self.value is MISSING


class BooleanShape(Shape):
    kind = Kind.BOOLEAN


class NumberShape(Shape):
    kind = Kind.NUMBER

    def __init__(self, *, integer: bool = False) -> None:
        super().__init__()
        self.integer = integer

    def gt(self, value: float) -> NumberShape:
        return self._with_check("number.gt", value)

    def gte(self, value: float) -> NumberShape:
        return self._with_check("number.gte", value)

    def lt(self, value: float) -> NumberShape:
        return self._with_check("number.lt", value)

    def lte(self, value: float) -> NumberShape:
        return self._with_check("number.lte", value)

    def multiple_of(self, value: float) -> NumberShape:
        return self._with_check("number.multipleOf", value)

    def positive(self) -> NumberShape:
        return self.gt(0)

    def negative(self) -> NumberShape:
        return self.lt(0)


class BigIntShape(Shape):
    kind = Kind.BIGINT


class StringShape(Shape):
    kind = Kind.STRING

    def min(self, length: int) -> StringShape:
        return self._with_check("string.min", length)

    def max(self, length: int) -> StringShape:
        return self._with_check("string.max", length)

    def length(self, length: int) -> StringShape:
        return self._with_check("string.length", length)

    def regex(self, pattern: str) -> StringShape:
        return self._with_check("string.regex", pattern)

    def nonempty(self) -> StringShape:
        return self.min(1)


class SymbolShape(Shape):
    kind = Kind.SYMBOL


class EnumShape(Shape):
    kind = Kind.ENUM

    def __init__(self, values: Iterable[Any]) -> None:
        super().__init__()
        self.values = list(values)

    def accepts_missing(self) -> bool:
        return any(value is MISSING for value in self.values)


class UnionShape(Shape):
    kind = Kind.UNION

    def __init__(self, shapes: Iterable[Shape]) -> None:
        super().__init__()
        self.shapes = list(shapes)

    def accepts_missing(self) -> bool:
        return any(shape.accepts_missing() for shape in self.shapes)


class IntersectionShape(Shape):
    kind = Kind.INTERSECTION

    def __init__(self, shapes: Iterable[Shape]) -> None:
        super().__init__()
        self.shapes = list(shapes)

    def accepts_missing(self) -> bool:
        return bool(self.shapes) and all(shape.accepts_missing() for shape in self.shapes)


KEYS_MODES = {"preserved", "stripped", "exact"}


class ObjectShape(Shape):
    kind = Kind.OBJECT

    def __init__(
        self,
        shapes: dict[str, Shape],
        rest_shape: Shape | None = None,
        keys_mode: str = "preserved",
    ) -> None:
        super().__init__()
        if keys_mode not in KEYS_MODES:
            raise ValueError(f"Unknown keys mode: {keys_mode!r}")
        self.shapes = dict(shapes)
        self.rest_shape = rest_shape
        self.keys_mode = keys_mode

    @property
    def keys(self) -> list[str]:
        return list(self.shapes)

    def exact(self) -> ObjectShape:
        return self._with_keys(rest_shape=None, keys_mode="exact")

    def strip(self) -> ObjectShape:
        return self._with_keys(rest_shape=None, keys_mode="stripped")

    def rest(self, shape: Shape) -> ObjectShape:
        return self._with_keys(rest_shape=shape, keys_mode="preserved")

    def extend(self, shapes: dict[str, Shape]) -> ObjectShape:
        shape = self._clone()
        shape.shapes = {**self.shapes, **shapes}
        return shape

    def partial(self) -> ObjectShape:
        shape = self._clone()
        shape.shapes = {key: value.optional() for key, value in self.shapes.items()}
        return shape

    def _with_keys(self, *, rest_shape: Shape | None, keys_mode: str) -> ObjectShape:
        shape = self._clone()
        shape.rest_shape = rest_shape
        shape.keys_mode = keys_mode
        return shape


class RecordShape(Shape):
    kind = Kind.RECORD

    def __init__(self, key_shape: Shape | None, value_shape: Shape) -> None:
        super().__init__()
        self.key_shape = key_shape
        self.value_shape = value_shape


class ArrayShape(Shape):
    kind = Kind.ARRAY

    def __init__(self, shapes: list[Shape] | None, rest_shape: Shape | None) -> None:
        super().__init__()
        self.shapes = list(shapes) if shapes is not None else None
        self.rest_shape = rest_shape

    def min(self, length: int) -> ArrayShape:
        return self._with_check("array.min", length)

    def max(self, length: int) -> ArrayShape:
        return self._with_check("array.max", length)

    def length(self, length: int) -> ArrayShape:
        return self._with_check("array.length", length)

    def nonempty(self) -> ArrayShape:
        return self.min(1)


class SetShape(Shape):
    kind = Kind.SET

    def __init__(self, shape: Shape) -> None:
        super().__init__()
        self.shape = shape

    def min(self, size: int) -> SetShape:
        return self._with_check("set.min", size)

    def max(self, size: int) -> SetShape:
        return self._with_check("set.max", size)

    def size(self, size: int) -> SetShape:
        return self._with_check("set.size", size)


class MapShape(Shape):
    kind = Kind.MAP

    def __init__(self, key_shape: Shape, value_shape: Shape) -> None:
        super().__init__()
        self.key_shape = key_shape
        self.value_shape = value_shape


class DateShape(Shape):
    kind = Kind.DATE


class InstanceShape(Shape):
    kind = Kind.INSTANCE

    def __init__(self, ctor: type) -> None:
        super().__init__()
        self.ctor = ctor


class PromiseShape(Shape):
    kind = Kind.PROMISE

    def __init__(self, shape: Shape | None = None) -> None:
        super().__init__()
        self.shape = shape


class ReplaceShape(Shape):
    kind = Kind.REPLACE

    def __init__(self, shape: Shape, input_value: Any, output_value: Any) -> None:
        super().__init__()
        self.shape = shape
        self.input_value = input_value
        self.output_value = output_value

    def accepts_missing(self) -> bool:
        return self.input_value is MISSING or self.shape.accepts_missing()


class DenyShape(Shape):
    kind = Kind.DENY

    def __init__(self, shape: Shape, denied_value: Any) -> None:
        super().__init__()
        self.shape = shape
        self.denied_value = denied_value

    def accepts_missing(self) -> bool:
        return self.denied_value is not MISSING and self.shape.accepts_missing()


class ExcludeShape(Shape):
    kind = Kind.EXCLUDE

    def __init__(self, shape: Shape, excluded_shape: Shape) -> None:
        super().__init__()
        self.shape = shape
        self.excluded_shape = excluded_shape

    def accepts_missing(self) -> bool:
        return self.shape.accepts_missing() and not self.excluded_shape.accepts_missing()


class LazyShape(Shape):
    """Defers building the wrapped shape, which is how cyclic graphs are declared.

    Lazy shapes convert to the fragment of the wrapped shape, so annotations set on
    the lazy shape itself are not emitted. Annotate the wrapped shape instead. The
    same holds for ``pipe``, ``catch`` and ``transform``.
    """

    kind = Kind.LAZY

    def __init__(self, provider: Callable[[], Shape]) -> None:
        super().__init__()
        self.provider = provider
        self._shape: Shape | None = None
        self._resolving = False

    @property
    def shape(self) -> Shape:
        if self._shape is None:
            self._shape = self.provider()
        return self._shape

    def accepts_missing(self) -> bool:
        # Cyclic lazy chains never bottom out.
        if self._resolving:
            return False
        self._resolving = True
        try:
            return self.shape.accepts_missing()
        finally:
            self._resolving = False


class PipeShape(Shape):
    kind = Kind.PIPE

    def __init__(self, input_shape: Shape, output_shape: Shape) -> None:
        super().__init__()
        self.input_shape = input_shape
        self.output_shape = output_shape

    def accepts_missing(self) -> bool:
        return self.input_shape.accepts_missing()


class CatchShape(Shape):
    kind = Kind.CATCH

    def __init__(self, shape: Shape, fallback: Any = None) -> None:
        super().__init__()
        self.shape = shape
        self.fallback = fallback

    def accepts_missing(self) -> bool:
        return True


class TransformShape(Shape):
    kind = Kind.TRANSFORM

    def __init__(self, shape: Shape, callback: Callable[[Any], Any]) -> None:
        super().__init__()
        self.shape = shape
        self.callback = callback

    def accepts_missing(self) -> bool:
        return self.shape.accepts_missing()
