from __future__ import annotations

from typing import Any, Callable, Iterable

from .model import (
    MISSING,
    AnyShape,
    ArrayShape,
    BigIntShape,
    BooleanShape,
    CatchShape,
    Check,
    ConstShape,
    DateShape,
    DenyShape,
    EnumShape,
    ExcludeShape,
    InstanceShape,
    IntersectionShape,
    Kind,
    LazyShape,
    MapShape,
    NeverShape,
    NumberShape,
    ObjectShape,
    PipeShape,
    PromiseShape,
    RecordShape,
    ReplaceShape,
    SetShape,
    Shape,
    StringShape,
    SymbolShape,
    TransformShape,
    UnionShape,
)


def any() -> AnyShape:  # noqa: A001
    return AnyShape()


def never() -> NeverShape:
    return NeverShape()


def const(value: Any) -> ConstShape:
    return ConstShape(value)


def boolean() -> BooleanShape:
    return BooleanShape()


def number() -> NumberShape:
    return NumberShape()


def integer() -> NumberShape:
    return NumberShape(integer=True)


def bigint() -> BigIntShape:
    return BigIntShape()


def string() -> StringShape:
    return StringShape()


def symbol() -> SymbolShape:
    return SymbolShape()


def enum(values: Iterable[Any]) -> EnumShape:
    return EnumShape(values)


def union(*shapes: Shape) -> UnionShape:
    return UnionShape(shapes)


def intersection(*shapes: Shape) -> IntersectionShape:
    return IntersectionShape(shapes)


def object(shapes: dict[str, Shape], rest: Shape | None = None) -> ObjectShape:  # noqa: A001
    return ObjectShape(shapes, rest_shape=rest)


def record(key_or_value: Shape, value: Shape | None = None) -> RecordShape:
    if value is None:
        return RecordShape(None, key_or_value)
    return RecordShape(key_or_value, value)


def array(shape: Shape | None = None) -> ArrayShape:
    return ArrayShape(None, shape if shape is not None else AnyShape())


def tuple(shapes: Iterable[Shape], rest: Shape | None = None) -> ArrayShape:  # noqa: A001
    return ArrayShape(list(shapes), rest)


def set(shape: Shape | None = None) -> SetShape:  # noqa: A001
    return SetShape(shape if shape is not None else AnyShape())


def map(key: Shape, value: Shape) -> MapShape:  # noqa: A001
    return MapShape(key, value)


def date() -> DateShape:
    return DateShape()


def instance(ctor: type) -> InstanceShape:
    return InstanceShape(ctor)


def promise(shape: Shape | None = None) -> PromiseShape:
    return PromiseShape(shape)


def lazy(provider: Callable[[], Shape]) -> LazyShape:
    return LazyShape(provider)


__all__ = [
    "MISSING",
    "AnyShape",
    "ArrayShape",
    "BigIntShape",
    "BooleanShape",
    "CatchShape",
    "Check",
    "ConstShape",
    "DateShape",
    "DenyShape",
    "EnumShape",
    "ExcludeShape",
    "InstanceShape",
    "IntersectionShape",
    "Kind",
    "LazyShape",
    "MapShape",
    "NeverShape",
    "NumberShape",
    "ObjectShape",
    "PipeShape",
    "PromiseShape",
    "RecordShape",
    "ReplaceShape",
    "SetShape",
    "Shape",
    "StringShape",
    "SymbolShape",
    "TransformShape",
    "UnionShape",
    "any",
    "array",
    "bigint",
    "boolean",
    "const",
    "date",
    "enum",
    "instance",
    "integer",
    "intersection",
    "lazy",
    "map",
    "never",
    "number",
    "object",
    "promise",
    "record",
    "set",
    "string",
    "symbol",
    "tuple",
    "union",
]
