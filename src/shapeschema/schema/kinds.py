from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Callable

from shapeschema.schema.errors import InvalidNodeError, UnrepresentableKindError
from shapeschema.shapes import MISSING, Kind, Shape

if TYPE_CHECKING:
    from shapeschema.schema.converter import Converter

Builder = Callable[[Any, "Converter"], dict[str, Any]]
Fold = Callable[[dict[str, Any], str, Any], None]


def build_schema(shape: Shape, converter: Converter) -> dict[str, Any]:
    unwrap = TRANSPARENT_KINDS.get(shape.kind)
    if unwrap is not None:
        return converter.convert(unwrap(shape))

    builder = BUILDERS.get(shape.kind)
    if builder is None:
        raise InvalidNodeError(shape)
    return converter.options.finish(shape, builder(shape, converter))


def const_schema(value: Any, *, as_enum: bool = False) -> dict[str, Any]:
    if value is None or value is MISSING:
        return {"type": "null"}
    if as_enum:
        return {"enum": [value]}
    return {"const": value}


def _fold_min(schema: dict[str, Any], keyword: str, value: Any) -> None:
    current = schema.get(keyword)
    if current is None or value > current:
        schema[keyword] = value


def _fold_max(schema: dict[str, Any], keyword: str, value: Any) -> None:
    current = schema.get(keyword)
    if current is None or value < current:
        schema[keyword] = value


def _fold_last(schema: dict[str, Any], keyword: str, value: Any) -> None:
    schema[keyword] = value


_STRING_CHECKS: dict[str, tuple[tuple[str, Fold], ...]] = {
    "string.min": (("minLength", _fold_min),),
    "string.max": (("maxLength", _fold_max),),
    "string.length": (("minLength", _fold_min), ("maxLength", _fold_max)),
}

_NUMBER_CHECKS: dict[str, tuple[tuple[str, Fold], ...]] = {
    "number.gte": (("minimum", _fold_min),),
    "number.lte": (("maximum", _fold_max),),
    "number.gt": (("exclusiveMinimum", _fold_min),),
    "number.lt": (("exclusiveMaximum", _fold_max),),
    "number.multipleOf": (("multipleOf", _fold_last),),
}

_ARRAY_CHECKS: dict[str, tuple[tuple[str, Fold], ...]] = {
    "array.min": (("minItems", _fold_min),),
    "array.max": (("maxItems", _fold_max),),
    "array.length": (("minItems", _fold_min), ("maxItems", _fold_max)),
}

_SET_CHECKS: dict[str, tuple[tuple[str, Fold], ...]] = {
    "set.min": (("minItems", _fold_min),),
    "set.max": (("maxItems", _fold_max),),
    "set.size": (("minItems", _fold_min), ("maxItems", _fold_max)),
}


def _apply_checks(
    schema: dict[str, Any],
    shape: Shape,
    table: dict[str, tuple[tuple[str, Fold], ...]],
) -> dict[str, Any]:
    # Checks without a keyword are runtime-only refinements.
    for check in shape.checks:
        for keyword, fold in table.get(check.kind, ()):
            fold(schema, keyword, check.param)
    return schema


def _convert_shapes(shapes: list[Shape], converter: Converter) -> list[dict[str, Any]]:
    return [converter.convert(shape) for shape in shapes]


def _build_string(shape: Any, converter: Converter) -> dict[str, Any]:
    schema = _apply_checks({"type": "string"}, shape, _STRING_CHECKS)

    patterns = []
    for check in shape.checks:
        if check.kind == "string.regex":
            param = check.param
            patterns.append(param.pattern if isinstance(param, re.Pattern) else str(param))
    if patterns:
        schema["pattern"] = patterns[0]
        if len(patterns) > 1:
            schema["allOf"] = [{"pattern": pattern} for pattern in patterns[1:]]
    return schema


def _build_number(shape: Any, converter: Converter) -> dict[str, Any]:
    schema = {"type": "integer" if shape.integer else "number"}
    return _apply_checks(schema, shape, _NUMBER_CHECKS)


def _build_const(shape: Any, converter: Converter) -> dict[str, Any]:
    return const_schema(shape.value, as_enum=converter.options.const_as_enum)


def _build_enum(shape: Any, converter: Converter) -> dict[str, Any]:
    return {"enum": [value for value in shape.values if value is not MISSING]}


def _build_object(shape: Any, converter: Converter) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object"}
    properties: dict[str, Any] = {}
    required: list[str] = []

    for key in shape.keys:
        value_shape = shape.shapes[key]
        properties[key] = converter.convert(value_shape)
        if not value_shape.accepts_missing():
            required.append(key)

    if properties:
        schema["properties"] = properties
    if required:
        schema["required"] = required

    if shape.rest_shape is not None:
        schema["additionalProperties"] = converter.convert(shape.rest_shape)
    elif shape.keys_mode == "exact":
        schema["additionalProperties"] = False
    return schema


def _build_record(shape: Any, converter: Converter) -> dict[str, Any]:
    schema: dict[str, Any] = {
        "type": "object",
        "additionalProperties": converter.convert(shape.value_shape),
    }
    if shape.key_shape is not None:
        schema["propertyNames"] = converter.convert(shape.key_shape)
    return schema


def _build_array(shape: Any, converter: Converter) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "array"}
    if shape.shapes:
        schema["prefixItems"] = _convert_shapes(shape.shapes, converter)
    if shape.rest_shape is not None:
        schema["items"] = converter.convert(shape.rest_shape)
    else:
        schema["items"] = False
    return _apply_checks(schema, shape, _ARRAY_CHECKS)


def _build_set(shape: Any, converter: Converter) -> dict[str, Any]:
    schema = {
        "type": "array",
        "uniqueItems": True,
        "items": converter.convert(shape.shape),
    }
    return _apply_checks(schema, shape, _SET_CHECKS)


def _build_map(shape: Any, converter: Converter) -> dict[str, Any]:
    return {
        "type": "array",
        "items": {
            "type": "array",
            "prefixItems": [converter.convert(shape.key_shape), converter.convert(shape.value_shape)],
            "items": False,
        },
    }


def _build_union(shape: Any, converter: Converter) -> dict[str, Any]:
    return {"anyOf": _convert_shapes(shape.shapes, converter)}


def _build_intersection(shape: Any, converter: Converter) -> dict[str, Any]:
    return {"allOf": _convert_shapes(shape.shapes, converter)}


def _build_replace(shape: Any, converter: Converter) -> dict[str, Any]:
    if shape.input_value is MISSING:
        return converter.convert(shape.shape)
    return {
        "oneOf": [
            const_schema(shape.input_value, as_enum=converter.options.const_as_enum),
            converter.convert(shape.shape),
        ]
    }


def _build_deny(shape: Any, converter: Converter) -> dict[str, Any]:
    schema = converter.convert(shape.shape)
    if shape.denied_value is not MISSING:
        schema["not"] = const_schema(shape.denied_value)
    return schema


def _build_exclude(shape: Any, converter: Converter) -> dict[str, Any]:
    schema = converter.convert(shape.shape)
    schema["not"] = converter.convert(shape.excluded_shape)
    return schema


def _build_symbol(shape: Any, converter: Converter) -> dict[str, Any]:
    raise UnrepresentableKindError(shape.kind.value)


def _fixed(fragment: dict[str, Any]) -> Builder:
    def build(shape: Any, converter: Converter) -> dict[str, Any]:
        return dict(fragment)

    return build


BUILDERS: dict[Kind, Builder] = {
    Kind.NEVER: lambda shape, converter: {"not": {}},
    Kind.ANY: lambda shape, converter: {},
    Kind.CONST: _build_const,
    Kind.BOOLEAN: _fixed({"type": "boolean"}),
    Kind.NUMBER: _build_number,
    Kind.BIGINT: _fixed({"type": "integer", "format": "int64"}),
    Kind.STRING: _build_string,
    Kind.SYMBOL: _build_symbol,
    Kind.ENUM: _build_enum,
    Kind.UNION: _build_union,
    Kind.INTERSECTION: _build_intersection,
    Kind.OBJECT: _build_object,
    Kind.RECORD: _build_record,
    Kind.ARRAY: _build_array,
    Kind.SET: _build_set,
    Kind.MAP: _build_map,
    Kind.DATE: _fixed({"type": "string", "format": "date-time"}),
    Kind.INSTANCE: _fixed({"type": "object"}),
    Kind.PROMISE: _fixed({"type": "object"}),
    Kind.REPLACE: _build_replace,
    Kind.DENY: _build_deny,
    Kind.EXCLUDE: _build_exclude,
}

# Wrappers that never produce a fragment of their own.
TRANSPARENT_KINDS: dict[Kind, Callable[[Any], Shape]] = {
    Kind.LAZY: lambda shape: shape.shape,
    Kind.PIPE: lambda shape: shape.input_shape,
    Kind.CATCH: lambda shape: shape.shape,
    Kind.TRANSFORM: lambda shape: shape.shape,
}
