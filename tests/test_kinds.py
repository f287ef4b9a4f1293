from __future__ import annotations

import re
from datetime import datetime

import pytest

from shapeschema import to_json_schema
from shapeschema import shapes as s
from shapeschema.schema.kinds import BUILDERS, TRANSPARENT_KINDS
from shapeschema.shapes import MISSING, Kind


def test_every_kind_has_exactly_one_handler() -> None:
    assert set(BUILDERS) | set(TRANSPARENT_KINDS) == set(Kind)
    assert not set(BUILDERS) & set(TRANSPARENT_KINDS)


def test_leaf_kinds() -> None:
    assert to_json_schema(s.any()) == {}
    assert to_json_schema(s.never()) == {"not": {}}
    assert to_json_schema(s.boolean()) == {"type": "boolean"}
    assert to_json_schema(s.bigint()) == {"type": "integer", "format": "int64"}
    assert to_json_schema(s.date()) == {"type": "string", "format": "date-time"}
    assert to_json_schema(s.instance(datetime)) == {"type": "object"}
    assert to_json_schema(s.promise(s.string())) == {"type": "object"}


def test_fixed_fragments_are_fresh_copies() -> None:
    first = to_json_schema(s.boolean().describe("flag"))
    second = to_json_schema(s.boolean())

    assert first == {"type": "boolean", "description": "flag"}
    assert second == {"type": "boolean"}


def test_string_length_bounds_fold_to_tightest() -> None:
    assert to_json_schema(s.string().max(10).max(5)) == {"type": "string", "maxLength": 5}
    assert to_json_schema(s.string().max(5).max(10)) == {"type": "string", "maxLength": 5}
    assert to_json_schema(s.string().min(2).min(4)) == {"type": "string", "minLength": 4}
    assert to_json_schema(s.string().length(3).max(5)) == {
        "type": "string",
        "minLength": 3,
        "maxLength": 3,
    }


def test_string_patterns() -> None:
    assert to_json_schema(s.string().regex("^a")) == {"type": "string", "pattern": "^a"}
    assert to_json_schema(s.string().regex(re.compile(r"\d+"))) == {"type": "string", "pattern": r"\d+"}
    assert to_json_schema(s.string().regex("^a").regex("b$").regex("c")) == {
        "type": "string",
        "pattern": "^a",
        "allOf": [{"pattern": "b$"}, {"pattern": "c"}],
    }


def test_number_bounds() -> None:
    assert to_json_schema(s.number().gte(1).gte(3)) == {"type": "number", "minimum": 3}
    assert to_json_schema(s.number().lte(10).lte(7)) == {"type": "number", "maximum": 7}
    assert to_json_schema(s.integer().gt(0).lt(100)) == {
        "type": "integer",
        "exclusiveMinimum": 0,
        "exclusiveMaximum": 100,
    }
    assert to_json_schema(s.number().multiple_of(2).multiple_of(3)) == {"type": "number", "multipleOf": 3}
    assert to_json_schema(s.number().positive()) == {"type": "number", "exclusiveMinimum": 0}


@pytest.mark.parametrize(
    ("shape", "expected"),
    [
        (s.number().gt(3).gt(1), {"type": "number", "exclusiveMinimum": 3}),
        (s.number().gt(1).gt(3), {"type": "number", "exclusiveMinimum": 3}),
        (s.number().lt(1).lt(9), {"type": "number", "exclusiveMaximum": 1}),
        (s.number().lt(9).lt(1), {"type": "number", "exclusiveMaximum": 1}),
        (s.number().gte(3).gte(1), {"type": "number", "minimum": 3}),
        (s.number().lte(7).lte(10), {"type": "number", "maximum": 7}),
        (s.string().length(3).min(1), {"type": "string", "minLength": 3, "maxLength": 3}),
        (s.string().min(5).length(3), {"type": "string", "minLength": 5, "maxLength": 3}),
        (s.string().length(3).max(5), {"type": "string", "minLength": 3, "maxLength": 3}),
    ],
)
def test_scalar_bounds_fold_regardless_of_order(shape, expected) -> None:
    assert to_json_schema(shape) == expected


@pytest.mark.parametrize(
    ("shape", "expected"),
    [
        (s.array().max(5).max(3), {"maxItems": 3}),
        (s.array().max(3).max(5), {"maxItems": 3}),
        (s.array().min(1).min(2), {"minItems": 2}),
        (s.array().min(2).min(1), {"minItems": 2}),
        (s.array().length(2).max(4), {"minItems": 2, "maxItems": 2}),
        (s.array().max(4).length(2).min(1), {"minItems": 2, "maxItems": 2}),
    ],
)
def test_array_item_counts_fold_regardless_of_order(shape, expected) -> None:
    assert to_json_schema(shape) == {"type": "array", "items": {}, **expected}


@pytest.mark.parametrize(
    ("shape", "expected"),
    [
        (s.set(s.number()).min(1).size(4), {"minItems": 4, "maxItems": 4}),
        (s.set(s.number()).size(4).min(1), {"minItems": 4, "maxItems": 4}),
        (s.set(s.number()).max(6).max(2), {"maxItems": 2}),
        (s.set(s.number()).max(2).max(6), {"maxItems": 2}),
    ],
)
def test_set_sizes_fold_regardless_of_order(shape, expected) -> None:
    assert to_json_schema(shape) == {
        "type": "array",
        "uniqueItems": True,
        "items": {"type": "number"},
        **expected,
    }


def test_unknown_checks_are_ignored() -> None:
    shape = s.string()._with_check("string.email", None)

    assert to_json_schema(shape) == {"type": "string"}


def test_object_partitions_required_keys() -> None:
    shape = s.object({"foo": s.string().optional(), "bar": s.number().gt(10)})

    assert to_json_schema(shape) == {
        "type": "object",
        "properties": {
            "foo": {"type": "string"},
            "bar": {"type": "number", "exclusiveMinimum": 10},
        },
        "required": ["bar"],
    }


def test_object_key_modes() -> None:
    shape = s.object({"aaa": s.string()})

    assert to_json_schema(shape.exact())["additionalProperties"] is False
    assert "additionalProperties" not in to_json_schema(shape.strip())
    assert to_json_schema(shape.rest(s.number()))["additionalProperties"] == {"type": "number"}
    assert to_json_schema(s.object({})) == {"type": "object"}
    assert "required" not in to_json_schema(shape.partial())


def test_record() -> None:
    assert to_json_schema(s.record(s.number())) == {
        "type": "object",
        "additionalProperties": {"type": "number"},
    }
    assert to_json_schema(s.record(s.string().min(1), s.boolean())) == {
        "type": "object",
        "additionalProperties": {"type": "boolean"},
        "propertyNames": {"type": "string", "minLength": 1},
    }


def test_arrays_and_tuples() -> None:
    assert to_json_schema(s.array(s.string()).min(1).max(3)) == {
        "type": "array",
        "items": {"type": "string"},
        "minItems": 1,
        "maxItems": 3,
    }
    assert to_json_schema(s.array()) == {"type": "array", "items": {}}
    assert to_json_schema(s.tuple([s.string(), s.number()])) == {
        "type": "array",
        "prefixItems": [{"type": "string"}, {"type": "number"}],
        "items": False,
    }
    assert to_json_schema(s.tuple([s.string()], rest=s.boolean())) == {
        "type": "array",
        "prefixItems": [{"type": "string"}],
        "items": {"type": "boolean"},
    }


def test_set_and_map() -> None:
    assert to_json_schema(s.set(s.number()).size(2)) == {
        "type": "array",
        "uniqueItems": True,
        "items": {"type": "number"},
        "minItems": 2,
        "maxItems": 2,
    }
    assert to_json_schema(s.map(s.string(), s.number())) == {
        "type": "array",
        "items": {
            "type": "array",
            "prefixItems": [{"type": "string"}, {"type": "number"}],
            "items": False,
        },
    }


def test_union_and_intersection() -> None:
    assert to_json_schema(s.union(s.string(), s.number())) == {
        "anyOf": [{"type": "string"}, {"type": "number"}]
    }
    assert to_json_schema(s.intersection(s.object({}), s.record(s.string()))) == {
        "allOf": [
            {"type": "object"},
            {"type": "object", "additionalProperties": {"type": "string"}},
        ]
    }


def test_enum_and_const() -> None:
    assert to_json_schema(s.enum(["a", 1, MISSING])) == {"enum": ["a", 1]}
    assert to_json_schema(s.const("a")) == {"const": "a"}
    assert to_json_schema(s.const(None)) == {"type": "null"}
    assert to_json_schema(s.const(MISSING)) == {"type": "null"}
    assert to_json_schema(s.const("a"), const_as_enum=True) == {"enum": ["a"]}
    assert to_json_schema(s.const(None), const_as_enum=True) == {"type": "null"}


def test_replace_wrappers() -> None:
    assert to_json_schema(s.string().optional()) == {"type": "string"}
    assert to_json_schema(s.string().nullable()) == {
        "oneOf": [{"type": "null"}, {"type": "string"}]
    }
    assert to_json_schema(s.string().nullish()) == {
        "oneOf": [{"type": "null"}, {"type": "string"}]
    }
    assert to_json_schema(s.number().replace("none", 0)) == {
        "oneOf": [{"const": "none"}, {"type": "number"}]
    }


def test_deny_and_exclude() -> None:
    assert to_json_schema(s.string().deny("x")) == {"type": "string", "not": {"const": "x"}}
    assert to_json_schema(s.string().nullable().deny(None)) == {
        "oneOf": [{"type": "null"}, {"type": "string"}],
        "not": {"type": "null"},
    }
    assert to_json_schema(s.string().optional().deny(MISSING)) == {"type": "string"}
    assert to_json_schema(s.string().exclude(s.const("a"))) == {
        "type": "string",
        "not": {"const": "a"},
    }


def test_transparent_wrappers_convert_their_target() -> None:
    assert to_json_schema(s.string().to(s.number())) == {"type": "string"}
    assert to_json_schema(s.string().catch("x")) == {"type": "string"}
    assert to_json_schema(s.string().transform(str.upper)) == {"type": "string"}
    assert to_json_schema(s.lazy(lambda: s.boolean())) == {"type": "boolean"}


def test_transparent_wrappers_do_not_carry_annotations() -> None:
    shape = s.string().describe("inner").catch("x").describe("outer")

    assert to_json_schema(shape) == {"type": "string", "description": "inner"}


def test_lazy_annotations_come_from_the_wrapped_shape() -> None:
    target = s.number().title("Amount")

    assert to_json_schema(s.lazy(lambda: target).describe("dropped")) == {
        "type": "number",
        "title": "Amount",
    }


def test_caught_properties_are_not_required() -> None:
    shape = s.object({"aaa": s.number().catch(0), "bbb": s.number()})

    assert to_json_schema(shape)["required"] == ["bbb"]


def test_annotations_are_copied_onto_fragments() -> None:
    shape = s.object({"name": s.string().title("Name")}).describe("A person")

    assert to_json_schema(shape) == {
        "type": "object",
        "properties": {"name": {"type": "string", "title": "Name"}},
        "required": ["name"],
        "description": "A person",
    }
