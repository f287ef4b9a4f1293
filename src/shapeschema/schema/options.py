from __future__ import annotations

from typing import Any, Callable, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shapeschema.shapes import Shape

DRAFT_2020_12 = "https://json-schema.org/draft/2020-12/schema"

_ANNOTATION_KEYS = ("title", "description")

AnnotationsAccessor = Callable[[Shape], Mapping[str, Any]]


def default_annotations(shape: Shape) -> dict[str, Any]:
    return {key: shape.annotations[key] for key in _ANNOTATION_KEYS if key in shape.annotations}


def copy_annotations(
    shape: Shape,
    fragment: dict[str, Any],
    annotations: AnnotationsAccessor = default_annotations,
) -> dict[str, Any]:
    """Set ``title``/``description`` on the fragment when the shape carries them."""
    values = annotations(shape) or {}
    for key in _ANNOTATION_KEYS:
        value = values.get(key)
        if isinstance(value, str) and value:
            fragment[key] = value
    return fragment


class ConversionOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    definitions: dict[str, Any] = Field(default_factory=dict)
    definitions_key: str = "definitions"
    base_path: str = "#"
    dialect: str | None = None
    unused_definitions: bool = False
    const_as_enum: bool = False
    annotations: AnnotationsAccessor = default_annotations
    postprocess: Callable[[Shape, dict[str, Any]], Any] | None = None

    @field_validator("definitions_key")
    @classmethod
    def _validate_definitions_key(cls, value: str) -> str:
        if not value or "/" in value:
            raise ValueError("definitions_key must be a non-empty string without '/'.")
        return value

    @property
    def definitions_path(self) -> str:
        return f"{self.base_path}/{self.definitions_key}/"

    def finish(self, shape: Shape, fragment: dict[str, Any]) -> dict[str, Any]:
        if self.postprocess is None:
            return copy_annotations(shape, fragment, self.annotations)
        result = self.postprocess(shape, fragment)
        return fragment if result is None else result
