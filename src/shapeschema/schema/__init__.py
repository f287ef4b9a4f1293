from .check import check_document
from .converter import Converter, DefinitionEntry, to_json_schema
from .errors import (
    ConversionError,
    InvalidNodeError,
    SchemaCheckError,
    UnrepresentableKindError,
)
from .options import DRAFT_2020_12, ConversionOptions, copy_annotations, default_annotations

__all__ = [
    "DRAFT_2020_12",
    "ConversionError",
    "ConversionOptions",
    "Converter",
    "DefinitionEntry",
    "InvalidNodeError",
    "SchemaCheckError",
    "UnrepresentableKindError",
    "check_document",
    "copy_annotations",
    "default_annotations",
    "to_json_schema",
]
