__version__ = "0.1.0"

from shapeschema.schema import (  # noqa: E402
    DRAFT_2020_12,
    ConversionError,
    ConversionOptions,
    InvalidNodeError,
    UnrepresentableKindError,
    to_json_schema,
)

__all__ = [
    "DRAFT_2020_12",
    "ConversionError",
    "ConversionOptions",
    "InvalidNodeError",
    "UnrepresentableKindError",
    "__version__",
    "to_json_schema",
]
