from __future__ import annotations

import json
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from shapeschema.schema.errors import SchemaCheckError


def check_document(document: dict[str, Any]) -> None:
    """Check an emitted document against the meta-schema of its dialect.

    Documents without ``$schema`` are checked as Draft 2020-12.
    """
    if not _is_json_serializable(document):
        raise SchemaCheckError("Schema is not JSON-serializable.")

    validator = validator_for(document, default=Draft202012Validator)
    try:
        validator.check_schema(document)
    except SchemaError as exc:
        raise SchemaCheckError(f"Schema is not valid: {exc.message}") from exc


def _is_json_serializable(data: Any) -> bool:
    try:
        json.dumps(data)
    except (TypeError, ValueError):
        return False
    return True
