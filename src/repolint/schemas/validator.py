"""JSON Schema validation backed by the package-data schema registry."""

from __future__ import annotations

import functools
from typing import Any

from jsonschema.validators import Draft202012Validator

from repolint.utils.schema_registry import get_registry


@functools.lru_cache(maxsize=None)
def _validator_for(schema_name: str) -> Draft202012Validator:
    schema = get_registry().get_json(schema_name)
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def format_error_path(path: Any) -> str:
    return ".".join(str(p) for p in path)


def validate_data(data: Any, schema_name: str) -> tuple[bool, list[str]]:
    """Validate data against a schema from package data.

    Args:
        data: Data to validate
        schema_name: Name of schema to validate against

    Returns:
        Tuple of (is_valid, error_messages); messages are prefixed with the
        dotted path of the offending value when it is not the document root

    Raises:
        KeyError: If schema not found in package data
    """
    validator = _validator_for(schema_name)
    errors = sorted(validator.iter_errors(data), key=lambda e: (list(map(str, e.path)), e.message))
    if not errors:
        return True, []

    return False, [f"{format_error_path(e.path)}: {e.message}" if e.path else e.message for e in errors]
