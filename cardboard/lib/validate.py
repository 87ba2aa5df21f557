"""
Board schema checks.

Boards are checked against schemas/<name>.schema.json on the way in from disk
and again on the way out, so a file that cardboard wrote always loads.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema.exceptions import best_match

SCHEMAS_DIR = Path(__file__).parent.parent / "schemas"


class SchemaValidationError(Exception):
    """Data did not match its schema."""

    def __init__(self, schema_name: str, message: str, path: str | None = None):
        self.schema_name = schema_name
        self.detail = message
        self.path = path
        location = f" at {path}" if path else ""
        super().__init__(f"{schema_name} schema: {message}{location}")


@lru_cache(maxsize=None)
def _validator(schema_name: str) -> jsonschema.Draft7Validator:
    schema_file = SCHEMAS_DIR / f"{schema_name}.schema.json"
    if not schema_file.is_file():
        raise SchemaValidationError(schema_name, f"no schema file {schema_file}")
    schema = json.loads(schema_file.read_text(encoding="utf-8"))
    return jsonschema.Draft7Validator(schema)


def validate(data: Any, schema_name: str) -> None:
    """Raise SchemaValidationError for the most relevant violation, if any.

    The error path is dotted, e.g. "cards.0.title"; "(root)" for the top level.
    """
    error = best_match(_validator(schema_name).iter_errors(data))
    if error is None:
        return
    path = ".".join(str(part) for part in error.absolute_path) or "(root)"
    raise SchemaValidationError(schema_name, error.message, path)
