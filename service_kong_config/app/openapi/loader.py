"""
OpenAPI document loading and structural validation.
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from jsonschema import validate, ValidationError

from shared.errors import StructuralInputError


# Only what classification relies on; full OpenAPI validation is out of scope.
OPENAPI_STRUCTURE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["openapi", "paths"],
    "properties": {
        "openapi": {"type": "string"},
        "paths": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {
                    method: {
                        "type": "object",
                        "properties": {
                            "security": {
                                "type": "array",
                                "items": {"type": "object"},
                            },
                        },
                    }
                    for method in ("get", "post", "put", "patch", "delete", "options", "head")
                },
            },
        },
    },
}


def load_openapi_document(openapi_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load and structurally validate an OpenAPI document.

    JSON is expected; files ending in .yml/.yaml are parsed as YAML.

    Raises:
        StructuralInputError: If the file is unreadable, unparsable or lacks
            the fields route classification needs.
    """
    path = Path(openapi_path)

    try:
        with path.open("r", encoding="utf-8") as f:
            if path.suffix in (".yml", ".yaml"):
                document = yaml.safe_load(f)
            else:
                document = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise StructuralInputError(
            f"Failed to read OpenAPI document at {path}: {e}",
            details={"path": str(path)},
        ) from e

    try:
        validate(instance=document, schema=OPENAPI_STRUCTURE_SCHEMA)
    except ValidationError as e:
        raise StructuralInputError(
            f"Invalid OpenAPI document at {path}: {e.message}",
            details={"path": str(path), "field": "/".join(str(p) for p in e.absolute_path)},
        ) from e

    return document
