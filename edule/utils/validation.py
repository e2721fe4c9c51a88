"""
Collection document validation utilities

Checks the envelope of a collection document read from storage before the
record store hands it to services: the record array must exist, every record
must be an object with an integer id, and the id counter must be sane.
"""

from typing import Any, Dict, List

from jsonschema import Draft7Validator


def collection_document_schema(name: str) -> Dict[str, Any]:
    """Build the JSON schema for the document backing collection ``name``"""
    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "type": "object",
        "properties": {
            name: {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {"id": {"type": "integer"}},
                    "required": ["id"],
                },
            },
            "nextId": {"type": "integer", "minimum": 1},
        },
        "required": [name],
    }


def validate_collection_document(name: str, document: Any) -> List[str]:
    """
    Validate a loaded collection document

    Args:
        name: Collection name; also the key of the record array
        document: Parsed JSON document

    Returns:
        List of human-readable problems, empty when the document is valid
    """
    validator = Draft7Validator(collection_document_schema(name))
    errors = []
    for error in validator.iter_errors(document):
        field_path = ".".join(str(x) for x in error.absolute_path) or name
        errors.append(f"{field_path}: {error.message}")
    return errors
