"""
JSON schemas for document validation.
This module defines schemas for validating documents in the users and files collections.
"""

from typing import Dict, Any
from enum import Enum
import jsonschema


class FileType(str, Enum):
    """Enumeration for stored file types"""
    FOLDER = 'folder'
    FILE = 'file'
    IMAGE = 'image'


OBJECT_ID_PATTERN = "^[0-9a-f]{24}$"
MAX_EMAIL_LENGTH = 254
MAX_NAME_LENGTH = 255

# JSON Schema validators (for runtime validation)
USER_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "_id": {"type": "string", "pattern": OBJECT_ID_PATTERN},
        "email": {"type": "string", "minLength": 1, "maxLength": MAX_EMAIL_LENGTH},
        # sha1 hex digest, never the plaintext
        "password": {"type": "string", "pattern": "^[0-9a-f]{40}$"}
    },
    "required": ["_id", "email", "password"],
    "additionalProperties": False
}

FILE_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "_id": {"type": "string", "pattern": OBJECT_ID_PATTERN},
        "userId": {"type": "string", "minLength": 1},
        "name": {"type": "string", "minLength": 1, "maxLength": MAX_NAME_LENGTH},
        "type": {"type": "string", "enum": [t.value for t in FileType]},
        "isPublic": {"type": "boolean"},
        "parentId": {
            "oneOf": [
                {"type": "integer", "enum": [0]},
                {"type": "string", "pattern": OBJECT_ID_PATTERN}
            ]
        },
        "localPath": {"type": "string", "minLength": 1}
    },
    "required": ["_id", "userId", "name", "type", "isPublic", "parentId"],
    "additionalProperties": False
}


def validate_user_document(document: Dict[str, Any]) -> None:
    """Validate a user document against the schema"""
    jsonschema.validate(document, USER_JSON_SCHEMA)


def validate_file_document(document: Dict[str, Any]) -> None:
    """Validate a file document against the schema"""
    jsonschema.validate(document, FILE_JSON_SCHEMA)
    if document["type"] != FileType.FOLDER.value and "localPath" not in document:
        raise jsonschema.ValidationError("non-folder documents require localPath")


# Schema mapping for easy access
DOCUMENT_SCHEMAS = {
    'users': USER_JSON_SCHEMA,
    'files': FILE_JSON_SCHEMA,
}

DOCUMENT_VALIDATORS = {
    'users': validate_user_document,
    'files': validate_file_document,
}

COLLECTIONS = tuple(DOCUMENT_SCHEMAS)
