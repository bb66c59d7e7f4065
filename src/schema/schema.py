"""
Centralized JSON Schema Loading Module.

This module is responsible for loading JSON schema files from disk and
exposing them as module-level constants for use throughout the application.

Design Principles:
    1. Load Once: Schemas are loaded at module import time, not per request
    2. Fail Fast: Missing or invalid schemas cause immediate import failure
    3. Read Only: Callers receive deep copies when they need to mutate a schema

File Location:
    Schemas are expected to be in the same directory as this module
    (src/schema/). The path is resolved using __file__ so it works
    regardless of the current working directory.

Error Handling:
    - FileNotFoundError: Schema file doesn't exist at expected path
    - json.JSONDecodeError: Schema file contains invalid JSON syntax
"""
import copy
import json
from pathlib import Path
from typing import Dict, Any

SCHEMA_DIR = Path(__file__).parent


def _load_schema(schema_filename: str) -> Dict[str, Any]:
    """
    Load a JSON schema file from the schema directory.

    Args:
        schema_filename: Name of the JSON schema file (e.g., "font_family_schema.json")

    Returns:
        Parsed JSON schema as a dictionary, ready for use with jsonschema library

    Raises:
        FileNotFoundError: If the schema file doesn't exist at the expected location.
        json.JSONDecodeError: If the schema file exists but contains invalid JSON.

    Example:
        >>> schema = _load_schema("font_family_schema.json")
        >>> schema["$schema"]
        'http://json-schema.org/draft-04/schema#'
    """
    schema_path = SCHEMA_DIR / schema_filename

    if not schema_path.exists():
        raise FileNotFoundError(
            f"Schema file not found: {schema_path}. "
            f"Expected location: {SCHEMA_DIR}"
        )

    try:
        with open(schema_path, "r") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise json.JSONDecodeError(
            f"Invalid JSON in schema file {schema_filename}: {e.msg}",
            e.doc,
            e.pos
        ) from e


# Font Family item schema (JSON Schema Draft 4).
# "context" and "readonly" are REST-level annotations ignored by jsonschema.
FONT_FAMILY_SCHEMA = _load_schema("font_family_schema.json")

# Query parameters accepted by the font family collection endpoint
FONT_FAMILY_COLLECTION_PARAMS_SCHEMA = _load_schema("collection_params_schema.json")


def get_font_family_schema() -> Dict[str, Any]:
    """
    Get the font family item schema.

    The returned object is the module-level constant; treat it as read only.
    Use get_font_family_settings_schema() when a mutable copy is needed.

    Returns:
        Font family JSON schema containing id, theme_json_version,
        font_faces and font_family_settings properties.
    """
    return FONT_FAMILY_SCHEMA


def get_font_family_settings_schema() -> Dict[str, Any]:
    """
    Get a private copy of the font_family_settings sub-schema.

    Validation on update drops the "required" list, so every caller
    gets its own copy instead of the shared constant.

    Example:
        >>> schema = get_font_family_settings_schema()
        >>> schema["required"]
        ['name', 'slug', 'fontFamily']
    """
    return copy.deepcopy(FONT_FAMILY_SCHEMA["properties"]["font_family_settings"])


def get_collection_params_schema() -> Dict[str, Any]:
    """Get the font family collection query parameter schema."""
    return FONT_FAMILY_COLLECTION_PARAMS_SCHEMA
