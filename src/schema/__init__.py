"""Schema Package - JSON Schema Loading and Validation.

This package provides centralized loading and access to the JSON schemas
used by the font library REST endpoints.

Schemas are loaded once at module import time and exposed as module-level
constants, avoiding repeated file I/O and providing a single source of
truth for schema definitions.

Available Schemas:
    FONT_FAMILY_SCHEMA: JSON Schema for font family resources
        Describes the response object and the nested
        font_family_settings object (theme.json format).

    FONT_FAMILY_COLLECTION_PARAMS_SCHEMA: JSON Schema for the query
        parameters accepted by the font family collection endpoint.

Usage Patterns:
    # Direct import (most common):
    from schema import FONT_FAMILY_SCHEMA
    validate(instance=item, schema=FONT_FAMILY_SCHEMA)

    # Mutable copy of the settings sub-schema:
    from schema import get_font_family_settings_schema
    settings_schema = get_font_family_settings_schema()
"""
from .schema import (
    FONT_FAMILY_SCHEMA,
    FONT_FAMILY_COLLECTION_PARAMS_SCHEMA,
    get_font_family_schema,
    get_font_family_settings_schema,
    get_collection_params_schema,
)

__all__ = [
    "FONT_FAMILY_SCHEMA",
    "FONT_FAMILY_COLLECTION_PARAMS_SCHEMA",
    "get_font_family_schema",
    "get_font_family_settings_schema",
    "get_collection_params_schema",
]
