"""Font Families Package.

REST resource for font families: a named, sluggable wrapper around a CSS
font-family declaration with an optional preview image URL.

Exports:
    FontFamilyPolicy: Validation, mapping and serialization rules
    create_font_families_controller: Builds the PostsController for the routes
    format_font_family, sanitize_title: String helpers
"""
from .controller import (
    FONT_FACE_POST_TYPE,
    FONT_FAMILY_POST_TYPE,
    DuplicateFontFamilyError,
    FontFamilyPolicy,
    TrashNotSupportedError,
    create_font_families_controller,
)
from .utils import format_font_family, sanitize_title

__all__ = [
    "FONT_FACE_POST_TYPE",
    "FONT_FAMILY_POST_TYPE",
    "DuplicateFontFamilyError",
    "FontFamilyPolicy",
    "TrashNotSupportedError",
    "create_font_families_controller",
    "format_font_family",
    "sanitize_title",
]
