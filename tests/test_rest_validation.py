import pytest

from rest.errors import InvalidParamError
from rest.validation import (
    apply_defaults,
    coerce_value,
    format_param_path,
    sanitize_boolean,
    strip_rest_keywords,
    validate_value,
)
from schema import get_collection_params_schema, get_font_family_settings_schema


@pytest.mark.parametrize("value,schema,expected", [
    ("2", {"type": "integer"}, 2),
    (" -3 ", {"type": "integer"}, -3),
    ("two", {"type": "integer"}, "two"),
    ("true", {"type": "boolean"}, True),
    ("FALSE", {"type": "boolean"}, False),
    ("", {"type": "boolean"}, False),
    (1, {"type": "boolean"}, True),
    ("yes", {"type": "boolean"}, "yes"),
    ("1,2, 3", {"type": "array", "items": {"type": "integer"}}, [1, 2, 3]),
    (["1,2", "3"], {"type": "array", "items": {"type": "integer"}}, [1, 2, 3]),
    ("arial", {"type": "array", "items": {"type": "string"}}, ["arial"]),
    ("text", {"type": "string"}, "text"),
])
def test_coerce_value(value, schema, expected):
    assert coerce_value(value, schema) == expected


def test_strip_rest_keywords():
    schema = {"type": "integer", "context": ["view"], "readonly": True}

    assert strip_rest_keywords(schema) == {"type": "integer"}
    assert "context" in schema


def test_format_param_path():
    assert format_param_path("font_family_settings", []) == "font_family_settings"
    assert format_param_path("font_family_settings", ["preview"]) == "font_family_settings[preview]"


def test_validate_value_accepts_valid_settings():
    settings = {"name": "Arial", "slug": "arial", "fontFamily": "Arial"}

    validate_value(settings, get_font_family_settings_schema(), "font_family_settings")


def test_validate_value_reports_nested_path():
    settings = {"name": "Arial", "slug": "arial", "fontFamily": ["Arial"]}

    with pytest.raises(InvalidParamError) as excinfo:
        validate_value(settings, get_font_family_settings_schema(), "font_family_settings")

    error = excinfo.value
    assert error.status == 400
    assert error.message == "Invalid parameter(s): font_family_settings[fontFamily]"
    assert "font_family_settings[fontFamily]" in error.details["params"]


def test_validate_value_rejects_additional_properties():
    settings = {"name": "Arial", "slug": "arial", "fontFamily": "Arial", "fontWeight": "400"}

    with pytest.raises(InvalidParamError) as excinfo:
        validate_value(settings, get_font_family_settings_schema(), "font_family_settings")

    assert excinfo.value.code == "rest_invalid_param"


def test_settings_schema_copy_is_private():
    schema = get_font_family_settings_schema()
    schema.pop("required")

    assert get_font_family_settings_schema()["required"] == ["name", "slug", "fontFamily"]


@pytest.mark.parametrize("value,expected", [
    (None, False),
    (True, True),
    (False, False),
    ("true", True),
    ("1", True),
    ("false", False),
    ("0", False),
    ("", False),
    (1, True),
    (0, False),
])
def test_sanitize_boolean(value, expected):
    assert sanitize_boolean(value) is expected


@pytest.mark.parametrize("value", ["maybe", 2, ["true"]])
def test_sanitize_boolean_rejects_other_values(value):
    with pytest.raises(InvalidParamError) as excinfo:
        sanitize_boolean(value, "force")

    assert excinfo.value.message == "Invalid parameter(s): force"


def test_apply_defaults():
    params = apply_defaults(get_collection_params_schema(), {"page": "2", "include": "3,4", "other": "x"})

    assert params["page"] == 2
    assert params["include"] == [3, 4]
    assert params["per_page"] == 10
    assert params["exclude"] == []
    assert params["order"] == "desc"
    assert params["context"] == "view"
    assert "offset" not in params
    assert "other" not in params
