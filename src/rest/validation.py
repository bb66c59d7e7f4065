"""
Request argument coercion and JSON Schema validation.

Query strings and form bodies deliver every value as a string, so values
are first coerced towards the type their schema declares ("2" -> 2,
"1,2" -> [1, 2], "true" -> True) and then validated with jsonschema.
Values that cannot be coerced are left untouched so that validation
reports them.
"""
import re
from typing import Any, Dict, Iterable

from jsonschema import Draft4Validator
from jsonschema.exceptions import best_match

from rest.errors import InvalidParamError

_INTEGER_PATTERN = re.compile(r"^-?\d+$")

# Annotations understood by the REST layer but not by jsonschema
_REST_ONLY_KEYWORDS = ("context", "readonly")

_TRUE_STRINGS = ("true", "1")
_FALSE_STRINGS = ("false", "0", "")


def coerce_value(value: Any, schema: Dict[str, Any]) -> Any:
    """Coerce a raw request value towards the schema's declared type."""
    value_type = schema.get("type")

    if value_type == "integer" and isinstance(value, str) and _INTEGER_PATTERN.match(value.strip()):
        return int(value.strip())

    if value_type == "boolean":
        if isinstance(value, str) and value.lower() in _TRUE_STRINGS + _FALSE_STRINGS:
            return value.lower() in _TRUE_STRINGS
        if isinstance(value, int) and not isinstance(value, bool) and value in (0, 1):
            return bool(value)

    if value_type == "array":
        if isinstance(value, str):
            value = [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, (list, tuple)):
            item_schema = schema.get("items", {})
            items = []
            for item in value:
                # "1,2" may also arrive as one element of a repeated parameter
                if isinstance(item, str) and "," in item:
                    items.extend(coerce_value(part.strip(), item_schema) for part in item.split(",") if part.strip())
                else:
                    items.append(coerce_value(item, item_schema))
            return items

    return value


def strip_rest_keywords(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Return a shallow copy of an argument schema without REST-only annotations."""
    return {key: value for key, value in schema.items() if key not in _REST_ONLY_KEYWORDS}


def format_param_path(param: str, path: Iterable[Any]) -> str:
    """Render a parameter path the way clients send it: settings[name]."""
    return param + "".join(f"[{part}]" for part in path)


def validate_value(value: Any, schema: Dict[str, Any], param: str) -> None:
    """Validate one value against a schema, raising InvalidParamError.

    Args:
        value: The decoded/coerced value
        schema: JSON Schema (Draft 4) describing the value
        param: Parameter name used in the error message

    Raises:
        InvalidParamError: With the failing path and the validator message
    """
    error = best_match(Draft4Validator(schema).iter_errors(value))
    if error is None:
        return

    path = format_param_path(param, error.absolute_path)
    raise InvalidParamError(
        f"Invalid parameter(s): {path}",
        details={"params": {path: error.message}},
    )


def sanitize_boolean(value: Any, param: str = "force", default: bool = False) -> bool:
    """Interpret a boolean request flag.

    Accepts JSON booleans, 0/1 and the strings "true"/"false"/"1"/"0"/"".

    Raises:
        InvalidParamError: For any other value
    """
    if value is None:
        return default
    coerced = coerce_value(value, {"type": "boolean"})
    if isinstance(coerced, bool):
        return coerced
    raise InvalidParamError(
        f"Invalid parameter(s): {param}",
        details={"params": {param: f"{param} is not of type boolean."}},
    )


def apply_defaults(schema: Dict[str, Any], raw: Dict[str, Any]) -> Dict[str, Any]:
    """Coerce raw values for every schema property and fill declared defaults."""
    result: Dict[str, Any] = {}
    for name, prop in schema.get("properties", {}).items():
        if name in raw:
            result[name] = coerce_value(raw[name], prop)
        elif "default" in prop:
            default = prop["default"]
            result[name] = list(default) if isinstance(default, list) else default
    return result
