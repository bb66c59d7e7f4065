"""
Response field selection.

Clients may restrict a response with ``_fields=id,font_family_settings.name``.
The request's selection is parsed once into a FieldSelection and threaded
through the serializer, which asks ``includes(name)`` before computing a
top-level field and finally calls ``filter(data)`` to prune nested keys.
"""
import copy
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Union


def parse_field_list(raw: Union[None, str, Iterable[str]]) -> List[str]:
    """Split a comma separated (or repeated) _fields value into field paths."""
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = [raw]
    fields: List[str] = []
    for chunk in raw:
        for name in str(chunk).split(","):
            name = name.strip()
            if name and name not in fields:
                fields.append(name)
    return fields


def is_field_included(field: str, requested: Iterable[str]) -> bool:
    """Whether a field (possibly dotted) is covered by the requested paths.

    A field is included when it is requested exactly, when a nested path
    below it is requested ("a" for "a.b"), or when one of its ancestors is
    requested ("a.b" for "a").
    """
    for accepted in requested:
        if accepted == field:
            return True
        if accepted.startswith(f"{field}."):
            return True
        if field.startswith(f"{accepted}."):
            return True
    return False


def filter_response_fields(data: Dict[str, Any], requested: Iterable[str]) -> Dict[str, Any]:
    """Keep only the requested (possibly nested) paths of a response object."""
    result: Dict[str, Any] = {}
    copied: List[str] = []

    for path in sorted(requested, key=lambda p: p.count(".")):
        if any(path.startswith(f"{done}.") for done in copied):
            continue

        parts = path.split(".")
        value: Any = data
        for part in parts:
            if not isinstance(value, dict) or part not in value:
                break
            value = value[part]
        else:
            target = result
            for part in parts[:-1]:
                target = target.setdefault(part, {})
            target[parts[-1]] = copy.deepcopy(value)
            copied.append(path)

    return result


def filter_response_by_context(data: Dict[str, Any], schema: Dict[str, Any], context: str) -> Dict[str, Any]:
    """Drop top-level properties whose schema "context" list excludes context."""
    properties = schema.get("properties", {})
    filtered = {}
    for key, value in data.items():
        contexts = properties.get(key, {}).get("context")
        if contexts is not None and context not in contexts:
            continue
        filtered[key] = value
    return filtered


@dataclass(frozen=True)
class FieldSelection:
    """Fields to emit for one request.

    Attributes:
        fields: Top-level fields that will be computed
        requested: Raw requested paths, or None when the client asked for everything
    """
    fields: FrozenSet[str]
    requested: Optional[FrozenSet[str]] = None

    @classmethod
    def from_request(cls, available: Iterable[str], raw: Union[None, str, Iterable[str]]) -> "FieldSelection":
        requested = parse_field_list(raw)
        if not requested:
            return cls(fields=frozenset(available))
        return cls(
            fields=frozenset(f for f in available if is_field_included(f, requested)),
            requested=frozenset(requested),
        )

    def includes(self, field: str) -> bool:
        return field in self.fields

    def filter(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if self.requested is None:
            return data
        return filter_response_fields(data, self.requested)
