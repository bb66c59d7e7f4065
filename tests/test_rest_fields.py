from rest.fields import (
    FieldSelection,
    filter_response_by_context,
    filter_response_fields,
    is_field_included,
    parse_field_list,
)

AVAILABLE = ["id", "theme_json_version", "font_faces", "font_family_settings", "_links"]

ITEM = {
    "id": 7,
    "theme_json_version": 2,
    "font_faces": [11, 12],
    "font_family_settings": {"name": "Arial", "slug": "arial", "fontFamily": "Arial", "preview": ""},
}


def test_parse_field_list():
    assert parse_field_list(None) == []
    assert parse_field_list("id, font_faces,,id") == ["id", "font_faces"]
    assert parse_field_list(["id", "font_family_settings.name,font_faces"]) == [
        "id", "font_family_settings.name", "font_faces",
    ]


def test_is_field_included():
    assert is_field_included("id", ["id"])
    assert is_field_included("font_family_settings", ["font_family_settings.name"])
    assert is_field_included("font_family_settings.name", ["font_family_settings"])
    assert not is_field_included("font_faces", ["font_family_settings.name"])
    assert not is_field_included("font", ["font_faces"])


def test_filter_response_fields_nested():
    filtered = filter_response_fields(ITEM, ["id", "font_family_settings.name", "font_family_settings.slug"])

    assert filtered == {"id": 7, "font_family_settings": {"name": "Arial", "slug": "arial"}}


def test_filter_response_fields_parent_wins_over_child():
    filtered = filter_response_fields(ITEM, ["font_family_settings.name", "font_family_settings"])

    assert filtered == {"font_family_settings": ITEM["font_family_settings"]}


def test_filter_response_fields_ignores_unknown_paths():
    assert filter_response_fields(ITEM, ["unknown", "id.deeper", "font_faces"]) == {"font_faces": [11, 12]}


def test_filter_response_fields_copies_values():
    filtered = filter_response_fields(ITEM, ["font_family_settings"])
    filtered["font_family_settings"]["name"] = "Changed"

    assert ITEM["font_family_settings"]["name"] == "Arial"


def test_filter_response_by_context():
    schema = {
        "properties": {
            "id": {"context": ["view", "edit", "embed"]},
            "secret": {"context": ["edit"]},
        }
    }
    data = {"id": 1, "secret": "x", "_links": {}}

    assert filter_response_by_context(data, schema, "view") == {"id": 1, "_links": {}}
    assert filter_response_by_context(data, schema, "edit") == data


def test_field_selection_everything():
    selection = FieldSelection.from_request(AVAILABLE, None)

    assert selection.requested is None
    assert all(selection.includes(name) for name in AVAILABLE)
    assert selection.filter(ITEM) is ITEM


def test_field_selection_subset():
    selection = FieldSelection.from_request(AVAILABLE, "id,font_family_settings.name")

    assert selection.fields == frozenset({"id", "font_family_settings"})
    assert not selection.includes("font_faces")
    assert not selection.includes("_links")
    assert selection.filter(ITEM) == {"id": 7, "font_family_settings": {"name": "Arial"}}
