"""
Unit Tests for FontFamilyPolicy.

Exercises the policy directly, without the Flask layer: settings
validation and sanitizing, mapping to and from stored posts, the
duplicate slug check and the capability map.
"""
import json

import pytest

from auth import Actor, TokenAuthorizer
from font_families import (
    DuplicateFontFamilyError,
    FontFamilyPolicy,
    TrashNotSupportedError,
    create_font_families_controller,
)
from rest import InvalidParamError, RestRequest
from storage import Post


@pytest.fixture
def policy(store):
    return FontFamilyPolicy(store)


def create_request(**body):
    return RestRequest(method="POST", body_params=body)


def update_request(post_id, **body):
    return RestRequest(method="POST", url_params={"id": post_id}, body_params=body)


class TestSettingsValidation:

    def test_valid_create_settings(self, policy):
        value = json.dumps({"name": "Arial", "slug": "arial", "fontFamily": "Arial"})

        policy.validate_font_family_settings(value, create_request())

    def test_partial_update_settings(self, policy):
        value = json.dumps({"preview": "https://example.com/arial.png"})

        policy.validate_font_family_settings(value, update_request(1))

    def test_create_requires_all_keys(self, policy):
        value = json.dumps({"preview": "https://example.com/arial.png"})

        with pytest.raises(InvalidParamError):
            policy.validate_font_family_settings(value, create_request())

    def test_slug_cannot_be_updated(self, policy):
        value = json.dumps({"slug": "arial"})

        with pytest.raises(InvalidParamError) as excinfo:
            policy.validate_font_family_settings(value, update_request(1))

        assert excinfo.value.message == "font_family_settings[slug] cannot be updated."

    @pytest.mark.parametrize("value", ["{not json", 42, None])
    def test_settings_must_be_json_string(self, policy, value):
        with pytest.raises(InvalidParamError) as excinfo:
            policy.validate_font_family_settings(value, create_request())

        assert excinfo.value.message == "font_family_settings parameter must be a valid JSON string."

    def test_settings_must_be_object(self, policy):
        with pytest.raises(InvalidParamError) as excinfo:
            policy.validate_font_family_settings("[1, 2]", update_request(1))

        assert excinfo.value.message == "Invalid parameter(s): font_family_settings"

    def test_sanitize_defaults_preview_on_create_only(self, policy):
        value = json.dumps({"name": "Open Sans", "slug": "open-sans", "fontFamily": "Open Sans, sans-serif"})

        created = policy.sanitize_font_family_settings(value, create_request())
        updated = policy.sanitize_font_family_settings(json.dumps({"name": "Open Sans"}), update_request(1))

        assert created["preview"] == ""
        assert created["fontFamily"] == '"Open Sans", sans-serif'
        assert updated == {"name": "Open Sans"}


class TestMapping:

    def test_prepare_item_for_database_on_create(self, policy):
        args = {"font_family_settings": {
            "name": "Arial", "slug": "Arial Bold", "fontFamily": "Arial", "preview": "",
        }}

        post = policy.prepare_item_for_database(create_request(), args, None)

        assert post.id == 0
        assert post.post_type == "wp_font_family"
        assert post.post_status == "publish"
        assert post.post_title == "Arial"
        assert post.post_name == "arial-bold"
        assert json.loads(post.post_content) == {"fontFamily": "Arial", "preview": ""}

    def test_prepare_item_for_database_merges_existing(self, policy):
        existing = Post(
            id=5,
            post_type="wp_font_family",
            post_title="A",
            post_name="a",
            post_content=json.dumps({"fontFamily": "A", "preview": ""}),
            post_date="2026-01-01T00:00:00+00:00",
        )
        args = {"font_family_settings": {"preview": "http://x/y.png"}}

        post = policy.prepare_item_for_database(update_request(5), args, existing)

        assert post.id == 5
        assert post.post_date == existing.post_date
        assert post.post_title == "A"
        assert post.post_name == "a"
        assert json.loads(post.post_content) == {"fontFamily": "A", "preview": "http://x/y.png"}

    @pytest.mark.parametrize("content", ["", "{broken", "[1, 2]", '{"fontFamily": null}'])
    def test_get_settings_from_post_with_unusable_content(self, content):
        post = Post(id=3, post_type="wp_font_family", post_title="A", post_name="a", post_content=content)

        settings = FontFamilyPolicy.get_settings_from_post(post)

        assert settings == {"name": "A", "slug": "a", "fontFamily": "", "preview": ""}

    def test_get_font_face_ids_is_bounded_and_ascending(self, policy, store):
        family_id = store.insert_post(Post(post_type="wp_font_family", post_name="a"))
        face_ids = [
            store.insert_post(Post(post_type="wp_font_face", post_parent=family_id))
            for _ in range(101)
        ]

        ids = policy.get_font_face_ids(family_id)

        assert ids == face_ids[:99]


class TestLifecycleHooks:

    def test_before_create_rejects_existing_slug(self, policy, store):
        store.insert_post(Post(post_type="wp_font_family", post_name="arial"))
        args = {"font_family_settings": {"name": "Arial", "slug": "arial", "fontFamily": "Arial"}}

        with pytest.raises(DuplicateFontFamilyError) as excinfo:
            policy.before_create(create_request(), args)

        assert excinfo.value.status == 400
        assert excinfo.value.code == "rest_duplicate_font_family"

    def test_before_create_ignores_font_faces_with_same_slug(self, policy, store):
        store.insert_post(Post(post_type="wp_font_face", post_name="arial"))
        args = {"font_family_settings": {"name": "Arial", "slug": "arial", "fontFamily": "Arial"}}

        policy.before_create(create_request(), args)

    def test_before_delete_requires_force(self, policy):
        with pytest.raises(TrashNotSupportedError) as excinfo:
            policy.before_delete(RestRequest(method="DELETE", url_params={"id": 1}))

        assert excinfo.value.status == 501

        policy.before_delete(RestRequest(method="DELETE", url_params={"id": 1}, query_params={"force": "true"}))


class TestCapabilities:

    def test_every_operation_defaults_to_edit_theme_options(self, policy):
        assert set(policy.capabilities.values()) == {"edit_theme_options"}
        assert set(policy.capabilities) == {"read", "create_posts", "edit_posts", "delete_posts"}

    def test_capabilities_can_be_overridden_from_config(self, store):
        authorizer = TokenAuthorizer()
        config = {"font_families": {"capabilities": {"read": "read_font_families"}}}

        controller = create_font_families_controller(store, authorizer, config)

        assert controller.policy.capabilities["read"] == "read_font_families"
        assert controller.policy.capabilities["create_posts"] == "edit_theme_options"

    def test_reader_can_list_with_read_capability_override(self, store):
        authorizer = TokenAuthorizer()
        config = {"font_families": {"capabilities": {"read": "read_font_families"}}}
        controller = create_font_families_controller(store, authorizer, config)
        reader = Actor(name="reader", capabilities=frozenset({"read_font_families"}))

        response = controller.get_items(RestRequest(method="GET", actor=reader))

        assert response.status == 200
        assert response.data == []
        assert response.headers["X-WP-Total"] == "0"


class TestLinks:

    def test_prepare_links_adds_font_face_links(self, policy, store):
        family_id = store.insert_post(Post(post_type="wp_font_family", post_name="a"))
        face_id = store.insert_post(Post(post_type="wp_font_face", post_parent=family_id))
        family_href = f"http://localhost/wp/v2/font-families/{family_id}"
        links = {
            "self": [{"href": family_href}],
            "collection": [{"href": "http://localhost/wp/v2/font-families"}],
        }

        prepared = policy.prepare_links(store.get_post(family_id), links)

        assert prepared["self"] == links["self"]
        assert prepared["font_faces"] == [
            {"embeddable": True, "href": f"{family_href}/font-faces/{face_id}"},
        ]
