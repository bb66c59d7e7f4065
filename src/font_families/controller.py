"""
Font Families REST Controller.

Font families are stored as posts of type "wp_font_family":

    post_title    <- font_family_settings.name
    post_name     <- sanitize_title(font_family_settings.slug)
    post_content  <- JSON of the remaining settings (fontFamily, preview)

Font faces are child posts of type "wp_font_face" whose post_parent is the
family id. They are only enumerated here, never written.

Request Format (create/update):
    POST /wp/v2/font-families
    Content-Type: application/json

    {
      "theme_json_version": 2,
      "font_family_settings": "{\"name\": \"Arial\", \"slug\": \"arial\", \"fontFamily\": \"Arial, sans-serif\"}"
    }

    font_family_settings is sent as a JSON *string* so the same endpoint
    works with multipart/form-data bodies.

Success Response (201):
    {
      "id": 7,
      "theme_json_version": 2,
      "font_faces": [],
      "font_family_settings": {"name": "Arial", "slug": "arial",
                               "fontFamily": "Arial, sans-serif", "preview": ""},
      "_links": {"self": [...], "collection": [...], "font_faces": []}
    }

Uniqueness:
    The slug is checked with a query right before the insert. There is no
    storage-level constraint, so two concurrent creates with the same slug
    can both succeed; scripts/check_font_family_slugs.py reports such
    duplicates.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from rest.errors import DuplicateError, InvalidParamError, UnsupportedOperationError
from rest.fields import FieldSelection
from rest.policy import EndpointArg, ResourcePolicy
from rest.posts_controller import PostsController
from rest.request import RestRequest
from rest.validation import sanitize_boolean, validate_value
from schema import (
    get_collection_params_schema,
    get_font_family_schema,
    get_font_family_settings_schema,
)
from storage.base import ContentStore, Post, PostQuery

from .utils import format_font_family, sanitize_title

logger = logging.getLogger(__name__)

FONT_FAMILY_POST_TYPE = "wp_font_family"
FONT_FACE_POST_TYPE = "wp_font_face"
FONT_FAMILIES_REST_BASE = "font-families"
THEME_JSON_VERSION = 2

# Upper bound on child font faces listed per family
MAX_FONT_FACES = 99

DEFAULT_CAPABILITY = "edit_theme_options"


class DuplicateFontFamilyError(DuplicateError):
    """A font family with the same slug already exists."""
    code = "rest_duplicate_font_family"


class TrashNotSupportedError(UnsupportedOperationError):
    """Delete without force=true; font families cannot be trashed."""
    code = "rest_trash_not_supported"


class FontFamilyPolicy(ResourcePolicy):
    """Validation, mapping and serialization rules for font families."""

    post_type = FONT_FAMILY_POST_TYPE
    rest_base = FONT_FAMILIES_REST_BASE
    read_forbidden_message = "Sorry, you are not allowed to access font families."

    def __init__(self, store: ContentStore, capabilities: Optional[Dict[str, str]] = None):
        defaults = {cap: DEFAULT_CAPABILITY for cap in self.DEFAULT_CAPABILITIES}
        defaults.update(capabilities or {})
        super().__init__(store, defaults)

    # =====================================================================
    # Schemas and arguments
    # =====================================================================

    def get_item_schema(self) -> Dict[str, Any]:
        return get_font_family_schema()

    def get_collection_params_schema(self) -> Dict[str, Any]:
        return get_collection_params_schema()

    def get_endpoint_args(self) -> Dict[str, EndpointArg]:
        properties = self.get_item_schema()["properties"]
        return {
            "theme_json_version": EndpointArg(schema=properties["theme_json_version"]),
            "font_family_settings": EndpointArg(
                schema={
                    "description": "font-family declaration in theme.json format, encoded as a string.",
                    "type": "string",
                },
                required=True,
                validate_callback=self.validate_font_family_settings,
                sanitize_callback=self.sanitize_font_family_settings,
            ),
        }

    @staticmethod
    def _decode_settings(value: Any) -> Optional[Any]:
        if not isinstance(value, str):
            return None
        try:
            return json.loads(value)
        except ValueError:
            return None

    def validate_font_family_settings(self, value: Any, request: RestRequest) -> None:
        """Validate the encoded settings of a create or update request.

        Raises:
            InvalidParamError: If the value is not a JSON string, violates the
                settings schema, tries to change the slug on update, or leaves
                a required setting empty.
        """
        settings = self._decode_settings(value)
        if settings is None:
            raise InvalidParamError("font_family_settings parameter must be a valid JSON string.")

        schema = get_font_family_settings_schema()
        required = list(schema.get("required", []))

        if request.id is not None:
            # Partial updates are allowed, but the slug identifies the family
            schema.pop("required", None)
            if isinstance(settings, dict) and "slug" in settings:
                raise InvalidParamError("font_family_settings[slug] cannot be updated.")

        validate_value(settings, schema, "font_family_settings")

        for key in required:
            if key in settings and not settings[key]:
                raise InvalidParamError(f"font_family_settings[{key}] cannot be empty.")

        # A slug made only of punctuation would be stored as ""
        if "slug" in settings and not sanitize_title(settings["slug"]):
            raise InvalidParamError("font_family_settings[slug] must contain a letter or digit.")

    def sanitize_font_family_settings(self, value: str, request: RestRequest) -> Dict[str, Any]:
        """Decode validated settings and normalize them for storage."""
        settings = json.loads(value)

        if "fontFamily" in settings:
            settings["fontFamily"] = format_font_family(settings["fontFamily"])

        # Only on create: an update keeps the stored preview unless it sends one
        if request.id is None and "preview" not in settings:
            settings["preview"] = ""

        return settings

    # =====================================================================
    # Lifecycle hooks
    # =====================================================================

    def before_create(self, request: RestRequest, args: Dict[str, Any]) -> None:
        slug = args["font_family_settings"]["slug"]
        existing = self.store.query_posts(PostQuery(
            post_type=self.post_type,
            post_name=[sanitize_title(slug)],
            per_page=1,
        ))
        if existing.posts:
            logger.warning(f"Rejected font family with duplicate slug: {slug!r}")
            raise DuplicateFontFamilyError(f'A font family with slug "{slug}" already exists.')

    def before_delete(self, request: RestRequest) -> None:
        force = sanitize_boolean(request.get_param("force"), "force")
        if not force:
            raise TrashNotSupportedError(
                "Font faces do not support trashing. Set 'force=true' to delete."
            )

    # =====================================================================
    # Mapping
    # =====================================================================

    def prepare_item_for_database(self, request: RestRequest, args: Dict[str, Any],
                                  existing: Optional[Post]) -> Post:
        settings = dict(args["font_family_settings"])

        if existing is not None:
            settings = {**self.get_settings_from_post(existing), **settings}

        post = Post(
            post_type=self.post_type,
            post_status="publish",
            post_title=settings["name"],
            post_name=sanitize_title(settings["slug"]),
        )
        if existing is not None:
            post = post.copy(id=existing.id, post_parent=existing.post_parent, post_date=existing.post_date)

        # Name and slug live in post_title / post_name only
        settings.pop("name", None)
        settings.pop("slug", None)
        post.post_content = json.dumps(settings)

        return post

    @staticmethod
    def get_settings_from_post(post: Post) -> Dict[str, str]:
        """Rebuild the font_family_settings object from a stored post."""
        try:
            settings_json = json.loads(post.post_content) if post.post_content else {}
        except ValueError:
            logger.warning(f"Font family {post.id} has undecodable settings content")
            settings_json = {}
        if not isinstance(settings_json, dict):
            settings_json = {}

        return {
            "name": post.post_title or "",
            "slug": post.post_name or "",
            "fontFamily": settings_json.get("fontFamily") or "",
            "preview": settings_json.get("preview") or "",
        }

    def get_font_face_ids(self, font_family_id: int) -> List[int]:
        result = self.store.query_posts(PostQuery(
            post_type=FONT_FACE_POST_TYPE,
            post_parent=font_family_id,
            per_page=MAX_FONT_FACES,
            order="asc",
            orderby="id",
        ))
        return result.ids

    def prepare_item_data(self, post: Post, fields: FieldSelection) -> Dict[str, Any]:
        data: Dict[str, Any] = {}

        if fields.includes("id"):
            data["id"] = post.id

        if fields.includes("theme_json_version"):
            data["theme_json_version"] = THEME_JSON_VERSION

        if fields.includes("font_faces"):
            data["font_faces"] = self.get_font_face_ids(post.id)

        if fields.includes("font_family_settings"):
            data["font_family_settings"] = self.get_settings_from_post(post)

        return data

    def prepare_links(self, post: Post, links: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "self": links["self"],
            "collection": links["collection"],
            "font_faces": self.prepare_font_face_links(post.id, links["self"][0]["href"]),
        }

    def prepare_font_face_links(self, font_family_id: int, family_href: str) -> List[Dict[str, Any]]:
        """Embeddable links to the child font faces of a family."""
        return [
            {
                "embeddable": True,
                "href": f"{family_href}/font-faces/{font_face_id}",
            }
            for font_face_id in self.get_font_face_ids(font_family_id)
        ]


def create_font_families_controller(store: ContentStore, authorizer: Any,
                                    config: Optional[Dict[str, Any]] = None) -> PostsController:
    """Build the font families controller from configuration.

    Args:
        store: Document storage holding font families and font faces
        authorizer: Capability checker (see auth.TokenAuthorizer)
        config: Configuration dictionary; uses rest.namespace, rest.base_url
            and font_families.capabilities

    Returns:
        PostsController serving the font-families routes
    """
    config = config or {}
    rest_config = config.get("rest", {})
    capabilities = config.get("font_families", {}).get("capabilities") or {}

    policy = FontFamilyPolicy(store, capabilities)
    return PostsController(
        policy,
        store,
        authorizer,
        namespace=rest_config.get("namespace", "wp/v2"),
        base_url=rest_config.get("base_url"),
    )
