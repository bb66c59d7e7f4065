"""
Generic REST controller for typed documents.

PostsController implements the CRUD skeleton shared by every post-backed
resource:

    inbound request -> permission check -> argument validation/sanitizing
    -> ResourcePolicy maps arguments to a Post -> ContentStore call
    -> ResourcePolicy projects the stored Post into response data
    -> context filtering, links, _fields filtering

The controller talks to its collaborators only through narrow interfaces:
a ContentStore for persistence, an authorizer answering capability
checks, and a ResourcePolicy for everything resource specific.

Error Handling:
    Failures are raised as RestError subclasses. Permission and argument
    checks run before any mutating store call, so a rejected request
    never leaves a partial write behind.
"""
import logging
import math
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from rest.errors import (
    AuthorizationRequiredError,
    InvalidPageNumberError,
    MissingParamError,
    NotFoundError,
    PostExistsError,
)
from rest.fields import FieldSelection, filter_response_by_context
from rest.policy import ResourcePolicy
from rest.request import RestRequest, RestResponse
from rest.validation import (
    apply_defaults,
    coerce_value,
    strip_rest_keywords,
    validate_value,
)
from storage.base import ContentStore, Post, PostQuery

logger = logging.getLogger(__name__)


class PostsController:
    """CRUD endpoints for one post type, parameterized by a ResourcePolicy.

    Attributes:
        policy: Resource-specific mapping and validation
        store: Document storage
        authorizer: Object exposing user_can(actor, cap) and
            authorization_required_code(actor)
        namespace: REST namespace, e.g. "wp/v2"
        base_url: Optional fixed site URL for links (else the request root)
    """

    def __init__(self, policy: ResourcePolicy, store: ContentStore, authorizer: Any,
                 namespace: str = "wp/v2", base_url: Optional[str] = None):
        self.policy = policy
        self.store = store
        self.authorizer = authorizer
        self.namespace = namespace.strip("/")
        self.base_url = base_url

    # =====================================================================
    # Routes and links
    # =====================================================================

    @property
    def collection_route(self) -> str:
        return f"/{self.namespace}/{self.policy.rest_base}"

    def item_route(self, post_id: int) -> str:
        return f"{self.collection_route}/{post_id}"

    def rest_url(self, request: RestRequest, route: str = "") -> str:
        root = (self.base_url or request.url_root).rstrip("/")
        return f"{root}/{route.lstrip('/')}"

    def prepare_links(self, request: RestRequest, post: Post) -> Dict[str, Any]:
        links = {
            "self": [{"href": self.rest_url(request, self.item_route(post.id))}],
            "collection": [{"href": self.rest_url(request, self.collection_route)}],
        }
        return self.policy.prepare_links(post, links)

    # =====================================================================
    # Permission checks
    # =====================================================================

    def _require_capability(self, request: RestRequest, capability_key: str, code: str, message: str) -> None:
        capability = self.policy.capabilities[capability_key]
        if self.authorizer.user_can(request.actor, capability):
            return

        actor_name = request.actor.name if request.actor else "anonymous"
        logger.warning(f"Denied {request.method} {request.route} for {actor_name}: missing '{capability}'")
        raise AuthorizationRequiredError(
            message,
            code=code,
            status=self.authorizer.authorization_required_code(request.actor),
        )

    def get_items_permissions_check(self, request: RestRequest) -> None:
        self._require_capability(request, "read", "rest_cannot_read", self.policy.read_forbidden_message)

    def get_item_permissions_check(self, request: RestRequest) -> None:
        self.get_items_permissions_check(request)

    def create_item_permissions_check(self, request: RestRequest) -> None:
        self._require_capability(
            request, "create_posts", "rest_cannot_create",
            "Sorry, you are not allowed to create posts as this user.",
        )

    def update_item_permissions_check(self, request: RestRequest) -> None:
        self._require_capability(
            request, "edit_posts", "rest_cannot_edit",
            "Sorry, you are not allowed to edit this post.",
        )

    def delete_item_permissions_check(self, request: RestRequest) -> None:
        self._require_capability(
            request, "delete_posts", "rest_cannot_delete",
            "Sorry, you are not allowed to delete this post.",
        )

    # =====================================================================
    # Arguments
    # =====================================================================

    def get_collection_params(self, request: RestRequest) -> Dict[str, Any]:
        """Coerce, default and validate the collection query parameters."""
        schema = self.policy.get_collection_params_schema()
        params = apply_defaults(schema, request.get_params())
        for name, value in params.items():
            validate_value(value, strip_rest_keywords(schema["properties"][name]), name)
        return params

    def get_context(self, request: RestRequest) -> str:
        context = request.get_param("context") or "view"
        validate_value(context, {"type": "string", "enum": ["view", "embed", "edit"]}, "context")
        return context

    def prepare_endpoint_args(self, request: RestRequest) -> Dict[str, Any]:
        """Validate and sanitize the create/update arguments of a request."""
        endpoint_args = self.policy.get_endpoint_args()

        missing = [
            name for name, arg in endpoint_args.items()
            if arg.required and not request.has_param(name)
        ]
        if missing:
            raise MissingParamError(
                f"Missing parameter(s): {', '.join(missing)}",
                details={"params": missing},
            )

        args: Dict[str, Any] = {}
        for name, arg in endpoint_args.items():
            if not request.has_param(name):
                if "default" in arg.schema:
                    args[name] = arg.schema["default"]
                continue

            value = coerce_value(request.get_param(name), arg.schema)
            validate_value(value, strip_rest_keywords(arg.schema), name)
            if arg.validate_callback:
                arg.validate_callback(value, request)
            if arg.sanitize_callback:
                value = arg.sanitize_callback(value, request)
            args[name] = value

        return args

    def get_fields_for_response(self, request: RestRequest) -> FieldSelection:
        available = list(self.policy.get_item_schema().get("properties", {})) + ["_links"]
        return FieldSelection.from_request(available, request.get_param("_fields"))

    # =====================================================================
    # Operations
    # =====================================================================

    def get_post(self, post_id: Any) -> Post:
        """Fetch a post of this controller's type or raise NotFoundError."""
        try:
            post_id = int(post_id)
        except (TypeError, ValueError):
            raise NotFoundError("Invalid post ID.")

        post = self.store.get_post(post_id) if post_id > 0 else None
        if post is None or post.post_type != self.policy.post_type:
            raise NotFoundError("Invalid post ID.")
        return post

    def get_items(self, request: RestRequest) -> RestResponse:
        """List posts of this type with pagination headers."""
        self.get_items_permissions_check(request)
        params = self.get_collection_params(request)
        fields = self.get_fields_for_response(request)

        page = params["page"]
        per_page = params["per_page"]
        offset = params.get("offset")
        if offset is not None and page > 1:
            offset += (page - 1) * per_page

        result = self.store.query_posts(PostQuery(
            post_type=self.policy.post_type,
            post_status=["publish"],
            post_name=params.get("slug") or [],
            include=params["include"],
            exclude=params["exclude"],
            order=params["order"],
            orderby=params["orderby"],
            page=page,
            per_page=per_page,
            offset=offset,
        ))

        max_pages = math.ceil(result.total / per_page) if result.total else 0
        if result.total and page > max_pages:
            raise InvalidPageNumberError(
                "The page number requested is larger than the number of pages available."
            )

        items = [
            self.prepare_item_for_response(request, post, fields, params["context"])
            for post in result.posts
        ]

        headers = {
            "X-WP-Total": str(result.total),
            "X-WP-TotalPages": str(max_pages),
        }
        link_header = self._pagination_links(request, page, max_pages)
        if link_header:
            headers["Link"] = link_header

        return RestResponse(items, 200, headers)

    def _pagination_links(self, request: RestRequest, page: int, max_pages: int) -> str:
        base = self.rest_url(request, self.collection_route)
        links: List[str] = []

        def page_url(target: int) -> str:
            query = dict(request.query_params)
            query["page"] = target
            return f"{base}?{urlencode(query, doseq=True)}"

        if page > 1:
            links.append(f'<{page_url(min(page - 1, max_pages) if max_pages else 1)}>; rel="prev"')
        if page < max_pages:
            links.append(f'<{page_url(page + 1)}>; rel="next"')
        return ", ".join(links)

    def get_item(self, request: RestRequest) -> RestResponse:
        """Fetch one post by the id in the route."""
        self.get_item_permissions_check(request)
        context = self.get_context(request)
        post = self.get_post(request.id)
        fields = self.get_fields_for_response(request)
        return RestResponse(self.prepare_item_for_response(request, post, fields, context))

    def create_item(self, request: RestRequest) -> RestResponse:
        """Create a post from validated arguments; 201 with Location header."""
        self.create_item_permissions_check(request)
        if request.get_param("id"):
            raise PostExistsError("Cannot create existing post.")

        args = self.prepare_endpoint_args(request)
        context = self.get_context(request)
        fields = self.get_fields_for_response(request)
        self.policy.before_create(request, args)

        post = self.policy.prepare_item_for_database(request, args, None)
        post_id = self.store.insert_post(post)
        logger.info(f"Created {self.policy.post_type} {post_id} ({post.post_name})")

        post = self.get_post(post_id)
        data = self.prepare_item_for_response(request, post, fields, context)
        return RestResponse(data, 201, {"Location": self.rest_url(request, self.item_route(post_id))})

    def update_item(self, request: RestRequest) -> RestResponse:
        """Merge validated arguments onto an existing post."""
        self.update_item_permissions_check(request)
        args = self.prepare_endpoint_args(request)
        context = self.get_context(request)
        fields = self.get_fields_for_response(request)
        existing = self.get_post(request.id)

        post = self.policy.prepare_item_for_database(request, args, existing)
        if not self.store.update_post(post):
            raise NotFoundError("Invalid post ID.")
        logger.info(f"Updated {self.policy.post_type} {post.id}")

        post = self.get_post(post.id)
        return RestResponse(self.prepare_item_for_response(request, post, fields, context))

    def delete_item(self, request: RestRequest) -> RestResponse:
        """Permanently delete a post; the response carries its last state."""
        self.delete_item_permissions_check(request)
        self.policy.before_delete(request)
        post = self.get_post(request.id)

        fields = self.get_fields_for_response(request)
        previous = self.prepare_item_for_response(request, post, fields, self.get_context(request))
        previous.pop("_links", None)

        if not self.store.delete_post(post.id):
            raise NotFoundError("Invalid post ID.")
        logger.info(f"Deleted {self.policy.post_type} {post.id}")

        return RestResponse({"deleted": True, "previous": previous})

    def get_schema(self, request: RestRequest) -> RestResponse:
        """Describe the resource (answer to OPTIONS)."""
        methods = ["GET", "POST"] if request.id is None else ["GET", "POST", "PUT", "PATCH", "DELETE"]
        return RestResponse({
            "namespace": self.namespace,
            "methods": methods,
            "schema": self.policy.get_item_schema(),
        })

    # =====================================================================
    # Serialization
    # =====================================================================

    def prepare_item_for_response(self, request: RestRequest, post: Post,
                                  fields: FieldSelection, context: str = "view") -> Dict[str, Any]:
        data = self.policy.prepare_item_data(post, fields)
        data = filter_response_by_context(data, self.policy.get_item_schema(), context)
        if fields.includes("_links"):
            data["_links"] = self.prepare_links(request, post)
        return fields.filter(data)
