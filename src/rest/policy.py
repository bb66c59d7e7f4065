"""
Resource policies for the generic posts controller.

A PostsController knows how to list, fetch, create, update and delete
documents of one post type and how to wrap them in REST responses. What
it does not know is the resource itself: which arguments a write takes,
how they map onto a Post, and which fields a response carries. Those
decisions live in a ResourcePolicy injected into the controller.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from rest.fields import FieldSelection
from rest.request import RestRequest
from storage.base import ContentStore, Post

ValidateCallback = Callable[[Any, RestRequest], None]
SanitizeCallback = Callable[[Any, RestRequest], Any]


@dataclass
class EndpointArg:
    """One argument accepted by the create/update endpoints.

    Attributes:
        schema: JSON Schema for the raw value (before sanitizing)
        required: Whether the request must carry the argument
        validate_callback: Raises a RestError when the value is unacceptable
        sanitize_callback: Returns the normalized value used downstream
    """
    schema: Dict[str, Any]
    required: bool = False
    validate_callback: Optional[ValidateCallback] = None
    sanitize_callback: Optional[SanitizeCallback] = None


class ResourcePolicy(ABC):
    """Resource-specific behaviour plugged into a PostsController.

    Subclasses set post_type and rest_base and implement the abstract
    hooks. Capability names default to the post type's own names and may
    be overridden per deployment.
    """

    post_type: str = ""
    rest_base: str = ""
    read_forbidden_message = "Sorry, you are not allowed to access these posts."

    DEFAULT_CAPABILITIES = ("read", "create_posts", "edit_posts", "delete_posts")

    def __init__(self, store: ContentStore, capabilities: Optional[Dict[str, str]] = None):
        self.store = store
        self.capabilities = {cap: cap for cap in self.DEFAULT_CAPABILITIES}
        if capabilities:
            self.capabilities.update(capabilities)

    @abstractmethod
    def get_item_schema(self) -> Dict[str, Any]:
        """JSON Schema of one response item."""

    @abstractmethod
    def get_collection_params_schema(self) -> Dict[str, Any]:
        """JSON Schema of the collection query parameters."""

    @abstractmethod
    def get_endpoint_args(self) -> Dict[str, EndpointArg]:
        """Arguments accepted when creating or updating."""

    def before_create(self, request: RestRequest, args: Dict[str, Any]) -> None:
        """Last check before a new post is written. Raise to reject."""

    def before_delete(self, request: RestRequest) -> None:
        """First check of a delete request. Raise to reject."""

    @abstractmethod
    def prepare_item_for_database(self, request: RestRequest, args: Dict[str, Any],
                                  existing: Optional[Post]) -> Post:
        """Map validated arguments (merged onto existing, on update) to a Post."""

    @abstractmethod
    def prepare_item_data(self, post: Post, fields: FieldSelection) -> Dict[str, Any]:
        """Project a post into response data, computing only included fields."""

    def prepare_links(self, post: Post, links: Dict[str, Any]) -> Dict[str, Any]:
        """Adjust the default self/collection links of an item."""
        return links
