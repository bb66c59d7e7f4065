"""REST Package - generic post-backed REST controller.

Exports:
    PostsController: CRUD endpoints for one post type
    ResourcePolicy, EndpointArg: Resource-specific hooks injected into it
    RestRequest, RestResponse: Framework-independent request/response
    RestError and subclasses: Errors returned to clients
"""
from .errors import (
    RestError,
    InvalidParamError,
    MissingParamError,
    InvalidJSONError,
    PostExistsError,
    InvalidPageNumberError,
    DuplicateError,
    NotFoundError,
    AuthorizationRequiredError,
    UnsupportedOperationError,
)
from .fields import FieldSelection
from .policy import EndpointArg, ResourcePolicy
from .request import RestRequest, RestResponse
from .posts_controller import PostsController

__all__ = [
    "RestError",
    "InvalidParamError",
    "MissingParamError",
    "InvalidJSONError",
    "PostExistsError",
    "InvalidPageNumberError",
    "DuplicateError",
    "NotFoundError",
    "AuthorizationRequiredError",
    "UnsupportedOperationError",
    "FieldSelection",
    "EndpointArg",
    "ResourcePolicy",
    "RestRequest",
    "RestResponse",
    "PostsController",
]
