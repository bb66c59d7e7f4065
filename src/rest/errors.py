"""
REST Error Types.

Every failure a controller reports to the client is a RestError carrying a
machine-readable code, a human-readable message and an HTTP status. The
Flask app converts them into the response envelope:

    {
      "code": "rest_invalid_param",
      "message": "font_family_settings[slug] cannot be updated.",
      "data": {"status": 400}
    }

Validation errors may add a "details" object describing the failing field.
"""
from typing import Any, Dict, Optional


class RestError(Exception):
    """Base class for errors returned to REST clients.

    Attributes:
        code: Machine-readable error code
        message: Human-readable description
        status: HTTP status code
        details: Optional extra information (e.g. failing field path)
    """

    code = "rest_error"
    status = 500

    def __init__(self, message: str, code: Optional[str] = None, status: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status is not None:
            self.status = status
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "data": {"status": self.status},
        }
        if self.details:
            body["details"] = self.details
        return body


class InvalidParamError(RestError):
    """Malformed payload, schema violation or disallowed field."""
    code = "rest_invalid_param"
    status = 400


class MissingParamError(InvalidParamError):
    """A required request parameter was not sent."""
    code = "rest_missing_callback_param"


class InvalidJSONError(InvalidParamError):
    """The request body claimed to be JSON but could not be parsed."""
    code = "rest_invalid_json"


class PostExistsError(InvalidParamError):
    """Create was called with an identifier."""
    code = "rest_post_exists"


class InvalidPageNumberError(InvalidParamError):
    """Requested page lies beyond the last page of results."""
    code = "rest_post_invalid_page_number"


class DuplicateError(RestError):
    """A resource with the same unique key already exists."""
    code = "rest_duplicate"
    status = 400


class NotFoundError(RestError):
    """No resource with the requested identifier."""
    code = "rest_post_invalid_id"
    status = 404


class AuthorizationRequiredError(RestError):
    """The actor lacks the capability required for the operation.

    Status is 401 for anonymous callers and 403 for authenticated ones;
    the controller decides which.
    """
    code = "rest_forbidden"
    status = 401


class UnsupportedOperationError(RestError):
    """The operation exists in the REST vocabulary but not for this resource."""
    code = "rest_not_implemented"
    status = 501
