"""Framework-independent request and response objects used by the controllers."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from auth import Actor


@dataclass
class RestRequest:
    """One REST request as seen by a controller.

    Parameter lookup order is route (URL) parameters, then body, then
    query string.

    Attributes:
        method: HTTP method
        route: Matched route, e.g. "/wp/v2/font-families/5"
        url_params: Parameters captured from the route (e.g. {"id": 5})
        body_params: Parameters decoded from a JSON or form body
        query_params: Query string parameters (repeated keys become lists)
        actor: Authenticated caller, or None
        url_root: Scheme and host the request arrived on, used for links
    """
    method: str = "GET"
    route: str = ""
    url_params: Dict[str, Any] = field(default_factory=dict)
    body_params: Dict[str, Any] = field(default_factory=dict)
    query_params: Dict[str, Any] = field(default_factory=dict)
    actor: Optional[Actor] = None
    url_root: str = "http://localhost/"

    def has_param(self, name: str) -> bool:
        return name in self.url_params or name in self.body_params or name in self.query_params

    def get_param(self, name: str, default: Any = None) -> Any:
        for source in (self.url_params, self.body_params, self.query_params):
            if name in source:
                return source[name]
        return default

    def get_params(self) -> Dict[str, Any]:
        """All parameters merged with the lookup order applied."""
        merged: Dict[str, Any] = {}
        for source in (self.query_params, self.body_params, self.url_params):
            merged.update(source)
        return merged

    @property
    def id(self) -> Optional[int]:
        return self.url_params.get("id")


@dataclass
class RestResponse:
    """Data plus status and headers, serialized to JSON by the web layer."""
    data: Any
    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)
