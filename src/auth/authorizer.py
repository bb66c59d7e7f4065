"""
Token-based Authorization for the Font Library REST API.

Callers authenticate with a static API token sent either as
``Authorization: Bearer <token>`` or ``X-Internal-Token: <token>``.
Each configured token maps to a named actor holding a set of
capabilities (e.g. "edit_theme_options"). Controllers only ever ask one
question: does the current actor hold capability X?

Status Codes:
    authorization_required_code() mirrors the usual REST convention:
    401 when nobody is authenticated, 403 when an authenticated actor
    lacks the capability.
"""
import logging
import secrets
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from config import get_token_entries

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """An authenticated caller and the capabilities it holds."""
    name: str
    capabilities: FrozenSet[str] = field(default_factory=frozenset)

    def can(self, capability: str) -> bool:
        return capability in self.capabilities


class TokenAuthorizer:
    """Resolve request tokens to actors and answer capability checks.

    Attributes:
        tokens: List of {"name", "token", "capabilities"} entries
    """

    def __init__(self, tokens: Optional[List[Dict[str, Any]]] = None):
        self.tokens = tokens or []

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "TokenAuthorizer":
        """Create an authorizer from the auth section of config.yml.

        Args:
            config: Configuration dictionary from load_config()

        Returns:
            TokenAuthorizer holding every resolvable token entry
        """
        tokens = get_token_entries(config)
        if tokens:
            logger.info(f"Configured {len(tokens)} API token(s): {', '.join(t['name'] for t in tokens)}")
        else:
            logger.warning("No API tokens configured; every font library request will be rejected")
        return cls(tokens)

    @staticmethod
    def _extract_token(headers: Mapping[str, str]) -> Optional[str]:
        auth_header = headers.get("Authorization", "")
        if auth_header.lower().startswith("bearer "):
            token = auth_header[7:].strip()
            if token:
                return token
        return headers.get("X-Internal-Token") or None

    def authenticate(self, headers: Mapping[str, str]) -> Optional[Actor]:
        """Return the actor for the request's token, or None if anonymous."""
        provided = self._extract_token(headers)
        if not provided:
            return None

        for entry in self.tokens:
            if secrets.compare_digest(provided.encode(), str(entry["token"]).encode()):
                return Actor(name=entry["name"], capabilities=frozenset(entry["capabilities"]))

        logger.warning("Rejected request with unknown API token")
        return None

    def user_can(self, actor: Optional[Actor], capability: str) -> bool:
        """Check whether the actor holds the named capability."""
        return actor is not None and actor.can(capability)

    def authorization_required_code(self, actor: Optional[Actor]) -> int:
        """HTTP status for a failed capability check."""
        return 403 if actor is not None else 401
