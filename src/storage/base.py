"""
Content Store Interface.

This module defines the narrow storage interface the REST controllers
talk to: typed documents ("posts") addressed by numeric identifier, plus
a paginated query by type, parent, slug and id lists.

Concrete stores (see storage.sqlite_store) inherit from ContentStore and
implement the abstract methods. Controllers never issue SQL themselves.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import List, Optional


@dataclass
class Post:
    """A stored document.

    Attributes:
        id: Store-assigned identifier (0 until inserted)
        post_type: Document type, e.g. "wp_font_family"
        post_status: Publication status, e.g. "publish"
        post_title: Human readable title
        post_name: Machine-safe slug
        post_content: Body text (JSON for font families)
        post_parent: Identifier of the parent document (0 = none)
        post_date: ISO-8601 UTC creation timestamp
        post_modified: ISO-8601 UTC last modification timestamp
    """
    id: int = 0
    post_type: str = ""
    post_status: str = "publish"
    post_title: str = ""
    post_name: str = ""
    post_content: str = ""
    post_parent: int = 0
    post_date: str = ""
    post_modified: str = ""

    def copy(self, **changes) -> "Post":
        return replace(self, **changes)


@dataclass
class PostQuery:
    """Query arguments for ContentStore.query_posts().

    Empty lists and None values mean "no filter". orderby is either "id"
    or "include" (position within the include list).
    """
    post_type: str
    post_status: Optional[List[str]] = None
    post_parent: Optional[int] = None
    post_name: List[str] = field(default_factory=list)
    include: List[int] = field(default_factory=list)
    exclude: List[int] = field(default_factory=list)
    order: str = "desc"
    orderby: str = "id"
    page: int = 1
    per_page: int = 10
    offset: Optional[int] = None


@dataclass
class QueryResult:
    """A page of posts plus the number of matches across all pages."""
    posts: List[Post]
    total: int

    @property
    def ids(self) -> List[int]:
        return [post.id for post in self.posts]


class ContentStore(ABC):
    """Abstract base class for document stores.

    Reads return None / empty results for unknown identifiers. Writes
    propagate storage errors to the caller so that a failed mutation fails
    the request.
    """

    @abstractmethod
    def get_post(self, post_id: int) -> Optional[Post]:
        """Return the post with this identifier, or None."""

    @abstractmethod
    def query_posts(self, query: PostQuery) -> QueryResult:
        """Return one page of posts matching the query."""

    @abstractmethod
    def insert_post(self, post: Post) -> int:
        """Store a new post and return its assigned identifier."""

    @abstractmethod
    def update_post(self, post: Post) -> bool:
        """Overwrite an existing post. Returns False if it does not exist."""

    @abstractmethod
    def delete_post(self, post_id: int) -> bool:
        """Permanently delete a post. Returns False if it does not exist."""
