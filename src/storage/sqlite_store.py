"""SQLite-backed content store for font library documents."""

from __future__ import annotations

import logging
import os
import sqlite3
from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple

from storage.base import ContentStore, Post, PostQuery, QueryResult

logger = logging.getLogger(__name__)

_POST_COLUMNS = (
    "id, post_type, post_status, post_title, post_name, post_content, "
    "post_parent, post_date, post_modified"
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_post(row: sqlite3.Row) -> Post:
    return Post(
        id=row["id"],
        post_type=row["post_type"],
        post_status=row["post_status"],
        post_title=row["post_title"],
        post_name=row["post_name"],
        post_content=row["post_content"],
        post_parent=row["post_parent"],
        post_date=row["post_date"],
        post_modified=row["post_modified"],
    )


def _placeholders(values: List[Any]) -> str:
    return ", ".join("?" for _ in values)


class SQLiteContentStore(ContentStore):
    """Persistent document storage backed by SQLite."""

    def __init__(self, storage_path: str):
        self.storage_path = storage_path
        os.makedirs(self.storage_path, mode=0o755, exist_ok=True)
        self.db_path = os.path.join(self.storage_path, "posts.db")
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS posts (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        post_type TEXT NOT NULL,
                        post_status TEXT NOT NULL DEFAULT 'publish',
                        post_title TEXT NOT NULL DEFAULT '',
                        post_name TEXT NOT NULL DEFAULT '',
                        post_content TEXT NOT NULL DEFAULT '',
                        post_parent INTEGER NOT NULL DEFAULT 0,
                        post_date TEXT NOT NULL,
                        post_modified TEXT NOT NULL
                    )
                    """
                )
                # Not UNIQUE: slug uniqueness is checked by the controllers.
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_posts_type_name "
                    "ON posts(post_type, post_name)"
                )
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_posts_type_parent "
                    "ON posts(post_type, post_parent)"
                )
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize content database {self.db_path}: {e}")
            raise

    def get_post(self, post_id: int) -> Optional[Post]:
        """Get a post by ID from SQLite."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    f"SELECT {_POST_COLUMNS} FROM posts WHERE id = ?",
                    (post_id,),
                ).fetchone()
                if row:
                    return _row_to_post(row)
        except sqlite3.Error as e:
            logger.error(f"Failed to read post {post_id} from SQLite: {e}")
            raise

        return None

    def _build_where(self, query: PostQuery) -> Tuple[str, List[Any]]:
        clauses = ["post_type = ?"]
        params: List[Any] = [query.post_type]

        if query.post_status:
            clauses.append(f"post_status IN ({_placeholders(query.post_status)})")
            params.extend(query.post_status)
        if query.post_parent is not None:
            clauses.append("post_parent = ?")
            params.append(query.post_parent)
        if query.post_name:
            clauses.append(f"post_name IN ({_placeholders(query.post_name)})")
            params.extend(query.post_name)
        if query.include:
            clauses.append(f"id IN ({_placeholders(query.include)})")
            params.extend(query.include)
        if query.exclude:
            clauses.append(f"id NOT IN ({_placeholders(query.exclude)})")
            params.extend(query.exclude)

        return " AND ".join(clauses), params

    def _build_order(self, query: PostQuery) -> Tuple[str, List[Any]]:
        if query.orderby == "include" and query.include:
            cases = " ".join("WHEN ? THEN ?" for _ in query.include)
            params: List[Any] = []
            for position, post_id in enumerate(query.include):
                params.extend([post_id, position])
            return f"CASE id {cases} END", params

        direction = "ASC" if query.order.lower() == "asc" else "DESC"
        return f"id {direction}", []

    def query_posts(self, query: PostQuery) -> QueryResult:
        """Return one page of posts matching the query, plus the total count."""
        where, where_params = self._build_where(query)
        order, order_params = self._build_order(query)
        offset = query.offset if query.offset is not None else (query.page - 1) * query.per_page

        try:
            with self._connect() as conn:
                total = conn.execute(
                    f"SELECT COUNT(*) FROM posts WHERE {where}",
                    where_params,
                ).fetchone()[0]
                rows = conn.execute(
                    f"SELECT {_POST_COLUMNS} FROM posts WHERE {where} "
                    f"ORDER BY {order} LIMIT ? OFFSET ?",
                    where_params + order_params + [query.per_page, offset],
                ).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Failed to query posts of type {query.post_type}: {e}")
            raise

        return QueryResult(posts=[_row_to_post(row) for row in rows], total=total)

    def insert_post(self, post: Post) -> int:
        """Insert a new post and return its ID."""
        now = _now()
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO posts (post_type, post_status, post_title, post_name,
                                       post_content, post_parent, post_date, post_modified)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        post.post_type,
                        post.post_status,
                        post.post_title,
                        post.post_name,
                        post.post_content,
                        post.post_parent,
                        post.post_date or now,
                        now,
                    ),
                )
                return cursor.lastrowid
        except sqlite3.Error as e:
            logger.error(f"Failed to insert post of type {post.post_type}: {e}")
            raise

    def update_post(self, post: Post) -> bool:
        """Overwrite the stored fields of an existing post."""
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    """
                    UPDATE posts SET post_type = ?, post_status = ?, post_title = ?,
                                     post_name = ?, post_content = ?, post_parent = ?,
                                     post_modified = ?
                    WHERE id = ?
                    """,
                    (
                        post.post_type,
                        post.post_status,
                        post.post_title,
                        post.post_name,
                        post.post_content,
                        post.post_parent,
                        _now(),
                        post.id,
                    ),
                )
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Failed to update post {post.id}: {e}")
            raise

    def delete_post(self, post_id: int) -> bool:
        """Delete a post by ID."""
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "DELETE FROM posts WHERE id = ?",
                    (post_id,),
                )
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Failed to delete post {post_id}: {e}")
            raise

