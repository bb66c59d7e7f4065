"""Storage Package - document storage used by the REST controllers.

Exports:
    ContentStore: Abstract storage interface (get/query/insert/update/delete)
    Post, PostQuery, QueryResult: Records exchanged with a ContentStore
    SQLiteContentStore: SQLite implementation used by the service
"""
from .base import ContentStore, Post, PostQuery, QueryResult
from .sqlite_store import SQLiteContentStore

__all__ = ["ContentStore", "Post", "PostQuery", "QueryResult", "SQLiteContentStore"]
