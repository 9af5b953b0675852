"""Base repository class."""

import json
from typing import Any

import duckdb
from loguru import logger

from app.repositories.db import get_db


class BaseRepository:
    """Base repository with common functionality.

    Statements always run on the calling thread's connection, so a repository
    shared between request threads joins whatever transaction that thread opened.
    """

    def __init__(self):
        logger.debug("{} initialized", self.__class__.__name__)

    @property
    def _db(self) -> duckdb.DuckDBPyConnection:
        return get_db()

    def execute(self, query: str, params: list | None = None) -> Any:
        """Execute SQL query."""
        if params:
            return self._db.execute(query, params)
        return self._db.execute(query)

    def fetchall(self, query: str, params: list | None = None) -> list:
        """Execute and fetch all rows."""
        return self.execute(query, params).fetchall()

    def fetchone(self, query: str, params: list | None = None) -> Any:
        """Execute and fetch one row."""
        return self.execute(query, params).fetchone()

    def modify(self, query: str, params: list | None = None) -> int:
        """Execute INSERT/UPDATE/DELETE and return the affected row count."""
        row = self.fetchone(query, params)
        return int(row[0]) if row else 0

    @staticmethod
    def to_json(data: dict) -> str:
        return json.dumps(data, default=str)

    @staticmethod
    def from_json(raw: str | dict) -> dict:
        return raw if isinstance(raw, dict) else json.loads(raw)
