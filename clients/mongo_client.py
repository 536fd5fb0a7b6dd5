"""
MongoDB client for the credential store and resource collections.

Thin wrapper around pymongo. One client per process, shared by services.
Fail-fast: connection is verified with a ping on construction.
"""

import logging

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

logger = logging.getLogger(__name__)


class MongoDBClient:
    """
    MongoDB database handle.

    Usage:
        mongo = MongoDBClient("mongodb://localhost:27017", "courses")
        users = mongo.collection("users")
        users.find_one({"email": "a@b.c"})
    """

    def __init__(self, url: str, database: str, server_selection_timeout_ms: int = 5000):
        """
        Initialize MongoDB connection.

        Args:
            url: MongoDB connection URL
            database: Database name
            server_selection_timeout_ms: How long to wait for a reachable server

        Raises:
            ValueError: If url or database is empty
            pymongo.errors.PyMongoError: If the server cannot be reached
        """
        if not url:
            raise ValueError("url is required")
        if not database:
            raise ValueError("database is required")

        self._client = MongoClient(
            url,
            serverSelectionTimeoutMS=server_selection_timeout_ms,
            tz_aware=True,
        )
        self._client.admin.command("ping")
        self._db: Database = self._client[database]
        logger.info(f"MongoDBClient connected to database '{database}'")

    def collection(self, name: str) -> Collection:
        """Get collection by name."""
        return self._db[name]

    def ping(self) -> bool:
        """
        Health check.

        Returns True if the server responds.
        Raises pymongo.errors.PyMongoError if unreachable.
        """
        self._client.admin.command("ping")
        return True

    def close(self) -> None:
        """Close the connection."""
        self._client.close()
        logger.info("MongoDBClient closed")
