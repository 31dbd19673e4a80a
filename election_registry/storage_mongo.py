# election_registry/storage_mongo.py
import logging
from typing import Optional

from pydantic import ValidationError
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from .errors import StorageError
from .registry import RegistryState

logger = logging.getLogger(__name__)

REGISTRY_ID = "election"


class MongoStorage:
    """Keeps the whole registry in one MongoDB document.

    Voters are stored as a list of ``{"identity": ..., ...}`` entries rather
    than a mapping, so caller identities never become field names (``$`` or
    ``.`` in an identity is safe). Every save rewrites the full document, and
    the 16 MB BSON document limit caps the electorate at roughly a hundred
    thousand voters.
    """

    def __init__(self, uri: str, db_name: str, collection_name: str = "registry", client=None):
        """Connect to MongoDB and bind the collection holding the registry document.

        Args:
            uri: MongoDB connection string
            db_name: database name
            collection_name: collection holding the single registry document
            client: an already constructed client, used instead of connecting to ``uri``
        """
        try:
            self.client = client if client is not None else MongoClient(uri)
            self.db = self.client[db_name]
            self.collection = self.db[collection_name]
            # Test connection
            self.client.server_info()
            logger.info(f"Connected to MongoDB, database: {db_name}, collection: {collection_name}")
        except PyMongoError as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise StorageError("MongoDB is unreachable") from e

    def load_state(self) -> Optional[RegistryState]:
        """
        Retrieve the registry state

        Returns:
            The stored state, or None when no registry document exists yet
        """
        try:
            doc = self.collection.find_one({"_id": REGISTRY_ID})
        except PyMongoError as e:
            logger.error(f"Error loading registry: {e}")
            raise StorageError("Could not load registry state") from e
        if doc is None:
            return None
        doc.pop("_id", None)
        try:
            doc["voters"] = {entry.pop("identity"): entry for entry in doc.get("voters", [])}
            return RegistryState.model_validate(doc)
        except (AttributeError, KeyError, TypeError, ValidationError) as e:
            logger.error(f"Stored registry document is invalid: {e}")
            raise StorageError("Invalid registry document") from e

    def save_state(self, state: RegistryState) -> None:
        """Replace the registry document with ``state``, inserting it when absent."""
        doc = state.model_dump(mode="json")
        doc["voters"] = [{"identity": identity, **voter} for identity, voter in doc["voters"].items()]
        doc["_id"] = REGISTRY_ID
        try:
            self.collection.replace_one({"_id": REGISTRY_ID}, doc, upsert=True)
        except PyMongoError as e:
            logger.error(f"Error saving registry: {e}")
            raise StorageError("Could not save registry state") from e

    def close(self):
        """Close MongoDB connection"""
        try:
            self.client.close()
            logger.info("MongoDB connection closed")
        except PyMongoError as e:
            logger.error(f"Error closing MongoDB connection: {e}")
