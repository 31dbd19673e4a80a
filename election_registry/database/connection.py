from ..config import Settings
from ..storage import JsonStorage
from ..storage_mongo import MongoStorage


def get_storage(settings: Settings):
    """Build the storage backend named by ``settings.storage_backend``; None keeps state in memory."""
    backend = settings.storage_backend
    if backend == "memory":
        return None
    if backend == "json":
        return JsonStorage(settings.db_path)
    if backend == "mongo":
        return MongoStorage(settings.mongo_uri, settings.mongo_db, settings.registry_collection)
    raise ValueError(f"❌ Unknown REGISTRY_STORAGE '{backend}'. Use memory, json or mongo.")
