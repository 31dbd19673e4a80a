# election_registry/config.py
# Central place for settings, read from the environment (and .env when present)
import logging
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173"


class Settings(BaseModel):
    registry_admin: Optional[str] = None
    storage_backend: str = "memory"
    db_path: str = "data/registry.json"
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "voting_system"
    registry_collection: str = "registry"
    caller_header: str = "X-Caller-Identity"
    cors_origins: List[str] = DEFAULT_CORS_ORIGINS.split(",")
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL, got '{value}'")
        return level


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    load_dotenv(dotenv_path=dotenv_path)
    origins = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return Settings(
        registry_admin=os.getenv("REGISTRY_ADMIN") or None,
        storage_backend=os.getenv("REGISTRY_STORAGE", "memory").strip().lower(),
        db_path=os.getenv("REGISTRY_DB_PATH", "data/registry.json"),
        mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        mongo_db=os.getenv("MONGO_DB", "voting_system"),
        registry_collection=os.getenv("REGISTRY_COLLECTION", "registry"),
        caller_header=os.getenv("CALLER_HEADER", "X-Caller-Identity"),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
