# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import Settings, load_settings
from .database.connection import get_storage
from .errors import RegistryError, StorageError
from .registry import ElectionRegistry
from .routes.election_routes import router as election_router
from .routes.vote_routes import vote_router
from .routes.voter_routes import voter_router

logger = logging.getLogger(__name__)


def create_app(registry: Optional[ElectionRegistry] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level)

    if registry is None:
        storage = get_storage(settings)
        registry = ElectionRegistry.create(settings.registry_admin, storage=storage)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        storage = registry.storage
        if hasattr(storage, "close"):
            storage.close()

    app = FastAPI(title="Election Registry API", lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RegistryError)
    async def registry_error_handler(request: Request, exc: RegistryError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.code, "detail": exc.detail})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"Storage failure on {request.url.path}: {exc}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.code, "detail": str(exc)})

    app.include_router(election_router)
    app.include_router(voter_router)
    app.include_router(vote_router)

    @app.get("/health", tags=["General"])
    async def health_check():
        return {"status": "healthy", "storage": settings.storage_backend}

    @app.get("/", tags=["Root"])
    def read_root():
        return {"message": "Welcome to the Election Registry API"}

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("election_registry.main:create_app", factory=True, host="0.0.0.0", port=8000)
