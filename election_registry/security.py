# election_registry/security.py
# The caller identity is authenticated upstream; here it is only read from the request.
from fastapi import HTTPException, Request, status

from .registry import ElectionRegistry


def get_registry(request: Request) -> ElectionRegistry:
    return request.app.state.registry


def get_caller(request: Request) -> str:
    header = request.app.state.settings.caller_header
    identity = (request.headers.get(header) or "").strip()
    if not identity:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing caller identity header {header}",
        )
    return identity
