"""Shared FastAPI dependencies."""
from fastapi import Request
from admin_cache.services.queries import CloudControllerCache


def get_cc_cache(request: Request) -> CloudControllerCache:
    """Query facade created by the application lifespan."""
    return request.app.state.cc_cache
