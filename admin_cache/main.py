"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from admin_cache.api import health, resources, users
from admin_cache.cache.store import CacheStore
from admin_cache.config import settings
from admin_cache.services.cloud_controller import CloudControllerClient
from admin_cache.services.discovery import Discovery
from admin_cache.services.queries import CloudControllerCache
from admin_cache.services.refresh import RefreshManager

logging.basicConfig(level=settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown.

    Starts one refresh loop per data set on startup and cancels them
    on shutdown.
    """
    # Startup
    store = CacheStore()
    discovery = Discovery(CloudControllerClient())
    refresh_manager = RefreshManager(store, discovery.fetcher_for)
    app.state.cc_cache = CloudControllerCache(store)
    refresh_manager.start()
    yield
    # Shutdown
    await refresh_manager.stop()


# Create FastAPI app
app = FastAPI(
    title="Cloud Controller Admin Cache",
    description="Periodically refreshed cache of Cloud Controller and UAA data",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for dashboard access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Adjust for production
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(resources.router, prefix="/api", tags=["Resources"])
app.include_router(users.router, prefix="/api", tags=["Users"])


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "service": "Cloud Controller Admin Cache",
        "version": "0.1.0",
        "endpoints": {
            "health": "/health",
            "applications": "/api/applications",
            "applications_count": "/api/applications/count",
            "applications_instances": "/api/applications/instances",
            "organizations": "/api/organizations",
            "organizations_count": "/api/organizations/count",
            "spaces": "/api/spaces",
            "spaces_count": "/api/spaces/count",
            "spaces_auditors": "/api/spaces/auditors",
            "spaces_developers": "/api/spaces/developers",
            "spaces_managers": "/api/spaces/managers",
            "users": "/api/users",
            "users_count": "/api/users/count",
        },
    }


if __name__ == "__main__":
    uvicorn.run(app, host=settings.server_host, port=settings.server_port, log_level=settings.log_level.lower())
