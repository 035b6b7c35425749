"""Health check endpoint."""
import time
from fastapi import APIRouter, Depends
from admin_cache.api.deps import get_cc_cache
from admin_cache.models.schemas import HealthResponse
from admin_cache.services.queries import CloudControllerCache

router = APIRouter()

# Track startup time
START_TIME = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check(cc: CloudControllerCache = Depends(get_cc_cache)):
    """
    Health check endpoint.

    Reports, per data set, whether the last discovery succeeded
    (null until the first one completes). Never waits on the cache.
    """
    data_sets = {}
    for key in cc.store.keys():
        result = cc.store.peek(key)
        data_sets[key.value] = None if result is None else result.connected

    healthy = all(connected for connected in data_sets.values())
    return HealthResponse(
        status="ok" if healthy else "degraded",
        data_sets=data_sets,
        uptime_seconds=time.time() - START_TIME,
    )
