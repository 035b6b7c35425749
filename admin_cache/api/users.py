"""UAA user endpoints."""
from fastapi import APIRouter, Depends
from admin_cache.api.deps import get_cc_cache
from admin_cache.models.schemas import CountResponse, DiscoveryResult
from admin_cache.services.queries import CloudControllerCache

router = APIRouter()


@router.get("/users", response_model=DiscoveryResult)
async def get_users(cc: CloudControllerCache = Depends(get_cc_cache)):
    """
    Cached UAA users.

    Each item carries active, authorities, created, id, last_modified
    and version, plus email, familyname, givenname and username when
    UAA has them.
    """
    return await cc.users()


@router.get("/users/count", response_model=CountResponse)
async def get_users_count(cc: CloudControllerCache = Depends(get_cc_cache)):
    """Number of cached UAA users."""
    return CountResponse(count=await cc.users_count())
