"""Cloud Controller resource endpoints: applications, organizations, spaces."""
from fastapi import APIRouter, Depends
from admin_cache.api.deps import get_cc_cache
from admin_cache.models.schemas import CountResponse, DiscoveryResult, InstancesResponse
from admin_cache.services.queries import CloudControllerCache

router = APIRouter()


@router.get("/applications", response_model=DiscoveryResult)
async def get_applications(cc: CloudControllerCache = Depends(get_cc_cache)):
    """Cached applications, entity and metadata fields merged."""
    return await cc.applications()


@router.get("/applications/count", response_model=CountResponse)
async def get_applications_count(cc: CloudControllerCache = Depends(get_cc_cache)):
    """Number of cached applications."""
    return CountResponse(count=await cc.applications_count())


@router.get("/applications/instances", response_model=InstancesResponse)
async def get_application_instances(cc: CloudControllerCache = Depends(get_cc_cache)):
    """
    Instance totals across applications.

    ``running`` only counts applications in the STARTED state.
    """
    return InstancesResponse(
        running=await cc.applications_running_instances(),
        total=await cc.applications_total_instances(),
    )


@router.get("/organizations", response_model=DiscoveryResult)
async def get_organizations(cc: CloudControllerCache = Depends(get_cc_cache)):
    """Cached organizations, entity and metadata fields merged."""
    return await cc.organizations()


@router.get("/organizations/count", response_model=CountResponse)
async def get_organizations_count(cc: CloudControllerCache = Depends(get_cc_cache)):
    """Number of cached organizations."""
    return CountResponse(count=await cc.organizations_count())


@router.get("/spaces", response_model=DiscoveryResult)
async def get_spaces(cc: CloudControllerCache = Depends(get_cc_cache)):
    """Cached spaces, entity and metadata fields merged."""
    return await cc.spaces()


@router.get("/spaces/count", response_model=CountResponse)
async def get_spaces_count(cc: CloudControllerCache = Depends(get_cc_cache)):
    """Number of cached spaces."""
    return CountResponse(count=await cc.spaces_count())


@router.get("/spaces/auditors", response_model=DiscoveryResult)
async def get_spaces_auditors(cc: CloudControllerCache = Depends(get_cc_cache)):
    """``{user_guid, space_guid}`` for every space auditor role."""
    return await cc.spaces_auditors()


@router.get("/spaces/developers", response_model=DiscoveryResult)
async def get_spaces_developers(cc: CloudControllerCache = Depends(get_cc_cache)):
    """``{user_guid, space_guid}`` for every space developer role."""
    return await cc.spaces_developers()


@router.get("/spaces/managers", response_model=DiscoveryResult)
async def get_spaces_managers(cc: CloudControllerCache = Depends(get_cc_cache)):
    """``{user_guid, space_guid}`` for every space manager role."""
    return await cc.spaces_managers()
