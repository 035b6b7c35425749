"""Read access to cached data sets and the views derived from them."""
from typing import Any, Dict, List
from admin_cache.cache.store import CacheStore
from admin_cache.models.schemas import DataSetKey, DiscoveryResult
from admin_cache.services.discovery import log_discovery_error

# Role view name -> collection inlined on each deep user record
SPACE_ROLE_FIELDS = {
    "auditors": "audited_spaces",
    "developers": "spaces",
    "managers": "managed_spaces",
}


class CloudControllerCache:
    """
    Query facade over the cache store.

    Every accessor waits for the first publish of the data sets it
    needs. Derived views are computed on each call and not cached.
    """

    def __init__(self, store: CacheStore):
        self.store = store

    async def applications(self) -> DiscoveryResult:
        """Cached applications, waiting for the first discovery."""
        return await self.store.get(DataSetKey.APPLICATIONS)

    async def applications_count(self) -> int:
        """Number of cached applications."""
        return len((await self.applications()).items)

    async def applications_running_instances(self) -> int:
        """Sum of ``instances`` over applications in the STARTED state."""
        return sum(
            app.get("instances", 0)
            for app in (await self.applications()).items
            if app.get("state") == "STARTED"
        )

    async def applications_total_instances(self) -> int:
        """Sum of ``instances`` over all applications."""
        return sum(app.get("instances", 0) for app in (await self.applications()).items)

    async def organizations(self) -> DiscoveryResult:
        """Cached organizations, waiting for the first discovery."""
        return await self.store.get(DataSetKey.ORGANIZATIONS)

    async def organizations_count(self) -> int:
        """Number of cached organizations."""
        return len((await self.organizations()).items)

    async def spaces(self) -> DiscoveryResult:
        """Cached spaces, waiting for the first discovery."""
        return await self.store.get(DataSetKey.SPACES)

    async def spaces_count(self) -> int:
        """Number of cached spaces."""
        return len((await self.spaces()).items)

    async def spaces_auditors(self) -> DiscoveryResult:
        """Space auditor memberships joined from the deep user roster."""
        return await self._space_roles("auditors")

    async def spaces_developers(self) -> DiscoveryResult:
        """Space developer memberships joined from the deep user roster."""
        return await self._space_roles("developers")

    async def spaces_managers(self) -> DiscoveryResult:
        """Space manager memberships joined from the deep user roster."""
        return await self._space_roles("managers")

    async def users(self) -> DiscoveryResult:
        """Cached UAA users, waiting for the first discovery."""
        return await self.store.get(DataSetKey.USERS_UAA)

    async def users_count(self) -> int:
        """Number of cached UAA users."""
        return len((await self.users()).items)

    async def _space_roles(self, role: str) -> DiscoveryResult:
        users_cc_deep = await self.store.get(DataSetKey.USERS_CC_DEEP)
        if not users_cc_deep.connected:
            return DiscoveryResult.of()

        try:
            return DiscoveryResult.of(space_role_memberships(users_cc_deep, SPACE_ROLE_FIELDS[role]))
        except (KeyError, TypeError) as e:
            log_discovery_error(f"spaces_{role}", e)
            return DiscoveryResult.of()


def space_role_memberships(users_cc_deep: DiscoveryResult, field: str) -> List[Dict[str, Any]]:
    """
    Join deep user records against one of their inlined space collections.

    Args:
        users_cc_deep: Raw users fetched with inline-relations-depth=1
        field: Space collection on the user entity, e.g. ``managed_spaces``

    Returns:
        ``{user_guid, space_guid}`` per membership, in roster order
    """
    items = []
    for user in users_cc_deep.items:
        guid = user["metadata"]["guid"]
        for space in user["entity"][field]:
            items.append({"user_guid": guid, "space_guid": space["metadata"]["guid"]})
    return items
