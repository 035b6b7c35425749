"""Discovery of each cached data set from the Cloud Controller and UAA."""
import logging
from typing import Any, Awaitable, Callable, Dict, List
from admin_cache.models.schemas import DataSetKey, DiscoveryResult
from admin_cache.services.cloud_controller import CloudControllerClient

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[DiscoveryResult]]


class Discovery:
    """
    One fetcher per data set.

    Every ``discover_*`` method returns a complete result. Failures of
    any kind are logged and turned into a disconnected, empty result so
    a broken upstream only darkens its own data set.
    """

    def __init__(self, client: CloudControllerClient):
        """
        Initialize discovery.

        Args:
            client: Shared Cloud Controller client
        """
        self.client = client

    def fetcher_for(self, key: DataSetKey) -> Fetcher:
        """Return the ``discover_<key>`` coroutine method for a data set."""
        return getattr(self, f"discover_{key.value}")

    async def discover_applications(self) -> DiscoveryResult:
        return await self._discover_entities("applications", "v2/apps")

    async def discover_organizations(self) -> DiscoveryResult:
        return await self._discover_entities("organizations", "v2/organizations")

    async def discover_spaces(self) -> DiscoveryResult:
        return await self._discover_entities("spaces", "v2/spaces")

    async def discover_users_cc_deep(self) -> DiscoveryResult:
        """Users with their space roles inlined, kept as raw records."""
        try:
            return DiscoveryResult.of(await self.client.get_cc("v2/users?inline-relations-depth=1"))
        except Exception as e:
            log_discovery_error("users_cc_deep", e)
            return DiscoveryResult.of()

    async def discover_users_uaa(self) -> DiscoveryResult:
        """UAA users flattened to one attribute mapping each."""
        try:
            users = await self.client.get_uaa("Users")
            return DiscoveryResult.of([flatten_uaa_user(user) for user in users])
        except Exception as e:
            log_discovery_error("users_uaa", e)
            return DiscoveryResult.of()

    async def _discover_entities(self, name: str, path: str) -> DiscoveryResult:
        try:
            resources = await self.client.get_cc(path)
            return DiscoveryResult.of([merge_entity(resource) for resource in resources])
        except Exception as e:
            log_discovery_error(name, e)
            return DiscoveryResult.of()


def log_discovery_error(name: str, error: Exception):
    """Log a failed discovery with its traceback."""
    logger.debug("Error during discover_%s: %r", name, error, exc_info=error)


def merge_entity(resource: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a v2 resource into its entity fields plus metadata fields."""
    return {**resource["entity"], **resource["metadata"]}


def flatten_uaa_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten a SCIM user record.

    Optional attributes (email, family/given name, username) are only
    present in the result when present in the record.

    Args:
        user: Raw UAA user resource

    Returns:
        Flat attribute mapping
    """
    meta = user["meta"]
    name = user.get("name") or {}
    emails = user.get("emails")
    authorities: List[str] = sorted(group["display"] for group in user.get("groups") or [])

    attributes = {
        "active": user["active"],
        "authorities": ", ".join(authorities),
        "created": meta["created"],
        "id": user["id"],
        "last_modified": meta["lastModified"],
        "version": meta["version"],
    }

    if emails:
        attributes["email"] = emails[0]["value"]
    if name.get("familyName") is not None:
        attributes["familyname"] = name["familyName"]
    if name.get("givenName") is not None:
        attributes["givenname"] = name["givenName"]
    if user.get("userName") is not None:
        attributes["username"] = user["userName"]

    return attributes
