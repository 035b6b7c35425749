"""HTTP client for the Cloud Controller and UAA APIs."""
import asyncio
import logging
from typing import Any, Dict, List, Optional
import httpx
from admin_cache.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class CloudControllerError(Exception):
    """Unexpected response from the Cloud Controller or UAA."""


class AuthenticationError(CloudControllerError):
    """UAA refused the password grant."""


class ConfigurationError(CloudControllerError):
    """The info endpoint did not describe where to authenticate."""


class CloudControllerClient:
    """
    Client for Cloud Controller (v2) and UAA endpoints.

    Holds the bearer token and the endpoint info shared by every
    discovery. Concurrent callers may both log in after a 401; the
    later token simply replaces the earlier one.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize client state.

        Args:
            config: Settings to use (defaults to the application settings)
            transport: Optional httpx transport, used by tests
        """
        self.config = config or default_settings
        self.base_url = self.config.cloud_controller_uri.rstrip("/")
        self.timeout = httpx.Timeout(self.config.http_timeout)
        self._transport = transport
        self._info_lock = asyncio.Lock()

        self.token: Optional[str] = None
        self.authorization_endpoint: Optional[str] = None
        self.token_endpoint: Optional[str] = None
        self.login_count = 0

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            verify=self.config.cloud_controller_ssl_verify,
            transport=self._transport,
        )

    async def info(self):
        """
        Resolve the authorization and token endpoints once per process.

        Raises:
            ConfigurationError: If the info document is unavailable or
                lacks a required endpoint
        """
        async with self._info_lock:
            if self.token_endpoint is not None:
                return

            url = f"{self.base_url}/info"
            async with self._client() as client:
                response = await client.get(url)

            if response.status_code != httpx.codes.OK:
                raise ConfigurationError(f"Unable to fetch info from {url}")

            body = response.json()
            authorization_endpoint = body.get("authorization_endpoint")
            if authorization_endpoint is None:
                raise ConfigurationError(
                    f"Information retrieved from {url} does not include authorization_endpoint"
                )
            token_endpoint = body.get("token_endpoint")
            if token_endpoint is None:
                raise ConfigurationError(
                    f"Information retrieved from {url} does not include token_endpoint"
                )

            self.authorization_endpoint = authorization_endpoint.rstrip("/")
            self.token_endpoint = token_endpoint.rstrip("/")

    async def login(self) -> str:
        """
        Exchange the admin credentials for a bearer token.

        Returns:
            The new ``Authorization`` header value

        Raises:
            AuthenticationError: If UAA does not answer 200
        """
        await self.info()

        self.token = None
        self.login_count += 1

        async with self._client() as client:
            response = await client.post(
                f"{self.token_endpoint}/oauth/token",
                data={
                    "grant_type": "password",
                    "username": self.config.uaa_admin_credentials_username,
                    "password": self.config.uaa_admin_credentials_password,
                },
                headers={"Authorization": self.config.uaa_client_authorization},
            )

        if response.status_code != httpx.codes.OK:
            raise AuthenticationError(
                f"Unexpected response code from login is {response.status_code}, "
                f"message {response.reason_phrase}"
            )

        body = response.json()
        token = f"{body['token_type']} {body['access_token']}"
        self.token = token
        logger.debug("Logged in to %s", self.token_endpoint)
        return token

    async def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Authenticated GET returning parsed JSON.

        Logs in first if there is no token. A 401 causes one fresh login
        and one retry; a second 401 fails like any other status.

        Args:
            url: Absolute URL to fetch
            params: Optional query parameters

        Returns:
            Decoded JSON body

        Raises:
            CloudControllerError: On any response other than 200
        """
        recent_login = False
        token = self.token
        if token is None:
            token = await self.login()
            recent_login = True

        while True:
            async with self._client() as client:
                response = await client.get(
                    url, params=params, headers={"Authorization": token}
                )

            if response.status_code == httpx.codes.OK:
                return response.json()
            if not recent_login and response.status_code == httpx.codes.UNAUTHORIZED:
                logger.debug("Token rejected for %s, logging in again", url)
                token = await self.login()
                recent_login = True
                continue

            raise CloudControllerError(
                f"Unexpected response code from get is {response.status_code}, "
                f"message {response.reason_phrase}"
            )

    async def get_cc(self, path: str) -> List[Dict[str, Any]]:
        """
        Fetch every page of a Cloud Controller v2 collection.

        Follows ``next_url`` until it is empty.

        Args:
            path: Collection path relative to the Cloud Controller URI,
                e.g. ``v2/apps``

        Returns:
            All ``resources`` in page order
        """
        await self.info()

        url = f"{self.base_url}/{path}"
        resources: List[Dict[str, Any]] = []
        while True:
            body = await self.get(url)
            resources.extend(body.get("resources") or [])
            next_url = body.get("next_url")
            if not next_url:
                return resources
            if next_url.startswith(("http://", "https://")):
                url = next_url
            else:
                url = f"{self.base_url}/{next_url.lstrip('/')}"

    async def get_uaa(self, path: str) -> List[Dict[str, Any]]:
        """
        Fetch every page of a UAA SCIM collection.

        Requests ``startIndex`` (1-based) until ``totalResults`` items
        have been collected.

        Args:
            path: Collection path relative to the token endpoint, e.g. ``Users``

        Returns:
            All ``resources`` in page order
        """
        await self.info()

        base = f"{self.token_endpoint}/{path}"
        resources: List[Dict[str, Any]] = []
        while True:
            start_index = len(resources) + 1
            body = await self.get(base, params={"startIndex": start_index})
            page = body.get("resources") or []
            resources.extend(page)
            total_results = body.get("totalResults", 0)
            if not page or len(resources) >= total_results:
                return resources
