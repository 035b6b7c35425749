"""Shared fixtures: a fake Cloud Controller/UAA behind httpx.MockTransport."""
from typing import Any, Callable, Dict, List, Optional
import httpx
import pytest
from admin_cache.config import Settings
from admin_cache.services.cloud_controller import CloudControllerClient

CC_URI = "http://cc.test"
UAA_URI = "http://uaa.test"


def resource(guid: str, **entity: Any) -> Dict[str, Any]:
    """A Cloud Controller v2 resource record."""
    return {"metadata": {"guid": guid, "url": f"/v2/things/{guid}"}, "entity": entity}


def cc_page(resources: List[Dict[str, Any]], next_url: Optional[str] = None) -> Dict[str, Any]:
    return {"total_results": len(resources), "next_url": next_url, "resources": resources}


def uaa_page(resources: List[Dict[str, Any]], total: int) -> Dict[str, Any]:
    return {"resources": resources, "totalResults": total, "itemsPerPage": len(resources)}


class FakeUpstream:
    """
    Minimal Cloud Controller + UAA.

    ``routes`` maps a URL path to a handler returning an httpx.Response.
    Tokens issued by the fake login are accepted unless ``reject_all``
    is set.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.info_body: Dict[str, Any] = {
            "authorization_endpoint": "http://login.test",
            "token_endpoint": UAA_URI,
        }
        self.info_status = 200
        self.login_status = 200
        self.logins = 0
        self.reject_all = False
        self.routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def json_route(self, path: str, body: Any, status: int = 200):
        self.routes[path] = lambda request: httpx.Response(status, json=body)

    def paths(self, host: Optional[str] = None) -> List[str]:
        """Paths of data requests (not info or login) in order."""
        return [
            r.url.path
            for r in self.requests
            if r.url.path not in ("/info", "/oauth/token") and (host is None or r.url.host == host)
        ]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/info":
            return httpx.Response(self.info_status, json=self.info_body)

        if path == "/oauth/token":
            self.logins += 1
            if self.login_status != 200:
                return httpx.Response(self.login_status, json={"error": "unauthorized"})
            return httpx.Response(
                200, json={"token_type": "bearer", "access_token": f"token-{self.logins}"}
            )

        authorization = request.headers.get("Authorization", "")
        if self.reject_all or not authorization.startswith("bearer token-"):
            return httpx.Response(401, json={"error": "invalid_token"})

        handler = self.routes.get(path)
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)


@pytest.fixture
def cc_settings() -> Settings:
    return Settings(
        _env_file=None,
        cloud_controller_uri=CC_URI,
        cloud_controller_discovery_interval=1,
        uaa_admin_credentials_username="admin",
        uaa_admin_credentials_password="secret",
        http_timeout=5,
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def cc_client(cc_settings, upstream) -> CloudControllerClient:
    return CloudControllerClient(config=cc_settings, transport=httpx.MockTransport(upstream))
