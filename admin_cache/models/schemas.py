"""Pydantic schemas for cached data sets and API responses."""
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel


class DataSetKey(str, Enum):
    """Cached data sets, one refresh loop and one cache slot each."""
    APPLICATIONS = "applications"
    ORGANIZATIONS = "organizations"
    SPACES = "spaces"
    USERS_CC_DEEP = "users_cc_deep"
    USERS_UAA = "users_uaa"


class DiscoveryResult(BaseModel):
    """
    Outcome of one discovery.

    ``connected`` is False when the discovery failed; ``items`` is then
    always empty, never a partial list.
    """
    connected: bool
    items: List[Dict[str, Any]] = []

    class Config:
        """Pydantic config."""
        frozen = True

    @classmethod
    def of(cls, items: Optional[List[Dict[str, Any]]] = None) -> "DiscoveryResult":
        """Build a connected result from items, or a disconnected one from None."""
        if items is None:
            return cls(connected=False, items=[])
        return cls(connected=True, items=items)


class CountResponse(BaseModel):
    """Number of items in a data set."""
    count: int


class InstancesResponse(BaseModel):
    """Application instance totals."""
    running: int
    total: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    data_sets: Dict[str, Optional[bool]]
    uptime_seconds: float
