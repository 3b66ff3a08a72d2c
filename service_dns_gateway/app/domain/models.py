"""
Request, route and result models for the DNS gateway.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


class Operation(str, Enum):
    """Operations the gateway can dispatch."""
    INSTALL = "install"
    UNINSTALL = "uninstall"
    CREATE_DOMAIN = "create_domain"
    DELETE_DOMAIN = "delete_domain"
    ADD_RECORD = "add_record"
    UPDATE_RECORD = "update_record"
    DELETE_RECORD = "delete_record"


@dataclass(frozen=True)
class Route:
    """A (method, exact path) pair."""
    method: str
    path: str


ROUTES: Mapping[Route, Operation] = MappingProxyType({
    Route("POST", "/install"): Operation.INSTALL,
    Route("POST", "/uninstall"): Operation.UNINSTALL,
    Route("POST", "/domain"): Operation.CREATE_DOMAIN,
    Route("DELETE", "/domain"): Operation.DELETE_DOMAIN,
    Route("POST", "/record"): Operation.ADD_RECORD,
    Route("PUT", "/record"): Operation.UPDATE_RECORD,
    Route("DELETE", "/record"): Operation.DELETE_RECORD,
})


def resolve_route(method: str, path: str) -> Optional[Operation]:
    """Look up the operation bound to an exact (method, path) pair."""
    return ROUTES.get(Route(method.upper(), path))


class HeaderMap:
    """Read-only, case-insensitive header mapping."""

    def __init__(self, headers: Optional[Mapping[str, str]] = None):
        self._headers = {name.lower(): value for name, value in (headers or {}).items()}

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._headers.get(name.lower(), default)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._headers


@dataclass
class IncomingRequest:
    """Transport-neutral view of one HTTP request."""
    method: str
    path: str
    headers: HeaderMap = field(default_factory=HeaderMap)
    body: bytes = b""


@dataclass
class ProviderIdentity:
    """Provider name and key injected by the gateway, never by the caller."""
    provider: str
    apikey: str


@dataclass
class OperationRequest:
    """A routed operation with its normalized payload."""
    operation: Operation
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass
class GatewayResponse:
    """Status code plus the single JSON object written back."""
    status_code: int
    body: Dict[str, Any]

    @classmethod
    def success(cls, **fields: Any) -> "GatewayResponse":
        return cls(200, {"status": "success", **fields})
