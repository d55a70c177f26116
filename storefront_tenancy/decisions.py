"""
Decision values produced by the tenant resolver.

The resolver never touches the transport. It returns one of these values
and the middleware applies it to the live request.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from storefront_tenancy.records import TenantRecord
from storefront_tenancy.routing import RouteKind


@dataclass(frozen=True)
class PassThrough:
    """Let the request continue unmodified."""

    reason: str = ""
    route: Optional[RouteKind] = None


@dataclass(frozen=True)
class Redirect:
    """Send the client elsewhere (browser URL changes)."""

    to: str
    status: int = 302


@dataclass(frozen=True)
class Rewrite:
    """
    Route the request internally to another path (browser URL unchanged).

    Attributes:
        path: The rewritten request path
        query_string: Query string for the rewritten URL, without '?'
        headers: Request metadata for downstream handlers
        tenant: The resolved tenant, or None for the not-found page
    """

    path: str
    query_string: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    tenant: Optional[TenantRecord] = None

    @property
    def url(self) -> str:
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path


Decision = Union[PassThrough, Redirect, Rewrite]
