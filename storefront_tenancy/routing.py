"""
Request classification for the storefront tenant resolver.

classify_path() is total: every path maps to exactly one RouteKind,
checked in priority order (bypass, protected, exempt, candidate).
"""

import enum
import re
from typing import Iterable, Pattern, Union

from storefront_tenancy.conf import ResolverConfig


class RouteKind(enum.Enum):
    STATIC_ASSET = "static_asset"
    AUTH_ROUTE = "auth_route"
    PROTECTED_ADMIN_ROUTE = "protected_admin_route"
    EXEMPT_PATH = "exempt_path"
    PUBLIC_TENANT_CANDIDATE = "public_tenant_candidate"


def matches_prefix(path: str, prefixes: Iterable[str]) -> bool:
    return any(path.startswith(prefix) for prefix in prefixes)


def classify_path(path: str, config: ResolverConfig) -> RouteKind:
    """
    Classify a request path.

    Args:
        path: The request path (no query string)
        config: Resolver configuration

    Returns:
        The RouteKind for this path
    """
    if matches_prefix(path, config.asset_prefixes) or path.startswith(config.favicon_path):
        return RouteKind.STATIC_ASSET

    if path.startswith(config.auth_callback_prefix):
        return RouteKind.AUTH_ROUTE

    # Anything with an extension is a static file reference
    if "." in path:
        return RouteKind.STATIC_ASSET

    if matches_prefix(path, config.protected_paths):
        return RouteKind.PROTECTED_ADMIN_ROUTE

    if matches_prefix(path, config.exempt_paths):
        return RouteKind.EXEMPT_PATH

    return RouteKind.PUBLIC_TENANT_CANDIDATE


def compile_matcher(pattern: Union[str, Pattern, None]) -> Union[Pattern, None]:
    """Compile the excluded-path route matcher (None disables it)."""
    if not pattern:
        return None
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern
