"""
Host classification for storefront routing.

Splits an inbound Host header into a bare hostname and decides whether
it names a subdomain tenant, a custom-domain tenant, or neither.

Examples (root domains: platform.test, localhost):
    vendor1.platform.test  -> subdomain "vendor1"
    vendor1.localhost:3000 -> subdomain "vendor1"
    vendor.com             -> custom domain "vendor.com"
    platform.test          -> neither (reserved root domain)
    www.platform.test      -> subdomain "www" (filtered by the resolver)
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from django.http.request import split_domain_port


@dataclass(frozen=True)
class HostInfo:
    """
    Classification of a single Host header.

    At most one of subdomain and custom_domain is set.
    """

    hostname: str
    subdomain: Optional[str] = None
    custom_domain: Optional[str] = None

    @property
    def is_candidate(self) -> bool:
        return bool(self.subdomain or self.custom_domain)


def strip_port(host: str) -> str:
    """
    Return the bare, lowercased hostname of a Host header.

    Handles bracketed IPv6 literals. Malformed hosts yield an empty string.
    """
    if not host:
        return ""
    domain, _port = split_domain_port(host.strip())
    return domain


def extract_subdomain(hostname: str, dev_host_suffix: Optional[str] = ".localhost") -> Optional[str]:
    """
    Extract the subdomain candidate from a bare hostname.

    Args:
        hostname: Hostname without port
        dev_host_suffix: Local-development suffix, e.g. '.localhost'

    Returns:
        The candidate label, or None if the host has no subdomain
    """
    if dev_host_suffix and hostname.endswith(dev_host_suffix):
        return hostname[: -len(dev_host_suffix)] or None

    parts = hostname.split(".")
    if len(parts) >= 3:
        return parts[0] or None
    return None


def is_custom_domain_candidate(
    hostname: str,
    root_domains: Iterable[str],
    dev_host_suffix: Optional[str] = ".localhost",
) -> bool:
    """
    Check whether a bare hostname could be a tenant's custom domain.

    A custom domain is exactly two labels (vendor.com) and is not one of
    the platform's reserved root domains.
    """
    if dev_host_suffix and hostname.endswith(dev_host_suffix):
        return False

    parts = hostname.split(".")
    if len(parts) != 2 or not all(parts):
        return False
    return hostname not in set(root_domains)


def classify_host(
    host: str,
    root_domains: Iterable[str],
    dev_host_suffix: Optional[str] = ".localhost",
) -> HostInfo:
    """
    Classify a raw Host header value.

    Args:
        host: Host header, possibly with a ':port' suffix
        root_domains: Reserved platform root domains
        dev_host_suffix: Local-development suffix

    Returns:
        HostInfo for the bare hostname
    """
    hostname = strip_port(host)
    subdomain = extract_subdomain(hostname, dev_host_suffix)
    if subdomain is not None:
        return HostInfo(hostname=hostname, subdomain=subdomain)

    if is_custom_domain_candidate(hostname, root_domains, dev_host_suffix):
        return HostInfo(hostname=hostname, custom_domain=hostname)

    return HostInfo(hostname=hostname)
