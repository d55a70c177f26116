"""
Tenant Directory implementations for django-storefront-tenancy.

A directory answers one question: which active store, if any, is
addressed by this subdomain label or this custom hostname? It returns
a TenantRecord, None for "not found", or raises DirectoryLookupError
when it cannot answer.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import httpx
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError
from django.utils.module_loading import import_string

from storefront_tenancy.conf import storefront_settings
from storefront_tenancy.exceptions import DirectoryLookupError
from storefront_tenancy.records import TenantRecord


logger = logging.getLogger(__name__)


class BaseTenantDirectory(ABC):
    """
    Abstract base class for tenant directories.

    Implementations must match on subdomain equality OR exact custom
    domain equality, must skip soft-deleted stores and return at most
    one record.
    """

    @abstractmethod
    def lookup(self, subdomain: Optional[str], hostname: str) -> Optional[TenantRecord]:
        """
        Find the store addressed by a host.

        Args:
            subdomain: Subdomain candidate, if the host has one
            hostname: Bare hostname, matched against custom domains

        Returns:
            The matching TenantRecord, or None if no store matches

        Raises:
            DirectoryLookupError: If the backend cannot be queried
        """
        pass


class ModelTenantDirectory(BaseTenantDirectory):
    """
    Looks stores up directly through the Django ORM.
    """

    def lookup(self, subdomain: Optional[str], hostname: str) -> Optional[TenantRecord]:
        from storefront_tenancy.models import Store

        try:
            store = Store.objects.matching_host(subdomain, hostname).first()
        except DatabaseError as exc:
            raise DirectoryLookupError(
                f"Store lookup failed: {exc}",
                hostname=hostname,
            ) from exc

        if store is None:
            return None
        return TenantRecord.from_store(store)


class HttpTenantDirectory(BaseTenantDirectory):
    """
    Looks stores up through the internal store lookup endpoint.

    Useful when the process running the middleware has no database
    access of its own. Every call is bounded by LOOKUP_TIMEOUT.

    Args:
        lookup_url: URL of the lookup endpoint (defaults to LOOKUP_URL)
        timeout: Request timeout in seconds (defaults to LOOKUP_TIMEOUT)
        client: Preconfigured httpx.Client (mainly for tests)
    """

    def __init__(
        self,
        lookup_url: str = None,
        timeout: float = None,
        client: httpx.Client = None,
    ):
        self.lookup_url = lookup_url or storefront_settings.LOOKUP_URL
        if not self.lookup_url:
            raise ImproperlyConfigured(
                "STOREFRONT_TENANCY_LOOKUP_URL must be set to use HttpTenantDirectory"
            )
        if timeout is None:
            timeout = storefront_settings.LOOKUP_TIMEOUT
        self._client = client or httpx.Client(timeout=timeout)

    @property
    def _request_headers(self) -> Dict[str, str]:
        token = storefront_settings.INTERNAL_REQUEST_TOKEN
        return {storefront_settings.INTERNAL_REQUEST_HEADER: token or "true"}

    def lookup(self, subdomain: Optional[str], hostname: str) -> Optional[TenantRecord]:
        params = {"subdomain": subdomain or "", "host": hostname}
        logger.debug("Store lookup via %s for %s", self.lookup_url, hostname)

        try:
            response = self._client.get(
                self.lookup_url,
                params=params,
                headers=self._request_headers,
            )
        except httpx.HTTPError as exc:
            raise DirectoryLookupError(
                f"Store lookup request failed: {exc!r}",
                hostname=hostname,
            ) from exc

        if response.status_code == 404:
            return None

        if response.status_code != 200:
            raise DirectoryLookupError(
                f"Store lookup returned HTTP {response.status_code}",
                status_code=response.status_code,
                hostname=hostname,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise DirectoryLookupError(
                "Store lookup returned a non-JSON body",
                status_code=response.status_code,
                hostname=hostname,
            ) from exc

        if not isinstance(data, dict) or not data.get("id"):
            return None

        try:
            return TenantRecord.from_payload(data)
        except KeyError as exc:
            raise DirectoryLookupError(
                f"Store lookup response is missing field {exc}",
                hostname=hostname,
            ) from exc

    def close(self) -> None:
        self._client.close()


def get_directory(path: str = None) -> BaseTenantDirectory:
    """
    Instantiate the configured Tenant Directory.

    Args:
        path: Dotted path overriding DIRECTORY_CLASS (optional)

    Raises:
        ImproperlyConfigured: If the class cannot be imported
    """
    path = path or storefront_settings.DIRECTORY_CLASS
    try:
        directory_class = import_string(path)
    except ImportError as exc:
        raise ImproperlyConfigured(
            f"Cannot import tenant directory '{path}': {exc}"
        ) from exc
    return directory_class()
