"""
Public-safe tenant projection shared by the directory, cache and resolver.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class TenantRecord:
    """
    The fields of a store that are safe to cache and expose downstream.

    Attributes:
        id: Opaque unique identifier of the store
        slug: URL-safe identifier used in the canonical store path
        name: Display name
        subdomain: Subdomain label, if configured
        custom_domain: Fully-qualified custom hostname, if configured
        organization_id: Owning organization, used for authorization scoping
    """

    id: str
    slug: str
    name: str
    organization_id: str
    subdomain: Optional[str] = None
    custom_domain: Optional[str] = None

    @classmethod
    def from_store(cls, store) -> "TenantRecord":
        """Build a record from a Store model instance."""
        return cls(
            id=str(store.pk),
            slug=store.slug,
            name=store.name,
            organization_id=str(store.organization_id),
            subdomain=store.subdomain or None,
            custom_domain=store.custom_domain or None,
        )

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "TenantRecord":
        """Build a record from the lookup endpoint's JSON body."""
        return cls(
            id=str(data["id"]),
            slug=data["slug"],
            name=data["name"],
            organization_id=str(data["organizationId"]),
            subdomain=data.get("subdomain") or None,
            custom_domain=data.get("customDomain") or None,
        )

    def to_payload(self) -> Dict[str, Any]:
        """Serialize using the lookup endpoint's field names."""
        data = asdict(self)
        return {
            "id": data["id"],
            "slug": data["slug"],
            "name": data["name"],
            "subdomain": data["subdomain"],
            "customDomain": data["custom_domain"],
            "organizationId": data["organization_id"],
        }
