"""
Cache invalidation for storefront tenancy.

Any change to a store (rename, new domain, soft delete) evicts every
hostname cached for it, so the next request goes back to the directory.
"""

import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from storefront_tenancy.cache import get_default_cache
from storefront_tenancy.conf import storefront_settings
from storefront_tenancy.hosts import extract_subdomain
from storefront_tenancy.models import Store


logger = logging.getLogger(__name__)


def names_store(hostname: str, store: Store) -> bool:
    """Whether a bare hostname addresses the given store."""
    if store.custom_domain and hostname == store.custom_domain:
        return True
    if not store.subdomain:
        return False
    return extract_subdomain(hostname, storefront_settings.DEV_HOST_SUFFIX) == store.subdomain


@receiver(post_save, sender=Store, dispatch_uid="storefront_tenancy_store_saved")
@receiver(post_delete, sender=Store, dispatch_uid="storefront_tenancy_store_deleted")
def evict_store_from_cache(sender, instance, **kwargs):
    cache = get_default_cache()
    evicted = cache.evict_tenant(instance.pk)
    # Cached misses for the store's hosts are stale once it exists
    evicted += cache.evict_where(
        lambda hostname, entry: entry.record is None and names_store(hostname, instance)
    )
    if evicted:
        logger.debug("Evicted %d cached hostname(s) for store %s", evicted, instance.pk)
