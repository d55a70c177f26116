"""
Utility functions for django-storefront-tenancy.

Provides helper functions for audit logging, client IP extraction
and header-safe encoding of tenant metadata.
"""

import logging
from urllib.parse import quote

from django.utils import timezone

from storefront_tenancy.conf import storefront_settings


# Unreserved characters plus the sub-delims left unescaped in header values
HEADER_SAFE_CHARS = "-_.!~*'()"


def encode_header_value(value: str) -> str:
    """
    Percent-encode a value so it can travel in an HTTP header.

    Store names may contain non-ASCII characters or line breaks, neither
    of which is allowed in header values. Decode with urllib.parse.unquote.
    """
    return quote(value, safe=HEADER_SAFE_CHARS)


def get_audit_logger() -> logging.Logger:
    """
    Get the audit logger instance.

    Returns:
        Logger instance for audit events
    """
    return logging.getLogger(storefront_settings.AUDIT_LOGGER)


def audit_log(
    event: str,
    tenant=None,
    hostname: str = None,
    success: bool = True,
    request=None,
    extra: dict = None,
    exc_info: bool = False,
):
    """
    Log an audit event for tenant resolution activities.

    Args:
        event: Event type (e.g., 'tenant_resolved', 'login_required')
        tenant: The resolved TenantRecord (if any)
        hostname: The bare hostname being resolved (if any)
        success: Whether the operation succeeded
        request: The HTTP request (for IP/user agent extraction)
        extra: Additional context data
        exc_info: Attach the active exception's traceback
    """
    if not storefront_settings.AUDIT_ENABLED:
        return

    logger = get_audit_logger()

    log_data = {
        "event": event,
        "timestamp": timezone.now().isoformat(),
        "success": success,
    }

    if hostname:
        log_data["hostname"] = hostname

    if tenant:
        log_data["tenant_id"] = str(getattr(tenant, "id", None))
        log_data["tenant_slug"] = getattr(tenant, "slug", str(tenant))

    if request is not None:
        log_data["ip_address"] = get_client_ip(request)
        log_data["user_agent"] = request.META.get("HTTP_USER_AGENT", "")[:200]
        log_data["path"] = request.path
        log_data["method"] = request.method

    if extra:
        log_data.update(extra)

    if success:
        logger.info(f"Audit: {event}", extra={"audit_data": log_data})
    else:
        logger.warning(
            f"Audit: {event} FAILED",
            extra={"audit_data": log_data},
            exc_info=exc_info,
        )


def get_client_ip(request) -> str:
    """
    Extract client IP address from request.

    Handles proxied requests via X-Forwarded-For header.
    """
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        # Take the first IP in the chain (client IP)
        return x_forwarded_for.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "")
