"""
Custom exception classes for django-storefront-tenancy.

These exceptions describe the failures the tenant resolution layer
can observe. None of them escape the middleware: the resolver turns
each into a visible page (tenant-not-found or a sign-in redirect).
"""


class StorefrontTenancyError(Exception):
    """
    Base exception for all storefront tenancy errors.

    All custom exceptions in this library inherit from this class,
    allowing catch-all handling when needed.
    """

    def __init__(self, message: str = None, hostname: str = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            hostname: The bare hostname being resolved (if available)
        """
        self.message = message or self.__class__.__doc__.strip().splitlines()[0]
        self.hostname = hostname
        super().__init__(self.message)


class DirectoryLookupError(StorefrontTenancyError):
    """
    Raised when the Tenant Directory cannot answer a lookup.

    This covers transport failures (timeouts, refused connections),
    unexpected responses from the lookup endpoint and database errors.
    It is distinct from "not found", which is signalled by returning None.
    """

    def __init__(self, message: str = None, status_code: int = None, **kwargs):
        self.status_code = status_code
        super().__init__(message, **kwargs)


class IdentityVerificationError(StorefrontTenancyError):
    """
    Raised by an Identity Provider on infrastructure failure.

    Providers must not raise for "no session"; they return None instead.
    """
