"""
Identity Provider implementations for django-storefront-tenancy.

The resolver only needs a yes/no answer plus an identity for protected
dashboard paths. Providers return a Principal or None; they raise
IdentityVerificationError only when the session backend itself fails.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from django.contrib.auth import get_user
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError
from django.http import HttpRequest
from django.utils.module_loading import import_string

from rest_framework import exceptions as drf_exceptions
from rest_framework.authentication import TokenAuthentication

from storefront_tenancy.conf import storefront_settings
from storefront_tenancy.exceptions import IdentityVerificationError


@dataclass(frozen=True)
class Principal:
    """An authenticated identity."""

    user_id: str
    username: str
    is_superuser: bool = False

    @classmethod
    def from_user(cls, user) -> "Principal":
        return cls(
            user_id=str(user.pk),
            username=user.get_username(),
            is_superuser=getattr(user, "is_superuser", False),
        )


class BaseIdentityProvider(ABC):
    """
    Abstract base class for identity providers.
    """

    @abstractmethod
    def verify(self, request: HttpRequest) -> Optional[Principal]:
        """
        Verify the request's session or credentials.

        Args:
            request: The incoming HTTP request

        Returns:
            The authenticated Principal, or None if there is no valid session

        Raises:
            IdentityVerificationError: On infrastructure failure
        """
        pass


class SessionIdentityProvider(BaseIdentityProvider):
    """
    Uses Django's session authentication.

    Reads request.user when AuthenticationMiddleware has run, and falls
    back to loading the user from the session otherwise.
    """

    def verify(self, request: HttpRequest) -> Optional[Principal]:
        try:
            user = getattr(request, "user", None)
            if user is None:
                if not hasattr(request, "session"):
                    return None
                user = get_user(request)
            if not user.is_authenticated:
                return None
            return Principal.from_user(user)
        except Exception as exc:
            # Session engines are not always database backed
            raise IdentityVerificationError(
                f"Session verification failed: {exc!r}"
            ) from exc


class TokenIdentityProvider(BaseIdentityProvider):
    """
    Uses DRF's token authentication (Authorization: Token <key>).

    An unknown or inactive token counts as "no session".
    """

    def __init__(self):
        self._authentication = TokenAuthentication()

    def verify(self, request: HttpRequest) -> Optional[Principal]:
        try:
            result = self._authentication.authenticate(request)
        except drf_exceptions.AuthenticationFailed:
            return None
        except DatabaseError as exc:
            raise IdentityVerificationError(
                f"Token verification failed: {exc}"
            ) from exc

        if result is None:
            return None

        user, _token = result
        return Principal.from_user(user)


def get_identity_provider(path: str = None) -> BaseIdentityProvider:
    """
    Instantiate the configured Identity Provider.

    Raises:
        ImproperlyConfigured: If the class cannot be imported
    """
    path = path or storefront_settings.IDENTITY_PROVIDER_CLASS
    try:
        provider_class = import_string(path)
    except ImportError as exc:
        raise ImproperlyConfigured(
            f"Cannot import identity provider '{path}': {exc}"
        ) from exc
    return provider_class()
