"""
Tests for Identity Provider implementations.
"""

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError
from django.test import RequestFactory
from django.utils.functional import SimpleLazyObject
from rest_framework.authtoken.models import Token

from storefront_tenancy.exceptions import IdentityVerificationError
from storefront_tenancy.identity import (
    Principal,
    SessionIdentityProvider,
    TokenIdentityProvider,
    get_identity_provider,
)


@pytest.fixture
def user(db):
    User = get_user_model()
    return User.objects.create_user(username="alice", password="testpass123")


@pytest.fixture
def rf():
    return RequestFactory()


class TestSessionIdentityProvider:

    def test_authenticated_user(self, rf, user):
        request = rf.get("/dashboard")
        request.user = user

        principal = SessionIdentityProvider().verify(request)

        assert principal == Principal(user_id=str(user.pk), username="alice")

    def test_anonymous_user(self, rf):
        request = rf.get("/dashboard")
        request.user = AnonymousUser()

        assert SessionIdentityProvider().verify(request) is None

    def test_no_session_and_no_user(self, rf):
        assert SessionIdentityProvider().verify(rf.get("/dashboard")) is None

    def test_falls_back_to_session(self, client, user):
        client.force_login(user)
        request = RequestFactory().get("/dashboard")
        request.session = client.session

        principal = SessionIdentityProvider().verify(request)

        assert principal.username == "alice"

    def test_database_error(self, rf, monkeypatch):
        def broken(request):
            raise DatabaseError("session table locked")

        monkeypatch.setattr("storefront_tenancy.identity.get_user", broken)
        request = rf.get("/dashboard")
        request.session = {}

        with pytest.raises(IdentityVerificationError):
            SessionIdentityProvider().verify(request)

    def test_session_backend_outage(self, rf):
        def unavailable():
            raise ConnectionError("session cache backend down")

        request = rf.get("/dashboard")
        request.user = SimpleLazyObject(unavailable)

        with pytest.raises(IdentityVerificationError) as excinfo:
            SessionIdentityProvider().verify(request)

        assert isinstance(excinfo.value.__cause__, ConnectionError)


class TestTokenIdentityProvider:

    def test_valid_token(self, rf, user):
        token = Token.objects.create(user=user)
        request = rf.get("/dashboard", HTTP_AUTHORIZATION=f"Token {token.key}")

        principal = TokenIdentityProvider().verify(request)

        assert principal.user_id == str(user.pk)

    def test_unknown_token(self, rf, db):
        request = rf.get("/dashboard", HTTP_AUTHORIZATION="Token not-a-real-key")

        assert TokenIdentityProvider().verify(request) is None

    def test_no_header(self, rf, db):
        assert TokenIdentityProvider().verify(rf.get("/dashboard")) is None

    def test_inactive_user(self, rf, user):
        token = Token.objects.create(user=user)
        user.is_active = False
        user.save()
        request = rf.get("/dashboard", HTTP_AUTHORIZATION=f"Token {token.key}")

        assert TokenIdentityProvider().verify(request) is None


class TestGetIdentityProvider:

    def test_default_is_session(self):
        assert isinstance(get_identity_provider(), SessionIdentityProvider)

    def test_explicit_path(self):
        provider = get_identity_provider("storefront_tenancy.identity.TokenIdentityProvider")
        assert isinstance(provider, TokenIdentityProvider)

    def test_bad_path(self):
        with pytest.raises(ImproperlyConfigured):
            get_identity_provider("storefront_tenancy.identity.Missing")
