"""Tests for the Access Gate, Role Authority and capability checkers.

The dependencies are called directly with hand-built credentials and a fake
user directory.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from bistro.auth.dependencies import (
    AccessChecker,
    IdentityClaim,
    ensure_owner,
    is_admin,
    verify_admin,
    verify_jwt,
)
from bistro.auth.tokens import TokenService
from bistro.errors import ForbiddenError, UnauthorizedError

pytestmark = pytest.mark.auth


def make_request() -> MagicMock:
    request = MagicMock()
    request.method = "GET"
    request.url.path = "/carts"
    request.state = SimpleNamespace()
    return request


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestAccessGate:
    """verify_jwt: Unauthenticated -> token present? -> token valid? -> Authenticated."""

    @pytest.mark.asyncio
    async def test_missing_credentials_rejected_before_verification(self) -> None:
        token_service = MagicMock(spec=TokenService)

        with pytest.raises(UnauthorizedError) as exc_info:
            await verify_jwt(make_request(), None, token_service)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "unauthorized access"
        token_service.verify.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_token_rejected(self, token_service: TokenService) -> None:
        forged = TokenService(secret="other").issue({"email": "a@x.com"})

        with pytest.raises(UnauthorizedError):
            await verify_jwt(make_request(), bearer(forged), token_service)

    @pytest.mark.asyncio
    async def test_malformed_token_rejected(self, token_service: TokenService) -> None:
        with pytest.raises(UnauthorizedError):
            await verify_jwt(make_request(), bearer("garbage"), token_service)

    @pytest.mark.asyncio
    async def test_valid_token_attaches_identity(self, token_service: TokenService) -> None:
        request = make_request()
        token = token_service.issue({"email": "a@x.com", "name": "Alice"})

        identity = await verify_jwt(request, bearer(token), token_service)

        assert identity.email == "a@x.com"
        assert identity.claims == {"email": "a@x.com", "name": "Alice"}
        assert request.state.identity is identity


class TestRoleAuthority:
    """verify_admin halts with 403 unless the directory says role == 'admin'."""

    @pytest.mark.asyncio
    async def test_admin_passes(self, add_user) -> None:
        add_user("boss@x.com", role="admin")
        identity = IdentityClaim(email="boss@x.com")

        assert await verify_admin(identity) is identity

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [None, "user", "Admin", "administrator"])
    async def test_non_admin_roles_forbidden(self, add_user, role) -> None:
        add_user("a@x.com", role=role)

        with pytest.raises(ForbiddenError) as exc_info:
            await verify_admin(IdentityClaim(email="a@x.com"))

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "forbidden access"

    @pytest.mark.asyncio
    async def test_unregistered_identity_forbidden(self, fake_db) -> None:
        with pytest.raises(ForbiddenError):
            await verify_admin(IdentityClaim(email="ghost@x.com"))

    @pytest.mark.asyncio
    async def test_identity_without_email_is_not_admin(self, add_user) -> None:
        add_user("boss@x.com", role="admin")
        assert await is_admin(None) is False

    @pytest.mark.asyncio
    async def test_access_checker_composes_admin(self, add_user) -> None:
        add_user("a@x.com")
        identity = IdentityClaim(email="a@x.com")

        assert await AccessChecker()(identity) is identity
        with pytest.raises(ForbiddenError):
            await AccessChecker(admin=True)(identity)


class TestOwnership:
    def test_owner_passes(self) -> None:
        ensure_owner(IdentityClaim(email="a@x.com"), "a@x.com")

    @pytest.mark.parametrize("owner", ["b@x.com", None, "A@X.COM"])
    def test_other_owner_forbidden(self, owner) -> None:
        with pytest.raises(ForbiddenError):
            ensure_owner(IdentityClaim(email="a@x.com"), owner)

    def test_identity_without_email_owns_nothing(self) -> None:
        identity = IdentityClaim.from_claims({"name": "anonymous"})
        assert identity.email is None
        assert identity.owns(None) is False

    def test_non_string_email_claim_ignored(self) -> None:
        assert IdentityClaim.from_claims({"email": ["a@x.com"]}).email is None
