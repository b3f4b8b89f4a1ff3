"""
Authentication Dependencies - Bearer Token Validation & RBAC

Provides FastAPI dependencies for:
- Access Gate: bearer token validation against the Token Service
- Role Authority: admin check against the user directory
- Capability composition: routes declare {authenticated, admin}; ownership is
  checked with ``ensure_owner`` once the resource owner is known
"""

import logging
from dataclasses import dataclass, field
from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from bistro.auth.tokens import TokenError, TokenService, get_token_service
from bistro.database import USERS_COLLECTION, get_collection
from bistro.errors import ForbiddenError, UnauthorizedError
from bistro.models.schemas import UserRole

logger = logging.getLogger(__name__)

# auto_error=False: a missing or non-bearer header is answered with our own 401 body
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class IdentityClaim:
    """Identity extracted from a verified bearer token."""

    email: str | None
    claims: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "IdentityClaim":
        email = claims.get("email")
        return cls(email=email if isinstance(email, str) else None, claims=claims)

    def owns(self, owner_email: str | None) -> bool:
        """Check if the identity is the owner of a resource."""
        return self.email is not None and self.email == owner_email


async def verify_jwt(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> IdentityClaim:
    """
    Access Gate: require a valid bearer token.

    The decoded claim is attached to ``request.state.identity`` and returned.
    Never touches the store.
    """
    if credentials is None or not credentials.credentials:
        logger.warning(f"Rejected {request.method} {request.url.path}: no bearer token")
        raise UnauthorizedError()

    try:
        claims = token_service.verify(credentials.credentials)
    except TokenError as e:
        logger.warning(f"Rejected {request.method} {request.url.path}: token {e.kind}")
        raise UnauthorizedError()

    identity = IdentityClaim.from_claims(claims)
    request.state.identity = identity
    return identity


async def is_admin(email: str | None) -> bool:
    """Check if the directory record for email currently holds the admin role."""
    if not email:
        return False
    user = await get_collection(USERS_COLLECTION).find_one({"email": email})
    return user is not None and user.get("role") == UserRole.ADMIN.value


async def verify_admin(
    identity: Annotated[IdentityClaim, Depends(verify_jwt)],
) -> IdentityClaim:
    """Role Authority: require the verified caller to be an admin."""
    if not await is_admin(identity.email):
        logger.warning(f"Access denied for '{identity.email}': admin role required")
        raise ForbiddenError()
    return identity


def ensure_owner(identity: IdentityClaim, owner_email: str | None) -> None:
    """Raise ForbiddenError unless identity owns the resource."""
    if not identity.owns(owner_email):
        logger.warning(f"Access denied for '{identity.email}': resource owned by '{owner_email}'")
        raise ForbiddenError()


class AccessChecker:
    """
    Dependency class declaring the capabilities a route requires.

    Usage:
        @router.get("/users")
        async def list_users(identity: IdentityClaim = Depends(AccessChecker(admin=True))):
            ...
    """

    def __init__(self, admin: bool = False):
        """
        Initialize access checker.

        Args:
            admin: If True, the caller must hold the admin role in the user directory.
        """
        self.admin = admin

    async def __call__(
        self,
        identity: Annotated[IdentityClaim, Depends(verify_jwt)],
    ) -> IdentityClaim:
        if self.admin:
            return await verify_admin(identity)
        return identity


# Pre-configured checkers
Authenticated = AccessChecker()
AdminOnly = AccessChecker(admin=True)
