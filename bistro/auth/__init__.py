"""Authentication and authorization module.

Provides:
- Token Service: signed bearer tokens with a one-hour expiry
- Access Gate: bearer token validation dependency
- Role Authority: admin role dependency backed by the user directory
"""

from bistro.auth.dependencies import (
    AccessChecker,
    AdminOnly,
    Authenticated,
    IdentityClaim,
    ensure_owner,
    is_admin,
    verify_admin,
    verify_jwt,
)
from bistro.auth.tokens import (
    ExpiredTokenError,
    InvalidClaimsTokenError,
    InvalidTokenError,
    MissingTokenError,
    TokenError,
    TokenService,
    get_token_service,
)

__all__ = [
    # Token Service
    "TokenService",
    "TokenError",
    "MissingTokenError",
    "InvalidTokenError",
    "InvalidClaimsTokenError",
    "ExpiredTokenError",
    "get_token_service",
    # Access Gate / Role Authority
    "IdentityClaim",
    "verify_jwt",
    "verify_admin",
    "is_admin",
    "ensure_owner",
    # Capability checkers
    "AccessChecker",
    "Authenticated",
    "AdminOnly",
]
