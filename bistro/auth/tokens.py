"""
Token Service - HS256 bearer tokens carrying an identity claim.

Tokens are signed with the server-held secret and expire after a fixed window
(one hour by default). Issuance is decoupled from registration: any non-empty
JSON object is accepted as a claim.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

from bistro.settings import app_settings

logger = logging.getLogger(__name__)

# Added at issuance and removed again on verification
REGISTERED_TIME_CLAIMS = ("exp", "iat")

# Validated by the decoder, so a caller may not supply them
RESERVED_CLAIMS = ("exp", "iat", "nbf", "jti")


class TokenError(Exception):
    """Base class for token verification failures."""

    kind = "invalid"


class MissingTokenError(TokenError):
    """No token was presented, or the value is not a decodable JWT."""

    kind = "missing_or_malformed"


class InvalidTokenError(TokenError):
    """The token signature does not verify."""

    kind = "invalid_signature"


class InvalidClaimsTokenError(InvalidTokenError):
    """The signature verified but a registered claim did not."""

    kind = "invalid_claims"


class ExpiredTokenError(InvalidTokenError):
    """The token verified but its expiration time has passed."""

    kind = "expired"


class TokenService:
    """Issues and verifies signed identity tokens.

    Any non-empty claim is accepted except one carrying the reserved names in
    RESERVED_CLAIMS, so verify(issue(claim)) == claim for every issued token.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] | None = None,
    ):
        if not secret:
            raise ValueError("A signing secret is required")
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in
        self._clock = clock or (lambda: datetime.now(UTC))

    def issue(self, claim: Mapping[str, Any]) -> str:
        """Sign claim into a token valid for ``expires_in``."""
        if not isinstance(claim, Mapping) or not claim:
            raise ValueError("Identity claim must be a non-empty object")
        reserved = sorted(key for key in RESERVED_CLAIMS if key in claim)
        if reserved:
            raise ValueError(f"Identity claim may not set reserved claims: {reserved}")

        now = self._clock()
        payload = dict(claim)
        payload["iat"] = now
        payload["exp"] = now + self.expires_in
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str | None) -> dict[str, Any]:
        """Return the identity claim carried by token.

        Raises:
            MissingTokenError: token is absent or not a JWT at all
            ExpiredTokenError: token expired
            InvalidClaimsTokenError: a registered claim failed validation
            InvalidTokenError: signature validation failed
        """
        if not token or not token.strip():
            raise MissingTokenError("No bearer token presented")

        try:
            jwt.get_unverified_header(token)
        except JWTError as e:
            raise MissingTokenError(f"Malformed token: {e}") from e

        try:
            # Claims are caller-supplied; only signature and time claims are enforced
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_aud": False, "verify_sub": False},
            )
        except ExpiredSignatureError as e:
            raise ExpiredTokenError("Token expired") from e
        except JWTClaimsError as e:
            raise InvalidClaimsTokenError(f"Token claims rejected: {e}") from e
        except JWTError as e:
            raise InvalidTokenError(f"Token verification failed: {e}") from e

        return {key: value for key, value in payload.items() if key not in REGISTERED_TIME_CLAIMS}


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide TokenService built from application settings."""
    if app_settings.uses_default_secret:
        logger.warning("ACCESS_TOKEN_SECRET is not set; tokens are signed with the development placeholder")
    return TokenService(
        secret=app_settings.access_token_secret,
        algorithm=app_settings.jwt_algorithm,
        expires_in=timedelta(minutes=app_settings.access_token_expire_minutes),
    )
