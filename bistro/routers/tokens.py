"""
Token Router - Bearer Token Issuance

Endpoints:
- POST /jwt - Sign the posted identity claim into a one-hour token
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends

from bistro.auth.tokens import TokenService, get_token_service
from bistro.errors import InvalidClaimError
from bistro.models.schemas import TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=TokenResponse,
    summary="Issue a bearer token",
    description="Sign the supplied identity claim (expected to carry `email`). No registration is required.",
)
async def issue_token(
    claim: Annotated[dict[str, Any], Body()],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> TokenResponse:
    try:
        token = token_service.issue(claim)
    except ValueError:
        raise InvalidClaimError()

    logger.info(f"Issued token for '{claim.get('email')}'")
    return TokenResponse(token=token)
