"""
Users Router - User Directory and Admin Role

Endpoints:
- POST /users - Register a user (idempotent by email)
- GET /users - List all users (admin)
- PATCH /users/admin/{user_id} - Promote a user to admin (admin)
- GET /users/admin/{email} - Admin status of the caller's own email
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pymongo.errors import DuplicateKeyError

from bistro.auth.dependencies import AdminOnly, Authenticated, IdentityClaim, is_admin
from bistro.database import (
    USERS_COLLECTION,
    find_all,
    get_collection,
    insert_result,
    parse_object_id,
    update_result,
)
from bistro.models.schemas import AdminStatus, InsertAck, MessageResponse, UpdateAck, UserCreate, UserRole
from bistro.settings import app_settings

logger = logging.getLogger(__name__)

router = APIRouter()

USER_EXISTS_MESSAGE = "user already exists"


# ============================================================================
# Admin Bootstrap
# ============================================================================


async def init_admin_users() -> None:
    """Grant the admin role to every email listed in settings.admin_emails."""
    users_col = get_collection(USERS_COLLECTION)

    for email in app_settings.admin_emails:
        await users_col.update_one(
            {"email": email},
            {"$set": {"role": UserRole.ADMIN.value}},
            upsert=True,
        )
        logger.info(f"Ensured admin role for '{email}'")


# ============================================================================
# User Endpoints
# ============================================================================


@router.post(
    "",
    response_model=InsertAck | MessageResponse,
    summary="Register user",
    description="Create the user record for `email` unless it already exists.",
)
async def register_user(user: UserCreate) -> dict[str, Any]:
    users_col = get_collection(USERS_COLLECTION)

    existing = await users_col.find_one({"email": user.email})
    if existing is not None:
        return {"message": USER_EXISTS_MESSAGE}

    try:
        result = await users_col.insert_one(user.model_dump(exclude={"role"}))
    except DuplicateKeyError:
        # Lost a registration race to a concurrent request for the same email
        logger.info(f"Concurrent registration for '{user.email}' already stored")
        return {"message": USER_EXISTS_MESSAGE}

    logger.info(f"Registered user '{user.email}'")
    return insert_result(result)


@router.get(
    "",
    summary="List users (Admin)",
    description="List the whole user directory. **Requires the admin role.**",
)
async def list_users(
    identity: Annotated[IdentityClaim, Depends(AdminOnly)],
) -> list[dict[str, Any]]:
    logger.info(f"Admin '{identity.email}' listing users")
    return await find_all(USERS_COLLECTION)


@router.patch(
    "/admin/{user_id}",
    response_model=UpdateAck,
    summary="Promote user to admin (Admin)",
    description="Set `role: admin` on the user record. **Requires the admin role.**",
)
async def promote_user(
    user_id: str,
    identity: Annotated[IdentityClaim, Depends(AdminOnly)],
) -> dict[str, Any]:
    object_id = parse_object_id(user_id)
    users_col = get_collection(USERS_COLLECTION)

    result = await users_col.update_one({"_id": object_id}, {"$set": {"role": UserRole.ADMIN.value}})
    logger.info(f"Admin '{identity.email}' promoted user {user_id} (matched={result.matched_count})")
    return update_result(result)


@router.get(
    "/admin/{email}",
    response_model=AdminStatus,
    summary="Check admin status",
    description="Whether `email` holds the admin role. Callers may only ask about their own email.",
)
async def get_admin_status(
    email: str,
    identity: Annotated[IdentityClaim, Depends(Authenticated)],
) -> AdminStatus:
    if not identity.owns(email):
        return AdminStatus(admin=False)

    return AdminStatus(admin=await is_admin(email))
