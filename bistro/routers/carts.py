"""
Carts Router - Per-user Cart Staging

Endpoints:
- POST /carts - Add an item to a cart (no auth; the item names its owner)
- GET /carts?email= - List the caller's cart items (owner only)
- DELETE /carts/{item_id} - Remove a cart item (owner only)
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from bistro.auth.dependencies import Authenticated, IdentityClaim, ensure_owner
from bistro.database import (
    CARTS_COLLECTION,
    delete_result,
    find_all,
    get_collection,
    insert_result,
    parse_object_id,
)
from bistro.models.schemas import CartItemCreate, DeleteAck, InsertAck

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=InsertAck,
    summary="Add cart item",
    description="Store the posted item verbatim. `email` identifies the owner for later reads.",
)
async def add_cart_item(item: CartItemCreate) -> dict[str, Any]:
    carts_col = get_collection(CARTS_COLLECTION)
    result = await carts_col.insert_one(item.model_dump())
    logger.info(f"Added cart item {result.inserted_id} for '{item.email}'")
    return insert_result(result)


@router.get(
    "",
    summary="List cart items",
    description="List the cart of `email`. **Requires a bearer token whose email matches.**",
)
async def list_cart_items(
    identity: Annotated[IdentityClaim, Depends(Authenticated)],
    email: str | None = None,
) -> list[dict[str, Any]]:
    if not email:
        return []

    ensure_owner(identity, email)
    return await find_all(CARTS_COLLECTION, {"email": email})


@router.delete(
    "/{item_id}",
    response_model=DeleteAck,
    summary="Delete cart item",
    description="Remove a cart item. **Only the item owner may delete it.**",
)
async def delete_cart_item(
    item_id: str,
    identity: Annotated[IdentityClaim, Depends(Authenticated)],
) -> dict[str, Any]:
    object_id = parse_object_id(item_id)
    carts_col = get_collection(CARTS_COLLECTION)

    doc = await carts_col.find_one({"_id": object_id})
    if doc is not None:
        ensure_owner(identity, doc.get("email"))

    result = await carts_col.delete_one({"_id": object_id})
    logger.info(f"'{identity.email}' deleted cart item {item_id} (deleted={result.deleted_count})")
    return delete_result(result)
