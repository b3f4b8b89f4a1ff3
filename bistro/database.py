"""
Database configuration for MongoDB persistence.

Uses Motor (async MongoDB driver) for async operations. A single client is
opened by the application lifespan and shared by every request.
"""

import logging
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from fastapi.encoders import jsonable_encoder
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult
from pymongo.server_api import ServerApi

from bistro.errors import InvalidIdentifierError
from bistro.settings import app_settings

logger = logging.getLogger(__name__)

# MongoDB connection
_client: AsyncIOMotorClient | None = None
_db: AsyncIOMotorDatabase | None = None

# Collection names
MENU_COLLECTION = "menu"
REVIEWS_COLLECTION = "reviews"
CARTS_COLLECTION = "carts"
USERS_COLLECTION = "users"


async def connect_db() -> None:
    """Initialize MongoDB connection and verify it with a ping."""
    global _client, _db

    mongo_url = app_settings.mongodb_url
    db_name = app_settings.mongodb_database

    logger.info(f"Connecting to MongoDB: {mongo_url.split('@')[-1]} / {db_name}")

    server_api = None
    if app_settings.mongodb_server_api_version:
        server_api = ServerApi(app_settings.mongodb_server_api_version, strict=True, deprecation_errors=True)

    _client = AsyncIOMotorClient(mongo_url, server_api=server_api)
    _db = _client[db_name]

    try:
        await _client.admin.command("ping")
        logger.info("✅ MongoDB connection established")
    except Exception as e:
        logger.error(f"❌ Failed to connect to MongoDB: {e}")
        raise


async def close_db() -> None:
    """Close MongoDB connection."""
    global _client, _db

    if _client:
        _client.close()
        _client = None
        _db = None
        logger.info("MongoDB connection closed")


def get_database() -> AsyncIOMotorDatabase:
    """Get the database instance."""
    if _db is None:
        raise RuntimeError("Database not initialized. Call connect_db() first.")
    return _db


def get_collection(name: str) -> AsyncIOMotorCollection:
    """Get a collection by name."""
    return get_database()[name]


async def ping_db() -> bool:
    """Return True when the database answers a ping."""
    try:
        await get_database().command("ping")
        return True
    except Exception as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False


async def init_indexes() -> None:
    """Create the indexes the access-control invariants rely on."""
    db = get_database()

    # One directory record per email; registration races end in DuplicateKeyError
    await db[USERS_COLLECTION].create_index("email", unique=True)
    await db[CARTS_COLLECTION].create_index("email")

    logger.info("✅ Database indexes created")


def parse_object_id(value: str) -> ObjectId:
    """Convert a path identifier to an ObjectId, rejecting malformed values with a 400."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise InvalidIdentifierError()


def serialize_document(document: dict[str, Any]) -> dict[str, Any]:
    """Render a stored document as JSON-ready data; ObjectIds at any depth become hex strings."""
    return jsonable_encoder(document, custom_encoder={ObjectId: str})


async def find_all(collection_name: str, query: dict[str, Any] | None = None) -> list[dict[str, Any]]:
    """Return every document of a collection matching query."""
    cursor = get_collection(collection_name).find(query or {})
    return [serialize_document(doc) async for doc in cursor]


def insert_result(result: InsertOneResult) -> dict[str, Any]:
    return {"acknowledged": result.acknowledged, "insertedId": str(result.inserted_id)}


def delete_result(result: DeleteResult) -> dict[str, Any]:
    return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}


def update_result(result: UpdateResult) -> dict[str, Any]:
    upserted_id = result.upserted_id
    return {
        "acknowledged": result.acknowledged,
        "matchedCount": result.matched_count,
        "modifiedCount": result.modified_count,
        "upsertedId": str(upserted_id) if upserted_id is not None else None,
        "upsertedCount": 1 if upserted_id is not None else 0,
    }
