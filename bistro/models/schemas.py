"""
Pydantic schemas for the Bistro Boss API.

Cart items and user profiles are stored verbatim, so their request models
allow extra fields and only pin down what the access-control checks read.
"""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    """Roles a directory record can hold."""

    ADMIN = "admin"


# ============================================================================
# Token Schemas
# ============================================================================


class TokenResponse(BaseModel):
    """Signed bearer token for the supplied identity claim."""

    token: str


# ============================================================================
# Cart Schemas
# ============================================================================


class CartItemCreate(BaseModel):
    """Cart line item as posted by the client; ``email`` names the owner."""

    model_config = ConfigDict(extra="allow")

    email: Annotated[str, Field(min_length=1, description="Owner email")]


# ============================================================================
# User Schemas
# ============================================================================


class UserCreate(BaseModel):
    """User registration payload; profile fields beyond ``email`` are kept as-is."""

    model_config = ConfigDict(extra="allow")

    email: Annotated[str, Field(min_length=1, description="Unique user email")]
    role: str | None = Field(default=None, description="Ignored; roles are only granted by promotion")


class AdminStatus(BaseModel):
    admin: bool


class MessageResponse(BaseModel):
    message: str


# ============================================================================
# Store Acknowledgements
# ============================================================================


class InsertAck(BaseModel):
    acknowledged: bool
    insertedId: str


class DeleteAck(BaseModel):
    acknowledged: bool
    deletedCount: int


class UpdateAck(BaseModel):
    acknowledged: bool
    matchedCount: int
    modifiedCount: int
    upsertedId: str | None = None
    upsertedCount: int = 0


class HealthResponse(BaseModel):
    status: str
    service: str
    database: str
