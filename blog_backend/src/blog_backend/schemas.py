from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class LoginRequest(BaseModel):
    """
    Schema for the admin login request.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"password": "666"}})

    password: Optional[str] = Field(default=None, description="Shared admin password")


# PUBLIC_INTERFACE
class TokenOut(BaseModel):
    """Signed session token returned by a successful login."""

    token: str = Field(..., description="HS256 JWT to send as 'Authorization: Bearer <token>'")


# PUBLIC_INTERFACE
class PostCreate(BaseModel):
    """
    Schema for creating a new post.

    The title is declared optional so that a missing or empty title reaches the
    store, which rejects it with a 400 and a `{"msg": ...}` body.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Hello",
                "content": "# First post\n\nWritten in markdown.",
            }
        }
    )

    title: Optional[str] = Field(default=None, description="Post title (required, non-empty)")
    content: Optional[str] = Field(default=None, description="Optional post body")


# PUBLIC_INTERFACE
class PostUpdate(BaseModel):
    """
    Schema for replacing the editable fields of an existing post.
    Omitted fields are cleared, not kept.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Hello again",
                "content": "Edited body",
            }
        }
    )

    title: Optional[str] = Field(default=None, description="New title")
    content: Optional[str] = Field(default=None, description="New body")


# PUBLIC_INTERFACE
class PostOut(BaseModel):
    """
    Schema returned by the API for a post. Unset fields are omitted from responses.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1737800130123,
                "title": "Hello",
                "content": "Body",
                "createdAt": "2025-01-25T10:15:30.123Z",
                "updatedAt": "2025-01-26T09:00:00.000Z",
            }
        },
    )

    id: int = Field(..., description="Millisecond creation timestamp, unique per post")
    title: Optional[str] = Field(default=None, description="Post title")
    content: Optional[str] = Field(default=None, description="Post body")
    created_at: str = Field(..., alias="createdAt", description="ISO8601 creation timestamp")
    updated_at: Optional[str] = Field(
        default=None, alias="updatedAt", description="ISO8601 timestamp of the last update"
    )


# PUBLIC_INTERFACE
class DeleteResult(BaseModel):
    ok: bool = Field(True, description="Always true; deletes are idempotent")


# PUBLIC_INTERFACE
class UploadOut(BaseModel):
    """
    Schema returned after a file has been stored.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "url": "/uploads/1737800130123-9f86d081884c7d65.png",
                "filename": "screenshot.png",
                "originalFilename": "screenshot.png",
            }
        }
    )

    url: str = Field(..., description="Public path of the stored file")
    filename: str = Field(..., description="Client-supplied file name")
    originalFilename: str = Field(..., description="Client-supplied file name")


# PUBLIC_INTERFACE
class ErrorOut(BaseModel):
    msg: str = Field(..., description="Human readable error message")
