"""Record shapes for the persisted collections and the collection registry.

Records are stored as plain JSON objects with camelCase keys (the format the
storefront front end consumes). These models describe and build them; the
registry tells the record store which file backs each collection and whether
the collection may start out missing.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field

MessageStatus = Literal["pending", "accepted", "rejected"]
MESSAGE_STATUSES = ("pending", "accepted", "rejected")


class CourseRecord(BaseModel):
    """Catalog course. Extra descriptive fields (image, level...) are kept."""

    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    title: str
    category: str
    instructor: str
    price: Optional[Union[int, float]] = None
    rating: Optional[Union[int, float]] = None
    badge: Optional[str] = None
    createdAt: Optional[str] = None


class UserRecord(BaseModel):
    id: Optional[int] = None
    name: str
    email: str
    password: str = Field(..., description="Salted password hash")
    isAdmin: bool = False
    profileImage: Optional[str] = None
    createdAt: str
    passwordUpdatedAt: Optional[str] = None


class EnrollmentRecord(BaseModel):
    id: Optional[int] = None
    userId: int
    courseId: int
    progress: Union[int, float] = Field(0, ge=0, le=100)
    completed: bool = False
    enrolledAt: str
    lastUpdated: Optional[str] = None


class MessageRecord(BaseModel):
    """Instructor application submitted through the storefront."""

    id: Optional[int] = None
    type: str = "instructor_request"
    name: str
    email: str
    phone: Optional[str] = None
    expertise: Optional[str] = None
    experience: Optional[str] = None
    message: Optional[str] = None
    createdAt: str
    status: MessageStatus = "pending"


class BlogRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    title: str


class SessionRecord(BaseModel):
    """Server-side login session; only the token digest is stored."""

    id: Optional[int] = None
    tokenHash: str
    userId: int
    createdAt: str
    expiresAt: str


@dataclass(frozen=True)
class CollectionSpec:
    name: str
    model: Type[BaseModel]
    filename: str
    allow_empty: bool = False


COLLECTIONS: Dict[str, CollectionSpec] = {
    "courses": CollectionSpec("courses", CourseRecord, "courses.json"),
    "users": CollectionSpec("users", UserRecord, "users.json"),
    "enrollments": CollectionSpec(
        "enrollments", EnrollmentRecord, "user-courses.json"
    ),
    "messages": CollectionSpec(
        "messages", MessageRecord, "messages.json", allow_empty=True
    ),
    "blogs": CollectionSpec("blogs", BlogRecord, "blogs.json", allow_empty=True),
    "sessions": CollectionSpec(
        "sessions", SessionRecord, "sessions.json", allow_empty=True
    ),
}


def get_collection_spec(name: str) -> CollectionSpec:
    try:
        return COLLECTIONS[name]
    except KeyError:
        raise ValueError(f"Unknown collection: {name}") from None


def build_record(collection: str, /, **fields) -> dict:
    """Validate ``fields`` against the collection's model and dump a record.

    Only fields that were actually given are emitted, so optional attributes
    the caller left out do not appear as ``null`` in the stored JSON.
    """
    model = get_collection_spec(collection).model
    return model(**fields).model_dump(exclude_unset=True, exclude={"id"})
