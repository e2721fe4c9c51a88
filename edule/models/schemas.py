"""
Pydantic request/response models for the storefront API

Request bodies keep every field optional where the service owns the
"missing field" rule, so the service can answer with its own 400 message
instead of a generic schema error.
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=100, description="Display name")
    email: Optional[str] = Field(None, max_length=254, description="Login email")
    password: Optional[str] = Field(None, max_length=256, description="Plain password")


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    userId: Optional[int] = None
    currentPassword: Optional[str] = None
    newPassword: Optional[str] = Field(None, max_length=256)


class ProfileUpdateRequest(BaseModel):
    """Only fields present in the request body are applied."""
    name: Optional[str] = Field(None, max_length=100)
    profileImage: Optional[str] = Field(None, description="Image URL or data URI; null clears it")


class EnrollRequest(BaseModel):
    userId: Optional[int] = None


class ProgressUpdateRequest(BaseModel):
    userId: Optional[int] = None
    progress: Optional[Union[int, float]] = Field(None, description="Percent complete, clamped to 0-100")


class ContactRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = Field(None, max_length=5000)


class InstructorApplicationRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    expertise: Optional[str] = None
    experience: Optional[str] = None
    message: Optional[str] = Field(None, max_length=5000)


class MessageStatusUpdate(BaseModel):
    status: Optional[str] = Field(None, description="pending, accepted or rejected")


class UserRoleUpdate(BaseModel):
    isAdmin: Optional[bool] = None


class CourseCreate(BaseModel):
    """New catalog course; descriptive extras (image, level...) pass through."""
    model_config = ConfigDict(extra="allow")

    title: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    instructor: str = Field(..., min_length=1, max_length=100)
    price: Optional[Union[int, float]] = Field(None, ge=0)
    rating: Optional[Union[int, float]] = Field(None, ge=0, le=5)
    badge: Optional[str] = None


class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Current environment")
    timestamp: datetime = Field(..., description="Check timestamp")
    uptime: Optional[float] = Field(None, description="Uptime in seconds")
