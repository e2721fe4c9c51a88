"""Authentication router: register, login/logout, profile, password.

Profile and password endpoints act on behalf of the bearer-token user; an
admin may act on any account.
"""
from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends

from edule.models.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)
from edule.routers.deps import (
    ensure_self_or_admin,
    get_auth_service,
    get_bearer_token,
    get_current_user,
)
from edule.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register")
async def register(
    payload: RegisterRequest, auth: AuthService = Depends(get_auth_service)
):
    user = await auth.register(payload.name, payload.email, payload.password)
    return {"success": True, "message": "Registration successful!", "user": user}


@router.post("/login")
async def login(payload: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    result = await auth.login(payload.email, payload.password)
    return {"success": True, "message": "Login successful!", **result}


@router.post("/logout")
async def logout(
    token: Optional[str] = Depends(get_bearer_token),
    auth: AuthService = Depends(get_auth_service),
):
    await auth.logout(token)
    return {"success": True, "message": "Logged out"}


@router.get("/profile/{user_id}")
async def get_profile(
    user_id: int,
    current: dict = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
):
    ensure_self_or_admin(current, user_id)
    profile = await auth.get_profile(user_id)
    return {"success": True, **profile}


@router.put("/profile/{user_id}")
async def update_profile(
    user_id: int,
    payload: ProfileUpdateRequest,
    current: dict = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
):
    ensure_self_or_admin(current, user_id)
    user = await auth.update_profile(user_id, **payload.model_dump(exclude_unset=True))
    return {"success": True, "message": "Profile updated successfully!", "user": user}


@router.put("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    current: dict = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
):
    ensure_self_or_admin(current, payload.userId)
    await auth.change_password(
        payload.userId, payload.currentPassword, payload.newPassword
    )
    return {"success": True, "message": "Password updated successfully!"}
