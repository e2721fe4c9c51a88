"""Shared router dependencies: service construction and request identity.

Identity comes from an ``Authorization: Bearer <token>`` header checked
against the server-side sessions collection. The admin flag is read from the
stored user on every request, so a role change applies immediately.
"""
from __future__ import annotations
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from edule.db.config import (
    get_admin_emails,
    get_password_hash_iterations,
    get_session_ttl_hours,
    get_store,
)
from edule.db.store import RecordStore
from edule.errors import Forbidden, NotFound
from edule.services.auth_service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(store: RecordStore = Depends(get_store)) -> AuthService:
    return AuthService(
        store,
        session_ttl_hours=get_session_ttl_hours(),
        hash_iterations=get_password_hash_iterations(),
        admin_emails=get_admin_emails(),
    )


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    return credentials.credentials if credentials else None


async def get_current_user(
    token: Optional[str] = Depends(get_bearer_token),
    auth: AuthService = Depends(get_auth_service),
) -> dict:
    return await auth.authenticate(token)


async def require_admin(user: dict = Depends(get_current_user)) -> dict:
    if not user.get("isAdmin"):
        raise Forbidden("Admin access required")
    return user


def ensure_self_or_admin(user: dict, user_id: Optional[int]) -> None:
    """Reject acting on another user's account unless the caller is admin.

    A missing ``user_id`` is left for the service to reject as a 400.
    """
    if user_id is None or user["id"] == user_id or user.get("isAdmin"):
        return
    raise Forbidden("You can only access your own account")


def parse_record_id(value: str, label: str) -> int:
    """Path ids that are not integers cannot name a record: 404, not 400."""
    try:
        return int(value)
    except ValueError:
        raise NotFound(f"{label} not found") from None
