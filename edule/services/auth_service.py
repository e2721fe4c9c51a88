"""Account service: registration, login sessions, profile and password.

Passwords are hashed off the event loop (``asyncio.to_thread``) before any
collection lock is taken, so a slow hash never holds up other writers.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Any, Dict, Iterable, Optional

from edule.db.store import RecordStore
from edule.errors import NotFound, Unauthorized, ValidationError, Conflict
from edule.models.entities import build_record
from edule.repositories.queries import (
    enrollments_for_user,
    find_by_id,
    find_user_by_email,
)
from edule.utils.security import (
    hash_password,
    needs_rehash,
    new_session_token,
    token_digest,
    verify_password,
)
from edule.utils.timestamps import is_past, iso_in, utcnow_iso

logger = logging.getLogger(__name__)


def public_user(user: dict) -> Dict[str, Any]:
    """Sanitized view of a user record (never includes the password)."""
    return {
        "id": user["id"],
        "name": user.get("name"),
        "email": user.get("email"),
        "isAdmin": bool(user.get("isAdmin", False)),
        "profileImage": user.get("profileImage") or None,
    }


class AuthService:
    def __init__(
        self,
        store: RecordStore,
        session_ttl_hours: int = 168,
        hash_iterations: int = 260000,
        admin_emails: Iterable[str] = (),
    ):
        self.store = store
        self.session_ttl_hours = session_ttl_hours
        self.hash_iterations = hash_iterations
        self.admin_emails = set(admin_emails)

    async def _hash(self, password: str) -> str:
        return await asyncio.to_thread(
            hash_password, password, self.hash_iterations
        )

    # Registration / login ---------------------------------------------------
    async def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> Dict[str, Any]:
        if not name or not email or not password:
            raise ValidationError("Please provide name, email, and password")
        password_hash = await self._hash(password)

        async with self.store.transaction("users") as users:
            if find_user_by_email(users, email):
                raise Conflict("This email is already taken")
            user = users.insert(
                build_record(
                    "users",
                    name=name,
                    email=email,
                    password=password_hash,
                    isAdmin=email in self.admin_emails,
                    profileImage=None,
                    createdAt=utcnow_iso(),
                )
            )
        logger.info(f"Registered user {user['id']}")
        return public_user(user)

    async def login(
        self, email: Optional[str], password: Optional[str]
    ) -> Dict[str, Any]:
        if not email or not password:
            raise ValidationError("Please provide email and password")

        users = await self.store.load("users")
        user = find_user_by_email(users, email)
        verified = user is not None and await asyncio.to_thread(
            verify_password, password, user.get("password")
        )
        if not verified:
            logger.warning(f"Failed login attempt for {email}")
            raise Unauthorized("Invalid email or password")

        if needs_rehash(user["password"]):
            await self._upgrade_legacy_password(user["id"], password, user["password"])

        token = await self._issue_session(user["id"])
        logger.info(f"User {user['id']} logged in")
        return {"user": public_user(user), "token": token}

    # Sessions ---------------------------------------------------------------
    async def _issue_session(self, user_id: int) -> str:
        token = new_session_token()
        async with self.store.transaction("sessions") as sessions:
            for expired in [s for s in sessions if is_past(s.get("expiresAt"))]:
                sessions.remove(expired["id"])
            sessions.insert(
                build_record(
                    "sessions",
                    tokenHash=token_digest(token),
                    userId=user_id,
                    createdAt=utcnow_iso(),
                    expiresAt=iso_in(self.session_ttl_hours),
                )
            )
        return token

    async def logout(self, token: Optional[str]) -> None:
        if not token:
            return
        digest = token_digest(token)
        async with self.store.transaction("sessions") as sessions:
            for session in [s for s in sessions if s.get("tokenHash") == digest]:
                sessions.remove(session["id"])

    async def authenticate(self, token: Optional[str]) -> dict:
        """Resolve a bearer token to the stored user record."""
        if not token:
            raise Unauthorized("Authentication required")
        digest = token_digest(token)
        sessions = await self.store.load("sessions")
        session = next(
            (s for s in sessions if s.get("tokenHash") == digest), None
        )
        if session is None or is_past(session.get("expiresAt")):
            raise Unauthorized("Session is invalid or has expired")

        users = await self.store.load("users")
        user = find_by_id(users, session.get("userId"))
        if user is None:
            raise Unauthorized("Session is invalid or has expired")
        return user

    # Password ---------------------------------------------------------------
    async def _store_password(
        self,
        user_id: int,
        current_password: str,
        new_password: str,
        expected_current: str,
    ) -> None:
        new_hash = await self._hash(new_password)
        async with self.store.transaction("users") as users:
            user = users.get(user_id)
            if user is None:
                raise NotFound("User not found")
            stored = user.get("password")
            # Changed since it was checked (e.g. a legacy upgrade on login)
            if stored != expected_current and not verify_password(
                current_password, stored
            ):
                raise Unauthorized("Current password is incorrect")
            user["password"] = new_hash
            user["passwordUpdatedAt"] = utcnow_iso()

    async def _upgrade_legacy_password(
        self, user_id: int, password: str, legacy: str
    ) -> None:
        """Replace a plaintext password with its hash if it is still stored.

        A concurrent login or password change may have replaced it already;
        the upgrade is then skipped and the login still succeeds.
        """
        new_hash = await self._hash(password)
        async with self.store.transaction("users") as users:
            user = users.get(user_id)
            if user is None or user.get("password") != legacy:
                return
            user["password"] = new_hash
            user["passwordUpdatedAt"] = utcnow_iso()
        logger.info(f"Upgraded legacy password for user {user_id}")

    async def change_password(
        self,
        user_id: Optional[int],
        current_password: Optional[str],
        new_password: Optional[str],
    ) -> None:
        if not user_id or not current_password or not new_password:
            raise ValidationError(
                "User ID, current password, and new password are required"
            )
        users = await self.store.load("users")
        user = find_by_id(users, user_id)
        if user is None:
            raise NotFound("User not found")
        stored = user.get("password")
        if not await asyncio.to_thread(verify_password, current_password, stored):
            raise Unauthorized("Current password is incorrect")

        await self._store_password(
            user_id, current_password, new_password, stored
        )
        logger.info(f"Password changed for user {user_id}")

    # Profile ----------------------------------------------------------------
    async def get_profile(self, user_id: int) -> Dict[str, Any]:
        users = await self.store.load("users")
        user = find_by_id(users, user_id)
        if user is None:
            raise NotFound("User not found")

        enrollments = await self.store.load("enrollments")
        courses = await self.store.load("courses")
        enrolled_courses = []
        for enrollment in enrollments_for_user(enrollments, user_id):
            course = find_by_id(courses, enrollment.get("courseId")) or {}
            enrolled_courses.append({
                **course,
                "progress": enrollment.get("progress"),
                "enrolledAt": enrollment.get("enrolledAt"),
                "completed": bool(enrollment.get("completed")),
            })

        completed = sum(1 for c in enrolled_courses if c["completed"])
        return {
            "user": {
                **public_user(user),
                "createdAt": user.get("createdAt"),
            },
            "enrolledCourses": enrolled_courses,
            "stats": {
                "totalEnrolled": len(enrolled_courses),
                "completed": completed,
                "inProgress": len(enrolled_courses) - completed,
            },
        }

    async def update_profile(self, user_id: int, **changes) -> Dict[str, Any]:
        """Partial update: only keys present in ``changes`` are written.

        ``profileImage=None`` clears the image; a missing key leaves it alone.
        ``name=None`` is ignored, but a blank name is rejected with a 400
        rather than silently skipped.
        """
        if changes.get("name") is None:
            changes.pop("name", None)
        elif not changes["name"].strip():
            raise ValidationError("Name cannot be empty")

        async with self.store.transaction("users") as users:
            user = users.get(user_id)
            if user is None:
                raise NotFound("User not found")
            if "name" in changes:
                user["name"] = changes["name"]
            if "profileImage" in changes:
                user["profileImage"] = changes["profileImage"]
        return public_user(user)
