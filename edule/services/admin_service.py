"""Admin dashboard operations: stats, user roles and catalog management."""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from edule.db.store import RecordStore
from edule.errors import NotFound, ValidationError
from edule.models.entities import build_record
from edule.repositories.queries import count_distinct
from edule.utils.timestamps import utcnow_iso

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, store: RecordStore):
        self.store = store

    async def stats(self) -> Dict[str, int]:
        users = await self.store.load("users")
        courses = await self.store.load("courses")
        enrollments = await self.store.load("enrollments")
        return {
            "totalUsers": len(users),
            "totalCourses": len(courses),
            "totalEnrollments": len(enrollments),
            "totalInstructors": count_distinct(courses, "instructor"),
        }

    async def list_users(self) -> List[Dict[str, Any]]:
        users = await self.store.load("users")
        return [
            {
                "id": u["id"],
                "name": u.get("name"),
                "email": u.get("email"),
                "isAdmin": bool(u.get("isAdmin", False)),
                "createdAt": u.get("createdAt"),
            }
            for u in users
        ]

    async def set_user_role(
        self, user_id: int, is_admin: Optional[bool]
    ) -> Dict[str, Any]:
        if is_admin is None:
            raise ValidationError("isAdmin is required")
        async with self.store.transaction("users") as users:
            user = users.get(user_id)
            if user is None:
                raise NotFound("User not found")
            user["isAdmin"] = is_admin
        logger.info(f"User {user_id} role set to {'admin' if is_admin else 'student'}")
        return {"id": user["id"], "name": user.get("name"), "isAdmin": is_admin}

    async def add_course(self, fields: Dict[str, Any]) -> dict:
        """Store exactly the given fields plus a generated id and createdAt."""
        try:
            record = build_record("courses", **{**fields, "createdAt": utcnow_iso()})
        except PydanticValidationError as exc:
            missing = sorted({".".join(str(p) for p in e["loc"]) for e in exc.errors()})
            raise ValidationError(
                f"Invalid course fields: {', '.join(missing)}"
            ) from exc

        async with self.store.transaction("courses") as courses:
            course = courses.insert(record)
        logger.info(f"Course {course['id']} added: {course.get('title')}")
        return course

    async def delete_course(self, course_id: int) -> None:
        async with self.store.transaction("courses") as courses:
            if courses.remove(course_id) is None:
                raise NotFound("Course not found")
        logger.info(f"Course {course_id} deleted")
