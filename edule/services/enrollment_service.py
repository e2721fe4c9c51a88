"""Course enrollment and progress tracking.

An enrollment moves enrolled (progress 0) -> in progress -> completed
(progress 100) through ``update_progress`` only. ``completed`` is recomputed
from the clamped progress on every update, so lowering the progress of a
finished course marks it in progress again.
"""
from __future__ import annotations
import logging
from typing import Optional, Union

from edule.db.store import RecordStore
from edule.errors import Conflict, NotFound, ValidationError
from edule.models.entities import build_record
from edule.repositories.queries import find_by_id, find_enrollment
from edule.utils.timestamps import utcnow_iso

logger = logging.getLogger(__name__)

Number = Union[int, float]


def clamp_progress(progress: Number) -> Number:
    return min(100, max(0, progress))


class EnrollmentService:
    def __init__(self, store: RecordStore):
        self.store = store

    async def enroll(self, user_id: Optional[int], course_id: int) -> dict:
        if user_id is None:
            raise ValidationError("User ID is required")

        if find_by_id(await self.store.load("courses"), course_id) is None:
            raise NotFound("Course not found")
        if find_by_id(await self.store.load("users"), user_id) is None:
            raise NotFound("User not found")

        async with self.store.transaction("enrollments") as enrollments:
            if find_enrollment(enrollments, user_id, course_id):
                raise Conflict("Already enrolled in this course")
            enrollment = enrollments.insert(
                build_record(
                    "enrollments",
                    userId=user_id,
                    courseId=course_id,
                    progress=0,
                    completed=False,
                    enrolledAt=utcnow_iso(),
                )
            )
        logger.info(f"User {user_id} enrolled in course {course_id}")
        return enrollment

    async def update_progress(
        self,
        user_id: Optional[int],
        course_id: int,
        progress: Optional[Number],
    ) -> dict:
        # progress=0 is a real value; only a missing one is rejected
        if user_id is None or progress is None:
            raise ValidationError("User ID and progress are required")

        clamped = clamp_progress(progress)
        async with self.store.transaction("enrollments") as enrollments:
            enrollment = find_enrollment(enrollments, user_id, course_id)
            if enrollment is None:
                raise NotFound("Enrollment not found")
            enrollment["progress"] = clamped
            enrollment["completed"] = clamped == 100
            enrollment["lastUpdated"] = utcnow_iso()
        return dict(enrollment)
