"""Enrollment router: enroll in a course and report progress."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from edule.db.config import get_store
from edule.db.store import RecordStore
from edule.models.schemas import EnrollRequest, ProgressUpdateRequest
from edule.routers.deps import ensure_self_or_admin, get_current_user
from edule.services.enrollment_service import EnrollmentService

router = APIRouter(tags=["Enrollments"])


def _get_service(store: RecordStore = Depends(get_store)) -> EnrollmentService:
    return EnrollmentService(store)


@router.post("/enroll/{course_id}")
async def enroll(
    course_id: int,
    payload: EnrollRequest,
    current: dict = Depends(get_current_user),
    service: EnrollmentService = Depends(_get_service),
):
    ensure_self_or_admin(current, payload.userId)
    enrollment = await service.enroll(payload.userId, course_id)
    return {
        "success": True,
        "message": "Successfully enrolled in course!",
        "enrollment": enrollment,
    }


@router.put("/progress/{course_id}")
async def update_progress(
    course_id: int,
    payload: ProgressUpdateRequest,
    current: dict = Depends(get_current_user),
    service: EnrollmentService = Depends(_get_service),
):
    ensure_self_or_admin(current, payload.userId)
    enrollment = await service.update_progress(
        payload.userId, course_id, payload.progress
    )
    return {
        "success": True,
        "message": "Progress updated successfully",
        "enrollment": enrollment,
    }
