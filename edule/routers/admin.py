"""Admin router. Every route requires an admin bearer token."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from edule.db.config import get_store
from edule.db.store import RecordStore
from edule.models.schemas import CourseCreate, MessageStatusUpdate, UserRoleUpdate
from edule.routers.deps import require_admin
from edule.services.admin_service import AdminService
from edule.services.message_service import MessageService

router = APIRouter(
    prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)]
)


def _get_service(store: RecordStore = Depends(get_store)) -> AdminService:
    return AdminService(store)


def _get_messages(store: RecordStore = Depends(get_store)) -> MessageService:
    return MessageService(store)


@router.get("/stats")
async def get_stats(service: AdminService = Depends(_get_service)):
    return {"success": True, "stats": await service.stats()}


@router.get("/users")
async def list_users(service: AdminService = Depends(_get_service)):
    return {"success": True, "users": await service.list_users()}


@router.put("/users/{user_id}/role")
async def update_user_role(
    user_id: int,
    payload: UserRoleUpdate,
    service: AdminService = Depends(_get_service),
):
    user = await service.set_user_role(user_id, payload.isAdmin)
    role = "Admin" if user["isAdmin"] else "Student"
    return {"success": True, "message": f"User role updated to {role}", "user": user}


@router.post("/courses")
async def add_course(
    payload: CourseCreate, service: AdminService = Depends(_get_service)
):
    course = await service.add_course(payload.model_dump(exclude_unset=True))
    return {"success": True, "message": "Course added successfully!", "course": course}


@router.delete("/courses/{course_id}")
async def delete_course(
    course_id: int, service: AdminService = Depends(_get_service)
):
    await service.delete_course(course_id)
    return {"success": True, "message": "Course deleted successfully!"}


@router.get("/messages")
async def list_messages(service: MessageService = Depends(_get_messages)):
    return {"success": True, "messages": await service.list_messages()}


@router.put("/messages/{message_id}/status")
async def update_message_status(
    message_id: int,
    payload: MessageStatusUpdate,
    service: MessageService = Depends(_get_messages),
):
    await service.set_status(message_id, payload.status)
    return {"success": True, "message": f"Application {payload.status}"}


@router.delete("/messages/{message_id}")
async def delete_message(
    message_id: int, service: MessageService = Depends(_get_messages)
):
    await service.delete_message(message_id)
    return {"success": True, "message": "Message deleted successfully"}
