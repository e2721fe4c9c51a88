"""Public forms: contact us and become-an-instructor."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from edule.db.config import get_store
from edule.db.store import RecordStore
from edule.models.schemas import ContactRequest, InstructorApplicationRequest
from edule.services.message_service import APPLICATION_REPLY, MessageService

router = APIRouter(tags=["Contact"])


def _get_service(store: RecordStore = Depends(get_store)) -> MessageService:
    return MessageService(store)


@router.post("/contact")
async def submit_contact(
    payload: ContactRequest, service: MessageService = Depends(_get_service)
):
    reply = await service.submit_contact(
        payload.name, payload.email, payload.subject, payload.message
    )
    return {"success": True, "message": reply}


@router.post("/become-instructor")
async def become_instructor(
    payload: InstructorApplicationRequest,
    service: MessageService = Depends(_get_service),
):
    await service.submit_instructor_application(**payload.model_dump())
    return {"success": True, "message": APPLICATION_REPLY}
