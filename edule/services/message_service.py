"""Contact form and instructor applications.

Contact submissions are only logged. Instructor applications are persisted
to the ``messages`` collection and moderated by admins.
"""
from __future__ import annotations
import logging
from typing import List, Optional

from edule.db.store import RecordStore
from edule.errors import NotFound, ValidationError
from edule.models.entities import MESSAGE_STATUSES, build_record
from edule.utils.timestamps import utcnow_iso

logger = logging.getLogger(__name__)

CONTACT_REPLY = "Thank you for contacting us! We will get back to you soon."
APPLICATION_REPLY = (
    "Thank you for your interest! We will review your application "
    "and contact you soon."
)


class MessageService:
    def __init__(self, store: RecordStore):
        self.store = store

    async def submit_contact(
        self,
        name: Optional[str],
        email: Optional[str],
        subject: Optional[str],
        message: Optional[str],
    ) -> str:
        if not name or not email or not message:
            raise ValidationError("Please provide name, email, and message")
        logger.info(
            f"Contact form submission from {name} <{email}>: "
            f"{subject or '(no subject)'}"
        )
        return CONTACT_REPLY

    async def submit_instructor_application(
        self,
        name: Optional[str],
        email: Optional[str],
        phone: Optional[str] = None,
        expertise: Optional[str] = None,
        experience: Optional[str] = None,
        message: Optional[str] = None,
    ) -> dict:
        if not name or not email:
            raise ValidationError("Please provide name and email")
        async with self.store.transaction("messages") as messages:
            record = messages.insert(
                build_record(
                    "messages",
                    type="instructor_request",
                    name=name,
                    email=email,
                    phone=phone,
                    expertise=expertise,
                    experience=experience,
                    message=message,
                    createdAt=utcnow_iso(),
                    status="pending",
                )
            )
        logger.info(f"Instructor application {record['id']} received")
        return record

    async def list_messages(self) -> List[dict]:
        return list(await self.store.load("messages"))

    async def set_status(self, message_id: int, status: Optional[str]) -> dict:
        if status not in MESSAGE_STATUSES:
            raise ValidationError(
                f"Status must be one of: {', '.join(MESSAGE_STATUSES)}"
            )
        async with self.store.transaction("messages") as messages:
            record = messages.get(message_id)
            if record is None:
                raise NotFound("Message not found")
            record["status"] = status
        logger.info(f"Message {message_id} marked {status}")
        return record

    async def delete_message(self, message_id: int) -> None:
        async with self.store.transaction("messages") as messages:
            if messages.remove(message_id) is None:
                raise NotFound("Message not found")
        logger.info(f"Message {message_id} deleted")
