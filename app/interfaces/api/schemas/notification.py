"""Pydantic models describing share notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.domain.entities import NotificationStatus, NotificationType


class ShareRequestCreate(BaseModel):
    """Payload used to ask another user to accept a shared note."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    recipient_email: str = Field(..., min_length=1, description="Correo del destinatario")
    sender_email: str = Field(..., min_length=1, description="Correo de quien comparte")
    note_id: str = Field(..., min_length=1, description="Identificador de la nota")
    note_title: str = Field(..., min_length=1, description="Título visible de la nota")


class ShareResponseRequest(BaseModel):
    """Identity of the user answering a share request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_email: str = Field(..., min_length=1, description="Correo del usuario que responde")


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    recipient_email: str
    sender_email: str
    note_id: str
    note_title: str
    type: NotificationType
    status: NotificationStatus
    created_at: datetime
    responded_at: datetime | None = None
    related_notification_id: int | None = None


class ShareResponseRead(BaseModel):
    """Acknowledgement returned after accepting or rejecting a request."""

    message: str
    notification: NotificationRead
    follow_up: NotificationRead
    access_granted: bool | None = None


__all__ = [
    "NotificationRead",
    "ShareRequestCreate",
    "ShareResponseRead",
    "ShareResponseRequest",
]
