"""SQLAlchemy model for persisted share notifications."""

from sqlalchemy import Column, DateTime, Enum, Integer, String

from app.domain.entities import NotificationStatus, NotificationType
from app.infrastructure.database import Base


class NotificationModel(Base):
    """Database representation of a share notification."""

    __tablename__ = "share_notification"

    id = Column(Integer, primary_key=True, index=True)
    recipient_email = Column(String(320), nullable=False, index=True)
    sender_email = Column(String(320), nullable=False, index=True)
    note_id = Column(String(255), nullable=False)
    note_title = Column(String(500), nullable=False)
    type = Column(
        Enum(NotificationType, name="notification_type", native_enum=False, length=20),
        nullable=False,
    )
    status = Column(
        Enum(NotificationStatus, name="notification_status", native_enum=False, length=20),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(), nullable=False)
    responded_at = Column(DateTime(), nullable=True)
    related_notification_id = Column(Integer, nullable=True)


__all__ = ["NotificationModel"]
