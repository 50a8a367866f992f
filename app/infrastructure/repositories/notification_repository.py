"""Persistence helpers for share notification entities."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.domain.entities import Notification, NotificationStatus, NotificationType
from app.domain.exceptions import StoreUnavailableError
from app.infrastructure.models import NotificationModel
from app.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Provide CRUD operations and ordered lookups for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        with self._store_operation("load notification %s" % notification_id):
            model = self.session.get(NotificationModel, notification_id)
            return self._to_entity(model) if model else None

    def list_for_recipient(self, email: str) -> Sequence[Notification]:
        with self._store_operation("list notifications for recipient"):
            query = self.session.query(NotificationModel).filter(
                NotificationModel.recipient_email == email
            )
            return self._ordered(query)

    def list_for_sender(self, email: str) -> Sequence[Notification]:
        with self._store_operation("list notifications for sender"):
            query = self.session.query(NotificationModel).filter(
                NotificationModel.sender_email == email
            )
            return self._ordered(query)

    def list_pending_for_recipient(self, email: str) -> Sequence[Notification]:
        with self._store_operation("list pending notifications"):
            query = (
                self.session.query(NotificationModel)
                .filter(NotificationModel.recipient_email == email)
                .filter(NotificationModel.type == NotificationType.SHARE_REQUEST)
                .filter(NotificationModel.status == NotificationStatus.PENDING)
            )
            return self._ordered(query)

    def create(self, notification: Notification) -> Notification:
        with self._store_operation("create notification"):
            model = NotificationModel()
            self._apply_entity_to_model(model, notification)
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
            return self._to_entity(model)

    def record_response(
        self,
        notification_id: int,
        *,
        status: NotificationStatus,
        responded_at: datetime,
        follow_up: Notification,
    ) -> tuple[Notification, Notification] | None:
        """Move a pending notification to ``status`` and store ``follow_up``.

        The status change only applies while the stored status is still
        ``PENDING``; both writes share one transaction. Returns ``None`` when
        another caller already moved the notification out of ``PENDING``.
        """

        with self._store_operation("record response for notification %s" % notification_id):
            updated_rows = (
                self.session.query(NotificationModel)
                .filter(
                    NotificationModel.id == notification_id,
                    NotificationModel.status == NotificationStatus.PENDING,
                )
                .update(
                    {
                        NotificationModel.status: status,
                        NotificationModel.responded_at: ensure_app_naive_datetime(
                            responded_at
                        ),
                    },
                    synchronize_session=False,
                )
            )
            if updated_rows != 1:
                self.session.rollback()
                return None

            follow_up_model = NotificationModel()
            self._apply_entity_to_model(follow_up_model, follow_up)
            self.session.add(follow_up_model)
            self.session.commit()

            primary_model = self.session.get(NotificationModel, notification_id)
            self.session.refresh(follow_up_model)
            return self._to_entity(primary_model), self._to_entity(follow_up_model)

    def _ordered(self, query: Query) -> list[Notification]:
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        return [self._to_entity(model) for model in query.all()]

    @contextmanager
    def _store_operation(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Notification store failed to %s: %s", action, exc)
            raise StoreUnavailableError("Notification store unavailable") from exc

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.recipient_email = notification.recipient_email
        model.sender_email = notification.sender_email
        model.note_id = notification.note_id
        model.note_title = notification.note_title
        model.type = notification.type
        model.status = notification.status
        model.created_at = ensure_app_naive_datetime(
            notification.created_at or now_in_app_timezone()
        )
        model.responded_at = ensure_app_naive_datetime(notification.responded_at)
        model.related_notification_id = notification.related_notification_id

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_email=model.recipient_email,
            sender_email=model.sender_email,
            note_id=model.note_id,
            note_title=model.note_title,
            type=NotificationType(model.type),
            status=NotificationStatus(model.status),
            created_at=ensure_app_timezone(model.created_at),
            responded_at=ensure_app_timezone(model.responded_at),
            related_notification_id=model.related_notification_id,
        )


__all__ = ["NotificationRepository"]
