"""FastAPI dependency utilities."""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import ShareRequestLifecycle
from app.infrastructure.database import get_db
from app.infrastructure.note_access import NotesServiceAccessGrantor, get_access_grantor
from app.infrastructure.notifications import notification_publisher
from app.infrastructure.repositories import NotificationRepository


def get_share_request_lifecycle(
    db: Session = Depends(get_db),
    access_grantor: NotesServiceAccessGrantor = Depends(get_access_grantor),
) -> ShareRequestLifecycle:
    """Return a lifecycle bound to the request's database session."""

    return ShareRequestLifecycle(
        NotificationRepository(db),
        notification_publisher,
        access_grantor,
    )
