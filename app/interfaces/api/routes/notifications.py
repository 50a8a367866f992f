"""Endpoints and websocket handler for share notifications."""

from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from app.application.use_cases.notifications import (
    ShareRequestLifecycle,
    ShareResponseResult,
)
from app.domain.entities import Notification, ShareDecision
from app.domain.exceptions import (
    InvalidNotificationStateError,
    InvalidShareRequestError,
    NotificationNotFoundError,
    ShareNotificationError,
    StoreUnavailableError,
    UnauthorizedResponderError,
)
from app.infrastructure.database import SessionLocal
from app.infrastructure.notifications import notification_manager, serialize_notification
from app.infrastructure.repositories import NotificationRepository
from app.interfaces.api.dependencies import get_share_request_lifecycle
from app.interfaces.api.schemas import (
    NotificationRead,
    ShareRequestCreate,
    ShareResponseRead,
    ShareResponseRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])

_RESPONSE_MESSAGES = {
    ShareDecision.ACCEPT: "Share request accepted",
    ShareDecision.REJECT: "Share request rejected",
}


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


def _raise_http_error(exc: Exception) -> NoReturn:
    if isinstance(exc, NotificationNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, UnauthorizedResponderError):
        status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, InvalidNotificationStateError):
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(exc, InvalidShareRequestError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, StoreUnavailableError):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Servicio de notificaciones no disponible",
        ) from exc
    else:
        raise exc
    raise HTTPException(status_code=status_code, detail=str(exc)) from exc


def _respond(
    lifecycle: ShareRequestLifecycle,
    notification_id: int,
    payload: ShareResponseRequest,
    decision: ShareDecision,
) -> ShareResponseRead:
    try:
        result: ShareResponseResult = lifecycle.respond(
            notification_id, payload.user_email, decision
        )
    except (ShareNotificationError, StoreUnavailableError) as exc:
        _raise_http_error(exc)

    return ShareResponseRead(
        message=_RESPONSE_MESSAGES[decision],
        notification=_notification_to_schema(result.notification),
        follow_up=_notification_to_schema(result.follow_up),
        access_granted=result.access_granted,
    )


@router.post(
    "/share-request",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_share_request(
    payload: ShareRequestCreate,
    lifecycle: ShareRequestLifecycle = Depends(get_share_request_lifecycle),
) -> NotificationRead:
    """Registra una solicitud para compartir una nota y avisa al destinatario."""

    try:
        notification = lifecycle.create_share_request(
            recipient_email=payload.recipient_email,
            sender_email=payload.sender_email,
            note_id=payload.note_id,
            note_title=payload.note_title,
        )
    except (ShareNotificationError, StoreUnavailableError) as exc:
        _raise_http_error(exc)
    return _notification_to_schema(notification)


@router.post("/{notification_id}/accept", response_model=ShareResponseRead)
def accept_share_request(
    notification_id: int,
    payload: ShareResponseRequest,
    lifecycle: ShareRequestLifecycle = Depends(get_share_request_lifecycle),
) -> ShareResponseRead:
    """Acepta una solicitud pendiente y notifica a quien la envió."""

    return _respond(lifecycle, notification_id, payload, ShareDecision.ACCEPT)


@router.post("/{notification_id}/reject", response_model=ShareResponseRead)
def reject_share_request(
    notification_id: int,
    payload: ShareResponseRequest,
    lifecycle: ShareRequestLifecycle = Depends(get_share_request_lifecycle),
) -> ShareResponseRead:
    """Rechaza una solicitud pendiente y notifica a quien la envió."""

    return _respond(lifecycle, notification_id, payload, ShareDecision.REJECT)


@router.get("/user/{email}", response_model=list[NotificationRead])
def list_user_notifications(
    email: str,
    lifecycle: ShareRequestLifecycle = Depends(get_share_request_lifecycle),
) -> list[NotificationRead]:
    """Return every notification addressed to ``email``, newest first."""

    try:
        notifications = lifecycle.list_for_recipient(email)
    except StoreUnavailableError as exc:
        _raise_http_error(exc)
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/sent/{email}", response_model=list[NotificationRead])
def list_sent_notifications(
    email: str,
    lifecycle: ShareRequestLifecycle = Depends(get_share_request_lifecycle),
) -> list[NotificationRead]:
    """Return every notification originated by ``email``, newest first."""

    try:
        notifications = lifecycle.list_for_sender(email)
    except StoreUnavailableError as exc:
        _raise_http_error(exc)
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/{notification_id}", response_model=NotificationRead)
def get_notification(
    notification_id: int,
    lifecycle: ShareRequestLifecycle = Depends(get_share_request_lifecycle),
) -> NotificationRead:
    try:
        notification = lifecycle.get(notification_id)
    except (ShareNotificationError, StoreUnavailableError) as exc:
        _raise_http_error(exc)
    return _notification_to_schema(notification)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the connected user."""

    email = (websocket.query_params.get("email") or "").strip()
    if not email:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        pending_notifications = NotificationRepository(session).list_pending_for_recipient(
            email
        )
    except StoreUnavailableError:
        await websocket.close(code=1011)
        return
    finally:
        session.close()

    await notification_manager.connect(email, websocket)
    try:
        if pending_notifications:
            await websocket.send_json(
                {
                    "type": "init",
                    "data": [serialize_notification(n) for n in pending_notifications],
                }
            )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except (ValueError, KeyError):
                continue

            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        notification_manager.disconnect(email, websocket)
    except Exception:
        logger.exception("Notification websocket for %s closed unexpectedly", email)
        notification_manager.disconnect(email, websocket)
        raise
