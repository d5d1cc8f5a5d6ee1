"""Endpoints and websocket handler for the notification feeds."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, WebSocket, WebSocketDisconnect, status

from tourguide.application.polling import RetryingPoller
from tourguide.domain.entities import AdminNotice
from tourguide.infrastructure.notifications import (
    EmergencyFeed,
    FeedConnectionManager,
    serialize_feed,
)
from tourguide.interfaces.api.dependencies import (
    get_admin_notice_poller,
    get_emergency_feed,
    get_feed_connections,
)
from tourguide.interfaces.api.schemas import (
    AdminNoticeFeedRead,
    EmergencyFeedRead,
    EmergencyNotificationRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _feed_to_read_model(feed: EmergencyFeed) -> EmergencyFeedRead:
    items = feed.list()
    return EmergencyFeedRead(
        items=[EmergencyNotificationRead.model_validate(item) for item in items],
        unread=sum(1 for item in items if not item.is_read),
    )


@router.get("/emergency", response_model=EmergencyFeedRead)
def list_emergency_notifications(
    feed: EmergencyFeed = Depends(get_emergency_feed),
) -> EmergencyFeedRead:
    """Devuelve las entradas del feed en memoria, de la más reciente a la más antigua."""

    return _feed_to_read_model(feed)


@router.post("/emergency/read-all", response_model=EmergencyFeedRead)
def mark_all_emergency_notifications_read(
    feed: EmergencyFeed = Depends(get_emergency_feed),
) -> EmergencyFeedRead:
    feed.mark_all_read()
    return _feed_to_read_model(feed)


@router.post("/emergency/{notification_id}/read", response_model=EmergencyFeedRead)
def mark_emergency_notification_read(
    notification_id: str,
    feed: EmergencyFeed = Depends(get_emergency_feed),
) -> EmergencyFeedRead:
    """Marca una entrada como leída. Los identificadores desconocidos se ignoran."""

    feed.mark_read(notification_id)
    return _feed_to_read_model(feed)


@router.delete("/emergency/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_emergency_notification(
    notification_id: str,
    feed: EmergencyFeed = Depends(get_emergency_feed),
) -> Response:
    feed.delete(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/admin", response_model=AdminNoticeFeedRead)
def read_admin_notices(
    poller: RetryingPoller[AdminNotice] = Depends(get_admin_notice_poller),
) -> AdminNoticeFeedRead:
    """Devuelve el último resultado del sondeo de avisos administrativos."""

    return AdminNoticeFeedRead.model_validate(poller.snapshot())


@router.websocket("/emergency/ws")
async def emergency_feed_websocket(
    websocket: WebSocket,
    feed: EmergencyFeed = Depends(get_emergency_feed),
    connections: FeedConnectionManager = Depends(get_feed_connections),
) -> None:
    """Websocket que envía el feed completo cada vez que cambia."""

    await connections.connect(websocket)
    try:
        await websocket.send_json({**serialize_feed(feed.list()), "type": "init"})
        while True:
            message = await websocket.receive_json()
            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
            elif message_type == "ack":
                notification_id = message.get("id")
                if isinstance(notification_id, str):
                    feed.mark_read(notification_id)
            elif message_type == "ack_all":
                feed.mark_all_read()
    except WebSocketDisconnect:
        connections.disconnect(websocket)
    except Exception:
        logger.exception("Emergency feed websocket closed unexpectedly")
        connections.disconnect(websocket)
        raise


__all__ = ["router"]
