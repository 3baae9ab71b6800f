"""
GET /api/v1/admin/menu/changes — Server-Sent Events stream of INSERT/UPDATE/DELETE on the menu.
One event per committed row change; a comment line is sent when the feed is idle.
"""
import json
import logging
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from jelovnik.config import get_settings
from jelovnik.core.auth import require_admin
from jelovnik.models.user import User
from jelovnik.services.realtime import ChangeFeed, ChangeType, Subscription, get_change_feed

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/menu", tags=["realtime"])

KEEPALIVE = ": keepalive\n\n"
# Last frame sent to a subscriber the feed cut off; the client refetches and reconnects
RESYNC = "event: RESYNC\ndata: {}\n\n"


def format_event(event_type: str, data: dict) -> str:
    return f"event: {event_type}\ndata: {json.dumps(data, ensure_ascii=False)}\n\n"


async def event_stream(
    request: Request,
    feed: ChangeFeed,
    sub: Subscription,
    keepalive_seconds: float,
) -> AsyncIterator[str]:
    try:
        while not await request.is_disconnected():
            event = await sub.get(timeout=keepalive_seconds)
            if sub.closed:
                yield RESYNC
                break
            if event is None:
                yield KEEPALIVE
                continue
            yield format_event(event.event_type.value, event.to_payload())
    finally:
        feed.unsubscribe(sub)
        logger.info("change_stream_closed", extra={"changed_count": feed.subscriber_count})


@router.get(
    "/changes",
    summary="Subscribe to menu changes",
    response_class=StreamingResponse,
)
async def menu_changes(
    request: Request,
    events: Optional[list[ChangeType]] = Query(None),
    current_user: User = require_admin(),
    feed: ChangeFeed = Depends(get_change_feed),
) -> StreamingResponse:
    sub = feed.subscribe(events)
    logger.info("change_stream_opened", extra={"user_id": str(current_user.id)})
    return StreamingResponse(
        event_stream(request, feed, sub, get_settings().realtime_keepalive_seconds),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
