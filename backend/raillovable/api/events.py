"""
Events API

Live turn lifecycle for a project over Server-Sent Events.
"""
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from ..events import EventPublisher, get_event_publisher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects/{project_id}", tags=["events"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # nginx must not buffer the stream
}


@router.get("/events")
async def stream_events(
    project_id: str,
    request: Request,
    publisher: EventPublisher = Depends(get_event_publisher),
):
    """
    Follow a project's generations.

    One JSON object per event: turn_started, generating, files_updated,
    complete, cancelled or error, each tagged with the assistant turn id.
    The first line is a `connected` greeting.
    """
    async def turn_events():
        async for line in publisher.subscribe(project_id):
            if await request.is_disconnected():
                logger.debug(f"Event subscriber for {project_id} went away")
                break
            yield line

    return StreamingResponse(turn_events(), media_type="text/event-stream", headers=SSE_HEADERS)
