"""
Turn Event Publisher

Server-Sent Events (SSE) describing the lifecycle of each generation
so a client can show the pending turn, the stop button and new files
without polling.
"""
import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Dict, Optional, AsyncGenerator
from dataclasses import dataclass, asdict, field
from enum import Enum

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Turn lifecycle event types."""
    TURN_STARTED = "turn_started"
    GENERATING = "generating"
    FILES_UPDATED = "files_updated"
    COMPLETE = "complete"
    CANCELLED = "cancelled"
    ERROR = "error"


@dataclass
class TurnEvent:
    """An event to be streamed to subscribers of a project."""
    event_type: str
    message: str
    turn_id: str  # Assistant turn the event belongs to
    data: Optional[Dict] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_sse(self) -> str:
        """Format as SSE data line."""
        return f"data: {json.dumps(asdict(self))}\n\n"


class EventPublisher:
    """
    Fan-out of turn events to per-project subscriber queues.

    Usage:
        publisher = get_event_publisher()

        # In the events endpoint
        async for line in publisher.subscribe(project_id):
            yield line

        # In the orchestrator
        await publisher.publish(project_id, EventType.COMPLETE, "Done", turn_id)
    """

    def __init__(self):
        # project_id -> subscriber queues
        self._subscribers: Dict[str, list[asyncio.Queue]] = {}

    def subscriber_count(self, project_id: str) -> int:
        return len(self._subscribers.get(project_id, []))

    async def subscribe(self, project_id: str) -> AsyncGenerator[str, None]:
        """Subscribe to events for a project. Yields SSE-formatted strings."""
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.setdefault(project_id, []).append(queue)

        try:
            yield f"data: {json.dumps({'event_type': 'connected', 'project_id': project_id})}\n\n"

            while True:
                event = await queue.get()
                if event is None:  # Shutdown signal
                    break
                yield event.to_sse()
        finally:
            queues = self._subscribers.get(project_id, [])
            if queue in queues:
                queues.remove(queue)
            if not queues:
                self._subscribers.pop(project_id, None)

    async def publish(
        self,
        project_id: str,
        event_type: EventType,
        message: str,
        turn_id: str,
        data: Optional[Dict] = None,
    ) -> None:
        """Publish an event to all subscribers of a project."""
        event = TurnEvent(
            event_type=event_type.value,
            message=message,
            turn_id=turn_id,
            data=data,
        )

        subscribers = list(self._subscribers.get(project_id, []))
        for queue in subscribers:
            queue.put_nowait(event)

        logger.debug(f"Published {event_type.value} to {len(subscribers)} subscribers")

    async def close_all(self, project_id: str) -> None:
        """Close all subscriber connections for a project."""
        for queue in list(self._subscribers.get(project_id, [])):
            queue.put_nowait(None)


# Global publisher instance
_publisher: Optional[EventPublisher] = None


def get_event_publisher() -> EventPublisher:
    """Get or create the global event publisher."""
    global _publisher
    if _publisher is None:
        _publisher = EventPublisher()
    return _publisher
