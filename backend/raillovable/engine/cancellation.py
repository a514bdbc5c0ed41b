"""
Cancellation

Per-generation cancellation tokens and the registry of live generation
sessions. A project with a registered session is generating; cancelling
signals the session's token, which the gateway observes while waiting
on the provider.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class CancellationToken:
    """Cooperative, one-shot cancellation signal."""

    def __init__(self):
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        await self._event.wait()


@dataclass
class GenerationSession:
    """One in-flight generation for a project. Never persisted."""
    project_id: str
    cancel_token: CancellationToken = field(default_factory=CancellationToken)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    turn_id: Optional[str] = None  # assistant placeholder being filled


class CancellationController:
    """
    Registry of generation sessions, at most one per project.

    open() and close() are called by the orchestrator; cancel() may be
    called by anyone. A cancelled session no longer counts as generating
    and is replaced by the next open(); close() of the replaced session
    then leaves the new one registered.
    """

    def __init__(self):
        self._sessions: Dict[str, GenerationSession] = {}

    def open(self, project_id: str) -> Optional[GenerationSession]:
        """Register a session, or return None if a live one already exists."""
        if self.is_generating(project_id):
            return None
        session = GenerationSession(project_id=project_id)
        self._sessions[project_id] = session
        logger.debug(f"Opened generation session for project {project_id}")
        return session

    def close(self, session: GenerationSession) -> None:
        """Unregister a session. Only the session that is registered is removed."""
        if self._sessions.get(session.project_id) is session:
            del self._sessions[session.project_id]
            logger.debug(f"Closed generation session for project {session.project_id}")

    def get(self, project_id: str) -> Optional[GenerationSession]:
        return self._sessions.get(project_id)

    def is_generating(self, project_id: str) -> bool:
        session = self._sessions.get(project_id)
        return session is not None and not session.cancel_token.cancelled

    def cancel(self, project_id: str) -> bool:
        """
        Signal the project's session to stop.

        Returns:
            True if a live session was signalled, False if there was nothing to cancel.
        """
        session = self._sessions.get(project_id)
        if session is None or session.cancel_token.cancelled:
            return False
        session.cancel_token.cancel()
        logger.info(f"Cancellation requested for project {project_id}")
        return True
