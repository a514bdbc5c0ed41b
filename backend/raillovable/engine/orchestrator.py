"""
Session Orchestrator

Drives one user turn end to end:
1. Guard: ignore empty turns and projects that are already generating
2. Append the user turn and a streaming assistant placeholder, persist
3. Call the provider gateway with the history before the placeholder
4. Extract files from the reply and merge them into the project
5. Fill in the placeholder (reply, cancellation notice or error), persist

Failures are written onto the placeholder turn, never raised to the
caller; only storage failures propagate. The generation session is
released in every outcome.
"""
import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

from .cancellation import CancellationController, GenerationSession
from ..codegen import extract_files, merge_files
from ..config import settings
from ..events import EventPublisher, EventType, get_event_publisher
from ..llm.base import Cancelled, GenerationError
from ..llm.gateway import ProviderGateway
from ..schemas.project import (
    Attachment,
    DEFAULT_PROJECT_NAME,
    FileSet,
    Project,
    Turn,
    TurnRole,
)
from ..schemas.provider import ProviderConfig
from ..store import ProjectStore, get_project_store
from ..tracer import trace_section, trace_input, trace_step, trace_output

logger = logging.getLogger(__name__)

# Project names are taken from the start of the first message
PROJECT_NAME_LENGTH = 40

ERROR_PREFIX = "❌ Error: "
CANCELLED_NOTICE = "⏹ Generation stopped."
UNEXPECTED_ERROR = "An error occurred"


class GenerationState(str, enum.Enum):
    """Generation state of a project."""
    IDLE = "idle"
    GENERATING = "generating"
    ERRORED = "errored"


@dataclass
class PendingTurn:
    """A turn whose user message is stored and whose reply is outstanding."""
    project: Project
    session: GenerationSession
    user_turn: Turn
    placeholder: Turn

    @property
    def project_id(self) -> str:
        return self.project.id


def project_name_from(text: str) -> str:
    return text.strip()[:PROJECT_NAME_LENGTH] or DEFAULT_PROJECT_NAME


class SessionOrchestrator:
    """
    Turn state machine: IDLE -> GENERATING -> (IDLE | ERRORED).

    ERRORED only lasts while the failure is written back; the error
    lives on the assistant turn, not on the project.
    """

    def __init__(
        self,
        store: ProjectStore,
        gateway: ProviderGateway,
        config_source: Callable[[], ProviderConfig] = settings.provider_config,
        controller: Optional[CancellationController] = None,
        publisher: Optional[EventPublisher] = None,
    ):
        self.store = store
        self.gateway = gateway
        self.config_source = config_source
        self.controller = controller or CancellationController()
        self.publisher = publisher or get_event_publisher()
        self._states: Dict[str, GenerationState] = {}
        # Serializes read-modify-replace writes per project
        self._write_locks: Dict[str, asyncio.Lock] = {}

    def _write_lock(self, project_id: str) -> asyncio.Lock:
        return self._write_locks.setdefault(project_id, asyncio.Lock())

    # =======================================
    # State
    # =======================================

    def state(self, project_id: str) -> GenerationState:
        if project_id in self._states:
            return self._states[project_id]
        if self.controller.is_generating(project_id):
            return GenerationState.GENERATING
        return GenerationState.IDLE

    def is_generating(self, project_id: str) -> bool:
        return self.state(project_id) == GenerationState.GENERATING

    def cancel(self, project_id: str) -> bool:
        """
        Stop the project's generation.

        The project reads as IDLE as soon as this returns and accepts a
        new turn right away; the cancelled turn records its notice once
        the provider call unwinds.
        """
        return self.controller.cancel(project_id)

    async def recover_interrupted(self) -> int:
        """
        Close out placeholders left streaming by a previous process.

        Run at startup, before any turn. Projects with a live session
        are skipped.

        Returns:
            Number of turns recovered
        """
        recovered = 0
        for project in await self.store.list():
            if self.controller.get(project.id) is not None:
                continue
            stale = [t for t in project.turns if t.streaming]
            if not stale:
                continue
            async with self._write_lock(project.id):
                for turn in stale:
                    turn.streaming = False
                    turn.text = turn.text or CANCELLED_NOTICE
                await self.store.replace(project)
            logger.warning(f"Recovered {len(stale)} interrupted turn(s) in project {project.id}")
            recovered += len(stale)
        return recovered

    # =======================================
    # Turns
    # =======================================

    async def send_turn(
        self,
        project_id: Optional[str],
        text: str,
        attachments: Optional[Sequence[Attachment]] = None,
    ) -> Optional[Project]:
        """
        Send a user turn and wait for the reply.

        Args:
            project_id: Target project, or None to start a new one
            text: User message
            attachments: Files attached to the message

        Returns:
            The updated project, or None when the turn was ignored
            (empty message, or the project is already generating).

        Raises:
            ProjectNotFoundError: project_id does not exist
        """
        pending = await self.begin_turn(project_id, text, attachments)
        if pending is None:
            return None
        return await self.complete_turn(pending)

    async def begin_turn(
        self,
        project_id: Optional[str],
        text: str,
        attachments: Optional[Sequence[Attachment]] = None,
    ) -> Optional[PendingTurn]:
        """
        Record the user turn and the streaming placeholder.

        The generating guard is claimed before the first await, so two
        calls racing on one project cannot both get past it.
        """
        attachments = list(attachments or [])

        trace_section("Turn Start")
        trace_input("engine.orchestrator", "text", text)
        trace_input("engine.orchestrator", "project_id", project_id)

        if not text.strip() and not attachments:
            logger.info("Ignoring empty turn")
            return None

        if project_id is None:
            project = Project(name=project_name_from(text))
            session = self.controller.open(project.id)
            logger.info(f"Creating project {project.id} ({project.name!r})")
        else:
            session = self.controller.open(project_id)
            if session is None:
                logger.info(f"Project {project_id} is already generating; turn ignored")
                return None
            project = None

        try:
            async with self._write_lock(session.project_id):
                if project is None:
                    project = await self.store.require(project_id)

                user_turn = Turn(role=TurnRole.USER, text=text, attachments=attachments)
                placeholder = Turn(role=TurnRole.ASSISTANT, text="", streaming=True)
                project.turns.extend([user_turn, placeholder])
                project.touch()
                session.turn_id = placeholder.id

                trace_step("engine.orchestrator", "Persisting user turn and placeholder")
                await self.store.replace(project)
        except BaseException:
            self.controller.close(session)
            raise

        await self.publisher.publish(
            project.id, EventType.TURN_STARTED, "Turn started", placeholder.id,
            data={"user_turn_id": user_turn.id},
        )
        return PendingTurn(
            project=project,
            session=session,
            user_turn=user_turn,
            placeholder=placeholder,
        )

    async def complete_turn(self, pending: PendingTurn) -> Project:
        """
        Generate the reply for a pending turn and write the outcome back.

        Returns:
            The project as persisted after the turn
        """
        project_id = pending.project_id
        placeholder_id = pending.placeholder.id
        # A cancelled turn that is still unwinding has no reply yet
        history = [
            t for t in pending.project.turns
            if t.id != placeholder_id and not t.streaming
        ]

        try:
            await self.publisher.publish(project_id, EventType.GENERATING, "Generating", placeholder_id)
            trace_section("Generation")
            try:
                config = self.config_source()
                raw = await self.gateway.generate(history, config, pending.session.cancel_token)
            except Cancelled:
                logger.info(f"Generation cancelled for project {project_id}")
                return await self._finish(pending, CANCELLED_NOTICE, EventType.CANCELLED)
            except asyncio.CancelledError:
                # Task torn down (shutdown); record it like a user cancellation
                await self._finish(pending, CANCELLED_NOTICE, EventType.CANCELLED)
                raise
            except GenerationError as e:
                logger.warning(f"Generation failed for project {project_id}: {e}")
                self._states[project_id] = GenerationState.ERRORED
                return await self._finish(pending, ERROR_PREFIX + e.user_message(), EventType.ERROR)
            except Exception:
                logger.exception(f"Unexpected generation failure for project {project_id}")
                self._states[project_id] = GenerationState.ERRORED
                return await self._finish(pending, ERROR_PREFIX + UNEXPECTED_ERROR, EventType.ERROR)

            trace_step("engine.orchestrator", "Extracting code blocks")
            extracted = extract_files(raw)
            trace_output("codegen.extractor", "files", sorted(extracted))
            if not extracted:
                logger.info(f"Reply for project {project_id} contained no code; files unchanged")
            return await self._finish(pending, raw, EventType.COMPLETE, extracted)
        finally:
            successor = self.controller.get(project_id)
            self.controller.close(pending.session)
            if successor is None or successor is pending.session:
                self._states.pop(project_id, None)

    async def _finish(
        self,
        pending: PendingTurn,
        text: str,
        event_type: EventType,
        extracted: Optional[FileSet] = None,
    ) -> Project:
        """
        Fill in the placeholder and persist.

        Reloads the stored project first so the write is a
        read-modify-replace of the current record. A project deleted
        while generating is not recreated.
        """
        project_id = pending.project_id
        placeholder_id = pending.placeholder.id

        async with self._write_lock(project_id):
            project = await self.store.get(project_id)
            deleted = project is None
            if deleted:
                logger.warning(f"Project {project_id} was deleted during generation; result discarded")
                project = pending.project

            turn = project.find_turn(placeholder_id)
            if turn is None:
                turn = pending.placeholder
                project.turns.append(turn)
            turn.text = text
            turn.streaming = False

            if extracted:
                project.files = merge_files(project.files, extracted)
            project.touch()

            if not deleted:
                await self.store.replace(project)

        message = text if event_type == EventType.ERROR else event_type.value.capitalize()
        await self.publisher.publish(project_id, event_type, message, placeholder_id)
        if extracted:
            await self.publisher.publish(
                project_id, EventType.FILES_UPDATED, f"{len(extracted)} files updated",
                placeholder_id, data={"files": sorted(project.files)},
            )
        trace_output("engine.orchestrator", "turn", text)
        return project


# Singleton orchestrator instance
_orchestrator_instance: Optional[SessionOrchestrator] = None


def get_orchestrator() -> SessionOrchestrator:
    """Get or create the process-wide orchestrator."""
    global _orchestrator_instance

    if _orchestrator_instance is None:
        _orchestrator_instance = SessionOrchestrator(
            store=get_project_store(),
            gateway=ProviderGateway(),
        )

    return _orchestrator_instance
