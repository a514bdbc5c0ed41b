"""
Chat API

Endpoints for sending turns and controlling in-flight generations.
"""
import asyncio
import logging
from fastapi import APIRouter, Depends, HTTPException, Response

from ..engine.orchestrator import SessionOrchestrator, get_orchestrator
from ..schemas.chat import (
    ChatRequest,
    ChatResponse,
    GenerationStatusResponse,
    CancelResponse,
)
from ..store import ProjectNotFoundError
from ..tracer import trace_section, trace_input, trace_output

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])

# Strong references to turns finishing in the background
_background_turns: set[asyncio.Task] = set()


def _on_background_turn_done(task: asyncio.Task) -> None:
    _background_turns.discard(task)
    if not task.cancelled() and task.exception() is not None:
        logger.error(f"Background turn failed: {task.exception()!r}")


@router.post("/chat", response_model=ChatResponse)
async def chat(
    data: ChatRequest,
    response: Response,
    wait: bool = True,
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
):
    """
    Send a user turn.

    With wait=true (default) the response carries the finished turn.
    With wait=false the response is 202 with the pending placeholder;
    follow progress on /projects/{id}/events or /projects/{id}/status.
    """
    trace_section("Chat Request")
    trace_input("api.chat", "project_id", data.project_id)
    trace_input("api.chat", "attachments", len(data.attachments))

    if not data.text.strip() and not data.attachments:
        raise HTTPException(status_code=400, detail="Message text or an attachment is required")

    try:
        pending = await orchestrator.begin_turn(data.project_id, data.text, data.attachments)
    except ProjectNotFoundError:
        raise HTTPException(status_code=404, detail="Project not found")

    if pending is None:
        raise HTTPException(status_code=409, detail="This project is already generating")

    if wait:
        project = await orchestrator.complete_turn(pending)
    else:
        task = asyncio.create_task(orchestrator.complete_turn(pending))
        _background_turns.add(task)
        task.add_done_callback(_on_background_turn_done)
        project = pending.project
        response.status_code = 202

    trace_output("api.chat", "project_id", project.id)
    return ChatResponse(
        project=project,
        assistant_turn_id=pending.placeholder.id,
        state=orchestrator.state(project.id).value,
    )


@router.post("/projects/{project_id}/cancel", response_model=CancelResponse)
async def cancel_generation(
    project_id: str,
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
):
    """Stop the project's generation. Cancelling an idle project is a no-op."""
    cancelled = orchestrator.cancel(project_id)
    return CancelResponse(
        project_id=project_id,
        cancelled=cancelled,
        state=orchestrator.state(project_id).value,
    )


@router.get("/projects/{project_id}/status", response_model=GenerationStatusResponse)
async def generation_status(
    project_id: str,
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
):
    """Current generation state of a project."""
    state = orchestrator.state(project_id)
    session = orchestrator.controller.get(project_id)
    if session is None or session.cancel_token.cancelled:
        return GenerationStatusResponse(project_id=project_id, state=state.value)
    return GenerationStatusResponse(
        project_id=project_id,
        state=state.value,
        started_at=session.started_at,
        assistant_turn_id=session.turn_id,
    )
