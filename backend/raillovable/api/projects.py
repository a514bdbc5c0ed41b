"""
Projects API

Endpoints for project management, files and export.
"""
from fastapi import APIRouter, Depends, HTTPException, Response

from ..engine.orchestrator import SessionOrchestrator, get_orchestrator
from ..events import EventPublisher, get_event_publisher
from ..schemas.project import (
    Project,
    ProjectCreate,
    ProjectUpdate,
    ProjectSummary,
    ProjectListResponse,
    ProjectFilesResponse,
)
from ..services.export import ProjectExporter, archive_filename, get_exporter
from ..store import ProjectStore, get_project_store

router = APIRouter(prefix="/projects", tags=["projects"])


def _project_to_summary(project: Project, generating: bool = False) -> ProjectSummary:
    """Convert Project to listing entry."""
    return ProjectSummary(
        id=project.id,
        name=project.name,
        turn_count=len(project.turns),
        file_count=len(project.files),
        generating=generating,
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


async def _get_or_404(store: ProjectStore, project_id: str) -> Project:
    project = await store.get(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post("", response_model=Project)
async def create_project(
    data: ProjectCreate,
    store: ProjectStore = Depends(get_project_store),
):
    """Create a new, empty project."""
    project = Project(name=data.name)
    await store.replace(project)
    return project


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    store: ProjectStore = Depends(get_project_store),
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
):
    """List all projects, most recently updated first."""
    projects = await store.list()
    return ProjectListResponse(
        projects=[_project_to_summary(p, orchestrator.is_generating(p.id)) for p in projects],
        total=len(projects),
    )


@router.get("/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    store: ProjectStore = Depends(get_project_store),
):
    """Get a project with its turns and files."""
    return await _get_or_404(store, project_id)


@router.patch("/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    store: ProjectStore = Depends(get_project_store),
):
    """Rename a project."""
    project = await _get_or_404(store, project_id)
    project.name = data.name
    project.touch()
    await store.replace(project)
    return project


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    store: ProjectStore = Depends(get_project_store),
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    """Delete a project, stopping its generation first and closing its event streams."""
    orchestrator.cancel(project_id)
    if not await store.delete(project_id):
        raise HTTPException(status_code=404, detail="Project not found")

    await publisher.close_all(project_id)
    return {"status": "deleted", "project_id": project_id}


@router.get("/{project_id}/files", response_model=ProjectFilesResponse)
async def get_files(
    project_id: str,
    store: ProjectStore = Depends(get_project_store),
):
    """Current merged files of a project."""
    project = await _get_or_404(store, project_id)
    return ProjectFilesResponse(project_id=project.id, files=project.files)


@router.get("/{project_id}/export")
async def export_project(
    project_id: str,
    store: ProjectStore = Depends(get_project_store),
    exporter: ProjectExporter = Depends(get_exporter),
):
    """Download the project as a runnable zip archive."""
    project = await _get_or_404(store, project_id)
    archive = exporter.export_project(project.name, project.files)
    return Response(
        content=archive,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{archive_filename(project.name)}"',
        },
    )
