"""Reference REST API for the remote project collection.

An in-memory implementation of the collection the client synchronizes
with. Run it with ``taskboard serve`` for local development; tests mount
it through ``httpx.ASGITransport``.
"""

import itertools
import logging

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from taskboard import __version__
from taskboard.domain.project import Project
from taskboard.domain.task import utcnow
from taskboard.interfaces.api.schemas import (
    CreateProjectRequest,
    DeleteResponse,
    UpdateProjectRequest,
)

logger = logging.getLogger(__name__)


class ProjectCollection:
    """Server-side project records keyed by id.

    Ids are assigned from a counter and never reused.
    """

    def __init__(self) -> None:
        self._projects: dict[str, Project] = {}
        self._ids = itertools.count(1)

    def all(self) -> list[Project]:
        return list(self._projects.values())

    def get(self, project_id: str) -> Project | None:
        return self._projects.get(project_id)

    def create(self, req: CreateProjectRequest) -> Project:
        now = utcnow()
        project = Project(
            id=str(next(self._ids)),
            name=req.name,
            description=req.description,
            github_url=req.github_url,
            tasks=tuple(req.tasks),
            created_at=now,
            updated_at=now,
        )
        self._projects[project.id] = project
        return project

    def update(self, project_id: str, changes: dict) -> Project | None:
        project = self._projects.get(project_id)
        if project is None:
            return None
        # Re-validated so blank optionals normalise to None
        updated = Project.model_validate(
            {**project.model_dump(), **changes, "updated_at": utcnow()}
        )
        self._projects[project_id] = updated
        return updated

    def delete(self, project_id: str) -> bool:
        return self._projects.pop(project_id, None) is not None


# =============================================================================
# Router
# =============================================================================


router = APIRouter()


def _collection(request: Request) -> ProjectCollection:
    return request.app.state.collection


def _require(request: Request, project_id: str) -> Project:
    project = _collection(request).get(project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.get("/projects", response_model=list[Project])
def list_projects(request: Request):
    """List all projects."""
    return _collection(request).all()


@router.post("/projects", response_model=Project, status_code=201)
def create_project(req: CreateProjectRequest, request: Request):
    """Create a project, assigning its id and timestamps."""
    project = _collection(request).create(req)
    logger.info(f"Created project {project.id}")
    return project


@router.get("/projects/{project_id}", response_model=Project)
def get_project(project_id: str, request: Request):
    """Get a project by ID."""
    return _require(request, project_id)


@router.patch("/projects/{project_id}", response_model=Project)
def update_project(project_id: str, req: UpdateProjectRequest, request: Request):
    """Update the fields present in the request."""
    _require(request, project_id)
    changes = {name: getattr(req, name) for name in req.model_fields_set}
    return _collection(request).update(project_id, changes)


@router.put("/projects/{project_id}", response_model=Project)
def replace_project(project_id: str, req: CreateProjectRequest, request: Request):
    """Replace a project's fields and tasks, keeping id and creation time."""
    _require(request, project_id)
    changes = {
        "name": req.name,
        "description": req.description,
        "github_url": req.github_url,
        "tasks": req.tasks,
    }
    return _collection(request).update(project_id, changes)


@router.delete("/projects/{project_id}", response_model=DeleteResponse)
def delete_project(project_id: str, request: Request):
    """Delete a project and its tasks."""
    if not _collection(request).delete(project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    logger.info(f"Deleted project {project_id}")
    return DeleteResponse()


# =============================================================================
# App Factory
# =============================================================================


def create_app(collection: ProjectCollection | None = None) -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title="taskboard",
        description="Reference project collection for taskboard clients",
        version=__version__,
    )
    app.state.collection = collection if collection is not None else ProjectCollection()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.get("/")
    def root():
        return {"name": "taskboard", "version": __version__}

    return app
