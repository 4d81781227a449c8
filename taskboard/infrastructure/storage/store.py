"""In-memory project store.

The client-side cache every interface renders from. It owns all Project
instances, performs no network I/O and never recomputes derived fields:
callers hand it projects that were already built through the domain
layer.

Projects are frozen models, so handing one out never exposes store state
to mutation. Each operation below is a single synchronous step; under
asyncio no two of them can interleave.
"""

from collections.abc import Iterable, Iterator

from taskboard.domain.project import Project
from taskboard.domain.shared import Err, NotFound, Ok, Result


class ProjectListing:
    """Restartable view of the projects committed when it was created.

    Iterating it any number of times yields the same projects in store
    order; later store writes do not show up in it.
    """

    def __init__(self, projects: Iterable[Project]) -> None:
        self._projects = tuple(projects)

    def __iter__(self) -> Iterator[Project]:
        yield from self._projects

    def __len__(self) -> int:
        return len(self._projects)

    def __repr__(self) -> str:
        return f"ProjectListing({[p.id for p in self._projects]!r})"


class ProjectStore:
    """Authoritative in-memory collection of projects keyed by id.

    Insertion order is display order. Replacing an existing project keeps
    its position.
    """

    def __init__(self, projects: Iterable[Project] = ()) -> None:
        self._projects: dict[str, Project] = {}
        self.load(projects)

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._projects

    def __len__(self) -> int:
        return len(self._projects)

    def get(self, project_id: str) -> Result[Project, NotFound]:
        """Get a project by id, or Err(NotFound)."""
        project = self._projects.get(project_id)
        if project is None:
            return Err(NotFound("project", project_id))
        return Ok(project)

    def list(self) -> ProjectListing:
        """All projects as of this call."""
        return ProjectListing(self._projects.values())

    def position(self, project_id: str) -> int | None:
        """Index of a project in display order."""
        for index, key in enumerate(self._projects):
            if key == project_id:
                return index
        return None

    def upsert(self, project: Project, position: int | None = None) -> None:
        """Insert or replace a project by id.

        Args:
            project: The project to store.
            position: Where to insert a project that is not stored yet.
                Defaults to the end. Ignored for replacements.
        """
        if project.id in self._projects or position is None:
            self._projects[project.id] = project
            return

        items = list(self._projects.items())
        items.insert(position, (project.id, project))
        self._projects = dict(items)

    def replace_id(self, old_id: str, project: Project) -> None:
        """Swap the entry stored under ``old_id`` for ``project``.

        Used when a provisional project is confirmed under its real id. The
        entry keeps its position. If ``old_id`` is gone the project is
        appended.
        """
        if old_id not in self._projects:
            self._projects[project.id] = project
            return

        replaced: dict[str, Project] = {}
        for key, value in self._projects.items():
            if key == old_id:
                replaced[project.id] = project
            elif key != project.id:
                replaced[key] = value
        self._projects = replaced

    def remove(self, project_id: str) -> None:
        """Delete a project and its tasks. No-op when absent."""
        self._projects.pop(project_id, None)

    def snapshot(self, project_id: str) -> Result[Project, NotFound]:
        """Deep copy of a project, for restoring it later."""
        project = self._projects.get(project_id)
        if project is None:
            return Err(NotFound("project", project_id))
        return Ok(project.model_copy(deep=True))

    def load(self, projects: Iterable[Project]) -> None:
        """Replace the whole collection."""
        self._projects = {project.id: project for project in projects}
