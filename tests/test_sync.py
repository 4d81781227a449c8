# tests/test_sync.py

import asyncio
import itertools
from datetime import UTC, datetime

from taskboard.application import ProjectSync
from taskboard.domain.project import (
    MutationRolledBack,
    NewProject,
    Project,
    ProjectChanges,
    ProjectCreated,
    ProjectDeleted,
    ProjectStatus,
)
from taskboard.domain.shared import (
    Err,
    NotFound,
    Ok,
    RemoteFailure,
    ValidationError,
)
from taskboard.domain.task import Task, TaskToggled
from taskboard.infrastructure.storage import ProjectStore

T0 = datetime(2024, 3, 1, tzinfo=UTC)
SERVER_TIME = datetime(2024, 3, 2, tzinfo=UTC)


class FakeRemote:
    """In-memory ProjectRemote whose write calls can be held open.

    With ``hold`` set, every create/update/replace/delete call parks on a
    future until the test calls ``release``. Operations named in ``fail``
    are refused with HTTP 500.
    """

    def __init__(self, projects=()):
        self.projects = {p.id: p for p in projects}
        self.calls: list[tuple[str, object]] = []
        self.fail: set[str] = set()
        self.hold = False
        self.waiting: list[asyncio.Future] = []
        self._ids = itertools.count(100)

    async def _gate(self, operation: str, subject: object) -> bool:
        self.calls.append((operation, subject))
        if not self.hold:
            return operation not in self.fail
        gate = asyncio.get_running_loop().create_future()
        self.waiting.append(gate)
        return await gate

    def release(self, index: int = 0, ok: bool = True) -> None:
        self.waiting[index].set_result(ok)

    def _failure(self, operation: str, status: int = 500) -> Err[RemoteFailure]:
        return Err(RemoteFailure(operation, f"HTTP {status}", status_code=status))

    async def list_all(self):
        return Ok(list(self.projects.values()))

    async def get(self, project_id):
        if project_id not in self.projects:
            return self._failure("get", 404)
        return Ok(self.projects[project_id])

    async def create(self, project):
        if not await self._gate("create", project):
            return self._failure("create")
        created = project.model_copy(
            update={"id": str(next(self._ids)), "created_at": SERVER_TIME, "updated_at": SERVER_TIME}
        )
        self.projects[created.id] = created
        return Ok(created)

    async def update(self, project):
        if not await self._gate("update", project):
            return self._failure("update")
        self.projects[project.id] = project
        return Ok(project)

    async def replace(self, project):
        if not await self._gate("replace", project):
            return self._failure("replace")
        self.projects[project.id] = project
        return Ok(project)

    async def delete(self, project_id):
        if not await self._gate("delete", project_id):
            return self._failure("delete")
        self.projects.pop(project_id, None)
        return Ok(None)


def make_project(project_id: str, *completed: bool) -> Project:
    tasks = tuple(
        Task(id=str(i), title=f"Task {i}", completed=done, created_at=T0)
        for i, done in enumerate(completed, start=1)
    )
    return Project(id=project_id, name=f"Project {project_id}", tasks=tasks, created_at=T0, updated_at=T0)


def make_sync(*projects: Project) -> tuple[ProjectSync, FakeRemote]:
    remote = FakeRemote(projects)
    return ProjectSync(remote, ProjectStore(projects)), remote


async def wait_for_calls(remote: FakeRemote, count: int) -> None:
    while len(remote.waiting) < count:
        await asyncio.sleep(0)


async def settle() -> None:
    for _ in range(10):
        await asyncio.sleep(0)


def stored(sync: ProjectSync, project_id: str) -> Project:
    result = sync.store.get(project_id)
    assert isinstance(result, Ok), result
    return result.value


# =============================================================================
# Optimistic visibility and reconciliation
# =============================================================================


def test_toggle_is_visible_before_remote_confirms():
    async def scenario():
        sync, remote = make_sync(make_project("1", False, False))
        remote.hold = True

        pending = asyncio.create_task(sync.toggle_task("1", "1"))
        await wait_for_calls(remote, 1)

        local = stored(sync, "1")
        assert local.progress == 50
        assert local.status == ProjectStatus.IN_PROGRESS

        remote.release()
        result = await pending

        assert isinstance(result, Ok)
        confirmed = stored(sync, "1")
        assert confirmed == result.value
        assert confirmed.progress == 50
        assert confirmed.status == ProjectStatus.IN_PROGRESS

    asyncio.run(scenario())


def test_add_task_failure_restores_snapshot():
    async def scenario():
        sync, remote = make_sync(make_project("1", True, False))
        remote.fail.add("update")
        before = stored(sync, "1")

        result = await sync.add_task("1", "Never persisted")

        assert isinstance(result, Err)
        assert isinstance(result.error, RemoteFailure)
        after = stored(sync, "1")
        assert after == before
        assert all(task.title != "Never persisted" for task in after.tasks)

    asyncio.run(scenario())


def test_toggle_twice_returns_to_original_state():
    async def scenario():
        sync, _ = make_sync(make_project("1", False, True))
        original = stored(sync, "1")

        await sync.toggle_task("1", "1")
        result = await sync.toggle_task("1", "1")

        assert isinstance(result, Ok)
        assert result.value.tasks == original.tasks
        assert result.value.status == original.status
        assert result.value.progress == original.progress

    asyncio.run(scenario())


def test_update_fields_uses_full_replace():
    async def scenario():
        sync, remote = make_sync(make_project("1", True))

        result = await sync.update_project_fields("1", ProjectChanges(name="Renamed", github_url=""))

        assert isinstance(result, Ok)
        assert remote.calls[0][0] == "replace"
        assert stored(sync, "1").name == "Renamed"
        assert stored(sync, "1").github_url is None
        assert stored(sync, "1").progress == 100

    asyncio.run(scenario())


# =============================================================================
# Ordering
# =============================================================================


def test_second_mutation_waits_and_snapshots_first_result():
    async def scenario():
        sync, remote = make_sync(make_project("1", False, False))
        remote.hold = True

        first = asyncio.create_task(sync.toggle_task("1", "1"))
        await wait_for_calls(remote, 1)
        second = asyncio.create_task(sync.remove_task("1", "2"))
        await settle()

        # Second is queued behind the first; nothing sent yet
        assert len(remote.calls) == 1

        remote.release(0, ok=True)
        assert isinstance(await first, Ok)
        await wait_for_calls(remote, 2)

        sent = remote.calls[1][1]
        assert [(t.id, t.completed) for t in sent.tasks] == [("1", True)]

        # Failing the second restores its snapshot: the first's result
        remote.release(1, ok=False)
        assert isinstance(await second, Err)
        restored = stored(sync, "1")
        assert [(t.id, t.completed) for t in restored.tasks] == [("1", True), ("2", False)]
        assert restored.progress == 50

    asyncio.run(scenario())


def test_different_projects_run_concurrently():
    async def scenario():
        sync, remote = make_sync(make_project("1", False), make_project("2", False))
        remote.hold = True

        first = asyncio.create_task(sync.toggle_task("1", "1"))
        second = asyncio.create_task(sync.toggle_task("2", "1"))
        await wait_for_calls(remote, 2)

        remote.release(1)
        remote.release(0)
        results = await asyncio.gather(first, second)

        assert all(isinstance(r, Ok) for r in results)
        assert stored(sync, "1").status == ProjectStatus.COMPLETED
        assert stored(sync, "2").status == ProjectStatus.COMPLETED

    asyncio.run(scenario())


def test_abandoned_mutation_keeps_project_serialized():
    async def scenario():
        sync, remote = make_sync(make_project("1", False, False))
        original = stored(sync, "1")
        remote.hold = True

        abandoned = asyncio.create_task(sync.toggle_task("1", "1"))
        await wait_for_calls(remote, 1)
        abandoned.cancel()
        await asyncio.gather(abandoned, return_exceptions=True)

        later = asyncio.create_task(sync.remove_task("1", "2"))
        await settle()
        # The later change waits until the abandoned one has reconciled
        assert len(remote.calls) == 1

        remote.release(0, ok=False)
        await wait_for_calls(remote, 2)
        sent = remote.calls[1][1]
        assert [(t.id, t.completed) for t in sent.tasks] == [("1", False)]

        remote.release(1, ok=False)
        assert isinstance(await later, Err)
        await sync.drain()

        assert stored(sync, "1") == original
        assert stored(sync, "1").tasks == remote.projects["1"].tasks

    asyncio.run(scenario())


def test_change_after_abandoned_failure_builds_on_rolled_back_state():
    async def scenario():
        sync, remote = make_sync(make_project("1", False, False))
        remote.hold = True

        abandoned = asyncio.create_task(sync.toggle_task("1", "1"))
        await wait_for_calls(remote, 1)
        abandoned.cancel()
        await asyncio.gather(abandoned, return_exceptions=True)

        later = asyncio.create_task(sync.remove_task("1", "2"))
        remote.release(0, ok=False)
        await wait_for_calls(remote, 2)
        remote.release(1, ok=True)
        latest = await later
        await sync.drain()

        assert isinstance(latest, Ok)
        assert stored(sync, "1") == latest.value
        assert [(t.id, t.completed) for t in stored(sync, "1").tasks] == [("1", False)]

    asyncio.run(scenario())


def test_abandoned_mutation_still_reconciles():
    async def scenario():
        sync, remote = make_sync(make_project("1", True, True))
        before = stored(sync, "1")
        remote.hold = True

        abandoned = asyncio.create_task(sync.toggle_task("1", "2"))
        await wait_for_calls(remote, 1)
        abandoned.cancel()
        await asyncio.gather(abandoned, return_exceptions=True)
        assert stored(sync, "1").status == ProjectStatus.IN_PROGRESS

        remote.release(0, ok=False)
        await sync.drain()

        assert stored(sync, "1") == before

    asyncio.run(scenario())


# =============================================================================
# Create and delete
# =============================================================================


def test_create_is_provisional_until_confirmed():
    async def scenario():
        sync, remote = make_sync()
        remote.hold = True

        pending = asyncio.create_task(
            sync.create_project(NewProject(name="Launch", tasks=[Task(title="Plan")]))
        )
        await wait_for_calls(remote, 1)

        [provisional] = list(sync.list_projects())
        assert provisional.id.startswith("tmp-")
        assert provisional.status == ProjectStatus.NOT_STARTED

        remote.release()
        result = await pending

        assert isinstance(result, Ok)
        assert result.value.id == "100"
        assert result.value.created_at == SERVER_TIME
        assert [p.id for p in sync.list_projects()] == ["100"]

        # The temporary id keeps resolving to the confirmed project
        remote.hold = False
        follow_up = await sync.add_task(provisional.id, "Ship")
        assert isinstance(follow_up, Ok)
        assert follow_up.value.id == "100"
        assert [t.title for t in stored(sync, "100").tasks] == ["Plan", "Ship"]

    asyncio.run(scenario())


def test_mutation_on_temporary_id_waits_for_create():
    async def scenario():
        sync, remote = make_sync()
        remote.hold = True

        creating = asyncio.create_task(sync.create_project(NewProject(name="Launch")))
        await wait_for_calls(remote, 1)
        [provisional] = list(sync.list_projects())

        adding = asyncio.create_task(sync.add_task(provisional.id, "First"))
        await settle()
        assert len(remote.calls) == 1

        remote.release(0)
        await creating
        await wait_for_calls(remote, 2)
        assert remote.calls[1][1].id == "100"
        remote.release(1)

        result = await adding
        assert isinstance(result, Ok)
        assert result.value.id == "100"

    asyncio.run(scenario())


def test_create_failure_removes_provisional_project():
    async def scenario():
        sync, remote = make_sync(make_project("1"))
        remote.fail.add("create")

        result = await sync.create_project(NewProject(name="Doomed"))

        assert isinstance(result, Err)
        assert isinstance(result.error, RemoteFailure)
        assert [p.id for p in sync.list_projects()] == ["1"]

    asyncio.run(scenario())


def test_delete_failure_brings_project_back():
    async def scenario():
        seven = make_project("7", True, False, False)
        sync, remote = make_sync(make_project("5"), seven, make_project("9"))
        remote.hold = True

        pending = asyncio.create_task(sync.delete_project("7"))
        await wait_for_calls(remote, 1)
        assert [p.id for p in sync.list_projects()] == ["5", "9"]

        remote.release(ok=False)
        result = await pending

        assert isinstance(result, Err)
        assert isinstance(result.error, RemoteFailure)
        assert [p.id for p in sync.list_projects()] == ["5", "7", "9"]
        assert stored(sync, "7").tasks == seven.tasks

    asyncio.run(scenario())


def test_delete_success_removes_project():
    async def scenario():
        sync, remote = make_sync(make_project("1"), make_project("2"))

        result = await sync.delete_project("1")

        assert result == Ok(None)
        assert [p.id for p in sync.list_projects()] == ["2"]
        assert "1" not in remote.projects

    asyncio.run(scenario())


# =============================================================================
# Validation and lookups
# =============================================================================


def test_validation_errors_change_nothing():
    async def scenario():
        sync, remote = make_sync(make_project("1", False))
        before = stored(sync, "1")

        blank_task = await sync.add_task("1", "  ")
        blank_name = await sync.create_project(NewProject(name=""))
        blank_edit = await sync.update_project_fields("1", ProjectChanges(name=""))

        for result in (blank_task, blank_name, blank_edit):
            assert isinstance(result, Err)
            assert isinstance(result.error, ValidationError)
        assert remote.calls == []
        assert [p.id for p in sync.list_projects()] == ["1"]
        assert stored(sync, "1") == before

    asyncio.run(scenario())


def test_missing_ids_are_not_found():
    async def scenario():
        sync, remote = make_sync(make_project("1", False))

        assert await sync.toggle_task("9", "1") == Err(NotFound("project", "9"))
        assert await sync.toggle_task("1", "9") == Err(NotFound("task", "9"))
        assert await sync.delete_project("9") == Err(NotFound("project", "9"))
        assert remote.calls == []

    asyncio.run(scenario())


def test_get_project_falls_back_to_remote():
    async def scenario():
        remote = FakeRemote([make_project("4", True)])
        sync = ProjectSync(remote)

        fetched = await sync.get_project("4")
        missing = await sync.get_project("5")

        assert isinstance(fetched, Ok)
        assert stored(sync, "4") == fetched.value
        assert missing == Err(NotFound("project", "5"))

    asyncio.run(scenario())


def test_refresh_keeps_in_flight_local_state():
    async def scenario():
        sync, remote = make_sync(make_project("1", False), make_project("2", False))
        remote.projects["3"] = make_project("3")
        remote.hold = True

        pending = asyncio.create_task(sync.toggle_task("1", "1"))
        await wait_for_calls(remote, 1)

        refreshed = await sync.refresh()

        assert isinstance(refreshed, Ok)
        assert [p.id for p in refreshed.value] == ["1", "2", "3"]
        assert stored(sync, "1").status == ProjectStatus.COMPLETED

        remote.release()
        await pending

    asyncio.run(scenario())


# =============================================================================
# Events and listings
# =============================================================================


def test_listeners_see_confirmed_and_rolled_back_mutations():
    async def scenario():
        sync, remote = make_sync(make_project("1", False))
        events = []
        unsubscribe = sync.subscribe(events.append)

        await sync.toggle_task("1", "1")
        remote.fail.add("delete")
        await sync.delete_project("1")
        remote.fail.clear()
        created = await sync.create_project(NewProject(name="New"))
        await sync.delete_project(created.value.id)
        unsubscribe()
        await sync.toggle_task("1", "1")

        kinds = [type(event) for event in events]
        assert kinds == [TaskToggled, MutationRolledBack, ProjectCreated, ProjectDeleted]
        assert events[1].operation == "delete"
        assert events[2].project_id == "100"
        assert events[2].temporary_id.startswith("tmp-")

    asyncio.run(scenario())


def test_listing_does_not_change_after_mutation():
    async def scenario():
        sync, _ = make_sync(make_project("1", False))

        listing = sync.list_projects()
        await sync.toggle_task("1", "1")

        assert [p.status for p in listing] == [ProjectStatus.NOT_STARTED]
        assert [p.status for p in sync.list_projects()] == [ProjectStatus.COMPLETED]

    asyncio.run(scenario())


def test_bookkeeping_is_dropped_once_mutations_settle():
    async def scenario():
        sync, remote = make_sync(make_project("1", False), make_project("2"))

        await sync.toggle_task("1", "1")
        remote.fail.add("update")
        await sync.toggle_task("1", "1")
        remote.fail.clear()
        await sync.delete_project("2")

        created = await sync.create_project(NewProject(name="Short-lived"))
        await sync.add_task(created.value.id, "Only task")
        await sync.delete_project(created.value.id)

        remote.fail.add("create")
        await sync.create_project(NewProject(name="Refused"))
        await sync.drain()

        assert sync._locks == {}
        assert not sync._users
        assert sync._generations == {}
        assert not sync._inflight
        assert sync._aliases == {}
        assert sync._creating == {}
        assert [p.id for p in sync.list_projects()] == ["1"]

    asyncio.run(scenario())
