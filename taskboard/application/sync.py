"""Optimistic synchronization between the project store and the remote store.

Every mutation follows the same sequence:

1. Snapshot   - copy the project as it is now (nothing for create).
2. Apply      - build the next project through the domain layer and write
                it to the store. Readers see it immediately.
3. Remote     - send the change to the remote store. This is the only
                await point.
4. Success    - store the remote's canonical project (create swaps the
                temporary id for the real one).
5. Failure    - restore the snapshot (create drops the provisional
                project, delete puts it back) and return RemoteFailure.

Mutations on the same project id run one at a time: the next one takes its
snapshot only after the previous one has reconciled. Different ids proceed
concurrently.

Each mutation runs in its own task, which holds the per-id lock from
snapshot to reconcile. A caller may stop waiting (e.g. cancel on timeout);
the task carries on, so the project stays serialized until the abandoned
change has been confirmed or rolled back. Each apply also bumps a per-id
generation, and a response whose generation is no longer current is
discarded rather than written over newer local state.
"""

import asyncio
import itertools
import logging
from collections import Counter
from collections.abc import AsyncIterator, Awaitable, Callable, Coroutine
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from taskboard.application import project_service, task_service
from taskboard.domain.project import (
    MutationRolledBack,
    NewProject,
    Project,
    ProjectChanges,
    ProjectDeleted,
)
from taskboard.domain.shared import (
    ConflictStale,
    DomainEvent,
    Err,
    NotFound,
    Ok,
    RemoteFailure,
    Result,
    TrackerError,
)
from taskboard.domain.types import TemporaryId
from taskboard.infrastructure.remote import ProjectRemote
from taskboard.infrastructure.storage import ProjectListing, ProjectStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[DomainEvent], None]
Change = Callable[[Project], Result[tuple[Project, DomainEvent], TrackerError]]
Send = Callable[[Project], Awaitable[Result[Project, RemoteFailure]]]


class ProjectSync:
    """Applies project and task mutations optimistically.

    This is the surface interfaces call. Reads come straight from the
    store; writes go through the snapshot/apply/reconcile sequence.

    Args:
        remote: The remote project collection.
        store: Store to keep in sync. A fresh empty one by default.
    """

    def __init__(self, remote: ProjectRemote, store: ProjectStore | None = None) -> None:
        self.remote = remote
        self.store = store if store is not None else ProjectStore()
        # Per-id bookkeeping, dropped once nothing holds or awaits the id
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: Counter[str] = Counter()
        self._generations: dict[str, int] = {}
        self._inflight: Counter[str] = Counter()
        self._aliases: dict[str, str] = {}
        self._creating: dict[str, asyncio.Task] = {}
        self._pending: set[asyncio.Task] = set()
        self._listeners: list[Listener] = []
        self._sequence = itertools.count(1)

    # =========================================================================
    # Events
    # =========================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with every confirmed or rolled-back mutation.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, event: DomainEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # =========================================================================
    # Reads
    # =========================================================================

    def list_projects(self) -> ProjectListing:
        """All projects currently in the store."""
        return self.store.list()

    async def get_project(self, project_id: str) -> Result[Project, TrackerError]:
        """Get a project from the store, fetching it from the remote if absent.

        Returns:
            Ok(Project), Err(NotFound) if neither the store nor the remote
            has it, or Err(RemoteFailure) if the remote could not be asked.
        """
        cached = self.store.get(self._resolve(project_id))
        if isinstance(cached, Ok) or TemporaryId.is_temporary(project_id):
            return cached

        async with self._exclusive(project_id) as key:
            cached = self.store.get(key)
            if isinstance(cached, Ok):
                return cached

            fetched = await self.remote.get(key)
            if isinstance(fetched, Err):
                if fetched.error.status_code == 404:
                    return Err(NotFound("project", key))
                return fetched

            self.store.upsert(fetched.value)
            return fetched

    async def refresh(self) -> Result[ProjectListing, RemoteFailure]:
        """Reload the store from the remote collection.

        Projects with a mutation still in flight keep their local state, so
        a refresh never undoes an optimistic write.
        """
        fetched = await self.remote.list_all()
        if isinstance(fetched, Err):
            return fetched

        local = {p.id: p for p in self.store.list() if self._inflight[p.id]}
        merged: list[Project] = []
        for project in fetched.value:
            if self._inflight[project.id]:
                # Deleted locally while in flight: local has no entry
                if project.id in local:
                    merged.append(local.pop(project.id))
            else:
                merged.append(project)
        merged.extend(local.values())

        self.store.load(merged)
        logger.info(f"Loaded {len(merged)} projects from remote")
        return Ok(self.store.list())

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create_project(self, fields: NewProject) -> Result[Project, TrackerError]:
        """Create a project, visible at once under a temporary id.

        On success the store entry is replaced, in place, by the remote's
        project with its real id. The temporary id keeps resolving to it.
        Mutations addressed to the temporary id wait for the create first.
        """
        temp_id = str(TemporaryId.generate(next(self._sequence)))
        built = project_service.build_project(fields, temp_id)
        if isinstance(built, Err):
            return built

        provisional, event = built.value
        self.store.upsert(provisional)
        self._inflight[temp_id] += 1
        task = self._spawn(self._reconcile_create(temp_id, provisional, event))
        self._creating[temp_id] = task
        return await asyncio.shield(task)

    async def update_project_fields(
        self,
        project_id: str,
        changes: ProjectChanges,
    ) -> Result[Project, TrackerError]:
        """Edit name, description or GitHub URL."""
        return await self._mutate(
            project_id,
            "update",
            lambda project: project_service.edit_project(project, changes),
            self.remote.replace,
        )

    async def add_task(
        self,
        project_id: str,
        title: str,
        description: str | None = None,
    ) -> Result[Project, TrackerError]:
        """Append a task to a project."""
        return await self._mutate(
            project_id,
            "add task",
            lambda project: task_service.add_task(project, title, description),
            self.remote.update,
        )

    async def toggle_task(self, project_id: str, task_id: str) -> Result[Project, TrackerError]:
        """Flip a task's completion flag."""
        return await self._mutate(
            project_id,
            "toggle task",
            lambda project: task_service.toggle_task(project, task_id),
            self.remote.update,
        )

    async def remove_task(self, project_id: str, task_id: str) -> Result[Project, TrackerError]:
        """Remove a task from a project."""
        return await self._mutate(
            project_id,
            "remove task",
            lambda project: task_service.remove_task(project, task_id),
            self.remote.update,
        )

    async def delete_project(self, project_id: str) -> Result[None, TrackerError]:
        """Delete a project and its tasks.

        The project disappears from the store at once and comes back, in
        its old position, if the remote refuses.
        """
        return await self._settle(self._run_delete(project_id))

    async def drain(self) -> None:
        """Wait for every remote call still running, abandoned ones included."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # =========================================================================
    # Protocol
    # =========================================================================

    async def _mutate(
        self,
        project_id: str,
        operation: str,
        change: Change,
        send: Send,
    ) -> Result[Project, TrackerError]:
        return await self._settle(self._run_update(project_id, operation, change, send))

    async def _run_update(
        self,
        project_id: str,
        operation: str,
        change: Change,
        send: Send,
    ) -> Result[Project, TrackerError]:
        async with self._exclusive(project_id) as key:
            snapshot = self.store.snapshot(key)
            if isinstance(snapshot, Err):
                return snapshot

            before = snapshot.value
            changed = change(before)
            if isinstance(changed, Err):
                return changed

            after, event = changed.value
            generation = self._apply(after)
            logger.info(f"Applied {operation} to project {key} locally")
            try:
                outcome = await send(after)
            finally:
                self._done(key)

            if not self._is_current(key, generation):
                return self._discard(key, generation)

            if isinstance(outcome, Err):
                self.store.upsert(before)
                return self._rolled_back(key, operation, outcome.error)

            self.store.upsert(outcome.value)
            logger.info(f"Remote confirmed {operation} on project {key}")
            self._publish(event)
            return outcome

    async def _run_delete(self, project_id: str) -> Result[None, TrackerError]:
        async with self._exclusive(project_id) as key:
            snapshot = self.store.snapshot(key)
            if isinstance(snapshot, Err):
                return snapshot

            position = self.store.position(key)
            self.store.remove(key)
            generation = self._bump(key)
            logger.info(f"Deleted project {key} locally")
            try:
                outcome = await self.remote.delete(key)
            finally:
                self._done(key)

            if not self._is_current(key, generation):
                self._discard(key, generation)
                return Ok(None)

            if isinstance(outcome, Err):
                self.store.upsert(snapshot.value, position)
                return self._rolled_back(key, "delete", outcome.error)

            self.store.remove(key)
            self._forget_aliases(key)
            logger.info(f"Remote confirmed deletion of project {key}")
            self._publish(ProjectDeleted(project_id=key))
            return Ok(None)

    async def _reconcile_create(
        self,
        temp_id: str,
        provisional: Project,
        event: DomainEvent,
    ) -> Result[Project, TrackerError]:
        try:
            outcome = await self.remote.create(provisional)
        finally:
            self._done(temp_id)
            self._creating.pop(temp_id, None)

        if isinstance(outcome, Err):
            self.store.remove(temp_id)
            return self._rolled_back(temp_id, "create", outcome.error)

        confirmed = outcome.value
        self.store.replace_id(temp_id, confirmed)
        self._aliases[temp_id] = confirmed.id
        logger.info(f"Remote confirmed project {confirmed.id} (was {temp_id})")
        self._publish(
            event.model_copy(update={"project_id": confirmed.id, "temporary_id": temp_id})
        )
        return outcome

    def _rolled_back(self, key: str, operation: str, error: RemoteFailure) -> Err[RemoteFailure]:
        logger.warning(f"Rolled back {operation} on project {key}: {error.message}")
        self._publish(MutationRolledBack(project_id=key, operation=operation, reason=error.message))
        return Err(error)

    def _discard(self, key: str, generation: int) -> Result[Project, NotFound]:
        stale = ConflictStale(key, generation)
        logger.debug(stale.message)
        return self.store.get(key)

    # =========================================================================
    # Bookkeeping
    # =========================================================================

    def _apply(self, project: Project) -> int:
        self.store.upsert(project)
        return self._bump(project.id)

    def _bump(self, key: str) -> int:
        self._generations[key] = self._generations.get(key, 0) + 1
        self._inflight[key] += 1
        return self._generations[key]

    def _done(self, key: str) -> None:
        self._inflight[key] -= 1
        if self._inflight[key] <= 0:
            del self._inflight[key]

    def _is_current(self, key: str, generation: int) -> bool:
        return self._generations.get(key) == generation

    def _resolve(self, project_id: str) -> str:
        return self._aliases.get(project_id, project_id)

    def _forget_aliases(self, key: str) -> None:
        for temp_id, confirmed_id in list(self._aliases.items()):
            if confirmed_id == key:
                del self._aliases[temp_id]

    def _spawn(self, coro: Coroutine[Any, Any, T]) -> "asyncio.Task[T]":
        task = asyncio.ensure_future(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _settle(self, coro: Coroutine[Any, Any, T]) -> T:
        # Shielded: abandoning the wait must not abandon the mutation
        return await asyncio.shield(self._spawn(coro))

    @asynccontextmanager
    async def _exclusive(self, project_id: str) -> AsyncIterator[str]:
        """Hold the per-project lock, yielding the project's current id.

        Waits for a pending create of a temporary id first, then follows
        the temporary id to the confirmed one. The lock and generation of
        an id are dropped when the last holder or waiter leaves.
        """
        pending = self._creating.get(project_id)
        if pending is not None:
            await asyncio.wait([pending])

        while True:
            key = self._resolve(project_id)
            self._users[key] += 1
            try:
                async with self._locks.setdefault(key, asyncio.Lock()):
                    if self._resolve(project_id) == key:
                        yield key
                        return
            finally:
                self._users[key] -= 1
                if self._users[key] <= 0:
                    del self._users[key]
                    self._locks.pop(key, None)
                    self._generations.pop(key, None)
