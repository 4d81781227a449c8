"""Remote project store client.

Talks to the REST collection that persists projects:

    POST   /projects          create, server assigns id and timestamps
    GET    /projects          list
    GET    /projects/{id}     fetch one
    PATCH  /projects/{id}     partial update
    PUT    /projects/{id}     full replace
    DELETE /projects/{id}     remove

Every call returns ``Ok`` or ``Err(RemoteFailure)``. Transport errors,
timeouts, non-2xx responses and unparseable bodies are all failures; no
call is retried here.
"""

import logging
from typing import Any, Protocol

import httpx
import pydantic

from taskboard.domain.project import Project
from taskboard.domain.shared import Err, Ok, RemoteFailure, Result, map_result

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 10.0

_project_list = pydantic.TypeAdapter(list[Project])


class ProjectRemote(Protocol):
    """CRUD operations over the remote Project resource."""

    async def list_all(self) -> Result[list[Project], RemoteFailure]: ...

    async def get(self, project_id: str) -> Result[Project, RemoteFailure]: ...

    async def create(self, project: Project) -> Result[Project, RemoteFailure]: ...

    async def update(self, project: Project) -> Result[Project, RemoteFailure]: ...

    async def replace(self, project: Project) -> Result[Project, RemoteFailure]: ...

    async def delete(self, project_id: str) -> Result[None, RemoteFailure]: ...


class HttpProjectRemote:
    """ProjectRemote over HTTP using httpx.

    Args:
        base_url: Root URL of the project API.
        timeout: Per-request timeout in seconds.
        client: Pre-built AsyncClient (e.g. with a mock transport). When
            given, the caller owns its lifetime.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpProjectRemote":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> Result[httpx.Response, RemoteFailure]:
        url = f"{self.base_url}{path}"
        try:
            client = await self._get_client()
            response = await client.request(method, url, json=payload)
        except httpx.TimeoutException:
            logger.error(f"{method} {url} timed out after {self.timeout}s")
            return Err(RemoteFailure(operation, "request timed out"))
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            return Err(RemoteFailure(operation, f"cannot reach {self.base_url}: {e}"))

        if not response.is_success:
            logger.error(f"{method} {url} returned {response.status_code}")
            return Err(
                RemoteFailure(
                    operation,
                    f"HTTP {response.status_code}",
                    status_code=response.status_code,
                )
            )
        return Ok(response)

    def _parse(self, operation: str, response: httpx.Response, adapter: Any) -> Result[Any, RemoteFailure]:
        try:
            return Ok(adapter(response.json()))
        except ValueError as e:
            logger.error(f"Invalid {operation} response body: {e}")
            return Err(
                RemoteFailure(
                    operation,
                    "invalid response body",
                    status_code=response.status_code,
                )
            )

    async def list_all(self) -> Result[list[Project], RemoteFailure]:
        result = await self._request("list", "GET", "/projects")
        if isinstance(result, Err):
            return result
        return self._parse("list", result.value, _project_list.validate_python)

    async def get(self, project_id: str) -> Result[Project, RemoteFailure]:
        result = await self._request("get", "GET", f"/projects/{project_id}")
        if isinstance(result, Err):
            return result
        return self._parse("get", result.value, Project.model_validate)

    async def create(self, project: Project) -> Result[Project, RemoteFailure]:
        """POST the project without its (temporary) id."""
        payload = project.to_payload(include_id=False)
        result = await self._request("create", "POST", "/projects", payload)
        if isinstance(result, Err):
            return result
        return self._parse("create", result.value, Project.model_validate)

    async def update(self, project: Project) -> Result[Project, RemoteFailure]:
        """PATCH the project's fields, tasks and derived values."""
        payload = project.to_payload(include_id=False)
        result = await self._request("update", "PATCH", f"/projects/{project.id}", payload)
        if isinstance(result, Err):
            return result
        return self._parse("update", result.value, Project.model_validate)

    async def replace(self, project: Project) -> Result[Project, RemoteFailure]:
        """PUT the full project representation."""
        payload = project.to_payload(include_id=False)
        result = await self._request("replace", "PUT", f"/projects/{project.id}", payload)
        if isinstance(result, Err):
            return result
        return self._parse("replace", result.value, Project.model_validate)

    async def delete(self, project_id: str) -> Result[None, RemoteFailure]:
        result = await self._request("delete", "DELETE", f"/projects/{project_id}")
        return map_result(result, lambda _: None)
