"""Request schemas for the reference project API.

These Pydantic models define the request bodies. Responses use the domain
``Project`` model directly, so derived ``status`` and ``progress`` are
always recomputed on the way out. Incoming ``status``/``progress`` keys
are ignored.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskboard.domain.task import Task


def _strip_name(value: Optional[str]) -> str:
    # Only runs for names actually sent, so None here is an explicit null
    if value is None or not value.strip():
        raise ValueError("Project name cannot be empty")
    return value.strip()


class CreateProjectRequest(BaseModel):
    """Request to create a project, also used for full replacement."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    description: Optional[str] = None
    github_url: Optional[str] = Field(default=None, alias="githubUrl")
    tasks: list[Task] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        return _strip_name(value)


class UpdateProjectRequest(BaseModel):
    """Request to update some of a project's fields."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    github_url: Optional[str] = Field(default=None, alias="githubUrl")
    tasks: Optional[list[Task]] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: Optional[str]) -> str:
        return _strip_name(value)


class DeleteResponse(BaseModel):
    status: str = "deleted"
