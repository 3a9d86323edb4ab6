"""Render project tools."""

from typing import Optional

from pydantic import BaseModel, Field

from tool_registry import tool

from .client import RenderClient
from .common import ListInput, done, list_resources
from .validators import copy_set_fields, validate_project_id

RESOURCE = "project"


class ProjectListFilters(BaseModel):
    owner_id: Optional[str] = Field(default=None, description="Filter by owner (workspace) ID")
    name: Optional[str] = Field(default=None, description="Filter by project name")


class ProjectListInput(ListInput):
    """Input schema for render_project_list tool."""
    filters: ProjectListFilters = Field(default_factory=ProjectListFilters)


class ProjectIdInput(BaseModel):
    project_id: str = Field(description="The project ID (prj-xxxxx)")


class ProjectCreateInput(BaseModel):
    """Input schema for render_project_create tool."""
    name: str = Field(description="Project name")
    owner_id: str = Field(description="Owner (workspace) ID")
    description: Optional[str] = Field(default=None, description="Project description")


class ProjectUpdateInput(ProjectIdInput):
    """Input schema for render_project_update tool.

    An empty ``description`` is sent as-is and clears the description.
    """
    name: Optional[str] = Field(default=None, description="New project name")
    description: Optional[str] = Field(default=None, description="New project description")


@tool(
    resource=RESOURCE,
    operation="list",
    description="List projects",
    input_schema=ProjectListInput,
)
async def render_project_list(client: RenderClient, params: ProjectListInput):
    query = copy_set_fields({}, params.filters, {"owner_id": "ownerId", "name": "name"})
    return await list_resources(client, "/projects", "project", params, query)


@tool(
    resource=RESOURCE,
    operation="get",
    description="Get a project by ID",
    input_schema=ProjectIdInput,
)
async def render_project_get(client: RenderClient, params: ProjectIdInput):
    validate_project_id(params.project_id)
    return await client.request("GET", f"/projects/{params.project_id}")


@tool(
    resource=RESOURCE,
    operation="create",
    description="Create a project",
    input_schema=ProjectCreateInput,
)
async def render_project_create(client: RenderClient, params: ProjectCreateInput):
    body = {"name": params.name, "ownerId": params.owner_id}
    if params.description:
        body["description"] = params.description
    return await client.request("POST", "/projects", body)


@tool(
    resource=RESOURCE,
    operation="update",
    description="Update a project's name or description",
    input_schema=ProjectUpdateInput,
)
async def render_project_update(client: RenderClient, params: ProjectUpdateInput):
    validate_project_id(params.project_id)
    body = {}
    if params.name:
        body["name"] = params.name
    if params.description is not None:
        body["description"] = params.description
    return await client.request("PATCH", f"/projects/{params.project_id}", body)


@tool(
    resource=RESOURCE,
    operation="delete",
    description="Delete a project",
    input_schema=ProjectIdInput,
)
async def render_project_delete(client: RenderClient, params: ProjectIdInput):
    validate_project_id(params.project_id)
    await client.request("DELETE", f"/projects/{params.project_id}")
    return done(projectId=params.project_id)
