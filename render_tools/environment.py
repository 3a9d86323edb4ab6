"""Render project environment tools.

Every operation is scoped to a project; the project ID is validated
before anything else.
"""

from typing import Optional

from pydantic import BaseModel, Field

from tool_registry import tool

from .client import RenderClient
from .common import ListInput, done, list_resources
from .validators import split_ids, validate_environment_id, validate_project_id

RESOURCE = "environment"


class EnvironmentListInput(ListInput):
    """Input schema for render_environment_list tool."""
    project_id: str = Field(description="The project ID (prj-xxxxx)")


class EnvironmentRefInput(BaseModel):
    project_id: str = Field(description="The project ID (prj-xxxxx)")
    environment_id: str = Field(description="The environment ID (env-xxxxx)")


class EnvironmentCreateInput(BaseModel):
    """Input schema for render_environment_create tool."""
    project_id: str = Field(description="The project ID (prj-xxxxx)")
    name: str = Field(description="Environment name")
    protected_status: Optional[bool] = Field(
        default=None,
        description="Whether the environment is protected"
    )


class EnvironmentUpdateInput(EnvironmentRefInput):
    """Input schema for render_environment_update tool."""
    name: Optional[str] = Field(default=None, description="New environment name")
    protected_status: Optional[bool] = Field(
        default=None,
        description="Whether the environment is protected"
    )


class EnvironmentResourcesInput(EnvironmentRefInput):
    """Input schema for render_environment_add_resources / remove_resources."""
    resource_ids: str = Field(description="Comma-separated resource IDs")


def _protection(value: bool) -> str:
    return "protected" if value else "unprotected"


def _environments_path(project_id: str, environment_id: str = "", suffix: str = "") -> str:
    validate_project_id(project_id)
    path = f"/projects/{project_id}/environments"
    if environment_id:
        validate_environment_id(environment_id)
        path = f"{path}/{environment_id}{suffix}"
    return path


@tool(
    resource=RESOURCE,
    operation="list",
    description="List environments of a project",
    input_schema=EnvironmentListInput,
)
async def render_environment_list(client: RenderClient, params: EnvironmentListInput):
    path = _environments_path(params.project_id)
    return await list_resources(client, path, "environment", params)


@tool(
    resource=RESOURCE,
    operation="get",
    description="Get an environment of a project",
    input_schema=EnvironmentRefInput,
)
async def render_environment_get(client: RenderClient, params: EnvironmentRefInput):
    return await client.request(
        "GET", _environments_path(params.project_id, params.environment_id)
    )


@tool(
    resource=RESOURCE,
    operation="create",
    description="Create an environment in a project",
    input_schema=EnvironmentCreateInput,
)
async def render_environment_create(client: RenderClient, params: EnvironmentCreateInput):
    path = _environments_path(params.project_id)
    body = {"name": params.name}
    if params.protected_status is not None:
        body["protectedStatus"] = _protection(params.protected_status)
    return await client.request("POST", path, body)


@tool(
    resource=RESOURCE,
    operation="update",
    description="Update an environment's name or protection",
    input_schema=EnvironmentUpdateInput,
)
async def render_environment_update(client: RenderClient, params: EnvironmentUpdateInput):
    path = _environments_path(params.project_id, params.environment_id)
    body = {}
    if params.name:
        body["name"] = params.name
    if params.protected_status is not None:
        body["protectedStatus"] = _protection(params.protected_status)
    return await client.request("PATCH", path, body)


@tool(
    resource=RESOURCE,
    operation="delete",
    description="Delete an environment",
    input_schema=EnvironmentRefInput,
)
async def render_environment_delete(client: RenderClient, params: EnvironmentRefInput):
    await client.request(
        "DELETE", _environments_path(params.project_id, params.environment_id)
    )
    return done(environmentId=params.environment_id)


@tool(
    resource=RESOURCE,
    operation="addResources",
    description="Move resources into an environment",
    input_schema=EnvironmentResourcesInput,
)
async def render_environment_add_resources(client: RenderClient, params: EnvironmentResourcesInput):
    path = _environments_path(params.project_id, params.environment_id, "/resources")
    return await client.request("POST", path, {"resourceIds": split_ids(params.resource_ids)})


@tool(
    resource=RESOURCE,
    operation="removeResources",
    description="Remove resources from an environment",
    input_schema=EnvironmentResourcesInput,
)
async def render_environment_remove_resources(client: RenderClient, params: EnvironmentResourcesInput):
    path = _environments_path(params.project_id, params.environment_id, "/resources")
    return await client.request("DELETE", path, {"resourceIds": split_ids(params.resource_ids)})
