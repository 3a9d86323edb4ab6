"""Render environment group tools.

Environment groups hold shared environment variables and secret files
that can be linked to several services.
"""

from typing import Optional
from urllib.parse import quote

from pydantic import BaseModel, Field

from tool_registry import tool

from .client import RenderClient
from .common import ListInput, done, list_resources
from .environment_variable import EnvVarValue
from .secret_file import NAME_SAFE_CHARS, SecretFileValue
from .validators import copy_set_fields, validate_env_group_id, validate_service_id

RESOURCE = "environmentGroup"


# -----------------------------------------------------------------------------
# Input Schemas
# -----------------------------------------------------------------------------

class EnvGroupListFilters(BaseModel):
    owner_id: Optional[str] = Field(default=None, description="Filter by owner (workspace) ID")
    name: Optional[str] = Field(default=None, description="Filter by group name")


class EnvGroupListInput(ListInput):
    """Input schema for render_environment_group_list tool."""
    filters: EnvGroupListFilters = Field(default_factory=EnvGroupListFilters)


class EnvGroupIdInput(BaseModel):
    env_group_id: str = Field(description="The environment group ID (evg-xxxxx)")


class EnvGroupCreateInput(BaseModel):
    """Input schema for render_environment_group_create tool."""
    name: str = Field(description="Group name")
    owner_id: str = Field(description="Owner (workspace) ID")


class EnvGroupUpdateInput(EnvGroupIdInput):
    """Input schema for render_environment_group_update tool."""
    name: Optional[str] = Field(default=None, description="New group name")


class EnvGroupServiceInput(EnvGroupIdInput):
    """Input schema for render_environment_group_link_service / unlink_service."""
    service_id: str = Field(description="The service ID (srv-xxxxx)")


class EnvGroupEnvVarKeyInput(EnvGroupIdInput):
    env_var_key: str = Field(description="Environment variable name")


class EnvGroupEnvVarInput(EnvVarValue, EnvGroupIdInput):
    """Input schema for render_environment_group_update_env_var tool."""


class EnvGroupSecretFileNameInput(EnvGroupIdInput):
    secret_file_name: str = Field(description="Secret file name")


class EnvGroupSecretFileInput(SecretFileValue, EnvGroupIdInput):
    """Input schema for render_environment_group_update_secret_file tool."""


def _path(env_group_id: str, suffix: str = "") -> str:
    validate_env_group_id(env_group_id)
    return f"/env-groups/{env_group_id}{suffix}"


def _secret_file_path(env_group_id: str, name: str) -> str:
    return _path(env_group_id, f"/secret-files/{quote(name, safe=NAME_SAFE_CHARS)}")


# -----------------------------------------------------------------------------
# Tool Implementations
# -----------------------------------------------------------------------------

@tool(
    resource=RESOURCE,
    operation="list",
    description="List environment groups",
    input_schema=EnvGroupListInput,
)
async def render_environment_group_list(client: RenderClient, params: EnvGroupListInput):
    query = copy_set_fields({}, params.filters, {"owner_id": "ownerId", "name": "name"})
    return await list_resources(client, "/env-groups", "envGroup", params, query)


@tool(
    resource=RESOURCE,
    operation="get",
    description="Get an environment group by ID",
    input_schema=EnvGroupIdInput,
)
async def render_environment_group_get(client: RenderClient, params: EnvGroupIdInput):
    return await client.request("GET", _path(params.env_group_id))


@tool(
    resource=RESOURCE,
    operation="create",
    description="Create an environment group",
    input_schema=EnvGroupCreateInput,
)
async def render_environment_group_create(client: RenderClient, params: EnvGroupCreateInput):
    return await client.request(
        "POST", "/env-groups", {"name": params.name, "ownerId": params.owner_id}
    )


@tool(
    resource=RESOURCE,
    operation="update",
    description="Rename an environment group",
    input_schema=EnvGroupUpdateInput,
)
async def render_environment_group_update(client: RenderClient, params: EnvGroupUpdateInput):
    path = _path(params.env_group_id)
    body = {"name": params.name} if params.name else {}
    return await client.request("PATCH", path, body)


@tool(
    resource=RESOURCE,
    operation="delete",
    description="Delete an environment group",
    input_schema=EnvGroupIdInput,
)
async def render_environment_group_delete(client: RenderClient, params: EnvGroupIdInput):
    await client.request("DELETE", _path(params.env_group_id))
    return done(envGroupId=params.env_group_id)


@tool(
    resource=RESOURCE,
    operation="linkService",
    description="Link a service to an environment group",
    input_schema=EnvGroupServiceInput,
)
async def render_environment_group_link_service(client: RenderClient, params: EnvGroupServiceInput):
    path = _path(params.env_group_id, "/link-service")
    validate_service_id(params.service_id)
    return await client.request("POST", path, {"serviceId": params.service_id})


@tool(
    resource=RESOURCE,
    operation="unlinkService",
    description="Unlink a service from an environment group",
    input_schema=EnvGroupServiceInput,
)
async def render_environment_group_unlink_service(client: RenderClient, params: EnvGroupServiceInput):
    path = _path(params.env_group_id, "/unlink-service")
    validate_service_id(params.service_id)
    return await client.request("POST", path, {"serviceId": params.service_id})


@tool(
    resource=RESOURCE,
    operation="getEnvVar",
    description="Get an environment variable of an environment group",
    input_schema=EnvGroupEnvVarKeyInput,
)
async def render_environment_group_get_env_var(client: RenderClient, params: EnvGroupEnvVarKeyInput):
    return await client.request(
        "GET", _path(params.env_group_id, f"/env-vars/{params.env_var_key}")
    )


@tool(
    resource=RESOURCE,
    operation="updateEnvVar",
    description="Create or replace an environment variable of an environment group",
    input_schema=EnvGroupEnvVarInput,
)
async def render_environment_group_update_env_var(client: RenderClient, params: EnvGroupEnvVarInput):
    return await client.request(
        "PUT", _path(params.env_group_id, f"/env-vars/{params.key}"), params.to_api()
    )


@tool(
    resource=RESOURCE,
    operation="deleteEnvVar",
    description="Delete an environment variable of an environment group",
    input_schema=EnvGroupEnvVarKeyInput,
)
async def render_environment_group_delete_env_var(client: RenderClient, params: EnvGroupEnvVarKeyInput):
    await client.request(
        "DELETE", _path(params.env_group_id, f"/env-vars/{params.env_var_key}")
    )
    return done(envVarKey=params.env_var_key)


@tool(
    resource=RESOURCE,
    operation="getSecretFile",
    description="Get a secret file of an environment group",
    input_schema=EnvGroupSecretFileNameInput,
)
async def render_environment_group_get_secret_file(
    client: RenderClient, params: EnvGroupSecretFileNameInput
):
    return await client.request(
        "GET", _secret_file_path(params.env_group_id, params.secret_file_name)
    )


@tool(
    resource=RESOURCE,
    operation="updateSecretFile",
    description="Create or replace a secret file of an environment group",
    input_schema=EnvGroupSecretFileInput,
)
async def render_environment_group_update_secret_file(
    client: RenderClient, params: EnvGroupSecretFileInput
):
    return await client.request(
        "PUT", _secret_file_path(params.env_group_id, params.name), params.to_api()
    )


@tool(
    resource=RESOURCE,
    operation="deleteSecretFile",
    description="Delete a secret file of an environment group",
    input_schema=EnvGroupSecretFileNameInput,
)
async def render_environment_group_delete_secret_file(
    client: RenderClient, params: EnvGroupSecretFileNameInput
):
    await client.request(
        "DELETE", _secret_file_path(params.env_group_id, params.secret_file_name)
    )
    return done(secretFileName=params.secret_file_name)
