"""Render service environment variable tools."""

from typing import List

from pydantic import BaseModel, Field

from tool_registry import tool

from .client import RenderClient, unwrap_page
from .common import done
from .validators import validate_service_id

RESOURCE = "environmentVariable"


class EnvVarValue(BaseModel):
    """A single environment variable definition.

    When ``generate_value`` is set Render generates a random value and
    ``value`` is ignored.
    """
    key: str = Field(description="Variable name")
    value: str = Field(default="", description="Variable value")
    generate_value: bool = Field(default=False, description="Let Render generate a random value")

    def to_api(self) -> dict:
        item = {"key": self.key}
        if self.generate_value:
            item["generateValue"] = "yes"
        else:
            item["value"] = self.value
        return item


class EnvVarListInput(BaseModel):
    """Input schema for render_environment_variable_list tool."""
    service_id: str = Field(description="The service ID (srv-xxxxx)")


class EnvVarKeyInput(BaseModel):
    service_id: str = Field(description="The service ID (srv-xxxxx)")
    env_var_key: str = Field(description="Environment variable name")


class EnvVarAddOrUpdateInput(EnvVarValue):
    """Input schema for render_environment_variable_add_or_update tool."""
    service_id: str = Field(description="The service ID (srv-xxxxx)")


class EnvVarUpdateAllInput(BaseModel):
    """Input schema for render_environment_variable_update_all tool."""
    service_id: str = Field(description="The service ID (srv-xxxxx)")
    env_vars: List[EnvVarValue] = Field(
        default_factory=list,
        description="Environment variables to set (replaces all existing)"
    )


def _env_vars_path(service_id: str, suffix: str = "") -> str:
    validate_service_id(service_id)
    return f"/services/{service_id}/env-vars{suffix}"


@tool(
    resource=RESOURCE,
    operation="list",
    description="List environment variables of a service",
    input_schema=EnvVarListInput,
)
async def render_environment_variable_list(client: RenderClient, params: EnvVarListInput):
    response = await client.request("GET", _env_vars_path(params.service_id))
    return unwrap_page(response, "envVar")


@tool(
    resource=RESOURCE,
    operation="get",
    description="Get an environment variable of a service",
    input_schema=EnvVarKeyInput,
)
async def render_environment_variable_get(client: RenderClient, params: EnvVarKeyInput):
    return await client.request(
        "GET", _env_vars_path(params.service_id, f"/{params.env_var_key}")
    )


@tool(
    resource=RESOURCE,
    operation="addOrUpdate",
    description="Create or replace an environment variable of a service",
    input_schema=EnvVarAddOrUpdateInput,
)
async def render_environment_variable_add_or_update(
    client: RenderClient, params: EnvVarAddOrUpdateInput
):
    return await client.request(
        "PUT",
        _env_vars_path(params.service_id, f"/{params.key}"),
        params.to_api(),
    )


@tool(
    resource=RESOURCE,
    operation="delete",
    description="Delete an environment variable of a service",
    input_schema=EnvVarKeyInput,
)
async def render_environment_variable_delete(client: RenderClient, params: EnvVarKeyInput):
    await client.request(
        "DELETE", _env_vars_path(params.service_id, f"/{params.env_var_key}")
    )
    return done(envVarKey=params.env_var_key)


@tool(
    resource=RESOURCE,
    operation="updateAll",
    description="Replace all environment variables of a service",
    input_schema=EnvVarUpdateAllInput,
)
async def render_environment_variable_update_all(client: RenderClient, params: EnvVarUpdateAllInput):
    envs = [env_var.to_api() for env_var in params.env_vars]
    return await client.request(
        "PUT", _env_vars_path(params.service_id), {"envVars": envs}
    )
