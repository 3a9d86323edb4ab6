"""Render deploy tools."""

from typing import Optional

from pydantic import BaseModel, Field

from tool_registry import tool

from .client import RenderClient
from .common import ListInput, list_resources
from .validators import copy_set_fields, validate_deploy_id, validate_service_id

RESOURCE = "deploy"


class DeployListFilters(BaseModel):
    start_time: Optional[str] = Field(default=None, description="Deploys started after (ISO 8601)")
    end_time: Optional[str] = Field(default=None, description="Deploys started before (ISO 8601)")


class DeployListInput(ListInput):
    """Input schema for render_deploy_list tool."""
    service_id: str = Field(description="The service ID (srv-xxxxx)")
    filters: DeployListFilters = Field(default_factory=DeployListFilters)


class DeployRefInput(BaseModel):
    """Identifies one deploy of a service."""
    service_id: str = Field(description="The service ID (srv-xxxxx)")
    deploy_id: str = Field(description="The deploy ID (dep-xxxxx)")


class DeployTriggerOptions(BaseModel):
    clear_cache: Optional[str] = Field(
        default=None,
        description="Build cache handling: 'clear' or 'do_not_clear'"
    )
    commit_id: Optional[str] = Field(default=None, description="Commit to deploy")
    image_url: Optional[str] = Field(default=None, description="Image to deploy (image-backed services)")


class DeployTriggerInput(BaseModel):
    """Input schema for render_deploy_trigger tool."""
    service_id: str = Field(description="The service ID (srv-xxxxx)")
    additional_options: DeployTriggerOptions = Field(default_factory=DeployTriggerOptions)


TRIGGER_FIELDS = {
    "clear_cache": "clearCache",
    "commit_id": "commitId",
    "image_url": "imageUrl",
}


def _deploy_path(params: DeployRefInput, suffix: str = "") -> str:
    validate_service_id(params.service_id)
    validate_deploy_id(params.deploy_id)
    return f"/services/{params.service_id}/deploys/{params.deploy_id}{suffix}"


@tool(
    resource=RESOURCE,
    operation="list",
    description="List deploys of a service",
    input_schema=DeployListInput,
)
async def render_deploy_list(client: RenderClient, params: DeployListInput):
    validate_service_id(params.service_id)
    query = copy_set_fields({}, params.filters, {"start_time": "startTime", "end_time": "endTime"})
    return await list_resources(
        client, f"/services/{params.service_id}/deploys", "deploy", params, query
    )


@tool(
    resource=RESOURCE,
    operation="get",
    description="Get a deploy of a service",
    input_schema=DeployRefInput,
)
async def render_deploy_get(client: RenderClient, params: DeployRefInput):
    return await client.request("GET", _deploy_path(params))


@tool(
    resource=RESOURCE,
    operation="trigger",
    description="Trigger a new deploy of a service",
    input_schema=DeployTriggerInput,
)
async def render_deploy_trigger(client: RenderClient, params: DeployTriggerInput):
    validate_service_id(params.service_id)
    body = copy_set_fields({}, params.additional_options, TRIGGER_FIELDS)
    return await client.request("POST", f"/services/{params.service_id}/deploys", body)


@tool(
    resource=RESOURCE,
    operation="cancel",
    description="Cancel an in-progress deploy",
    input_schema=DeployRefInput,
)
async def render_deploy_cancel(client: RenderClient, params: DeployRefInput):
    return await client.request("POST", _deploy_path(params, "/cancel"))


@tool(
    resource=RESOURCE,
    operation="rollback",
    description="Roll a service back to a previous deploy",
    input_schema=DeployRefInput,
)
async def render_deploy_rollback(client: RenderClient, params: DeployRefInput):
    """Roll back to ``deploy_id``.

    The rollback endpoint hangs off the service rather than the deploy.
    """
    validate_service_id(params.service_id)
    validate_deploy_id(params.deploy_id)
    return await client.request(
        "POST", f"/services/{params.service_id}/rollback/{params.deploy_id}"
    )
