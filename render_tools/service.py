"""Render service tools.

Covers web services, static sites, background workers, private services
and cron jobs: CRUD, lifecycle (suspend/resume/restart), scaling,
autoscaling and build cache purge.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from tool_registry import tool

from .client import RenderClient
from .common import DateFilters, ListInput, Region, done, list_resources
from .validators import apply_date_filters, copy_set_fields, validate_service_id

RESOURCE = "service"


class ServiceType(str, Enum):
    WEB_SERVICE = "web_service"
    STATIC_SITE = "static_site"
    BACKGROUND_WORKER = "background_worker"
    PRIVATE_SERVICE = "private_service"
    CRON_JOB = "cron_job"


class Runtime(str, Enum):
    DOCKER = "docker"
    NODE = "node"
    PYTHON = "python"
    GO = "go"
    RUST = "rust"
    RUBY = "ruby"
    ELIXIR = "elixir"
    STATIC = "static"


class SuspendedFilter(str, Enum):
    SUSPENDED = "suspended"
    NOT_SUSPENDED = "not_suspended"
    ALL = "all"


class DeploymentSource(str, Enum):
    GIT = "git"
    IMAGE = "image"


class YesNo(str, Enum):
    YES = "yes"
    NO = "no"


# -----------------------------------------------------------------------------
# Input Schemas
# -----------------------------------------------------------------------------

class ServiceListFilters(DateFilters):
    """Filters for listing services."""
    name: Optional[str] = Field(default=None, description="Filter by service name")
    owner_id: Optional[str] = Field(default=None, description="Filter by owner (workspace) ID")
    type: Optional[ServiceType] = Field(default=None, description="Filter by service type")
    env: Optional[Runtime] = Field(default=None, description="Filter by runtime environment")
    region: Optional[Region] = Field(default=None, description="Filter by region")
    suspended: Optional[SuspendedFilter] = Field(default=None, description="Filter by suspension state")


class ServiceListInput(ListInput):
    """Input schema for render_service_list tool."""
    filters: ServiceListFilters = Field(default_factory=ServiceListFilters)


class ServiceIdInput(BaseModel):
    """Input carrying only a service ID."""
    service_id: str = Field(description="The service ID (srv-xxxxx)")


class ServiceCreateOptions(BaseModel):
    """Optional fields for service creation."""
    auto_deploy: Optional[YesNo] = Field(default=None, description="Deploy automatically on push")
    build_command: Optional[str] = Field(default=None, description="Build command")
    docker_command: Optional[str] = Field(default=None, description="Docker command override")
    dockerfile_path: Optional[str] = Field(default=None, description="Path to the Dockerfile")
    health_check_path: Optional[str] = Field(default=None, description="HTTP health check path")
    num_instances: Optional[int] = Field(default=None, ge=1, description="Number of instances")
    plan: Optional[str] = Field(default=None, description="Instance plan (starter, standard, pro, ...)")
    region: Optional[Region] = Field(default=None, description="Deployment region")
    root_dir: Optional[str] = Field(default=None, description="Root directory of the service in the repo")
    runtime: Optional[Runtime] = Field(default=None, description="Runtime")
    start_command: Optional[str] = Field(default=None, description="Start command")


class ServiceCreateInput(BaseModel):
    """Input schema for render_service_create tool."""
    type: ServiceType = Field(description="Service type")
    name: str = Field(description="Service name")
    owner_id: str = Field(description="Owner (workspace) ID")
    deployment_source: DeploymentSource = Field(
        default=DeploymentSource.GIT,
        description="Deploy from a Git repository or a Docker image"
    )
    repo: str = Field(default="", description="Repository URL (git source)")
    branch: str = Field(default="main", description="Repository branch (git source)")
    image: str = Field(default="", description="Docker image path (image source)")
    additional_options: ServiceCreateOptions = Field(default_factory=ServiceCreateOptions)


class ServiceUpdateFields(BaseModel):
    """Fields that can be changed on an existing service."""
    name: Optional[str] = None
    auto_deploy: Optional[YesNo] = None
    branch: Optional[str] = None
    build_command: Optional[str] = None
    health_check_path: Optional[str] = None
    start_command: Optional[str] = None
    image: Optional[str] = Field(default=None, description="New Docker image path")


class ServiceUpdateInput(ServiceIdInput):
    """Input schema for render_service_update tool."""
    update_fields: ServiceUpdateFields = Field(default_factory=ServiceUpdateFields)


class ServiceScaleInput(ServiceIdInput):
    """Input schema for render_service_scale tool."""
    num_instances: int = Field(ge=1, description="Number of instances to run")


class AutoscalingCriteria(BaseModel):
    """Target utilization percentages; unset criteria are disabled."""
    cpu: Optional[int] = Field(default=None, ge=1, le=100, description="Target CPU percentage")
    memory: Optional[int] = Field(default=None, ge=1, le=100, description="Target memory percentage")


class ServiceAutoscalingInput(ServiceIdInput):
    """Input schema for render_service_update_autoscaling tool."""
    autoscaling_enabled: bool = Field(default=True, description="Whether autoscaling is enabled")
    min_instances: int = Field(default=1, ge=1, description="Minimum instances")
    max_instances: int = Field(default=3, ge=1, description="Maximum instances")
    autoscaling_criteria: AutoscalingCriteria = Field(default_factory=AutoscalingCriteria)


CREATE_OPTION_FIELDS = {
    "auto_deploy": "autoDeploy",
    "build_command": "buildCommand",
    "docker_command": "dockerCommand",
    "dockerfile_path": "dockerfilePath",
    "health_check_path": "healthCheckPath",
    "num_instances": "numInstances",
    "plan": "plan",
    "region": "region",
    "root_dir": "rootDir",
    "runtime": "runtime",
    "start_command": "startCommand",
}

UPDATE_FIELDS = {
    "name": "name",
    "auto_deploy": "autoDeploy",
    "branch": "branch",
    "build_command": "buildCommand",
    "health_check_path": "healthCheckPath",
    "start_command": "startCommand",
}

LIST_FILTER_FIELDS = {
    "name": "name",
    "owner_id": "ownerId",
    "type": "type",
    "env": "env",
    "region": "region",
    "suspended": "suspended",
}


def _path(service_id: str, suffix: str = "") -> str:
    validate_service_id(service_id)
    return f"/services/{service_id}{suffix}"


# -----------------------------------------------------------------------------
# Tool Implementations
# -----------------------------------------------------------------------------

@tool(
    resource=RESOURCE,
    operation="list",
    description="List services in the Render workspace",
    input_schema=ServiceListInput,
)
async def render_service_list(client: RenderClient, params: ServiceListInput):
    """List services, optionally following every page."""
    query = copy_set_fields({}, params.filters, LIST_FILTER_FIELDS)
    apply_date_filters(query, params.filters)
    return await list_resources(client, "/services", "service", params, query)


@tool(
    resource=RESOURCE,
    operation="get",
    description="Get a service by ID",
    input_schema=ServiceIdInput,
)
async def render_service_get(client: RenderClient, params: ServiceIdInput):
    return await client.request("GET", _path(params.service_id))


@tool(
    resource=RESOURCE,
    operation="create",
    description="Create a new service from a Git repository or Docker image",
    input_schema=ServiceCreateInput,
)
async def render_service_create(client: RenderClient, params: ServiceCreateInput):
    """Create a service.

    Git sources send ``repo`` and ``branch``; image sources send an
    ``image`` object scoped to the owner.
    """
    body = {
        "type": params.type.value,
        "name": params.name,
        "ownerId": params.owner_id,
    }
    if params.deployment_source == DeploymentSource.GIT:
        body["repo"] = params.repo
        body["branch"] = params.branch
    else:
        body["image"] = {"ownerId": params.owner_id, "imagePath": params.image}

    copy_set_fields(body, params.additional_options, CREATE_OPTION_FIELDS)
    return await client.request("POST", "/services", body)


@tool(
    resource=RESOURCE,
    operation="update",
    description="Update a service's settings",
    input_schema=ServiceUpdateInput,
)
async def render_service_update(client: RenderClient, params: ServiceUpdateInput):
    path = _path(params.service_id)
    body = copy_set_fields({}, params.update_fields, UPDATE_FIELDS)
    if params.update_fields.image:
        body["image"] = {"imagePath": params.update_fields.image}
    return await client.request("PATCH", path, body)


@tool(
    resource=RESOURCE,
    operation="delete",
    description="Delete a service",
    input_schema=ServiceIdInput,
)
async def render_service_delete(client: RenderClient, params: ServiceIdInput):
    await client.request("DELETE", _path(params.service_id))
    return done(serviceId=params.service_id)


@tool(
    resource=RESOURCE,
    operation="suspend",
    description="Suspend a running service",
    input_schema=ServiceIdInput,
)
async def render_service_suspend(client: RenderClient, params: ServiceIdInput):
    return await client.request("POST", _path(params.service_id, "/suspend"))


@tool(
    resource=RESOURCE,
    operation="resume",
    description="Resume a suspended service",
    input_schema=ServiceIdInput,
)
async def render_service_resume(client: RenderClient, params: ServiceIdInput):
    return await client.request("POST", _path(params.service_id, "/resume"))


@tool(
    resource=RESOURCE,
    operation="restart",
    description="Restart a service",
    input_schema=ServiceIdInput,
)
async def render_service_restart(client: RenderClient, params: ServiceIdInput):
    await client.request("POST", _path(params.service_id, "/restart"))
    return done(serviceId=params.service_id)


@tool(
    resource=RESOURCE,
    operation="scale",
    description="Scale a service to a fixed number of instances",
    input_schema=ServiceScaleInput,
)
async def render_service_scale(client: RenderClient, params: ServiceScaleInput):
    return await client.request(
        "POST",
        _path(params.service_id, "/scale"),
        {"numInstances": params.num_instances},
    )


@tool(
    resource=RESOURCE,
    operation="updateAutoscaling",
    description="Configure autoscaling for a service",
    input_schema=ServiceAutoscalingInput,
)
async def render_service_update_autoscaling(client: RenderClient, params: ServiceAutoscalingInput):
    path = _path(params.service_id, "/autoscaling")
    criteria = {}
    if params.autoscaling_criteria.cpu:
        criteria["cpu"] = {"enabled": True, "percentage": params.autoscaling_criteria.cpu}
    if params.autoscaling_criteria.memory:
        criteria["memory"] = {"enabled": True, "percentage": params.autoscaling_criteria.memory}

    body = {
        "enabled": params.autoscaling_enabled,
        "min": params.min_instances,
        "max": params.max_instances,
        "criteria": criteria,
    }
    return await client.request("PUT", path, body)


@tool(
    resource=RESOURCE,
    operation="deleteAutoscaling",
    description="Remove the autoscaling configuration of a service",
    input_schema=ServiceIdInput,
)
async def render_service_delete_autoscaling(client: RenderClient, params: ServiceIdInput):
    await client.request("DELETE", _path(params.service_id, "/autoscaling"))
    return done(serviceId=params.service_id)


@tool(
    resource=RESOURCE,
    operation="purgeCache",
    description="Purge the build cache of a service",
    input_schema=ServiceIdInput,
)
async def render_service_purge_cache(client: RenderClient, params: ServiceIdInput):
    await client.request("POST", _path(params.service_id, "/cache/purge"))
    return done(serviceId=params.service_id)
