"""Render PostgreSQL tools.

Covers database CRUD, connection info, lifecycle, high availability
failover, point-in-time recovery, exports and database users.
"""

from typing import Optional

from pydantic import BaseModel, Field

from tool_registry import tool

from .client import RenderClient
from .common import ListInput, Region, done, list_resources
from .validators import copy_set_fields, validate_postgres_id

RESOURCE = "postgres"


# -----------------------------------------------------------------------------
# Input Schemas
# -----------------------------------------------------------------------------

class PostgresListFilters(BaseModel):
    owner_id: Optional[str] = Field(default=None, description="Filter by owner (workspace) ID")
    name: Optional[str] = Field(default=None, description="Filter by database name")
    region: Optional[Region] = Field(default=None, description="Filter by region")
    status: Optional[str] = Field(default=None, description="Filter by status, e.g. available")


class PostgresListInput(ListInput):
    """Input schema for render_postgres_list tool."""
    filters: PostgresListFilters = Field(default_factory=PostgresListFilters)


class PostgresIdInput(BaseModel):
    postgres_id: str = Field(description="The PostgreSQL ID (dpg-xxxxx)")


class PostgresCreateOptions(BaseModel):
    database_name: Optional[str] = Field(default=None, description="Name of the initial database")
    database_user: Optional[str] = Field(default=None, description="Name of the initial user")
    high_availability_enabled: Optional[bool] = Field(
        default=None, description="Run a standby for failover"
    )
    plan: Optional[str] = Field(default=None, description="Instance plan, e.g. basic_256mb")
    region: Optional[Region] = Field(default=None, description="Region")
    version: Optional[str] = Field(default=None, description="PostgreSQL major version, e.g. 16")


class PostgresCreateInput(BaseModel):
    """Input schema for render_postgres_create tool."""
    name: str = Field(description="Database name")
    owner_id: str = Field(description="Owner (workspace) ID")
    additional_options: PostgresCreateOptions = Field(default_factory=PostgresCreateOptions)


class PostgresUpdateInput(PostgresIdInput):
    """Input schema for render_postgres_update tool."""
    name: Optional[str] = Field(default=None, description="New name")
    plan: Optional[str] = Field(default=None, description="New plan")
    high_availability_enabled: Optional[bool] = Field(default=None, description="Toggle high availability")


class PostgresRecoveryInput(PostgresIdInput):
    """Input schema for render_postgres_trigger_recovery tool."""
    recovery_target_time: str = Field(description="Point in time to restore to (ISO 8601)")


class PostgresSubListInput(ListInput, PostgresIdInput):
    """Input for list operations nested under a database."""


class PostgresCreateUserInput(PostgresIdInput):
    """Input schema for render_postgres_create_user tool."""
    username: str = Field(description="Name of the new database user")


class PostgresUserInput(PostgresIdInput):
    user_id: str = Field(description="Database user ID")


CREATE_OPTION_FIELDS = {
    "database_name": "databaseName",
    "database_user": "databaseUser",
    "plan": "plan",
    "region": "region",
    "version": "version",
}


def _path(postgres_id: str, suffix: str = "") -> str:
    validate_postgres_id(postgres_id)
    return f"/postgres/{postgres_id}{suffix}"


# -----------------------------------------------------------------------------
# Tool Implementations
# -----------------------------------------------------------------------------

@tool(
    resource=RESOURCE,
    operation="list",
    description="List PostgreSQL databases",
    input_schema=PostgresListInput,
)
async def render_postgres_list(client: RenderClient, params: PostgresListInput):
    query = copy_set_fields(
        {}, params.filters,
        {"owner_id": "ownerId", "name": "name", "region": "region", "status": "status"},
    )
    return await list_resources(client, "/postgres", "postgres", params, query)


@tool(
    resource=RESOURCE,
    operation="get",
    description="Get a PostgreSQL database by ID",
    input_schema=PostgresIdInput,
)
async def render_postgres_get(client: RenderClient, params: PostgresIdInput):
    return await client.request("GET", _path(params.postgres_id))


@tool(
    resource=RESOURCE,
    operation="create",
    description="Create a PostgreSQL database",
    input_schema=PostgresCreateInput,
)
async def render_postgres_create(client: RenderClient, params: PostgresCreateInput):
    """Create a database.

    ``high_availability_enabled`` is sent whenever it is set, including
    an explicit False.
    """
    options = params.additional_options
    body = {"name": params.name, "ownerId": params.owner_id}
    copy_set_fields(body, options, CREATE_OPTION_FIELDS)
    if options.high_availability_enabled is not None:
        body["highAvailabilityEnabled"] = options.high_availability_enabled
    return await client.request("POST", "/postgres", body)


@tool(
    resource=RESOURCE,
    operation="update",
    description="Update a PostgreSQL database",
    input_schema=PostgresUpdateInput,
)
async def render_postgres_update(client: RenderClient, params: PostgresUpdateInput):
    path = _path(params.postgres_id)
    body = copy_set_fields({}, params, {"name": "name", "plan": "plan"})
    if params.high_availability_enabled is not None:
        body["highAvailabilityEnabled"] = params.high_availability_enabled
    return await client.request("PATCH", path, body)


@tool(
    resource=RESOURCE,
    operation="delete",
    description="Delete a PostgreSQL database",
    input_schema=PostgresIdInput,
)
async def render_postgres_delete(client: RenderClient, params: PostgresIdInput):
    await client.request("DELETE", _path(params.postgres_id))
    return done(postgresId=params.postgres_id)


@tool(
    resource=RESOURCE,
    operation="getConnectionInfo",
    description="Get connection strings and credentials of a PostgreSQL database",
    input_schema=PostgresIdInput,
)
async def render_postgres_get_connection_info(client: RenderClient, params: PostgresIdInput):
    return await client.request("GET", _path(params.postgres_id, "/connection-info"))


@tool(
    resource=RESOURCE,
    operation="suspend",
    description="Suspend a PostgreSQL database",
    input_schema=PostgresIdInput,
)
async def render_postgres_suspend(client: RenderClient, params: PostgresIdInput):
    return await client.request("POST", _path(params.postgres_id, "/suspend"))


@tool(
    resource=RESOURCE,
    operation="resume",
    description="Resume a suspended PostgreSQL database",
    input_schema=PostgresIdInput,
)
async def render_postgres_resume(client: RenderClient, params: PostgresIdInput):
    return await client.request("POST", _path(params.postgres_id, "/resume"))


@tool(
    resource=RESOURCE,
    operation="restart",
    description="Restart a PostgreSQL database",
    input_schema=PostgresIdInput,
)
async def render_postgres_restart(client: RenderClient, params: PostgresIdInput):
    await client.request("POST", _path(params.postgres_id, "/restart"))
    return done(postgresId=params.postgres_id)


@tool(
    resource=RESOURCE,
    operation="failover",
    description="Fail over a high availability PostgreSQL database to its standby",
    input_schema=PostgresIdInput,
)
async def render_postgres_failover(client: RenderClient, params: PostgresIdInput):
    return await client.request("POST", _path(params.postgres_id, "/failover"))


@tool(
    resource=RESOURCE,
    operation="getRecoveryStatus",
    description="Get point-in-time recovery availability of a PostgreSQL database",
    input_schema=PostgresIdInput,
)
async def render_postgres_get_recovery_status(client: RenderClient, params: PostgresIdInput):
    return await client.request("GET", _path(params.postgres_id, "/recovery"))


@tool(
    resource=RESOURCE,
    operation="triggerRecovery",
    description="Restore a PostgreSQL database to a point in time",
    input_schema=PostgresRecoveryInput,
)
async def render_postgres_trigger_recovery(client: RenderClient, params: PostgresRecoveryInput):
    return await client.request(
        "POST",
        _path(params.postgres_id, "/recovery"),
        {"recoveryTargetTime": params.recovery_target_time},
    )


@tool(
    resource=RESOURCE,
    operation="listExports",
    description="List exports of a PostgreSQL database",
    input_schema=PostgresSubListInput,
)
async def render_postgres_list_exports(client: RenderClient, params: PostgresSubListInput):
    return await list_resources(client, _path(params.postgres_id, "/exports"), "export", params)


@tool(
    resource=RESOURCE,
    operation="createExport",
    description="Start an export of a PostgreSQL database",
    input_schema=PostgresIdInput,
)
async def render_postgres_create_export(client: RenderClient, params: PostgresIdInput):
    return await client.request("POST", _path(params.postgres_id, "/exports"))


@tool(
    resource=RESOURCE,
    operation="listUsers",
    description="List users of a PostgreSQL database",
    input_schema=PostgresSubListInput,
)
async def render_postgres_list_users(client: RenderClient, params: PostgresSubListInput):
    return await list_resources(client, _path(params.postgres_id, "/users"), "user", params)


@tool(
    resource=RESOURCE,
    operation="createUser",
    description="Create a PostgreSQL database user",
    input_schema=PostgresCreateUserInput,
)
async def render_postgres_create_user(client: RenderClient, params: PostgresCreateUserInput):
    return await client.request(
        "POST", _path(params.postgres_id, "/users"), {"username": params.username}
    )


@tool(
    resource=RESOURCE,
    operation="deleteUser",
    description="Delete a PostgreSQL database user",
    input_schema=PostgresUserInput,
)
async def render_postgres_delete_user(client: RenderClient, params: PostgresUserInput):
    await client.request("DELETE", _path(params.postgres_id, f"/users/{params.user_id}"))
    return done(userId=params.user_id)
