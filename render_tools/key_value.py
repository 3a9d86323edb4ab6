"""Render Key Value (Redis-compatible) instance tools."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from tool_registry import tool

from .client import RenderClient
from .common import ListInput, Region, done, list_resources
from .validators import copy_set_fields, validate_key_value_id

RESOURCE = "keyValue"


class MaxmemoryPolicy(str, Enum):
    ALLKEYS_LRU = "allkeys_lru"
    ALLKEYS_LFU = "allkeys_lfu"
    ALLKEYS_RANDOM = "allkeys_random"
    VOLATILE_LRU = "volatile_lru"
    VOLATILE_LFU = "volatile_lfu"
    VOLATILE_RANDOM = "volatile_random"
    VOLATILE_TTL = "volatile_ttl"
    NOEVICTION = "noeviction"


class KeyValueListFilters(BaseModel):
    owner_id: Optional[str] = Field(default=None, description="Filter by owner (workspace) ID")
    name: Optional[str] = Field(default=None, description="Filter by instance name")
    region: Optional[Region] = Field(default=None, description="Filter by region")


class KeyValueListInput(ListInput):
    """Input schema for render_key_value_list tool."""
    filters: KeyValueListFilters = Field(default_factory=KeyValueListFilters)


class KeyValueIdInput(BaseModel):
    key_value_id: str = Field(description="The Key Value instance ID (red-xxxxx)")


class KeyValueCreateOptions(BaseModel):
    maxmemory_policy: Optional[MaxmemoryPolicy] = Field(default=None, description="Eviction policy")
    plan: Optional[str] = Field(default=None, description="Instance plan")
    region: Optional[Region] = Field(default=None, description="Region")


class KeyValueCreateInput(BaseModel):
    """Input schema for render_key_value_create tool."""
    name: str = Field(description="Instance name")
    owner_id: str = Field(description="Owner (workspace) ID")
    additional_options: KeyValueCreateOptions = Field(default_factory=KeyValueCreateOptions)


class KeyValueUpdateInput(KeyValueIdInput):
    """Input schema for render_key_value_update tool."""
    name: Optional[str] = Field(default=None, description="New name")
    plan: Optional[str] = Field(default=None, description="New plan")
    maxmemory_policy: Optional[MaxmemoryPolicy] = Field(default=None, description="New eviction policy")


OPTION_FIELDS = {
    "name": "name",
    "maxmemory_policy": "maxmemoryPolicy",
    "plan": "plan",
    "region": "region",
}


def _path(key_value_id: str, suffix: str = "") -> str:
    validate_key_value_id(key_value_id)
    return f"/key-value/{key_value_id}{suffix}"


@tool(
    resource=RESOURCE,
    operation="list",
    description="List Key Value instances",
    input_schema=KeyValueListInput,
)
async def render_key_value_list(client: RenderClient, params: KeyValueListInput):
    query = copy_set_fields(
        {}, params.filters, {"owner_id": "ownerId", "name": "name", "region": "region"}
    )
    return await list_resources(client, "/key-value", "keyValue", params, query)


@tool(
    resource=RESOURCE,
    operation="get",
    description="Get a Key Value instance by ID",
    input_schema=KeyValueIdInput,
)
async def render_key_value_get(client: RenderClient, params: KeyValueIdInput):
    return await client.request("GET", _path(params.key_value_id))


@tool(
    resource=RESOURCE,
    operation="create",
    description="Create a Key Value instance",
    input_schema=KeyValueCreateInput,
)
async def render_key_value_create(client: RenderClient, params: KeyValueCreateInput):
    body = {"name": params.name, "ownerId": params.owner_id}
    copy_set_fields(body, params.additional_options, OPTION_FIELDS)
    return await client.request("POST", "/key-value", body)


@tool(
    resource=RESOURCE,
    operation="update",
    description="Update a Key Value instance",
    input_schema=KeyValueUpdateInput,
)
async def render_key_value_update(client: RenderClient, params: KeyValueUpdateInput):
    path = _path(params.key_value_id)
    body = copy_set_fields({}, params, OPTION_FIELDS)
    return await client.request("PATCH", path, body)


@tool(
    resource=RESOURCE,
    operation="delete",
    description="Delete a Key Value instance",
    input_schema=KeyValueIdInput,
)
async def render_key_value_delete(client: RenderClient, params: KeyValueIdInput):
    await client.request("DELETE", _path(params.key_value_id))
    return done(keyValueId=params.key_value_id)


@tool(
    resource=RESOURCE,
    operation="getConnectionInfo",
    description="Get connection details of a Key Value instance",
    input_schema=KeyValueIdInput,
)
async def render_key_value_get_connection_info(client: RenderClient, params: KeyValueIdInput):
    return await client.request("GET", _path(params.key_value_id, "/connection-info"))


@tool(
    resource=RESOURCE,
    operation="suspend",
    description="Suspend a Key Value instance",
    input_schema=KeyValueIdInput,
)
async def render_key_value_suspend(client: RenderClient, params: KeyValueIdInput):
    return await client.request("POST", _path(params.key_value_id, "/suspend"))


@tool(
    resource=RESOURCE,
    operation="resume",
    description="Resume a suspended Key Value instance",
    input_schema=KeyValueIdInput,
)
async def render_key_value_resume(client: RenderClient, params: KeyValueIdInput):
    return await client.request("POST", _path(params.key_value_id, "/resume"))
