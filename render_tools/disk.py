"""Render persistent disk tools.

Disks belong to a service, so the service ID is validated on every call.
"""

from typing import Optional

from pydantic import BaseModel, Field

from tool_registry import tool

from .client import RenderClient
from .common import ListInput, done, list_resources
from .validators import copy_set_fields, validate_disk_id, validate_service_id

RESOURCE = "disk"


class DiskListInput(ListInput):
    """Input schema for render_disk_list tool."""
    service_id: str = Field(description="The service ID (srv-xxxxx)")


class DiskRefInput(BaseModel):
    service_id: str = Field(description="The service ID (srv-xxxxx)")
    disk_id: str = Field(description="The disk ID (dsk-xxxxx)")


class DiskAddInput(BaseModel):
    """Input schema for render_disk_add tool."""
    service_id: str = Field(description="The service ID (srv-xxxxx)")
    name: str = Field(description="Disk name")
    mount_path: str = Field(description="Absolute mount path, e.g. /var/data")
    size_gb: int = Field(default=1, ge=1, description="Disk size in GB")


class DiskUpdateInput(DiskRefInput):
    """Input schema for render_disk_update tool."""
    name: Optional[str] = Field(default=None, description="New name")
    mount_path: Optional[str] = Field(default=None, description="New mount path")
    size_gb: Optional[int] = Field(default=None, ge=1, description="New size in GB (grow only)")


class DiskSnapshotListInput(ListInput, DiskRefInput):
    """Input schema for render_disk_list_snapshots tool."""


class DiskRestoreInput(DiskRefInput):
    """Input schema for render_disk_restore_snapshot tool."""
    snapshot_id: str = Field(description="Snapshot key to restore")


def _disks_path(service_id: str, disk_id: str = "", suffix: str = "") -> str:
    validate_service_id(service_id)
    path = f"/services/{service_id}/disks"
    if disk_id:
        validate_disk_id(disk_id)
        path = f"{path}/{disk_id}{suffix}"
    return path


@tool(
    resource=RESOURCE,
    operation="list",
    description="List disks attached to a service",
    input_schema=DiskListInput,
)
async def render_disk_list(client: RenderClient, params: DiskListInput):
    return await list_resources(client, _disks_path(params.service_id), "disk", params)


@tool(
    resource=RESOURCE,
    operation="get",
    description="Get a disk of a service",
    input_schema=DiskRefInput,
)
async def render_disk_get(client: RenderClient, params: DiskRefInput):
    return await client.request("GET", _disks_path(params.service_id, params.disk_id))


@tool(
    resource=RESOURCE,
    operation="add",
    description="Attach a new disk to a service",
    input_schema=DiskAddInput,
)
async def render_disk_add(client: RenderClient, params: DiskAddInput):
    body = {"name": params.name, "mountPath": params.mount_path, "sizeGB": params.size_gb}
    return await client.request("POST", _disks_path(params.service_id), body)


@tool(
    resource=RESOURCE,
    operation="update",
    description="Update a disk of a service",
    input_schema=DiskUpdateInput,
)
async def render_disk_update(client: RenderClient, params: DiskUpdateInput):
    path = _disks_path(params.service_id, params.disk_id)
    body = copy_set_fields(
        {}, params, {"name": "name", "mount_path": "mountPath", "size_gb": "sizeGB"}
    )
    return await client.request("PATCH", path, body)


@tool(
    resource=RESOURCE,
    operation="delete",
    description="Delete a disk of a service",
    input_schema=DiskRefInput,
)
async def render_disk_delete(client: RenderClient, params: DiskRefInput):
    await client.request("DELETE", _disks_path(params.service_id, params.disk_id))
    return done(diskId=params.disk_id)


@tool(
    resource=RESOURCE,
    operation="listSnapshots",
    description="List snapshots of a disk",
    input_schema=DiskSnapshotListInput,
)
async def render_disk_list_snapshots(client: RenderClient, params: DiskSnapshotListInput):
    path = _disks_path(params.service_id, params.disk_id, "/snapshots")
    return await list_resources(client, path, "snapshot", params)


@tool(
    resource=RESOURCE,
    operation="restoreSnapshot",
    description="Restore a disk from a snapshot",
    input_schema=DiskRestoreInput,
)
async def render_disk_restore_snapshot(client: RenderClient, params: DiskRestoreInput):
    path = _disks_path(
        params.service_id, params.disk_id, f"/snapshots/{params.snapshot_id}/restore"
    )
    return await client.request("POST", path)
