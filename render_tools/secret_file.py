"""Render service secret file tools.

File names are URL-encoded in request paths and contents are sent
base64-encoded.
"""

from typing import List
from urllib.parse import quote

from pydantic import BaseModel, Field

from tool_registry import tool

from .client import RenderClient, unwrap_page
from .common import done, encode_contents
from .validators import validate_service_id

RESOURCE = "secretFile"

# Left unescaped when a file name is placed in a request path
NAME_SAFE_CHARS = "!'()*"


class SecretFileValue(BaseModel):
    name: str = Field(description="File name, e.g. .npmrc")
    contents: str = Field(description="File contents (plain text)")

    def to_api(self) -> dict:
        return {"name": self.name, "contents": encode_contents(self.contents)}


class SecretFileListInput(BaseModel):
    """Input schema for render_secret_file_list tool."""
    service_id: str = Field(description="The service ID (srv-xxxxx)")


class SecretFileNameInput(BaseModel):
    service_id: str = Field(description="The service ID (srv-xxxxx)")
    secret_file_name: str = Field(description="Secret file name")


class SecretFileAddOrUpdateInput(SecretFileValue):
    """Input schema for render_secret_file_add_or_update tool."""
    service_id: str = Field(description="The service ID (srv-xxxxx)")


class SecretFileUpdateAllInput(BaseModel):
    """Input schema for render_secret_file_update_all tool."""
    service_id: str = Field(description="The service ID (srv-xxxxx)")
    secret_files: List[SecretFileValue] = Field(
        default_factory=list,
        description="Secret files to set (replaces all existing)"
    )


def _files_path(service_id: str, name: str = "") -> str:
    validate_service_id(service_id)
    path = f"/services/{service_id}/secret-files"
    if name:
        path = f"{path}/{quote(name, safe=NAME_SAFE_CHARS)}"
    return path


@tool(
    resource=RESOURCE,
    operation="list",
    description="List secret files of a service",
    input_schema=SecretFileListInput,
)
async def render_secret_file_list(client: RenderClient, params: SecretFileListInput):
    response = await client.request("GET", _files_path(params.service_id))
    return unwrap_page(response, "secretFile")


@tool(
    resource=RESOURCE,
    operation="get",
    description="Get a secret file of a service",
    input_schema=SecretFileNameInput,
)
async def render_secret_file_get(client: RenderClient, params: SecretFileNameInput):
    return await client.request(
        "GET", _files_path(params.service_id, params.secret_file_name)
    )


@tool(
    resource=RESOURCE,
    operation="addOrUpdate",
    description="Create or replace a secret file of a service",
    input_schema=SecretFileAddOrUpdateInput,
)
async def render_secret_file_add_or_update(
    client: RenderClient, params: SecretFileAddOrUpdateInput
):
    return await client.request(
        "PUT", _files_path(params.service_id, params.name), params.to_api()
    )


@tool(
    resource=RESOURCE,
    operation="delete",
    description="Delete a secret file of a service",
    input_schema=SecretFileNameInput,
)
async def render_secret_file_delete(client: RenderClient, params: SecretFileNameInput):
    await client.request(
        "DELETE", _files_path(params.service_id, params.secret_file_name)
    )
    return done(secretFileName=params.secret_file_name)


@tool(
    resource=RESOURCE,
    operation="updateAll",
    description="Replace all secret files of a service",
    input_schema=SecretFileUpdateAllInput,
)
async def render_secret_file_update_all(client: RenderClient, params: SecretFileUpdateAllInput):
    files = [secret_file.to_api() for secret_file in params.secret_files]
    return await client.request(
        "PUT", _files_path(params.service_id), {"secretFiles": files}
    )
