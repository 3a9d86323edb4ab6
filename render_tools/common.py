"""Shared input schemas and helpers for the Render resource tools."""

import base64
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from .client import RenderClient, unwrap_page

JsonResult = Union[Dict[str, Any], List[Dict[str, Any]]]


class Region(str, Enum):
    OREGON = "oregon"
    FRANKFURT = "frankfurt"
    OHIO = "ohio"
    SINGAPORE = "singapore"
    VIRGINIA = "virginia"


class ListInput(BaseModel):
    """Common pagination parameters for list operations."""

    return_all: bool = Field(
        default=False,
        description="Whether to return all results or only up to a given limit"
    )
    limit: int = Field(
        default=50,
        ge=1,
        le=100,
        description="Max number of results to return"
    )


class DateFilters(BaseModel):
    """Creation/update time filters shared by several list operations."""

    created_before: Optional[str] = Field(default=None, description="Created before (ISO 8601)")
    created_after: Optional[str] = Field(default=None, description="Created after (ISO 8601)")
    updated_before: Optional[str] = Field(default=None, description="Updated before (ISO 8601)")
    updated_after: Optional[str] = Field(default=None, description="Updated after (ISO 8601)")


async def list_resources(
    client: RenderClient,
    path: str,
    resource_key: str,
    params: ListInput,
    query: Optional[Dict[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """Run a list operation honoring return_all/limit.

    Args:
        client: Render API client
        path: List endpoint path
        resource_key: Wrapper field name of each list item
        params: Input carrying return_all and limit
        query: Filters to send

    Returns:
        Unwrapped resources
    """
    query = dict(query or {})
    if params.return_all:
        return await client.paginate("GET", path, query=query)

    query["limit"] = params.limit
    response = await client.request("GET", path, query=query)
    return unwrap_page(response, resource_key, params.limit)


def done(**identifiers: Any) -> Dict[str, Any]:
    """Result for operations whose response carries no body."""
    return {"success": True, **identifiers}


def encode_contents(contents: str) -> str:
    """Base64-encode secret file contents as the API expects."""
    return base64.b64encode(contents.encode("utf-8")).decode("ascii")
