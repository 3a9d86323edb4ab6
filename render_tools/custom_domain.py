"""Render custom domain tools.

Custom domain IDs are opaque and are passed through unchecked; only the
owning service ID is validated.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from tool_registry import tool

from .client import RenderClient
from .common import ListInput, done, list_resources
from .validators import copy_set_fields, validate_service_id

RESOURCE = "customDomain"


class DomainType(str, Enum):
    APEX = "apex"
    SUBDOMAIN = "subdomain"


class VerificationStatus(str, Enum):
    VERIFIED = "verified"
    UNVERIFIED = "unverified"


class CustomDomainListFilters(BaseModel):
    name: Optional[str] = Field(default=None, description="Filter by domain name")
    domain_type: Optional[DomainType] = Field(default=None, description="Filter by domain type")
    verification_status: Optional[VerificationStatus] = Field(
        default=None, description="Filter by DNS verification status"
    )
    created_before: Optional[str] = Field(default=None, description="Created before (ISO 8601)")
    created_after: Optional[str] = Field(default=None, description="Created after (ISO 8601)")


class CustomDomainListInput(ListInput):
    """Input schema for render_custom_domain_list tool."""
    service_id: str = Field(description="The service ID (srv-xxxxx)")
    filters: CustomDomainListFilters = Field(default_factory=CustomDomainListFilters)


class CustomDomainRefInput(BaseModel):
    service_id: str = Field(description="The service ID (srv-xxxxx)")
    custom_domain_id: str = Field(description="Custom domain ID or name")


class CustomDomainAddInput(BaseModel):
    """Input schema for render_custom_domain_add tool."""
    service_id: str = Field(description="The service ID (srv-xxxxx)")
    domain_name: str = Field(description="Domain name to attach, e.g. www.example.com")


LIST_FILTER_FIELDS = {
    "name": "name",
    "domain_type": "domainType",
    "verification_status": "verificationStatus",
    "created_before": "createdBefore",
    "created_after": "createdAfter",
}


def _domains_path(service_id: str, suffix: str = "") -> str:
    validate_service_id(service_id)
    return f"/services/{service_id}/custom-domains{suffix}"


@tool(
    resource=RESOURCE,
    operation="list",
    description="List custom domains of a service",
    input_schema=CustomDomainListInput,
)
async def render_custom_domain_list(client: RenderClient, params: CustomDomainListInput):
    path = _domains_path(params.service_id)
    query = copy_set_fields({}, params.filters, LIST_FILTER_FIELDS)
    return await list_resources(client, path, "customDomain", params, query)


@tool(
    resource=RESOURCE,
    operation="get",
    description="Get a custom domain of a service",
    input_schema=CustomDomainRefInput,
)
async def render_custom_domain_get(client: RenderClient, params: CustomDomainRefInput):
    return await client.request(
        "GET", _domains_path(params.service_id, f"/{params.custom_domain_id}")
    )


@tool(
    resource=RESOURCE,
    operation="add",
    description="Attach a custom domain to a service",
    input_schema=CustomDomainAddInput,
)
async def render_custom_domain_add(client: RenderClient, params: CustomDomainAddInput):
    return await client.request(
        "POST", _domains_path(params.service_id), {"name": params.domain_name}
    )


@tool(
    resource=RESOURCE,
    operation="delete",
    description="Remove a custom domain from a service",
    input_schema=CustomDomainRefInput,
)
async def render_custom_domain_delete(client: RenderClient, params: CustomDomainRefInput):
    await client.request(
        "DELETE", _domains_path(params.service_id, f"/{params.custom_domain_id}")
    )
    return done(customDomainId=params.custom_domain_id)


@tool(
    resource=RESOURCE,
    operation="verifyDns",
    description="Re-run DNS verification for a custom domain",
    input_schema=CustomDomainRefInput,
)
async def render_custom_domain_verify_dns(client: RenderClient, params: CustomDomainRefInput):
    return await client.request(
        "POST", _domains_path(params.service_id, f"/{params.custom_domain_id}/verify")
    )
