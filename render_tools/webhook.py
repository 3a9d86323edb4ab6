"""Render webhook subscription tools.

Webhook IDs are opaque and are not prefix-checked.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from tool_registry import tool

from .client import RenderClient, unwrap_page
from .common import ListInput, done, list_resources
from .validators import split_ids

RESOURCE = "webhook"


class WebhookEventType(str, Enum):
    """Event types a Render webhook can subscribe to."""
    DEPLOY_STARTED = "deploy_started"
    DEPLOY_SUCCEEDED = "deploy_succeeded"
    DEPLOY_FAILED = "deploy_failed"
    DEPLOY_CANCELED = "deploy_canceled"
    SERVICE_CREATED = "service_created"
    SERVICE_DELETED = "service_deleted"
    SERVICE_SUSPENDED = "service_suspended"
    SERVICE_RESUMED = "service_resumed"
    SERVER_FAILED = "server_failed"
    SERVER_AVAILABLE = "server_available"
    CERTIFICATE_RENEWED = "certificate_renewed"
    MAINTENANCE_STARTED = "maintenance_started"
    MAINTENANCE_COMPLETED = "maintenance_completed"


class EventStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class WebhookListInput(ListInput):
    """Input schema for render_webhook_list tool."""
    owner_id: str = Field(description="Owner (workspace) ID")


class WebhookIdInput(BaseModel):
    webhook_id: str = Field(description="The webhook ID")


class WebhookCreateInput(BaseModel):
    """Input schema for render_webhook_create tool."""
    owner_id: str = Field(description="Owner (workspace) ID")
    url: str = Field(description="URL Render delivers events to")
    events: List[WebhookEventType] = Field(description="Event types to subscribe to")
    secret: Optional[str] = Field(default=None, description="Signing secret")
    service_ids: Optional[str] = Field(
        default=None,
        description="Comma-separated service IDs to scope the webhook to"
    )


class WebhookUpdateInput(WebhookIdInput):
    """Input schema for render_webhook_update tool."""
    url: Optional[str] = Field(default=None, description="New delivery URL")
    secret: Optional[str] = Field(default=None, description="New signing secret")
    events: List[WebhookEventType] = Field(default_factory=list, description="New event types")
    service_ids: Optional[str] = Field(default=None, description="Comma-separated service IDs")


class WebhookEventListInput(ListInput, WebhookIdInput):
    """Input schema for render_webhook_list_events tool."""
    status: Optional[EventStatus] = Field(default=None, description="Filter by delivery status")


def _event_values(events: List[WebhookEventType]) -> List[str]:
    return [event.value for event in events]


@tool(
    resource=RESOURCE,
    operation="list",
    description="List webhooks of a workspace",
    input_schema=WebhookListInput,
)
async def render_webhook_list(client: RenderClient, params: WebhookListInput):
    """List webhooks.

    Unlike the other list operations a single page is returned unsliced,
    and a non-list response is passed through as-is.
    """
    query = {"ownerId": params.owner_id}
    if params.return_all:
        return await client.paginate("GET", "/webhooks", query=query)

    query["limit"] = params.limit
    response = await client.request("GET", "/webhooks", query=query)
    if isinstance(response, list):
        return unwrap_page(response, "webhook")
    return response


@tool(
    resource=RESOURCE,
    operation="create",
    description="Create a webhook subscription",
    input_schema=WebhookCreateInput,
)
async def render_webhook_create(client: RenderClient, params: WebhookCreateInput):
    body = {
        "ownerId": params.owner_id,
        "url": params.url,
        "events": _event_values(params.events),
    }
    if params.secret:
        body["secret"] = params.secret
    if params.service_ids:
        body["serviceIds"] = split_ids(params.service_ids)
    return await client.request("POST", "/webhooks", body)


@tool(
    resource=RESOURCE,
    operation="get",
    description="Get a webhook by ID",
    input_schema=WebhookIdInput,
)
async def render_webhook_get(client: RenderClient, params: WebhookIdInput):
    return await client.request("GET", f"/webhooks/{params.webhook_id}")


@tool(
    resource=RESOURCE,
    operation="update",
    description="Update a webhook subscription",
    input_schema=WebhookUpdateInput,
)
async def render_webhook_update(client: RenderClient, params: WebhookUpdateInput):
    body = {}
    if params.url:
        body["url"] = params.url
    if params.secret:
        body["secret"] = params.secret
    if params.events:
        body["events"] = _event_values(params.events)
    if params.service_ids:
        body["serviceIds"] = split_ids(params.service_ids)
    return await client.request("PATCH", f"/webhooks/{params.webhook_id}", body)


@tool(
    resource=RESOURCE,
    operation="delete",
    description="Delete a webhook subscription",
    input_schema=WebhookIdInput,
)
async def render_webhook_delete(client: RenderClient, params: WebhookIdInput):
    await client.request("DELETE", f"/webhooks/{params.webhook_id}")
    return done(webhookId=params.webhook_id)


@tool(
    resource=RESOURCE,
    operation="listEvents",
    description="List delivery events of a webhook",
    input_schema=WebhookEventListInput,
)
async def render_webhook_list_events(client: RenderClient, params: WebhookEventListInput):
    path = f"/webhooks/{params.webhook_id}/events"
    query = {"status": params.status.value} if params.status else {}
    return await list_resources(client, path, "event", params, query)
