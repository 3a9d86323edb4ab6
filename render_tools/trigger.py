"""Render webhook trigger.

Two halves:
- the inbound side verifies the ``x-render-signature`` HMAC of a delivery
  and normalizes the event for the host;
- the subscription side creates, checks and deletes the Render webhook a
  trigger node listens on, keeping its ID and secret in the state store.
"""

import hashlib
import hmac
import json
import secrets
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from database import WebhookStateStore
from logging_config import get_logger

from .client import RenderAPIError, RenderClient, RenderError
from .validators import split_ids
from .webhook import WebhookEventType

logger = get_logger(__name__)

SIGNATURE_HEADER = "x-render-signature"
INVALID_FORMAT = "Invalid signature format"
VERIFICATION_FAILED = "Signature verification failed"


class WebhookSignatureError(RenderError):
    """Signature of an inbound delivery did not match."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class RenderWebhookError(RenderError):
    """Managing the Render webhook subscription failed."""
    pass


# -----------------------------------------------------------------------------
# Inbound deliveries
# -----------------------------------------------------------------------------

class WebhookEvent(BaseModel):
    """Body of a Render webhook delivery."""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    type: Optional[str] = None
    timestamp: Optional[str] = None
    data: Optional[Any] = None


@dataclass
class WebhookDelivery:
    """Outcome of one inbound delivery.

    Rejected deliveries carry the rejection reason in ``response`` and no
    event; accepted ones carry the normalized event.
    """
    accepted: bool
    response: Optional[str] = None
    event: Optional[Dict[str, Any]] = None


def canonical_json(payload: Any) -> str:
    """Compact JSON serialization the signature is computed over."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def compute_signature(payload: Any, secret: str) -> str:
    """Hex HMAC-SHA256 of the canonical JSON of ``payload``."""
    return hmac.new(
        secret.encode("utf-8"),
        canonical_json(payload).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def verify_signature(payload: Any, secret: str, signature: str) -> None:
    """Check a delivery signature.

    Raises:
        WebhookSignatureError: If the signature length differs from the
            expected digest or the digests do not match
    """
    expected = compute_signature(payload, secret).encode("utf-8")
    received = signature.encode("utf-8")

    if len(received) != len(expected):
        raise WebhookSignatureError(INVALID_FORMAT)
    if not hmac.compare_digest(received, expected):
        raise WebhookSignatureError(VERIFICATION_FAILED)


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is not None:
        return value
    for key, candidate in headers.items():
        if key.lower() == name:
            return candidate
    return None


def normalize_event(body: Dict[str, Any], headers: Mapping[str, str]) -> Dict[str, Any]:
    """Build the envelope forwarded to the host."""
    event = WebhookEvent.model_validate(body)
    return {
        "id": event.id,
        "type": event.type,
        "timestamp": event.timestamp,
        "data": event.data,
        "headers": {
            SIGNATURE_HEADER: _header(headers, SIGNATURE_HEADER),
            "content-type": _header(headers, "content-type"),
        },
    }


def receive_webhook(
    body: Dict[str, Any],
    headers: Mapping[str, str],
    state: Optional[Dict[str, Any]],
) -> WebhookDelivery:
    """Verify and normalize one inbound delivery.

    Verification is skipped when the node disabled it, no secret is
    stored, or the delivery carries no signature header.

    Args:
        body: Decoded JSON body of the delivery
        headers: Request headers
        state: Stored webhook state of the trigger node, if any

    Returns:
        WebhookDelivery describing acceptance or rejection
    """
    state = state or {}
    secret = state.get("webhook_secret")
    signature = _header(headers, SIGNATURE_HEADER)

    if state.get("verify_signature", True) and secret and signature:
        try:
            verify_signature(body, secret, signature)
        except WebhookSignatureError as e:
            logger.warning(
                "Rejected Render webhook delivery",
                extra={"node_id": state.get("node_id"), "reason": e.reason},
            )
            return WebhookDelivery(accepted=False, response=e.reason)

    return WebhookDelivery(accepted=True, event=normalize_event(body, headers))


# -----------------------------------------------------------------------------
# Subscription lifecycle
# -----------------------------------------------------------------------------

class TriggerConfig(BaseModel):
    """Configuration of a Render trigger node."""
    owner_id: str = Field(description="Owner (workspace) ID the webhook belongs to")
    events: List[WebhookEventType] = Field(
        default_factory=lambda: [WebhookEventType.DEPLOY_SUCCEEDED],
        description="Event types to listen for"
    )
    service_ids: str = Field(
        default="",
        description="Comma-separated service IDs; empty listens to all services"
    )
    verify_signature: bool = Field(default=True, description="Verify delivery signatures")
    webhook_secret: Optional[str] = Field(
        default=None,
        description="Signing secret; a random one is generated when omitted"
    )


class RenderWebhookTrigger:
    """Manages the Render webhook backing a trigger node."""

    def __init__(self, client: RenderClient, store: WebhookStateStore):
        self.client = client
        self.store = store

    async def check_exists(self, node_id: str, webhook_url: str) -> bool:
        """Whether the stored webhook still exists and points at ``webhook_url``."""
        state = self.store.get(node_id)
        if state is None:
            return False

        try:
            response = await self.client.request("GET", f"/webhooks/{state['webhook_id']}")
        except RenderError as e:
            logger.info(
                "Stored Render webhook not found",
                extra={"node_id": node_id, "webhook_id": state["webhook_id"], "error": str(e)},
            )
            return False

        return isinstance(response, dict) and response.get("url") == webhook_url

    async def create(self, node_id: str, webhook_url: str, config: TriggerConfig) -> bool:
        """Register a webhook for the node and persist its ID and secret.

        Returns:
            True if Render returned a webhook ID, False otherwise

        Raises:
            RenderWebhookError: If the Render API rejected the request
        """
        secret = config.webhook_secret or secrets.token_hex(32)
        events = [event.value for event in config.events]
        service_ids = split_ids(config.service_ids)

        body = {
            "ownerId": config.owner_id,
            "url": webhook_url,
            "events": events,
            "secret": secret,
        }
        if service_ids:
            body["serviceIds"] = service_ids

        try:
            response = await self.client.request("POST", "/webhooks", body)
        except RenderAPIError as e:
            raise RenderWebhookError(f"Failed to create Render webhook: {e}") from e

        if not isinstance(response, dict) or not response.get("id"):
            return False

        self.store.save(
            node_id,
            webhook_id=response["id"],
            webhook_secret=secret,
            owner_id=config.owner_id,
            events=events,
            service_ids=service_ids,
            verify_signature=config.verify_signature,
        )
        logger.info(
            "Created Render webhook",
            extra={"node_id": node_id, "webhook_id": response["id"], "events": events},
        )
        return True

    async def delete(self, node_id: str) -> bool:
        """Delete the node's webhook on Render and forget the local state.

        Remote failures are logged and do not prevent the local state from
        being cleared.
        """
        state = self.store.get(node_id)
        if state is not None:
            try:
                await self.client.request("DELETE", f"/webhooks/{state['webhook_id']}")
            except RenderError as e:
                logger.warning(
                    f"Failed to delete webhook: {e}",
                    extra={"node_id": node_id, "webhook_id": state["webhook_id"]},
                )
            self.store.clear(node_id)
        return True
