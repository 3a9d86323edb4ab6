"""Render cloud tools package.

Contains tools for managing Render resources:
- service, deploy, customDomain, environmentVariable, secretFile
- project, environment
- postgres, keyValue, disk
- environmentGroup, webhook

plus the webhook trigger (signature verification and subscription
lifecycle) and the per-item node executor.
"""

# Import tools to trigger registration
from . import service
from . import deploy
from . import custom_domain
from . import environment_variable
from . import secret_file
from . import project
from . import environment
from . import postgres
from . import key_value
from . import disk
from . import environment_group
from . import webhook

# Import client for external use
from .client import (
    PAGE_SIZE,
    InvalidIdentifierError,
    RenderAPIError,
    RenderAuthError,
    RenderClient,
    RenderError,
    RenderRateLimitError,
)
from .resources import Resource, UnknownOperationError, execute_node
from .trigger import (
    RenderWebhookError,
    RenderWebhookTrigger,
    TriggerConfig,
    WebhookDelivery,
    WebhookSignatureError,
    compute_signature,
    receive_webhook,
    verify_signature,
)

__all__ = [
    # Tools modules
    "service",
    "deploy",
    "custom_domain",
    "environment_variable",
    "secret_file",
    "project",
    "environment",
    "postgres",
    "key_value",
    "disk",
    "environment_group",
    "webhook",
    # Client classes
    "PAGE_SIZE",
    "RenderClient",
    "RenderError",
    "InvalidIdentifierError",
    "RenderAuthError",
    "RenderAPIError",
    "RenderRateLimitError",
    # Node execution
    "Resource",
    "UnknownOperationError",
    "execute_node",
    # Trigger
    "RenderWebhookError",
    "RenderWebhookTrigger",
    "TriggerConfig",
    "WebhookDelivery",
    "WebhookSignatureError",
    "compute_signature",
    "receive_webhook",
    "verify_signature",
]
