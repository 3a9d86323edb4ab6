"""Core server setup and routing for the Render tools server.

Defines the FastAPI application with:
- Tool discovery endpoint (/api/tools)
- Tool execution endpoint (/api/tools/{tool_name}/execute)
- Node execution endpoint (/api/nodes/{resource}/{operation}/execute)
- Webhook trigger lifecycle endpoints (/api/triggers/{node_id})
- Inbound Render webhook receiver (/webhooks/render/{node_id})
- Health check endpoint (/health)
"""

import inspect
from typing import Any, Callable, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ValidationError

from config import get_settings
from database import WebhookStateStore, init_db
from logging_config import get_logger, setup_logging
from tool_registry import get_registry

import render_tools  # noqa: F401  (registers tools)
from render_tools.client import InvalidIdentifierError, RenderClient, RenderError
from render_tools.resources import UnknownOperationError, execute_node
from render_tools.trigger import (
    RenderWebhookError,
    RenderWebhookTrigger,
    TriggerConfig,
    receive_webhook,
)

# Initialize logging
settings = get_settings()
setup_logging(settings.log_level)
logger = get_logger(__name__)

VERSION = "0.1.0"


# Response models
class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


class ToolExecutionResponse(BaseModel):
    """Response for tool execution."""
    success: bool
    result: Any = None
    error: str = ""


class NodeExecutionRequest(BaseModel):
    """Request body for node execution."""
    items: List[Dict[str, Any]] = [{}]
    continue_on_fail: bool = False


class NodeExecutionResponse(BaseModel):
    """Response for node execution."""
    success: bool
    results: List[Dict[str, Any]] = []
    error: str = ""


class TriggerResponse(BaseModel):
    """State of a trigger node's webhook subscription."""
    node_id: str
    webhook_url: str
    exists: bool
    webhook_id: Optional[str] = None
    events: List[str] = []
    service_ids: List[str] = []
    verify_signature: bool = True


def webhook_url_for(base_url: str, node_id: str) -> str:
    """Callback URL Render delivers a trigger node's events to."""
    return f"{base_url.rstrip('/')}/webhooks/render/{node_id}"


# Create FastAPI app
def create_app(
    store: Optional[WebhookStateStore] = None,
    client_factory: Optional[Callable[[], RenderClient]] = None,
    on_event: Optional[Callable[[str, Dict[str, Any]], Any]] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        store: Webhook state store (SQL-backed default created on first use)
        client_factory: Builds the Render client for each request
        on_event: Called with (node_id, event) for every accepted delivery

    Returns:
        Configured FastAPI instance
    """
    app = FastAPI(
        title="Render Tools Server",
        description="Render cloud hosting API tools and webhook triggers",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    make_client = client_factory or RenderClient
    state: Dict[str, Any] = {"store": store}

    def get_store() -> WebhookStateStore:
        if state["store"] is None:
            state["store"] = WebhookStateStore()
        return state["store"]

    def callback_url(request: Request, node_id: str) -> str:
        base_url = get_settings().webhook_base_url or str(request.base_url)
        return webhook_url_for(base_url, node_id)

    # -------------------------------------------------------------------------
    # Health and API Endpoints
    # -------------------------------------------------------------------------

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=VERSION)

    @app.get("/api/tools")
    async def list_tools():
        """List all available tools with their schemas.

        Returns:
            List of tool definitions with parameter schemas
        """
        return get_registry().get_manifest()

    @app.post("/api/tools/{tool_name}/execute", response_model=ToolExecutionResponse)
    async def execute_tool(
        tool_name: str,
        request: Dict[str, Any]
    ) -> ToolExecutionResponse:
        """Execute a specific tool.

        Args:
            tool_name: Name of the tool to execute
            request: Tool parameters

        Returns:
            Tool execution result

        Raises:
            HTTPException: If tool not found or parameters are invalid
        """
        registry = get_registry()
        if registry.get(tool_name) is None:
            logger.warning(f"Tool not found: {tool_name}")
            raise HTTPException(
                status_code=404,
                detail=f"Tool '{tool_name}' not found"
            )

        try:
            logger.info(f"Executing tool: {tool_name}")
            async with make_client() as client:
                result = await registry.execute(tool_name, request, client)
            return ToolExecutionResponse(success=True, result=result)

        except (ValidationError, InvalidIdentifierError) as e:
            logger.warning(f"Validation error for tool {tool_name}: {e}")
            raise HTTPException(
                status_code=400,
                detail=f"Invalid parameters: {str(e)}"
            )
        except RenderError as e:
            logger.error(f"Tool execution failed: {tool_name}: {e}")
            return ToolExecutionResponse(success=False, error=str(e))

    @app.post(
        "/api/nodes/{resource}/{operation}/execute",
        response_model=NodeExecutionResponse,
    )
    async def execute_node_endpoint(
        resource: str,
        operation: str,
        request: NodeExecutionRequest,
    ) -> NodeExecutionResponse:
        """Run one resource operation over a list of input items."""
        try:
            async with make_client() as client:
                results = await execute_node(
                    resource,
                    operation,
                    request.items,
                    client,
                    continue_on_fail=request.continue_on_fail,
                )
            return NodeExecutionResponse(success=True, results=results)

        except UnknownOperationError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except (ValidationError, RenderError) as e:
            logger.error(f"Node execution failed: {resource}.{operation}: {e}")
            return NodeExecutionResponse(success=False, error=str(e))

    # -------------------------------------------------------------------------
    # Webhook Trigger Endpoints
    # -------------------------------------------------------------------------

    @app.post("/api/triggers/{node_id}", response_model=TriggerResponse)
    async def activate_trigger(
        node_id: str,
        config: TriggerConfig,
        request: Request,
    ) -> TriggerResponse:
        """Ensure a Render webhook exists for a trigger node."""
        webhook_url = callback_url(request, node_id)
        store = get_store()

        try:
            async with make_client() as client:
                trigger = RenderWebhookTrigger(client, store)
                if not await trigger.check_exists(node_id, webhook_url):
                    created = await trigger.create(node_id, webhook_url, config)
                    if not created:
                        raise HTTPException(
                            status_code=502,
                            detail="Render did not return a webhook ID"
                        )
        except RenderWebhookError as e:
            raise HTTPException(status_code=502, detail=str(e))
        except RenderError as e:
            raise HTTPException(status_code=500, detail=str(e))

        saved = store.get(node_id) or {}
        return TriggerResponse(
            node_id=node_id,
            webhook_url=webhook_url,
            exists=True,
            webhook_id=saved.get("webhook_id"),
            events=saved.get("events", []),
            service_ids=saved.get("service_ids", []),
            verify_signature=saved.get("verify_signature", True),
        )

    @app.get("/api/triggers/{node_id}", response_model=TriggerResponse)
    async def get_trigger(node_id: str, request: Request) -> TriggerResponse:
        """Report a trigger node's stored subscription and whether it still exists."""
        saved = get_store().get(node_id)
        if saved is None:
            raise HTTPException(status_code=404, detail=f"No webhook stored for node '{node_id}'")

        webhook_url = callback_url(request, node_id)
        try:
            async with make_client() as client:
                exists = await RenderWebhookTrigger(client, get_store()).check_exists(
                    node_id, webhook_url
                )
        except RenderError as e:
            raise HTTPException(status_code=500, detail=str(e))

        return TriggerResponse(
            node_id=node_id,
            webhook_url=webhook_url,
            exists=exists,
            webhook_id=saved["webhook_id"],
            events=saved["events"],
            service_ids=saved["service_ids"],
            verify_signature=saved["verify_signature"],
        )

    @app.delete("/api/triggers/{node_id}")
    async def deactivate_trigger(node_id: str) -> Dict[str, Any]:
        """Delete a trigger node's Render webhook and its stored state."""
        try:
            async with make_client() as client:
                await RenderWebhookTrigger(client, get_store()).delete(node_id)
        except RenderError as e:
            raise HTTPException(status_code=500, detail=str(e))
        return {"success": True, "node_id": node_id}

    @app.post("/webhooks/render/{node_id}")
    async def render_webhook(node_id: str, request: Request):
        """Receive a Render webhook delivery for a trigger node.

        Rejected deliveries are answered with the rejection reason as plain
        text and are not forwarded.
        """
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Webhook body is not valid JSON")
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Webhook body must be a JSON object")

        delivery = receive_webhook(body, request.headers, get_store().get(node_id))
        if not delivery.accepted:
            return PlainTextResponse(delivery.response)

        logger.info(
            "Received Render webhook",
            extra={"node_id": node_id, "event_type": delivery.event["type"]},
        )
        if on_event is not None:
            outcome = on_event(node_id, delivery.event)
            if inspect.isawaitable(outcome):
                await outcome
        return {"received": True, "event": delivery.event}

    # -------------------------------------------------------------------------
    # Database initialization on startup
    # -------------------------------------------------------------------------

    @app.on_event("startup")
    async def startup_event():
        """Initialize database on startup."""
        if store is None:
            init_db()
            logger.info("Database initialized successfully")

    return app


# Create the app instance
app = create_app()
