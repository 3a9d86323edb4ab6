"""Resource dispatch and per-item node execution.

A node invocation names one resource and one operation and runs it over
a sequence of input items, each holding that operation's parameters.
"""

from enum import Enum
from typing import Any, Dict, List

from logging_config import ToolInvocationLogger, get_logger
from tool_registry import ToolDefinition, get_registry

from .client import RenderClient, RenderError

logger = get_logger(__name__)


class Resource(str, Enum):
    SERVICE = "service"
    DEPLOY = "deploy"
    CUSTOM_DOMAIN = "customDomain"
    ENVIRONMENT_VARIABLE = "environmentVariable"
    SECRET_FILE = "secretFile"
    PROJECT = "project"
    ENVIRONMENT = "environment"
    POSTGRES = "postgres"
    KEY_VALUE = "keyValue"
    DISK = "disk"
    ENVIRONMENT_GROUP = "environmentGroup"
    WEBHOOK = "webhook"


class UnknownOperationError(RenderError, LookupError):
    """The resource or operation is not supported."""
    pass


def resolve_operation(resource: str, operation: str) -> ToolDefinition:
    """Find the tool implementing ``operation`` on ``resource``.

    Raises:
        UnknownOperationError: If either is not registered
    """
    try:
        resource = Resource(resource).value
    except ValueError:
        raise UnknownOperationError(f"Unknown resource: {resource}") from None

    definition = get_registry().find(resource, operation)
    if definition is None:
        raise UnknownOperationError(f"Unknown operation: {operation}")
    return definition


def _as_records(result: Any, index: int) -> List[Dict[str, Any]]:
    rows = result if isinstance(result, list) else [result]
    return [{"json": row, "item": index} for row in rows]


async def execute_node(
    resource: str,
    operation: str,
    items: List[Dict[str, Any]],
    client: RenderClient,
    continue_on_fail: bool = False,
) -> List[Dict[str, Any]]:
    """Run one resource operation over every input item, in order.

    List results expand into one record per element; every record keeps
    the index of the item that produced it.

    Args:
        resource: Resource identifier, e.g. "service"
        operation: Operation identifier, e.g. "get"
        items: Parameters of each input item
        client: Render API client
        continue_on_fail: Record per-item errors instead of raising

    Returns:
        List of {"json": ..., "item": index} records

    Raises:
        UnknownOperationError: If the resource/operation is not supported
        Exception: The first item error when continue_on_fail is False
    """
    definition = resolve_operation(resource, operation)
    registry = get_registry()
    results: List[Dict[str, Any]] = []

    for index, parameters in enumerate(items):
        invocation = ToolInvocationLogger(logger).start(definition.name, item=index)
        try:
            result = await registry.execute(definition.name, parameters, client)
        except Exception as e:
            invocation.failure(str(e))
            if not continue_on_fail:
                raise
            results.append({"json": {"error": str(e)}, "item": index})
            continue

        records = _as_records(result, index)
        invocation.success(result_count=len(records))
        results.extend(records)

    return results
