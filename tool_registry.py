"""Tool registration and discovery system for the Render tools server.

Provides a central registry for all Render tools with:
- Schema validation using Pydantic
- Tool discovery (manifest)
- Resource/operation lookup and execution routing
"""

import asyncio
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel


@dataclass
class ToolDefinition:
    """Definition of a Render tool.

    Attributes:
        name: Unique tool identifier (e.g., "render_service_get")
        resource: Resource the tool operates on (e.g., "service")
        operation: Operation verb within the resource (e.g., "get")
        description: Human-readable description
        input_schema: Pydantic model for input validation
        handler: Async function called as handler(client, params)
        tags: Optional tags for categorization
    """
    name: str
    resource: str
    operation: str
    description: str
    input_schema: Type[BaseModel]
    handler: Callable
    tags: List[str] = field(default_factory=list)

    def to_manifest_dict(self) -> Dict[str, Any]:
        """Convert to manifest dictionary for API response.

        Returns:
            Dictionary with tool metadata and parameter schema
        """
        return {
            "name": self.name,
            "resource": self.resource,
            "operation": self.operation,
            "description": self.description,
            "tags": self.tags,
            "parameters": self._schema_to_parameters(self.input_schema),
        }

    def json_schema(self) -> Dict[str, Any]:
        """Full JSON schema of the input model."""
        return self.input_schema.model_json_schema()

    @staticmethod
    def _schema_to_parameters(schema: Type[BaseModel]) -> List[Dict[str, Any]]:
        """Convert Pydantic schema to parameter list.

        Args:
            schema: Pydantic model class

        Returns:
            List of parameter definitions
        """
        parameters = []
        json_schema = schema.model_json_schema()
        properties = json_schema.get("properties", {})
        required = json_schema.get("required", [])

        for name, prop in properties.items():
            param = {
                "name": name,
                "type": prop.get("type", "object"),
                "description": prop.get("description", ""),
                "required": name in required,
            }

            if "default" in prop:
                param["default"] = prop["default"]

            if "enum" in prop:
                param["enum"] = prop["enum"]

            parameters.append(param)

        return parameters


def tool_name_for(resource: str, operation: str) -> str:
    """Build the tool name for a resource operation.

    >>> tool_name_for("environmentVariable", "addOrUpdate")
    'render_environment_variable_add_or_update'
    """
    def snake(value: str) -> str:
        return re.sub(r"(?<!^)(?=[A-Z])", "_", value).lower()

    return f"render_{snake(resource)}_{snake(operation)}"


class ToolRegistry:
    """Central registry for Render tools.

    Manages tool registration, discovery, and execution.
    """

    def __init__(self):
        self._tools: Dict[str, ToolDefinition] = {}
        self._operations: Dict[Tuple[str, str], str] = {}

    def register(
        self,
        resource: str,
        operation: str,
        description: str,
        input_schema: Type[BaseModel],
        handler: Callable,
        tags: Optional[List[str]] = None,
        name: Optional[str] = None,
    ) -> ToolDefinition:
        """Register a new tool.

        Args:
            resource: Resource identifier
            operation: Operation identifier within the resource
            description: Human-readable description
            input_schema: Pydantic model for input validation
            handler: Async function that executes the tool
            tags: Optional tags for categorization
            name: Explicit tool name (derived from resource/operation if omitted)

        Returns:
            The registered tool definition

        Raises:
            ValueError: If a tool with the same name or resource/operation exists
        """
        name = name or tool_name_for(resource, operation)
        if name in self._tools:
            raise ValueError(f"Tool '{name}' is already registered")
        if (resource, operation) in self._operations:
            raise ValueError(
                f"Operation '{operation}' of resource '{resource}' is already registered"
            )

        definition = ToolDefinition(
            name=name,
            resource=resource,
            operation=operation,
            description=description,
            input_schema=input_schema,
            handler=handler,
            tags=tags or [resource],
        )
        self._tools[name] = definition
        self._operations[(resource, operation)] = name
        return definition

    def get(self, name: str) -> Optional[ToolDefinition]:
        """Get a tool by name.

        Args:
            name: Tool identifier

        Returns:
            ToolDefinition if found, None otherwise
        """
        return self._tools.get(name)

    def find(self, resource: str, operation: str) -> Optional[ToolDefinition]:
        """Get the tool registered for a resource operation."""
        name = self._operations.get((resource, operation))
        return self._tools.get(name) if name else None

    def operations(self, resource: str) -> List[str]:
        """List the operations registered for a resource."""
        return [op for (res, op) in self._operations if res == resource]

    def list_tools(self) -> List[ToolDefinition]:
        """Get all registered tools.

        Returns:
            List of all tool definitions
        """
        return list(self._tools.values())

    def get_manifest(self) -> List[Dict[str, Any]]:
        """Get tool manifest for API response.

        Returns:
            List of tool metadata dictionaries
        """
        return [tool.to_manifest_dict() for tool in self._tools.values()]

    async def execute(
        self,
        name: str,
        parameters: Dict[str, Any],
        client: Any,
    ) -> Any:
        """Execute a tool with the given parameters.

        Args:
            name: Tool identifier
            parameters: Input parameters
            client: Render API client passed through to the handler

        Returns:
            Decoded API result (dict or list of dicts)

        Raises:
            ValueError: If tool not found
            ValidationError: If parameters invalid
        """
        tool = self.get(name)
        if tool is None:
            raise ValueError(f"Tool '{name}' not found")

        validated_input = tool.input_schema(**parameters)

        if asyncio.iscoroutinefunction(tool.handler):
            result = await tool.handler(client, validated_input)
        else:
            result = tool.handler(client, validated_input)

        if isinstance(result, BaseModel):
            return result.model_dump(by_alias=True, exclude_none=True)
        return result


# Global registry instance
_registry: Optional[ToolRegistry] = None


def get_registry() -> ToolRegistry:
    """Get the global tool registry.

    Creates the instance on first call.

    Returns:
        Global ToolRegistry instance
    """
    global _registry
    if _registry is None:
        _registry = ToolRegistry()
    return _registry


def tool(
    resource: str,
    operation: str,
    description: str,
    input_schema: Type[BaseModel],
    tags: Optional[List[str]] = None
) -> Callable:
    """Decorator to register a function as a Render tool.

    Args:
        resource: Resource identifier
        operation: Operation identifier
        description: Human-readable description
        input_schema: Pydantic model for input validation
        tags: Optional tags for categorization

    Returns:
        Decorator function

    Example:
        @tool(
            resource="service",
            operation="get",
            description="Get a service by ID",
            input_schema=ServiceGetInput,
        )
        async def render_service_get(client, params: ServiceGetInput):
            ...
    """
    def decorator(func: Callable) -> Callable:
        get_registry().register(
            resource=resource,
            operation=operation,
            description=description,
            input_schema=input_schema,
            handler=func,
            tags=tags
        )
        return func
    return decorator
