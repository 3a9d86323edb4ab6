"""Render REST API client.

Handles bearer authentication, request/response classification and
cursor pagination against the Render v1 API.
"""

from typing import Any, Dict, List, Optional, Union

import httpx

from config import get_settings
from logging_config import get_logger

logger = get_logger(__name__)

PAGE_SIZE = 100

JsonResult = Union[Dict[str, Any], List[Dict[str, Any]]]


class RenderError(Exception):
    """Base class for all Render tool errors."""
    pass


class InvalidIdentifierError(RenderError, ValueError):
    """A resource identifier does not carry its expected prefix."""

    def __init__(self, message: str, prefix: str, value: str):
        super().__init__(message)
        self.prefix = prefix
        self.value = value


class RenderAuthError(RenderError):
    """No usable Render API key is configured."""
    pass


class RenderAPIError(RenderError):
    """API request to Render failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RenderRateLimitError(RenderAPIError):
    """Render answered 429; the request was not retried."""

    def __init__(self, reset: str):
        super().__init__(
            f"Rate limit exceeded. Retry after {reset} seconds.",
            status_code=429,
        )
        self.reset = reset


class RenderClient:
    """Async client for the Render REST API.

    Usage:
        async with RenderClient() as client:
            service = await client.request("GET", "/services/srv-abc123")
            services = await client.paginate("GET", "/services")
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        page_size: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Render client.

        Args:
            api_key: Render API key (defaults to config)
            base_url: API base URL (defaults to config)
            timeout: Request timeout in seconds (defaults to config, then httpx default)
            page_size: Page size for paginate() (defaults to config)
            transport: Optional httpx transport, used by tests
        """
        settings = get_settings()

        self.api_key = api_key or settings.render_api_key
        self.base_url = (base_url or settings.render_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.render_timeout
        self.page_size = page_size or settings.render_page_size or PAGE_SIZE
        self._transport = transport

        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "RenderClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_client(self) -> None:
        """Create HTTP client if not exists."""
        if self._client is not None:
            return
        if not self.api_key:
            raise RenderAuthError("Render API key not configured")

        kwargs: Dict[str, Any] = {
            "base_url": self.base_url,
            "headers": {
                "Accept": "application/json",
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
        }
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        if self._transport is not None:
            kwargs["transport"] = self._transport

        self._client = httpx.AsyncClient(**kwargs)

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, Any]] = None,
    ) -> JsonResult:
        """Issue a single request against the Render API.

        Args:
            method: HTTP method (GET, POST, PATCH, PUT, DELETE)
            path: Endpoint path relative to the base URL, e.g. "/services"
            body: JSON body, left out entirely when None or empty
            query: Query parameters, left out entirely when None or empty

        Returns:
            Decoded JSON response ({} for an empty body)

        Raises:
            RenderRateLimitError: On HTTP 429
            RenderAPIError: On any other failure status or transport error
        """
        await self._ensure_client()

        kwargs: Dict[str, Any] = {}
        if body:
            kwargs["json"] = body
        if query:
            kwargs["params"] = query

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise RenderAPIError(f"Request to Render timed out: {e}") from e
        except httpx.RequestError as e:
            raise RenderAPIError(f"Request to Render failed: {e}") from e

        if response.status_code == 429:
            reset = response.headers.get("ratelimit-reset", "unknown")
            logger.warning(
                "Render rate limit exceeded",
                extra={"method": method, "path": path, "ratelimit_reset": reset},
            )
            raise RenderRateLimitError(reset)

        if response.status_code >= 400:
            raise RenderAPIError(
                f"Render API request failed ({response.status_code}): "
                f"{self._error_message(response)}",
                status_code=response.status_code,
            )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise RenderAPIError(
                f"Render returned a non-JSON response: {e}",
                status_code=response.status_code,
            ) from e

    async def paginate(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, Any]] = None,
        page_size: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch every page of a cursor-paginated list and unwrap the items.

        Each list item is a wrapper holding one resource field plus a
        ``cursor``. A page shorter than the page size ends the loop, as
        does a non-list response.

        Args:
            method: HTTP method (normally GET)
            path: Endpoint path
            body: Optional JSON body sent with every page request
            query: Filters merged into every page request
            page_size: Items per page (defaults to the client's page size)

        Returns:
            Flat list of unwrapped resources in server order
        """
        limit = page_size or self.page_size
        results: List[Dict[str, Any]] = []
        cursor: Optional[str] = None
        pages = 0

        while True:
            page_query = {**(query or {}), "limit": limit}
            if cursor:
                page_query["cursor"] = cursor

            response = await self.request(method, path, body, page_query)
            pages += 1

            if not isinstance(response, list):
                break

            for item in response:
                resource_key = next((k for k in item if k != "cursor"), None)
                if resource_key and item.get(resource_key):
                    results.append(item[resource_key])
                if item.get("cursor"):
                    cursor = item["cursor"]

            if len(response) < limit:
                cursor = None

            if not cursor:
                break

        logger.debug(
            "Paginated Render list",
            extra={"path": path, "pages": pages, "result_count": len(results)},
        )
        return results

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract the provider's error message from a failed response."""
        try:
            data = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return response.text or response.reason_phrase


def unwrap_page(
    response: JsonResult,
    resource_key: str,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Unwrap a single page of list results.

    Args:
        response: Decoded list response (or a single object)
        resource_key: Wrapper field holding the resource, e.g. "service"
        limit: Maximum number of items to keep

    Returns:
        List of resources; a non-list response becomes a one-element list
    """
    if not isinstance(response, list):
        return [response]
    items = [item.get(resource_key) or item for item in response]
    return items[:limit] if limit is not None else items
