"""Single-request execution with deadline and failure classification.

Every token and conversation call goes through RequestExecutor so that
timeouts, network failures and non-success statuses surface to callers
as the same small set of classified exceptions.
"""

import asyncio
from typing import Any, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field

from miaw.observability.logging import Logger
from miaw.transport.exceptions import (
    ApiError,
    MalformedResponseError,
    RequestTimeoutError,
    TransportError,
)

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]


class RequestSpec(BaseModel):
    """Description of one outbound request."""

    model_config = ConfigDict(frozen=True)

    method: HttpMethod = Field(..., description="HTTP method")
    headers: dict[str, str] = Field(default_factory=dict, description="Request headers")
    json_body: Any = Field(default=None, description="JSON-serializable body")
    params: dict[str, str] | None = Field(default=None, description="Query parameters")
    timeout: float | None = Field(
        default=None, gt=0, description="Deadline in seconds, overrides executor default"
    )


class RequestExecutor:
    """Issue requests through a shared httpx client.

    No retries are attempted; each failure is logged once with its
    operation name and propagated.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        logger: Logger,
        base_url: str = "",
        timeout: float | None = None,
    ) -> None:
        """Initialize executor.

        Args:
            http_client: Client used for every request
            logger: Logger for failure reporting
            base_url: Prefix for request paths
            timeout: Default deadline in seconds, None for no deadline
        """
        self._http = http_client
        self._logger = logger
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def execute(self, path: str, spec: RequestSpec, operation: str) -> httpx.Response:
        """Send a request and return the successful response.

        Args:
            path: Request path, appended to the base URL
            spec: Method, headers, body, query and optional deadline
            operation: Operation name reported with any failure

        Returns:
            The response, guaranteed to have a 2xx status

        Raises:
            RequestTimeoutError: If the deadline elapsed
            TransportError: If no response was received
            ApiError: If the response status was not 2xx
        """
        timeout = spec.timeout if spec.timeout is not None else self.timeout

        try:
            async with asyncio.timeout(timeout):
                response = await self._http.request(
                    spec.method,
                    f"{self.base_url}{path}",
                    headers=spec.headers,
                    json=spec.json_body,
                    params=spec.params,
                )
        except (TimeoutError, httpx.TimeoutException) as e:
            self._logger.error("request_timeout", operation=operation, timeout=timeout)
            raise RequestTimeoutError(operation, timeout) from e
        except httpx.HTTPError as e:
            self._logger.error(
                "request_transport_failed",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TransportError(str(e), operation) from e

        if not response.is_success:
            error = ApiError(response.status_code, operation)
            self._logger.error(
                "request_failed",
                operation=operation,
                status_code=error.status_code,
                category=error.category.value,
            )
            raise error

        return response

    async def execute_json(self, path: str, spec: RequestSpec, operation: str) -> Any:
        """Send a request and decode its JSON body."""
        response = await self.execute(path, spec, operation)
        try:
            return response.json()
        except ValueError as e:
            self._logger.error("response_not_json", operation=operation)
            raise MalformedResponseError(
                f"Response for {operation} is not valid JSON", operation
            ) from e
