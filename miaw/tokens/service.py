"""Access token issuance and refresh."""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from miaw.observability.logging import Logger
from miaw.tokens.models import (
    AuthenticatedTokenParams,
    TokenResponse,
    UnauthenticatedTokenParams,
    resolve_token_params,
)
from miaw.transport.exceptions import MalformedResponseError
from miaw.transport.executor import RequestExecutor, RequestSpec

AUTHORIZATION_PATH = "/iamessage/api/v2/authorization"


class TokenLifecycleManager:
    """Issue and refresh access tokens for the messaging service.

    The caller owns the resulting credential; nothing is cached here and
    no request is retried.
    """

    def __init__(
        self,
        executor: RequestExecutor,
        org_id: str,
        developer_name: str,
        logger: Logger,
    ) -> None:
        self._executor = executor
        self._org_id = org_id
        self._developer_name = developer_name
        self._logger = logger

    async def create(
        self,
        params: UnauthenticatedTokenParams
        | AuthenticatedTokenParams
        | Mapping[str, Any]
        | None = None,
    ) -> TokenResponse:
        """Create a new access token.

        The authenticated endpoint is used only when both an authorization
        type and a customer identity token are supplied.

        Args:
            params: Token parameters, typed or as a plain mapping

        Returns:
            TokenResponse with the access token and last event id

        Raises:
            ValidationFailedError: If params are invalid
            MessagingError: If the request fails
        """
        resolved = resolve_token_params(params)
        operation = f"tokens.create_{resolved.kind}_token"

        self._logger.debug("token_create_started", token_kind=resolved.kind)

        data = await self._executor.execute_json(
            f"{AUTHORIZATION_PATH}/{resolved.kind}/access-token",
            RequestSpec(
                method="POST",
                json_body=resolved.to_wire(self._org_id, self._developer_name),
            ),
            operation,
        )

        token = self._parse(data, operation)
        self._logger.info("token_created", token_kind=resolved.kind)
        return token

    async def continue_(self, token: str) -> TokenResponse:
        """Refresh an access token using the current token as the credential.

        Args:
            token: Current access token

        Returns:
            TokenResponse with the continuation token
        """
        operation = "tokens.refresh_token"
        self._logger.debug("token_refresh_started")

        data = await self._executor.execute_json(
            f"{AUTHORIZATION_PATH}/continuation-access-token",
            RequestSpec(method="GET", headers={"Authorization": f"Bearer {token}"}),
            operation,
        )

        refreshed = self._parse(data, operation)
        self._logger.info("token_refreshed")
        return refreshed

    refresh = continue_

    def _parse(self, data: Any, operation: str) -> TokenResponse:
        try:
            return TokenResponse.model_validate(data)
        except ValidationError as e:
            self._logger.error("token_response_invalid", operation=operation)
            raise MalformedResponseError(
                f"Unexpected token response for {operation}", operation
            ) from e
