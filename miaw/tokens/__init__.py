"""Access token lifecycle.

Usage:
    tokens = TokenLifecycleManager(executor, org_id, developer_name, logger)
    guest = await tokens.create()
    customer = await tokens.create(
        {"authorizationType": "JWT", "customerIdentityToken": "eyJ..."}
    )
    refreshed = await tokens.continue_(guest.access_token)
"""

from miaw.tokens.models import (
    AuthenticatedTokenParams,
    TokenContext,
    TokenCreateParams,
    TokenResponse,
    UnauthenticatedTokenParams,
    resolve_token_params,
)
from miaw.tokens.service import TokenLifecycleManager

__all__ = [
    "AuthenticatedTokenParams",
    "TokenContext",
    "TokenCreateParams",
    "TokenLifecycleManager",
    "TokenResponse",
    "UnauthenticatedTokenParams",
    "resolve_token_params",
]
