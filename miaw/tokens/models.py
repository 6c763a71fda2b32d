"""Token request and response models.

Token creation parameters are a tagged union: the authenticated variant
requires both an authorization type and a customer identity token, and
loose caller input is classified into one variant exactly once, by
resolve_token_params.
"""

from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from miaw.transport.exceptions import ValidationFailedError

Platform = Literal["Web", "Mobile"]
TokenKind = Literal["unauthenticated", "authenticated"]

DEFAULT_APP_NAME = "MessagingInAppWebClient"
DEFAULT_CLIENT_VERSION = "1.0.0"


class TokenContext(BaseModel):
    """Application context sent with token creation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    app_name: str = Field(default=DEFAULT_APP_NAME, alias="appName")
    client_version: str = Field(default=DEFAULT_CLIENT_VERSION, alias="clientVersion")


class _TokenParamsBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    capabilities_version: str = Field(default="1", alias="capabilitiesVersion")
    platform: Platform = Field(default="Web")
    device_id: str | None = Field(default=None, alias="deviceId")
    context: TokenContext = Field(default_factory=TokenContext)

    @field_validator("capabilities_version", "platform", "context", mode="before")
    @classmethod
    def _empty_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        """Treat empty values as absent so the field default applies."""
        if value in (None, "", {}):
            field = cls.model_fields[info.field_name]
            return field.get_default(call_default_factory=True)
        return value

    def to_wire(self, org_id: str, developer_name: str) -> dict[str, Any]:
        """Build the access-token request body."""
        body: dict[str, Any] = {
            "orgId": org_id,
            "esDeveloperName": developer_name,
            "capabilitiesVersion": self.capabilities_version,
            "platform": self.platform,
            "context": self.context.model_dump(by_alias=True),
        }
        if self.device_id:
            body["deviceId"] = self.device_id
        return body


class UnauthenticatedTokenParams(_TokenParamsBase):
    """Parameters for an anonymous (guest) access token."""

    kind: Literal["unauthenticated"] = "unauthenticated"


class AuthenticatedTokenParams(_TokenParamsBase):
    """Parameters for an access token bound to a verified customer identity."""

    kind: Literal["authenticated"] = "authenticated"
    authorization_type: str = Field(..., min_length=1, alias="authorizationType")
    customer_identity_token: str = Field(..., min_length=1, alias="customerIdentityToken")

    def to_wire(self, org_id: str, developer_name: str) -> dict[str, Any]:
        body = super().to_wire(org_id, developer_name)
        body["authorizationType"] = self.authorization_type
        body["customerIdentityToken"] = self.customer_identity_token
        return body


TokenCreateParams = Annotated[
    UnauthenticatedTokenParams | AuthenticatedTokenParams,
    Field(discriminator="kind"),
]

_AUTH_KEYS = (
    ("authorization_type", "authorizationType"),
    ("customer_identity_token", "customerIdentityToken"),
)


def _lookup(data: Mapping[str, Any], names: tuple[str, str]) -> Any:
    for name in names:
        if name in data:
            return data[name]
    return None


def resolve_token_params(
    params: UnauthenticatedTokenParams | AuthenticatedTokenParams | Mapping[str, Any] | None,
) -> UnauthenticatedTokenParams | AuthenticatedTokenParams:
    """Classify token parameters into the authenticated or unauthenticated variant.

    A mapping is authenticated only when both the authorization type and
    the customer identity token are non-empty strings. Keys may use the
    Python or the wire spelling.

    Raises:
        ValidationFailedError: If the remaining fields are invalid
    """
    if isinstance(params, (UnauthenticatedTokenParams, AuthenticatedTokenParams)):
        return params

    data = dict(params or {})
    auth_values = [_lookup(data, names) for names in _AUTH_KEYS]
    is_authenticated = all(isinstance(v, str) and v for v in auth_values)

    data.pop("kind", None)

    try:
        if is_authenticated:
            return AuthenticatedTokenParams.model_validate(data)
        for names in _AUTH_KEYS:
            for name in names:
                data.pop(name, None)
        return UnauthenticatedTokenParams.model_validate(data)
    except ValidationError as e:
        raise ValidationFailedError(f"Invalid token parameters: {e}") from e


class TokenResponse(BaseModel):
    """Access token plus the resumption cursor for the event stream."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    access_token: str = Field(..., min_length=1, alias="accessToken")
    last_event_id: str = Field(default="", alias="lastEventId")
