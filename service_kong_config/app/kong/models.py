"""
Kong declarative configuration models.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


FORMAT_VERSION = "3.0"
TRANSFORM = True

# Placeholders resolved from the secret map after merging
KONG_SSL_VERIFY_PLACEHOLDER = "${KONG_SSL_VERIFY}"
OIDC_DISCOVERY_PLACEHOLDER = "${OIDC_DISCOVERY_URL}"
CORS_ORIGINS_PLACEHOLDER = "${KONG_CORS_ORIGINS}"
TRUST_TOKEN_PLACEHOLDER = "${KONG_TRUST_TOKEN}"

# Must match the audience of JWTs issued by the auth service. Not a credential:
# in bearer-only mode Kong validates signatures via JWKS only.
KONG_OIDC_CLIENT_ID = "kong"
KONG_OIDC_CLIENT_SECRET = "kong-secret"

USERINFO_HEADER_NAME = "X-Userinfo"
API_KEY_HEADER_NAME = "x-api-key"


class KongModel(BaseModel):
    """Base model: unknown Kong keys pass through untouched."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        """Dump only the keys that were set, with Kong's field names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class GatewayPlugin(KongModel):
    """Kong plugin. ``config`` is opaque for plugins this package does not build."""
    name: str
    config: Dict[str, Any] = Field(default_factory=dict)


class GatewayRoute(KongModel):
    name: str
    paths: Optional[List[str]] = None
    strip_path: Optional[bool] = None


class GatewayService(KongModel):
    name: str
    url: Optional[str] = None
    routes: List[GatewayRoute] = Field(default_factory=list)
    plugins: Optional[List[GatewayPlugin]] = None


class Consumer(KongModel):
    username: str
    keyauth_credentials: Optional[List[Dict[str, Any]]] = None
    plugins: Optional[List[GatewayPlugin]] = None


class GatewayDocument(KongModel):
    """A whole declarative configuration file."""
    format_version: str = Field(default=FORMAT_VERSION, alias="_format_version")
    transform: bool = Field(default=TRANSFORM, alias="_transform")
    services: List[GatewayService] = Field(default_factory=list)
    consumers: List[Consumer] = Field(default_factory=list)
    plugins: List[GatewayPlugin] = Field(default_factory=list)


# Typed configs for the plugins built here

class OidcPluginConfig(BaseModel):
    """kong-oidc in bearer-only mode: validate JWTs, never redirect."""
    client_id: str = KONG_OIDC_CLIENT_ID
    client_secret: str = KONG_OIDC_CLIENT_SECRET
    discovery: str
    bearer_only: str = "yes"
    bearer_jwt_auth_enable: str = "yes"
    ssl_verify: str = KONG_SSL_VERIFY_PLACEHOLDER
    unauth_action: str = "deny"
    userinfo_header_name: str = USERINFO_HEADER_NAME


class KeyAuthPluginConfig(BaseModel):
    key_names: List[str] = Field(default_factory=lambda: [API_KEY_HEADER_NAME])
    hide_credentials: bool = False


class CorsPluginConfig(BaseModel):
    origins: Union[List[str], str] = Field(default_factory=lambda: [CORS_ORIGINS_PLACEHOLDER])
    methods: List[str] = Field(default_factory=lambda: ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
    headers: List[str] = Field(
        default_factory=lambda: ["Accept", "Authorization", "Content-Type", "X-Request-ID", API_KEY_HEADER_NAME]
    )
    exposed_headers: List[str] = Field(default_factory=lambda: ["X-Request-ID"])
    credentials: bool = True
    max_age: int = 3600
