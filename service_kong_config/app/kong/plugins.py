"""
Plugin factories for generated Kong services and the seeded user document.
"""

from typing import List, Optional

from shared.errors import MissingDependencyError
from .models import (
    GatewayPlugin, OidcPluginConfig, KeyAuthPluginConfig, CorsPluginConfig,
    TRUST_TOKEN_PLACEHOLDER
)

# Claims set by the framework auth service. External OIDC providers use other names.
FRAMEWORK_JWT_CLAIM_HEADERS = [
    "X-JWT-Claim-Sub",
    "X-JWT-Claim-Email",
    "X-JWT-Claim-Role",
    "X-JWT-Claim-Confirmed",
]


def build_discovery_endpoint(
    discovery_url: Optional[str] = None,
    auth_service_url: Optional[str] = None,
    auth_service_prefix: Optional[str] = None,
) -> str:
    """
    Return the OIDC discovery endpoint.

    A direct discovery URL wins over the auth service URL and prefix.

    Raises:
        MissingDependencyError: If neither source is configured.
    """
    if discovery_url:
        return discovery_url
    if auth_service_url and auth_service_prefix:
        return f"{auth_service_url}/{auth_service_prefix}/.well-known/openid-configuration"
    raise MissingDependencyError(
        "No OIDC discovery source configured for JWT routes",
        details={"auth_service_url": auth_service_url, "auth_service_prefix": auth_service_prefix},
    )


def generate_jwt_oidc_plugin(discovery_endpoint: str) -> GatewayPlugin:
    """
    Generate the OIDC plugin for JWT-protected services.

    ssl_verify stays a placeholder: 'no' for local HTTP, 'yes' in the cloud.
    """
    config = OidcPluginConfig(discovery=discovery_endpoint)
    return GatewayPlugin(name="oidc", config=config.model_dump())


def generate_key_auth_plugin() -> GatewayPlugin:
    """Generate the key-auth plugin for partner API services."""
    return GatewayPlugin(name="key-auth", config=KeyAuthPluginConfig().model_dump())


def default_kong_plugins(use_auth_template: bool) -> List[GatewayPlugin]:
    """
    Return the default operational plugins for a new user document.

    Includes request-transformer (header hygiene and trust token), CORS,
    rate-limiting and correlation-id. The framework JWT claim headers are
    stripped from client requests only in auth-template mode.
    """
    jwt_claim_headers = FRAMEWORK_JWT_CLAIM_HEADERS if use_auth_template else []

    return [
        GatewayPlugin(
            name="request-transformer",
            config={
                "remove": {
                    "headers": [
                        "X-Consumer-Id",
                        "X-Consumer-Username",
                        *jwt_claim_headers,
                        "X-Kong-Request-Id",
                        "X-Kong-Trust",
                    ],
                },
                "add": {
                    "headers": [f"X-Kong-Trust:{TRUST_TOKEN_PLACEHOLDER}"],
                },
            },
        ),
        GatewayPlugin(name="cors", config=CorsPluginConfig().model_dump()),
        GatewayPlugin(
            name="rate-limiting",
            config={
                "minute": 100,
                "policy": "redis",
                "redis": {
                    "host": "${REDIS_HOST}",
                    "port": "${REDIS_PORT}",
                    "password": "${REDIS_PASSWORD}",
                    "database": 0,
                    "timeout": 2000,
                },
            },
        ),
        GatewayPlugin(
            name="correlation-id",
            config={
                "header_name": "X-Request-ID",
                "generator": "uuid",
                "echo_downstream": True,
            },
        ),
    ]
