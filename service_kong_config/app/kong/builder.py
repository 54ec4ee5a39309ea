"""
Generates Kong services and routes for one backend service, per security tier.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from shared.errors import MissingDependencyError, Diagnostic, MISSING_DISCOVERY_SOURCE
from shared.logging import get_logger
from ..openapi.aggregator import unique_paths
from ..openapi.models import GroupedRoutes
from .models import GatewayRoute, GatewayService, OIDC_DISCOVERY_PLACEHOLDER
from .plugins import build_discovery_endpoint, generate_jwt_oidc_plugin, generate_key_auth_plugin


@dataclass
class ServiceRouteConfig:
    """Inputs for generating the Kong services of one backend service."""
    service_name: str
    service_url: str
    global_prefix: str
    grouped_routes: GroupedRoutes = field(default_factory=GroupedRoutes)
    # Auth template mode: discovery endpoint served by the auth service
    auth_service_url: Optional[str] = None
    auth_service_prefix: Optional[str] = None
    # External OIDC mode; takes precedence over the auth service
    oidc_discovery_url: Optional[str] = None


class GatewayServiceBuilder:
    """Builds up to three Kong services (public, jwt, partner) per backend service."""

    def __init__(self):
        self.logger = get_logger("kong_config.builder")
        self.diagnostics: List[Diagnostic] = []

    def build(self, config: ServiceRouteConfig) -> List[GatewayService]:
        """Emit services in the fixed order public, jwt, partner; skip empty tiers."""
        services: List[GatewayService] = []

        if config.grouped_routes.public:
            services.append(self._public_service(config))

        if config.grouped_routes.jwt:
            services.append(self._jwt_service(config))

        if config.grouped_routes.partner:
            services.append(self._partner_service(config))

        return services

    def _public_service(self, config: ServiceRouteConfig) -> GatewayService:
        # Paths already carry the global prefix from OpenAPI
        return GatewayService(
            name=f"{config.service_name}-public",
            url=config.service_url,
            routes=[
                GatewayRoute(
                    name=f"{config.service_name}-public-route",
                    paths=unique_paths(config.grouped_routes.public),
                    strip_path=False,
                )
            ],
        )

    def _jwt_service(self, config: ServiceRouteConfig) -> GatewayService:
        try:
            discovery = build_discovery_endpoint(
                discovery_url=config.oidc_discovery_url,
                auth_service_url=config.auth_service_url,
                auth_service_prefix=config.auth_service_prefix,
            )
        except MissingDependencyError as e:
            # Emit the service anyway; the placeholder stays unresolved until the secret exists
            discovery = OIDC_DISCOVERY_PLACEHOLDER
            self.diagnostics.append(
                Diagnostic(
                    code=MISSING_DISCOVERY_SOURCE,
                    message=e.message,
                    details={"service": config.service_name},
                )
            )
            self.logger.warning(
                "JWT routes without discovery source",
                service=config.service_name,
                discovery=discovery,
            )

        return GatewayService(
            name=f"{config.service_name}-jwt",
            url=config.service_url,
            routes=[
                GatewayRoute(
                    name=f"{config.service_name}-jwt-route",
                    paths=unique_paths(config.grouped_routes.jwt),
                    strip_path=False,
                )
            ],
            plugins=[generate_jwt_oidc_plugin(discovery)],
        )

    def _partner_service(self, config: ServiceRouteConfig) -> GatewayService:
        """
        Partner routes use prefix matching rather than OpenAPI paths.

        Client calls /api/offers/v1/plans; the route /api/offers matches and
        is stripped; the service URL ends in /offers, so the backend receives
        /offers/v1/plans.
        """
        return GatewayService(
            name=f"{config.service_name}-partner",
            url=f"{config.service_url}/{config.global_prefix}",
            routes=[
                GatewayRoute(
                    name=f"{config.service_name}-partner-route",
                    paths=[f"/api/{config.global_prefix}"],
                    strip_path=True,
                )
            ],
            plugins=[generate_key_auth_plugin()],
        )


def generate_security_based_services(config: ServiceRouteConfig) -> List[GatewayService]:
    """Build the services of one backend service with a default builder."""
    return GatewayServiceBuilder().build(config)
