"""
Unit tests for GatewayServiceBuilder and the plugin factories.
"""

import pytest

from service_kong_config.app.kong.builder import (
    GatewayServiceBuilder, ServiceRouteConfig, generate_security_based_services
)
from service_kong_config.app.kong.plugins import (
    build_discovery_endpoint, default_kong_plugins, generate_jwt_oidc_plugin, generate_key_auth_plugin
)
from service_kong_config.app.openapi.aggregator import group_by_security
from service_kong_config.app.openapi.models import RouteSecurityRecord, SecurityType
from shared.errors import MissingDependencyError, MISSING_DISCOVERY_SOURCE


def grouped(*records):
    return group_by_security(
        RouteSecurityRecord(path=path, method=method, security_type=SecurityType(tier))
        for path, method, tier in records
    )


class TestGatewayServiceBuilder:
    """Test cases for GatewayServiceBuilder."""

    @pytest.fixture
    def builder(self):
        """Create GatewayServiceBuilder instance."""
        return GatewayServiceBuilder()

    @pytest.fixture
    def all_tiers_config(self):
        return ServiceRouteConfig(
            service_name="offers-service",
            service_url="${KONG_SERVICE_HOST}:3002",
            global_prefix="offers",
            grouped_routes=grouped(
                ("/health", "GET", "public"),
                ("/users", "GET", "jwt"),
                ("/users", "POST", "jwt"),
                ("/api/plans", "GET", "partner"),
            ),
            auth_service_url="${KONG_SERVICE_HOST}:3001",
            auth_service_prefix="auth",
        )

    def test_emits_services_in_tier_order(self, builder, all_tiers_config):
        services = builder.build(all_tiers_config)

        assert [s.name for s in services] == [
            "offers-service-public",
            "offers-service-jwt",
            "offers-service-partner",
        ]

    def test_public_service(self, builder, all_tiers_config):
        public = builder.build(all_tiers_config)[0]

        assert public.url == "${KONG_SERVICE_HOST}:3002"
        assert public.plugins is None
        assert len(public.routes) == 1
        assert public.routes[0].name == "offers-service-public-route"
        assert public.routes[0].paths == ["/health"]
        assert public.routes[0].strip_path is False
        assert "plugins" not in public.to_dict()

    def test_jwt_service_dedupes_paths(self, builder, all_tiers_config):
        jwt = builder.build(all_tiers_config)[1]

        assert jwt.url == "${KONG_SERVICE_HOST}:3002"
        assert jwt.routes[0].name == "offers-service-jwt-route"
        assert jwt.routes[0].paths == ["/users"]
        assert jwt.routes[0].strip_path is False

    def test_jwt_service_uses_auth_service_discovery(self, builder, all_tiers_config):
        jwt = builder.build(all_tiers_config)[1]

        assert len(jwt.plugins) == 1
        plugin = jwt.plugins[0]
        assert plugin.name == "oidc"
        assert plugin.config["discovery"] == (
            "${KONG_SERVICE_HOST}:3001/auth/.well-known/openid-configuration"
        )

    def test_direct_discovery_url_takes_precedence(self, builder, all_tiers_config):
        all_tiers_config.oidc_discovery_url = "https://tenant.auth0.com/.well-known/openid-configuration"

        jwt = builder.build(all_tiers_config)[1]

        assert jwt.plugins[0].config["discovery"] == "https://tenant.auth0.com/.well-known/openid-configuration"

    def test_partner_service_uses_synthetic_prefix_route(self, builder, all_tiers_config):
        partner = builder.build(all_tiers_config)[2]

        assert partner.url == "${KONG_SERVICE_HOST}:3002/offers"
        assert partner.routes[0].name == "offers-service-partner-route"
        assert partner.routes[0].paths == ["/api/offers"]
        assert partner.routes[0].strip_path is True
        assert [p.name for p in partner.plugins] == ["key-auth"]

    def test_only_non_empty_tiers_are_emitted(self, builder):
        config = ServiceRouteConfig(
            service_name="billing-service",
            service_url="${KONG_SERVICE_HOST}:3003",
            global_prefix="billing",
            grouped_routes=grouped(("/billing/v1/invoices", "GET", "partner")),
        )

        services = builder.build(config)

        assert [s.name for s in services] == ["billing-service-partner"]

    def test_no_routes_no_services(self, builder):
        config = ServiceRouteConfig(
            service_name="empty-service",
            service_url="${KONG_SERVICE_HOST}:3004",
            global_prefix="empty",
        )

        assert builder.build(config) == []

    def test_at_most_three_services(self, builder):
        config = ServiceRouteConfig(
            service_name="offers-service",
            service_url="${KONG_SERVICE_HOST}:3002",
            global_prefix="offers",
            grouped_routes=grouped(*[
                (f"/r{i}", method, tier)
                for i in range(5)
                for method in ("GET", "POST")
                for tier in ("public", "jwt", "partner")
            ]),
            oidc_discovery_url="${OIDC_DISCOVERY_URL}",
        )

        services = builder.build(config)

        assert len(services) == 3

    def test_missing_discovery_source_warns_and_keeps_placeholder(self, builder):
        config = ServiceRouteConfig(
            service_name="offers-service",
            service_url="${KONG_SERVICE_HOST}:3002",
            global_prefix="offers",
            grouped_routes=grouped(("/users", "GET", "jwt")),
        )

        services = builder.build(config)

        assert services[0].plugins[0].config["discovery"] == "${OIDC_DISCOVERY_URL}"
        assert [d.code for d in builder.diagnostics] == [MISSING_DISCOVERY_SOURCE]

    def test_module_level_helper(self, all_tiers_config):
        assert len(generate_security_based_services(all_tiers_config)) == 3


class TestPluginFactories:
    """Test cases for the plugin factories."""

    def test_oidc_plugin_is_bearer_only_and_denies(self):
        plugin = generate_jwt_oidc_plugin("https://idp/.well-known/openid-configuration")

        assert plugin.to_dict() == {
            "name": "oidc",
            "config": {
                "client_id": "kong",
                "client_secret": "kong-secret",
                "discovery": "https://idp/.well-known/openid-configuration",
                "bearer_only": "yes",
                "bearer_jwt_auth_enable": "yes",
                "ssl_verify": "${KONG_SSL_VERIFY}",
                "unauth_action": "deny",
                "userinfo_header_name": "X-Userinfo",
            },
        }

    def test_key_auth_plugin(self):
        assert generate_key_auth_plugin().to_dict() == {
            "name": "key-auth",
            "config": {"key_names": ["x-api-key"], "hide_credentials": False},
        }

    def test_discovery_endpoint_requires_a_source(self):
        with pytest.raises(MissingDependencyError):
            build_discovery_endpoint(auth_service_url="${KONG_SERVICE_HOST}:3001")

    @pytest.mark.parametrize("use_auth_template,expected_present", [(True, True), (False, False)])
    def test_default_plugins_claim_headers(self, use_auth_template, expected_present):
        plugins = default_kong_plugins(use_auth_template)

        assert [p.name for p in plugins] == ["request-transformer", "cors", "rate-limiting", "correlation-id"]
        removed = plugins[0].config["remove"]["headers"]
        assert ("X-JWT-Claim-Sub" in removed) is expected_present
        assert removed[-2:] == ["X-Kong-Request-Id", "X-Kong-Trust"]

    def test_default_cors_origins_placeholder(self):
        cors = default_kong_plugins(True)[1]

        assert cors.config["origins"] == ["${KONG_CORS_ORIGINS}"]
        assert cors.config["credentials"] is True
        assert cors.config["max_age"] == 3600
