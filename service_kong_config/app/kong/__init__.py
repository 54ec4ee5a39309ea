"""
Kong declarative configuration package.

Builds, merges and resolves Kong documents. The builder works on pydantic
models; the merger, resolver and CORS normalizer work on the plain
dict/list shape that is written to YAML.
"""

from .models import GatewayDocument, GatewayService, GatewayRoute, GatewayPlugin, Consumer
from .builder import GatewayServiceBuilder, ServiceRouteConfig, generate_security_based_services
from .merger import ConfigMerger, merge_kong_configs
from .resolver import PlaceholderResolver, resolve_placeholders
from .cors import CorsNormalizer, process_cors_origins
from .plugins import default_kong_plugins

__all__ = [
    "ConfigMerger",
    "Consumer",
    "CorsNormalizer",
    "GatewayDocument",
    "GatewayPlugin",
    "GatewayRoute",
    "GatewayService",
    "GatewayServiceBuilder",
    "PlaceholderResolver",
    "ServiceRouteConfig",
    "default_kong_plugins",
    "generate_security_based_services",
    "merge_kong_configs",
    "process_cors_origins",
    "resolve_placeholders",
]
