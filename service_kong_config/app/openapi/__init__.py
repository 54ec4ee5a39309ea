"""
OpenAPI parsing package.

Reads backend OpenAPI documents and reduces them to route security records
grouped by tier. Everything here is pure except the loader.
"""

from .models import SecurityType, RouteSecurityRecord, GroupedRoutes, HTTP_METHODS
from .classifier import SecurityClassifier, extract_route_security
from .aggregator import group_by_security, unique_paths, group_by_path
from .loader import load_openapi_document
from .parser import ParsedServiceSecurity, parse_openapi_security

__all__ = [
    "GroupedRoutes",
    "HTTP_METHODS",
    "ParsedServiceSecurity",
    "RouteSecurityRecord",
    "SecurityClassifier",
    "SecurityType",
    "extract_route_security",
    "group_by_path",
    "group_by_security",
    "load_openapi_document",
    "parse_openapi_security",
    "unique_paths",
]
