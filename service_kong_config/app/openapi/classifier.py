"""
Security classification of OpenAPI routes.
"""

from typing import Any, Dict, List, Optional

from shared.logging import get_logger
from .models import (
    HTTP_METHODS, BEARER_SCHEME, API_KEY_SCHEME,
    SecurityType, RouteSecurityRecord
)


class SecurityClassifier:
    """Classifies every operation of an OpenAPI document into security tiers."""

    def __init__(self):
        self.logger = get_logger("kong_config.classifier")

    def classify(self, document: Dict[str, Any], service_name: str) -> List[RouteSecurityRecord]:
        """
        Extract one record per (route, security tier).

        Records follow the document's path order and, within a path, the
        fixed HTTP method order. A route secured by both bearer and api-key
        yields a jwt and a partner record.
        """
        records: List[RouteSecurityRecord] = []

        for path, path_item in (document.get("paths") or {}).items():
            if not isinstance(path_item, dict):
                continue

            for method in HTTP_METHODS:
                operation = path_item.get(method)
                if operation is None:
                    continue

                security = operation.get("security") if isinstance(operation, dict) else None
                for security_type in determine_security_types(security):
                    records.append(
                        RouteSecurityRecord(
                            path=path,
                            method=method.upper(),
                            security_type=security_type,
                        )
                    )

        self.logger.debug("Routes classified", service=service_name, routes=len(records))
        return records


def determine_security_types(security: Optional[List[Dict[str, Any]]]) -> List[SecurityType]:
    """
    Map an operation's security requirements to security tiers.

    Bearer and api-key are additive: both present means dual access through
    the JWT and the partner service. Requirements naming neither scheme are
    treated as public.
    """
    if not security:
        return [SecurityType.PUBLIC]

    requirements = [req for req in security if isinstance(req, dict)]
    has_bearer = any(BEARER_SCHEME in req for req in requirements)
    has_api_key = any(API_KEY_SCHEME in req for req in requirements)

    if has_bearer and has_api_key:
        return [SecurityType.JWT, SecurityType.PARTNER]
    if has_bearer:
        return [SecurityType.JWT]
    if has_api_key:
        return [SecurityType.PARTNER]

    return [SecurityType.PUBLIC]


def extract_route_security(document: Dict[str, Any], service_name: str = "") -> List[RouteSecurityRecord]:
    """Classify a document with a default classifier."""
    return SecurityClassifier().classify(document, service_name)
