"""
Entry point for parsing the security metadata of one backend service.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from shared.logging import get_logger
from .aggregator import group_by_path, group_by_security
from .classifier import SecurityClassifier
from .loader import load_openapi_document
from .models import GroupedRoutes

logger = get_logger("kong_config.openapi")


@dataclass
class ParsedServiceSecurity:
    """Security tiers of one backend service."""
    service_name: str
    openapi_path: str
    grouped_routes: GroupedRoutes


def parse_openapi_security(
    service_name: str,
    openapi_path: Union[str, Path],
    classifier: Optional[SecurityClassifier] = None,
) -> ParsedServiceSecurity:
    """
    Load a service's OpenAPI document and group its routes by tier.

    Raises:
        StructuralInputError: If the document is malformed.
    """
    classifier = classifier or SecurityClassifier()
    logger.debug("Parsing OpenAPI security", service=service_name, path=str(openapi_path))

    document = load_openapi_document(openapi_path)
    records = classifier.classify(document, service_name)
    grouped = group_by_security(records)

    by_path = group_by_path(records)
    logger.debug(
        "Route shape",
        service=service_name,
        paths=len(by_path),
        operations=sum(len(methods) for methods in by_path.values()),
    )

    return ParsedServiceSecurity(
        service_name=service_name,
        openapi_path=str(openapi_path),
        grouped_routes=grouped,
    )
