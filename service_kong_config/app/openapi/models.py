"""
Route security data models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


# Iteration order for operations within a path item
HTTP_METHODS = ("get", "post", "put", "patch", "delete", "options", "head")

BEARER_SCHEME = "bearer"
API_KEY_SCHEME = "api-key"


class SecurityType(str, Enum):
    """Security tier a route is exposed under."""
    PUBLIC = "public"
    JWT = "jwt"
    PARTNER = "partner"


@dataclass(frozen=True)
class RouteSecurityRecord:
    """One (route, security tier) pair."""
    path: str
    method: str
    security_type: SecurityType


@dataclass
class GroupedRoutes:
    """Route records partitioned by security tier."""
    public: List[RouteSecurityRecord] = field(default_factory=list)
    jwt: List[RouteSecurityRecord] = field(default_factory=list)
    partner: List[RouteSecurityRecord] = field(default_factory=list)

    def bucket(self, security_type: SecurityType) -> List[RouteSecurityRecord]:
        """Return the list holding records of the given tier."""
        return getattr(self, SecurityType(security_type).value)

    def counts(self) -> dict:
        """Number of records per tier, keyed by tier name."""
        return {
            "public": len(self.public),
            "jwt": len(self.jwt),
            "partner": len(self.partner),
        }

    def is_empty(self) -> bool:
        """True when no tier holds a record."""
        return not (self.public or self.jwt or self.partner)
