"""
Shared error handling for the Kong configuration generator.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    hint: Optional[str] = None
    details: Dict[str, Any] = {}


class GatewayConfigException(Exception):
    """Base exception for gateway configuration generation."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            hint=getattr(self, "hint", None),
            details=self.details
        )

    def format(self) -> str:
        """Format the error for terminal output."""
        output = self.message
        hint = getattr(self, "hint", None)
        if hint:
            output += f"\n\n{hint}"
        return output


class StructuralInputError(GatewayConfigException):
    """Malformed or unreadable input document (OpenAPI, YAML, JSON)."""

    def __init__(self, message: str = "Invalid input document", details: Optional[Dict[str, Any]] = None):
        super().__init__("STRUCTURAL_INPUT_ERROR", message, details)


class MissingDependencyError(GatewayConfigException):
    """A generated route needs a collaborator that is not configured."""

    def __init__(self, message: str = "Missing dependency", details: Optional[Dict[str, Any]] = None):
        super().__init__("MISSING_DEPENDENCY", message, details)


class FatalConfigurationError(GatewayConfigException):
    """Project-level precondition failure. Aborts before anything is written."""

    def __init__(
        self,
        message: str = "Kong configuration generation failed",
        hint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.hint = hint
        super().__init__("FATAL_CONFIGURATION_ERROR", message, details)


# Diagnostic codes for non-fatal findings
MISSING_SECRET = "MISSING_SECRET"
CORS_ORIGINS_UNRESOLVED = "CORS_ORIGINS_UNRESOLVED"
MISSING_DISCOVERY_SOURCE = "MISSING_DISCOVERY_SOURCE"


@dataclass(frozen=True)
class Diagnostic:
    """Non-fatal finding recorded during a generation run."""
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


def missing_secret_diagnostic(name: str) -> Diagnostic:
    """Diagnostic for a placeholder whose secret is not in the secret map."""
    return Diagnostic(
        code=MISSING_SECRET,
        message=f"{name} not found in secrets, keeping placeholder",
        details={"secret": name},
    )
