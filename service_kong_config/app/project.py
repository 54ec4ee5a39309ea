"""
Project configuration: service descriptors and auth template mode.
"""

import json
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from shared.errors import FatalConfigurationError, StructuralInputError

AUTH_TEMPLATES = ("fullstack-auth", "auth")
AUTH_SERVICE_NAME = "auth-service"
DEFAULT_AUTH_PREFIX = "auth"


class ServiceDescriptor(BaseModel):
    """A service declared in the project configuration."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    type: str = "nestjs"
    port: Optional[int] = None
    global_prefix: Optional[str] = Field(default=None, alias="globalPrefix")

    @property
    def prefix(self) -> str:
        """Global prefix, defaulting to the service name."""
        return self.global_prefix or self.name

    @property
    def url_secret_key(self) -> str:
        """Secret holding the service URL, e.g. OFFERS_SERVICE_URL."""
        return f"{self.name.upper().replace('-', '_')}_URL"


class FrameworkSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    template: Optional[str] = None


class ProjectConfig(BaseModel):
    """Top-level project configuration file."""

    model_config = ConfigDict(extra="allow")

    framework: Optional[FrameworkSettings] = None
    services: List[ServiceDescriptor] = Field(default_factory=list)

    @property
    def has_auth_template(self) -> bool:
        """True when the framework auth service issues the JWTs."""
        return bool(self.framework and self.framework.template in AUTH_TEMPLATES)

    def find_service(self, name: str) -> Optional[ServiceDescriptor]:
        for service in self.services:
            if service.name == name:
                return service
        return None


def load_project_config(path: Union[str, Path]) -> ProjectConfig:
    """
    Load the project configuration file.

    Raises:
        FatalConfigurationError: If the file does not exist
        StructuralInputError: If it cannot be parsed
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FatalConfigurationError(
            f"Project configuration not found: {config_path}",
            hint="Run the generator from the project root or pass --project-root",
        )

    try:
        with config_path.open("r", encoding="utf-8") as f:
            return ProjectConfig.model_validate(json.load(f))
    except (ValueError, OSError) as e:
        # pydantic's ValidationError is a ValueError
        raise StructuralInputError(
            f"Invalid project configuration {config_path}: {e}",
            details={"path": str(config_path)},
        ) from e
