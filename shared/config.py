"""
Shared configuration management for the Kong configuration generator.
"""

from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="KONG_CONFIG_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    log_level: str = Field(default="info")
    json_logs: bool = Field(default=False)


class GeneratorConfig(BaseConfig):
    """File layout and naming conventions for a generation run."""

    project_root: Path = Field(default=Path("."))

    # Inputs
    project_config_file: str = Field(default=".gateway/config.json")
    secrets_file: str = Field(default=".secrets.local.json")
    openapi_relative_path: str = Field(default="apps/{service}/docs/openapi.json")
    backend_service_types: List[str] = Field(default_factory=lambda: ["nestjs"])

    # Gateway documents
    framework_config_file: str = Field(default="kong.framework.yml")
    user_config_file: str = Field(default="kong.user.yml")
    override_config_file: str = Field(default="kong.custom.yml")
    output_config_file: str = Field(default="kong.yml")

    # Kong runs inside the compose network
    service_host_placeholder: str = Field(default="${KONG_SERVICE_HOST}")
    redis_host_override: str = Field(default="redis")

    def resolve(self, relative: str) -> Path:
        """Resolve a project-relative file name against the project root."""
        return Path(self.project_root) / relative

    @property
    def framework_config_path(self) -> Path:
        return self.resolve(self.framework_config_file)

    @property
    def user_config_path(self) -> Path:
        return self.resolve(self.user_config_file)

    @property
    def override_config_path(self) -> Path:
        return self.resolve(self.override_config_file)

    @property
    def output_config_path(self) -> Path:
        return self.resolve(self.output_config_file)

    def openapi_path(self, service_name: str) -> Path:
        """Return the OpenAPI document location for a backend service."""
        return self.resolve(self.openapi_relative_path.format(service=service_name))


def get_config(**overrides) -> GeneratorConfig:
    """Get generator configuration, applying explicit overrides over the environment."""
    return GeneratorConfig(**overrides)
