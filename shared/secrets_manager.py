"""
Secrets management for the Kong configuration generator.

The generator never stores secrets; it only reads the project's local secrets
file and flattens it into the string map used for placeholder resolution.
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional, Union
from urllib.parse import urlparse

from shared.errors import FatalConfigurationError, StructuralInputError
from shared.logging import get_logger

logger = get_logger("kong_config.secrets")


class SecretsManager:
    """
    Loads the flat secret map from a local secrets file.

    File layout::

        {
          "secrets": {"KONG_TRUST_TOKEN": "...", "REDIS": {"REDIS_HOST": "..."}},
          "offers-service": {"OFFERS_SERVICE_URL": "http://localhost:3002"},
          "$schema": "..."
        }
    """

    def __init__(self, secrets_file: Union[str, Path]):
        """
        Initialize the secrets manager.

        Args:
            secrets_file: Path to the local secrets JSON file
        """
        self.secrets_file = Path(secrets_file)
        self._secrets: Optional[Dict[str, str]] = None

    def load(self) -> Dict[str, str]:
        """
        Load and flatten the secrets file.

        Returns:
            Flat secret map

        Raises:
            FatalConfigurationError: If the file does not exist
            StructuralInputError: If the file is not a JSON object
        """
        if not self.secrets_file.exists():
            raise FatalConfigurationError(
                f"Secrets file not found: {self.secrets_file}",
                hint="Generate local secrets before generating the Kong configuration",
            )

        try:
            with self.secrets_file.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (ValueError, OSError) as e:
            raise StructuralInputError(
                f"Failed to read secrets file {self.secrets_file}: {e}",
                details={"path": str(self.secrets_file)},
            ) from e

        if not isinstance(raw, dict):
            raise StructuralInputError(
                f"Secrets file {self.secrets_file} must contain a JSON object",
                details={"path": str(self.secrets_file)},
            )

        self._secrets = flatten_secrets(raw)
        logger.debug("Secrets loaded", path=str(self.secrets_file), count=len(self._secrets))
        return self._secrets

    @property
    def secrets(self) -> Dict[str, str]:
        if self._secrets is None:
            return self.load()
        return self._secrets

    def get_secret(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a secret by key.

        Args:
            key: Secret key
            default: Default value if secret not found

        Returns:
            Secret value or default
        """
        return self.secrets.get(key, default)


def flatten_secrets(raw: Dict[str, Any]) -> Dict[str, str]:
    """
    Flatten a secrets document into key-value pairs.

    String entries under ``secrets`` are taken as is, one level of nested
    objects under ``secrets`` is unpacked, and string entries of every
    per-service section are added afterwards (later sections win).
    """
    resolved: Dict[str, str] = {}

    for key, value in (raw.get("secrets") or {}).items():
        if isinstance(value, str):
            resolved[key] = value
        elif isinstance(value, dict):
            for nested_key, nested_value in value.items():
                if isinstance(nested_value, str):
                    resolved[nested_key] = nested_value

    for section, section_values in raw.items():
        # Skip metadata keys
        if section == "secrets" or section.startswith("$"):
            continue
        if not isinstance(section_values, dict):
            continue
        for key, value in section_values.items():
            if isinstance(value, str):
                resolved[key] = value

    return resolved


def get_required_secret(secrets: Dict[str, str], key: str, hint: Optional[str] = None) -> str:
    """
    Get a secret that must be present.

    Raises:
        FatalConfigurationError: If the secret is missing or empty
    """
    value = secrets.get(key)
    if not value:
        raise FatalConfigurationError(
            f"{key} is required in the local secrets file",
            hint=hint or "Regenerate local secrets and try again",
            details={"secret": key},
        )
    return value


def extract_port(url: str) -> Optional[int]:
    """Return the explicit port of a URL, or None when it has none."""
    try:
        return urlparse(url).port
    except ValueError:
        return None
