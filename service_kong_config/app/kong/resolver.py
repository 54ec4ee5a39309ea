"""
Resolves ${NAME} placeholders in Kong documents from the secret map.
"""

import re
from typing import Any, Dict, List, Mapping

from shared.errors import Diagnostic, missing_secret_diagnostic
from shared.logging import get_logger

PLACEHOLDER_PATTERN = re.compile(r"\$\{([^}]+)\}")
NUMERIC_PATTERN = re.compile(r"[0-9]+")


def is_placeholder(value: Any) -> bool:
    """True when the whole value is a single ${NAME} token."""
    return isinstance(value, str) and PLACEHOLDER_PATTERN.fullmatch(value) is not None


class PlaceholderResolver:
    """
    Recursive placeholder substitution over JSON-shaped values.

    Whole-string placeholders resolving to digits become ints, since Kong
    rejects strings for integer fields such as ports. Embedded placeholders
    are replaced textually. Unknown names keep their token and are recorded
    in ``missing``; resolution never raises.
    """

    def __init__(self, secrets: Mapping[str, str]):
        self.secrets = secrets
        self.logger = get_logger("kong_config.resolver")
        self.missing: List[str] = []

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return [missing_secret_diagnostic(name) for name in self.missing]

    def resolve(self, value: Any) -> Any:
        """Return a resolved copy of ``value``."""
        if isinstance(value, str):
            return self._resolve_string(value)
        if isinstance(value, list):
            return [self.resolve(item) for item in value]
        if isinstance(value, dict):
            return {key: self.resolve(item) for key, item in value.items()}
        # numbers, booleans, None
        return value

    def _resolve_string(self, value: str) -> Any:
        whole = PLACEHOLDER_PATTERN.fullmatch(value)
        if whole:
            name = whole.group(1)
            secret = self._lookup(name)
            if secret is None:
                return value
            if NUMERIC_PATTERN.fullmatch(secret):
                return int(secret)
            return secret

        def replace(match: "re.Match[str]") -> str:
            secret = self._lookup(match.group(1))
            return match.group(0) if secret is None else secret

        return PLACEHOLDER_PATTERN.sub(replace, value)

    def _lookup(self, name: str):
        secret = self.secrets.get(name)
        if secret is None:
            self._record_missing(name)
            return None
        return str(secret)

    def _record_missing(self, name: str) -> None:
        if name not in self.missing:
            self.missing.append(name)
        self.logger.warning("Secret not found, keeping placeholder", secret=name)


def resolve_placeholders(value: Any, secrets: Dict[str, str]) -> Any:
    """Resolve placeholders with a throwaway resolver."""
    return PlaceholderResolver(secrets).resolve(value)
