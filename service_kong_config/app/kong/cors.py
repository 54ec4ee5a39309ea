"""
Post-processing of the CORS plugin's origins after placeholder resolution.
"""

from typing import Any, Dict, List, Optional

from shared.errors import Diagnostic, CORS_ORIGINS_UNRESOLVED
from shared.logging import get_logger
from .resolver import is_placeholder


class CorsNormalizer:
    """
    Turns comma-joined CORS origins into a list.

    The origins field is array-typed in Kong, so the default template holds
    ["${KONG_CORS_ORIGINS}"], which resolves to a one-element list with a
    comma-joined string. Only the first plugin named "cors" is inspected.

    Tokens are trimmed and empty tokens are dropped, so "a,,b" becomes
    ["a", "b"] rather than keeping an empty origin.
    """

    def __init__(self):
        self.logger = get_logger("kong_config.cors")
        self.diagnostics: List[Diagnostic] = []

    def normalize(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Normalize the document in place and return it."""
        cors_plugin = self._find_cors_plugin(document)
        if cors_plugin is None:
            return document

        config = cors_plugin.get("config")
        if not isinstance(config, dict):
            return document

        origins_string = self._origins_string(config.get("origins"))
        if origins_string is None:
            return document

        origins_string = origins_string.strip()
        if not origins_string or is_placeholder(origins_string):
            config["origins"] = []
            self.diagnostics.append(
                Diagnostic(
                    code=CORS_ORIGINS_UNRESOLVED,
                    message="CORS origins not configured",
                    details={"value": origins_string},
                )
            )
            self.logger.warning("CORS origins not configured", value=origins_string)
            return document

        config["origins"] = [token.strip() for token in origins_string.split(",") if token.strip()]
        self.logger.info("CORS origins", origins=config["origins"])
        return document

    @staticmethod
    def _find_cors_plugin(document: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for plugin in document.get("plugins") or []:
            if isinstance(plugin, dict) and plugin.get("name") == "cors":
                return plugin
        return None

    @staticmethod
    def _origins_string(origins: Any) -> Optional[str]:
        """Return the raw string to split, or None when origins is already a proper list."""
        if isinstance(origins, str):
            return origins
        if isinstance(origins, list) and len(origins) == 1 and isinstance(origins[0], str):
            sole = origins[0]
            if "," in sole or not sole.strip() or is_placeholder(sole.strip()):
                return sole
        return None


def process_cors_origins(document: Dict[str, Any]) -> Dict[str, Any]:
    return CorsNormalizer().normalize(document)
