"""
Merges the framework-generated Kong document with the user-owned one.
"""

import copy
from typing import Any, Dict, List, Mapping, Union

from .models import GatewayDocument, FORMAT_VERSION, TRANSFORM

# Top-level sections concatenated by the merge
LIST_SECTIONS = ("services", "consumers", "plugins")


class ConfigMerger:
    """
    Concatenation merge, no overlap resolution.

    The framework document owns generated services and consumers; the user
    document owns global plugins and may add services and consumers of its
    own. User entries are opaque and copied as written. Framework plugins
    are never carried into the merged document.
    """

    def merge(
        self,
        framework_doc: GatewayDocument,
        user_doc: Union[GatewayDocument, Mapping[str, Any]],
    ) -> Dict[str, Any]:
        """Return a new merged document. Inputs are left untouched."""
        framework = framework_doc.to_dict()
        user = user_doc.to_dict() if isinstance(user_doc, GatewayDocument) else copy.deepcopy(dict(user_doc))

        return {
            "_format_version": FORMAT_VERSION,
            "_transform": TRANSFORM,
            "services": [*section(framework, "services"), *section(user, "services")],
            "consumers": [*section(framework, "consumers"), *section(user, "consumers")],
            "plugins": section(user, "plugins"),
        }


def section(document: Mapping[str, Any], key: str) -> List[Any]:
    """A top-level list section; absent or null means empty."""
    return list(document.get(key) or [])


def merge_kong_configs(
    framework_doc: GatewayDocument,
    user_doc: Union[GatewayDocument, Mapping[str, Any]],
) -> Dict[str, Any]:
    return ConfigMerger().merge(framework_doc, user_doc)
