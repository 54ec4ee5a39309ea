"""
YAML document store for Kong configuration files.
"""

from pathlib import Path
from typing import Any, Dict, Union

import yaml

from shared.errors import StructuralInputError
from shared.logging import get_logger
from .kong.merger import LIST_SECTIONS
from .kong.models import GatewayDocument, FORMAT_VERSION, TRANSFORM
from .kong.plugins import default_kong_plugins

# Inserted into the seeded user document when no auth template is used
JWT_CLAIM_COMMENT_BLOCK = "\n".join([
    "      # Add your OIDC provider's JWT claims to prevent header spoofing:",
    "      # - X-JWT-Claim-Sub",
    "      # - X-JWT-Claim-Email",
    "      # - X-JWT-Claim-Role",
    "      # - X-JWT-Claim-Confirmed",
])
COMMENT_ANCHOR = "      - X-Kong-Request-Id"


def dump_yaml(document: Dict[str, Any]) -> str:
    return yaml.safe_dump(document, default_flow_style=False, sort_keys=False, allow_unicode=True, width=10_000)


class DocumentStore:
    """Reads and writes gateway documents."""

    def __init__(self):
        self.logger = get_logger("kong_config.documents")

    def exists(self, path: Union[str, Path]) -> bool:
        return Path(path).is_file()

    def read(self, path: Union[str, Path]) -> Dict[str, Any]:
        """
        Read a YAML document.

        Raises:
            StructuralInputError: If the file is unreadable or not a mapping.
        """
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as f:
                document = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise StructuralInputError(f"Failed to read {path}: {e}", details={"path": str(path)}) from e

        if not isinstance(document, dict):
            raise StructuralInputError(f"{path} must contain a YAML mapping", details={"path": str(path)})
        return document

    def read_user_document(self, path: Union[str, Path]) -> Dict[str, Any]:
        """
        Read a user-owned Kong document as written.

        Entries are not interpreted; only the top-level sections that get
        concatenated must be lists (or absent/null).

        Raises:
            StructuralInputError: If the file is not a mapping or a section is not a list.
        """
        document = self.read(path)
        for key in LIST_SECTIONS:
            value = document.get(key)
            if value is not None and not isinstance(value, list):
                raise StructuralInputError(
                    f"Invalid Kong document {path}: '{key}' must be a list",
                    details={"path": str(path), "field": key},
                )
        return document

    def write(self, path: Union[str, Path], document: Union[Dict[str, Any], GatewayDocument]) -> Path:
        if isinstance(document, GatewayDocument):
            document = document.to_dict()
        return self.write_text(path, dump_yaml(document))

    def write_text(self, path: Union[str, Path], content: str) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            f.write(content)
        self.logger.debug("Document written", path=str(path))
        return path

    def seed_user_document(self, path: Union[str, Path], use_auth_template: bool) -> GatewayDocument:
        """
        Create the user document template and return its model.

        The template carries only plugins. Without the auth template, the
        JWT claim headers are suggested as comments for the user to adapt.
        """
        document = GatewayDocument(
            format_version=FORMAT_VERSION,
            transform=TRANSFORM,
            services=[],
            plugins=default_kong_plugins(use_auth_template),
        )

        content = dump_yaml(document.to_dict())
        if not use_auth_template:
            content = content.replace(COMMENT_ANCHOR, JWT_CLAIM_COMMENT_BLOCK + "\n" + COMMENT_ANCHOR, 1)

        self.write_text(path, content)
        return document
