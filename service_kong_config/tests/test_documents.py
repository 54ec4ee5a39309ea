"""
Unit tests for the YAML document store.
"""

import pytest
import yaml

from service_kong_config.app.documents import DocumentStore, JWT_CLAIM_COMMENT_BLOCK
from service_kong_config.app.kong.models import GatewayDocument, GatewayService
from shared.errors import StructuralInputError


@pytest.fixture
def store():
    return DocumentStore()


class TestReadWrite:
    """Test cases for reading and writing documents."""

    def test_write_model_uses_kong_field_names(self, store, tmp_path):
        document = GatewayDocument(
            format_version="3.0",
            transform=True,
            services=[GatewayService(name="a", url="http://a:1", routes=[])],
        )

        path = store.write(tmp_path / "kong.framework.yml", document)

        content = path.read_text()
        assert content.startswith("_format_version: '3.0'\n_transform: true\n")
        assert yaml.safe_load(content)["services"] == [{"name": "a", "url": "http://a:1", "routes": []}]

    def test_write_creates_parent_directories(self, store, tmp_path):
        path = store.write(tmp_path / "nested" / "kong.yml", {"_format_version": "3.0"})

        assert path.is_file()

    def test_read_user_document_keeps_entries_as_written(self, store, tmp_path):
        path = tmp_path / "kong.user.yml"
        path.write_text(
            "_format_version: 3.0\n"
            "services:\n"
            "  - url: https://example.com\n"
            "    connect_timeout: 5000\n"
            "    routes:\n"
            "      - hosts: [api.example.com]\n"
            "consumers:\n"
            "  - custom_id: partner-42\n"
            "plugins:\n"
        )

        document = store.read_user_document(path)

        assert document == {
            "_format_version": 3.0,
            "services": [{
                "url": "https://example.com",
                "connect_timeout": 5000,
                "routes": [{"hosts": ["api.example.com"]}],
            }],
            "consumers": [{"custom_id": "partner-42"}],
            "plugins": None,
        }

    def test_exists(self, store, tmp_path):
        assert not store.exists(tmp_path / "kong.yml")
        assert not store.exists(tmp_path)

    @pytest.mark.parametrize("content", ["- just\n- a list\n", "key: [unclosed\n", ""])
    def test_read_rejects_non_mappings(self, store, tmp_path, content):
        path = tmp_path / "kong.user.yml"
        path.write_text(content)

        with pytest.raises(StructuralInputError):
            store.read(path)

    @pytest.mark.parametrize("content,field", [
        ("services: external-api\n", "services"),
        ("consumers:\n  username: partner\n", "consumers"),
        ("plugins: 3\n", "plugins"),
    ])
    def test_read_user_document_rejects_non_list_sections(self, store, tmp_path, content, field):
        path = tmp_path / "kong.user.yml"
        path.write_text(content)

        with pytest.raises(StructuralInputError) as exc_info:
            store.read_user_document(path)

        assert exc_info.value.details["field"] == field


class TestSeedUserDocument:
    """Test cases for the seeded user document."""

    def test_auth_template_seed(self, store, tmp_path):
        path = tmp_path / "kong.user.yml"

        document = store.seed_user_document(path, use_auth_template=True)

        content = path.read_text()
        assert "# Add your OIDC provider" not in content
        loaded = yaml.safe_load(content)
        assert loaded == document.to_dict()
        assert loaded["services"] == []
        assert [p["name"] for p in loaded["plugins"]] == ["request-transformer", "cors", "rate-limiting", "correlation-id"]
        assert "X-JWT-Claim-Sub" in loaded["plugins"][0]["config"]["remove"]["headers"]

    def test_external_oidc_seed_suggests_claim_headers_as_comments(self, store, tmp_path):
        path = tmp_path / "kong.user.yml"

        document = store.seed_user_document(path, use_auth_template=False)

        content = path.read_text()
        assert JWT_CLAIM_COMMENT_BLOCK in content
        assert content.index("# Add your OIDC provider") < content.index("- X-Kong-Request-Id")
        loaded = yaml.safe_load(content)
        assert loaded == document.to_dict()
        assert "X-JWT-Claim-Sub" not in loaded["plugins"][0]["config"]["remove"]["headers"]
