"""
Unit tests for OpenAPI security classification.
"""

import pytest

from service_kong_config.app.openapi.classifier import (
    SecurityClassifier, determine_security_types, extract_route_security
)
from service_kong_config.app.openapi.models import RouteSecurityRecord, SecurityType
from shared.test_helpers import SampleDataFactory


def make_document(paths):
    return SampleDataFactory.openapi_document(paths)


class TestSecurityClassifier:
    """Test cases for SecurityClassifier."""

    @pytest.fixture
    def classifier(self):
        """Create SecurityClassifier instance."""
        return SecurityClassifier()

    def test_route_without_security_is_public(self, classifier):
        """Routes without a security field are public."""
        doc = make_document({"/health": {"get": {}}})

        records = classifier.classify(doc, "offers-service")

        assert records == [RouteSecurityRecord("/health", "GET", SecurityType.PUBLIC)]

    def test_route_with_empty_security_is_public(self, classifier):
        """An empty security list is public."""
        doc = make_document({"/health": {"get": {"security": []}}})

        records = classifier.classify(doc, "offers-service")

        assert records == [RouteSecurityRecord("/health", "GET", SecurityType.PUBLIC)]

    def test_bearer_route_is_jwt(self, classifier):
        doc = make_document({"/users": {"get": SampleDataFactory.operation("bearer")}})

        records = classifier.classify(doc, "offers-service")

        assert records == [RouteSecurityRecord("/users", "GET", SecurityType.JWT)]

    def test_api_key_route_is_partner(self, classifier):
        doc = make_document({"/api/plans": {"get": SampleDataFactory.operation("api-key")}})

        records = classifier.classify(doc, "offers-service")

        assert records == [RouteSecurityRecord("/api/plans", "GET", SecurityType.PARTNER)]

    def test_dual_access_route_yields_jwt_and_partner(self, classifier):
        """Bearer plus api-key produces two records and never a public one."""
        doc = make_document({"/offers": {"get": {"security": [{"bearer": []}, {"api-key": []}]}}})

        records = classifier.classify(doc, "offers-service")

        assert records == [
            RouteSecurityRecord("/offers", "GET", SecurityType.JWT),
            RouteSecurityRecord("/offers", "GET", SecurityType.PARTNER),
        ]
        assert all(r.security_type != SecurityType.PUBLIC for r in records)

    def test_both_schemes_in_one_requirement_is_dual_access(self, classifier):
        doc = make_document({"/offers": {"post": {"security": [{"bearer": [], "api-key": []}]}}})

        records = classifier.classify(doc, "offers-service")

        assert [r.security_type for r in records] == [SecurityType.JWT, SecurityType.PARTNER]

    def test_unknown_scheme_degrades_to_public(self, classifier):
        doc = make_document({"/custom": {"get": {"security": [{"custom-scheme": []}]}}})

        records = classifier.classify(doc, "offers-service")

        assert records == [RouteSecurityRecord("/custom", "GET", SecurityType.PUBLIC)]

    def test_all_methods_extracted_in_fixed_order(self, classifier):
        """Methods follow get, post, put, patch, delete, options, head."""
        bearer = SampleDataFactory.operation("bearer")
        doc = make_document({"/users": {"delete": bearer, "get": bearer, "post": bearer}})

        records = classifier.classify(doc, "offers-service")

        assert [r.method for r in records] == ["GET", "POST", "DELETE"]

    def test_non_method_keys_are_ignored(self, classifier):
        doc = make_document({
            "/users": {
                "parameters": [{"name": "id", "in": "query"}],
                "summary": "Users",
                "get": {},
            }
        })

        records = classifier.classify(doc, "offers-service")

        assert len(records) == 1
        assert records[0].method == "GET"

    def test_document_path_order_is_preserved(self, classifier):
        doc = make_document({
            "/zeta": {"get": {}},
            "/alpha": {"get": SampleDataFactory.operation("bearer")},
            "/api/plans": {"get": SampleDataFactory.operation("api-key")},
        })

        records = classifier.classify(doc, "offers-service")

        assert [r.path for r in records] == ["/zeta", "/alpha", "/api/plans"]
        assert [r.security_type for r in records] == [
            SecurityType.PUBLIC, SecurityType.JWT, SecurityType.PARTNER
        ]

    def test_empty_paths(self, classifier):
        assert classifier.classify(make_document({}), "offers-service") == []

    def test_classification_is_deterministic(self, classifier):
        doc = make_document({
            "/users": {"get": SampleDataFactory.operation("bearer", "api-key"), "post": {}},
        })

        assert classifier.classify(doc, "a") == classifier.classify(doc, "a")

    def test_module_level_helper(self):
        doc = make_document({"/health": {"get": {}}})

        assert extract_route_security(doc) == [RouteSecurityRecord("/health", "GET", SecurityType.PUBLIC)]


class TestDetermineSecurityTypes:
    """Test cases for the security requirement mapping."""

    @pytest.mark.parametrize("security,expected", [
        (None, [SecurityType.PUBLIC]),
        ([], [SecurityType.PUBLIC]),
        ([{"bearer": []}], [SecurityType.JWT]),
        ([{"api-key": []}], [SecurityType.PARTNER]),
        ([{"api-key": []}, {"bearer": []}], [SecurityType.JWT, SecurityType.PARTNER]),
        ([{"oauth2": ["read"]}], [SecurityType.PUBLIC]),
        ([{"oauth2": []}, {"bearer": []}], [SecurityType.JWT]),
    ])
    def test_mapping(self, security, expected):
        assert determine_security_types(security) == expected
