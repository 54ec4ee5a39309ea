"""
Shared utilities for the Kong configuration generator.

This package aggregates common building blocks:

- config: Generator settings via pydantic-settings
- logging: Structured logging with run correlation
- errors: Canonical error types, responses and diagnostics
- secrets_manager: Loading and flattening the local secrets file
- test_helpers: Factories for OpenAPI documents and project layouts

Do not import from service_kong_config into shared/.
"""
