"""
Shared utilities for the Versioned Gateway.

This package aggregates common building blocks consumed by services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI service skeleton (health, metrics, error handlers)
- test_helpers: Token and settings factories for tests

Do not import from service packages into shared/.
"""
