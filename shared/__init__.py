"""
Shared utilities for the DNS gateway.

This package holds the building blocks the service is assembled from:

- config: Gateway settings via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Error taxonomy and the JSON error envelope
- base_service: FastAPI app factory with request middleware

Nothing in shared/ may import from service_dns_gateway.
"""
