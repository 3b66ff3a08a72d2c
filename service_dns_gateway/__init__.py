"""
DNS Gateway service package.

The gateway is the authenticated HTTP front door for managing DNS domains
and records:
- Authentication: a single configured API token (Bearer or X-API-Token)
- Routing: a static (method, path) table over a closed set of operations
- Validation: declarative per-operation schemas plus provider injection
- Persistence: a DNS service facade bound to one pooled connection per request

Structure:
- app.main: FastAPI app, lifecycle and the catch-all gateway route.
- app.auth: Token extraction and comparison.
- app.domain: Route table, validation, dispatch and the request pipeline.
- app.adapters: Service facade contract and the PostgreSQL implementation.
- app.persistence: asyncpg connection pool.
"""
