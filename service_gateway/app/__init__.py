"""
API Gateway Service package for the Versioned Gateway.

The gateway sits in front of business handlers and, for every request:
- Version resolution: picks one API version from the path segment, the
  version header or the version query parameter, falling back to a default.
- Authentication: validates an HMAC-signed bearer token and exposes the
  resulting principal to route dependencies.

Structure:
- app.main: FastAPI app, routes, and middleware wiring.
- app.versioning: Version model, resolver, per-version routing and docs.
- app.auth: Signing key, principal and token authenticator.
- app.domain: Request-path middleware and auth dependencies.
- app.routes: Versioned API routers.
"""
