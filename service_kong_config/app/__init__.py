"""
Kong configuration generator package.

Turns the OpenAPI documents of the project's backend services into a
declarative Kong configuration:
- Security classification: each route lands in the public, JWT or partner tier
- Service synthesis: up to three Kong services per backend service
- Merge: framework-generated document plus the user-owned document
- Resolution: ${NAME} placeholders replaced from the local secret map

Structure:
- app.openapi: Loading, classification and aggregation of OpenAPI routes.
- app.kong: Kong document models, plugin factories, builder, merger,
  placeholder resolver and CORS normalizer.
- app.project: Project configuration (service descriptors, template mode).
- app.documents: YAML document store.
- app.generator: The generation pipeline.
- app.main: Command line entry point.
"""
