"""
node-engine Application Package

Directory Structure:
├── domain/            # Node model, behavior and menu configs, events, errors, ports
├── engine/            # Variant registry, ViewEngine, render context, actions,
│   │                  # shell navigation, back-button chain, context menus
│   └── renderers/     # Built-in renderers and the default registry
├── application/       # Tree validation, render service, event handlers
├── infrastructure/    # Resource-to-tree adapter, recording mutation port
├── routers/           # FastAPI route handlers
├── schemas/           # Pydantic models for API requests/responses
│   └── api_schemas.py # HTTP request/response structures
└── config.py          # Application configuration

Node Types Clarification:
1. **API Schemas** (node_engine.schemas.api_schemas): Pydantic models for HTTP requests/responses
2. **Domain Nodes** (node_engine.domain.node): The recursive, immutable Node tree the engine renders

The engine never loads or persists nodes. Trees arrive from a data-loading
collaborator, and mutations leave through the MutationPort as intents.
"""
