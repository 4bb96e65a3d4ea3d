"""API Layer: FastAPI routes, error handlers, diagnostics middleware and docs.

Invariants:
    - Routes registered explicitly in main.create_app (no auto-discovery)
    - Routes never catch adapter errors; global handlers render them
"""
