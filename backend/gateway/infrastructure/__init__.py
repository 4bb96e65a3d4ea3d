"""Infrastructure Layer: backend client owners and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from adapters/ or api/
    - Every native client exception is translated to a core.errors type here
"""
