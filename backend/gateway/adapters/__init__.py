"""Resource Adapters: one per external store, CRUD-style operations only.

Invariants:
    - Each adapter wraps exactly one injected client (no module-level handles)
    - Zero-match keyed outcomes raise ResourceNotFoundError
    - Native client errors surface as UpstreamError via the client's translate_errors
"""
