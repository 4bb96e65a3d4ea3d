"""API Schemas: Pydantic models for request bodies and response shapes.

Invariants:
    - Schemas are the single source for both validation and the published API description
    - Wire field names follow the stores' own names (insertId, _id, Key, ...) via aliases
"""
