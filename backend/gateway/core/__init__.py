"""Core Layer: error taxonomy shared by adapters and the HTTP layer.

Invariants:
    - Core never imports from infrastructure/, adapters/ or api/
"""
