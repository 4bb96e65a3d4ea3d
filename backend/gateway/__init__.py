"""Storegate: HTTP gateway over a relational table, a document store and an S3 bucket.

Invariants:
    - Package root contains no executable code (no import side-effects)
"""
