"""Common Schemas: error envelope and confirmation messages."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Flat error envelope rendered for every GatewayError."""
    error: str
    code: str
    category: str
    severity: str
    details: Any | None = None


class MessageResponse(BaseModel):
    message: str
