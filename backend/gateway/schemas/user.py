"""User Schemas: document-store resource with a store-assigned ObjectId."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserWrite(BaseModel):
    """Body for POST /usuarios and PUT /usuarios/{id} (full replace)."""
    name: str
    email: str


class UserRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    name: str | None = None
    email: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, v: Any) -> str:
        return str(v)
