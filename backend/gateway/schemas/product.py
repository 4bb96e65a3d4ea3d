"""Product Schemas: request/response models for the relational resource.

Invariants:
    - ProductWrite requires name, description, price (no coercion beyond JSON → Decimal)
    - price serializes as a decimal string ("9.99"), the way DECIMAL(10,2) reads back
    - ProductWriteResult mirrors the driver's write summary (insertId, affectedRows)
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ProductWrite(BaseModel):
    """Body for POST /product and PUT /product/{id}."""
    name: str
    description: str
    price: Decimal


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    price: Decimal


class ProductWriteResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    insert_id: int = Field(0, alias="insertId")
    affected_rows: int = Field(alias="affectedRows")
    product: ProductRead
