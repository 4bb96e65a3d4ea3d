"""Relational Adapter: Product CRUD over the pooled SQLAlchemy engine.

Invariants:
    - Every value reaches SQL as a bound parameter
    - A write either commits fully or the session rolls back (DatabaseSessionManager)
    - update/delete matching zero rows raise ResourceNotFoundError and commit nothing
"""

import logging
from decimal import Decimal

from sqlalchemy import delete, select, update

from gateway.core.errors import ResourceNotFoundError
from gateway.db.base import Base
from gateway.infrastructure.database import DatabaseSessionManager
from gateway.models.product import Product

logger = logging.getLogger(__name__)


class ProductAdapter:
    """CRUD operations for the product table."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def init_schema(self) -> None:
        """Idempotently create the database and the product table."""
        await self._db.ensure_database()
        await self._db.create_tables(Base.metadata)
        logger.info("Product schema initialized")

    async def list_all(self) -> list[Product]:
        async with self._db.session("select") as db:
            result = await db.execute(select(Product).order_by(Product.id))
            return list(result.scalars().all())

    async def get(self, product_id: int) -> Product:
        async with self._db.session("select") as db:
            product = await db.get(Product, product_id)
        if product is None:
            raise ResourceNotFoundError(
                "Product", str(product_id), "Product cant be found",
            )
        return product

    async def create(
        self, name: str, description: str, price: Decimal,
    ) -> Product:
        async with self._db.session("insert") as db:
            product = Product(name=name, description=description, price=price)
            db.add(product)
            await db.commit()
            await db.refresh(product)
            return product

    async def update(
        self, product_id: int, name: str, description: str, price: Decimal,
    ) -> tuple[int, Product]:
        """Replace all mutable fields. Returns (affected rows, updated product)."""
        async with self._db.session("update") as db:
            result = await db.execute(
                update(Product)
                .where(Product.id == product_id)
                .values(name=name, description=description, price=price),
            )
            if result.rowcount == 0:
                raise ResourceNotFoundError(
                    "Product", str(product_id), "Product not found",
                )
            await db.commit()
            product = await db.get(Product, product_id, populate_existing=True)
            # Row removed by a concurrent delete after the commit
            if product is None:
                raise ResourceNotFoundError(
                    "Product", str(product_id), "Product not found",
                )
            return result.rowcount, product

    async def delete(self, product_id: int) -> int:
        """Delete by id. Returns affected rows (always >= 1)."""
        async with self._db.session("delete") as db:
            result = await db.execute(
                delete(Product).where(Product.id == product_id),
            )
            if result.rowcount == 0:
                raise ResourceNotFoundError(
                    "Product", str(product_id), "Product doesn't exist",
                )
            await db.commit()
            return result.rowcount
