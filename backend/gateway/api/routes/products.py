"""Product Routes: relational CRUD over the product table.

Invariants:
    - Create and update answer 201 with the driver-style write summary
    - Delete answers plain text; a missing row answers 404 and nothing else
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from gateway.adapters.relational import ProductAdapter
from gateway.api.deps import get_product_adapter
from gateway.api.responses import (
    BACKEND_UNAVAILABLE, INVALID_BODY, NOT_FOUND, UPSTREAM_FAILURE,
)
from gateway.schemas.product import ProductRead, ProductWrite, ProductWriteResult

router = APIRouter(tags=["CRUD MySQL"])

_FAILURES = {**UPSTREAM_FAILURE, **BACKEND_UNAVAILABLE}


@router.post(
    "/init-db",
    response_class=PlainTextResponse,
    summary="Cria o banco de dados e a tabela produto",
    responses={
        200: {"description": "Banco de dados e tabela criados com sucesso"},
        **_FAILURES,
    },
)
async def init_db(products: ProductAdapter = Depends(get_product_adapter)):
    await products.init_schema()
    return "db and table created with success!"


@router.get(
    "/product",
    response_model=list[ProductRead],
    summary="Lista todos os produtos",
    responses=_FAILURES,
)
async def list_products(products: ProductAdapter = Depends(get_product_adapter)):
    return [ProductRead.model_validate(p) for p in await products.list_all()]


@router.get(
    "/product/{id}",
    response_model=ProductRead,
    summary="Busca um produto pelo ID",
    responses={**NOT_FOUND, **_FAILURES},
)
async def get_product(
    id: int, products: ProductAdapter = Depends(get_product_adapter),
):
    return ProductRead.model_validate(await products.get(id))


@router.post(
    "/product",
    response_model=ProductWriteResult,
    status_code=status.HTTP_201_CREATED,
    summary="Cria um novo produto",
    responses={**INVALID_BODY, **_FAILURES},
)
async def create_product(
    body: ProductWrite, products: ProductAdapter = Depends(get_product_adapter),
):
    product = await products.create(body.name, body.description, body.price)
    return ProductWriteResult(
        insert_id=product.id,
        affected_rows=1,
        product=ProductRead.model_validate(product),
    )


@router.put(
    "/product/{id}",
    response_model=ProductWriteResult,
    status_code=status.HTTP_201_CREATED,
    summary="Atualiza um produto",
    responses={**INVALID_BODY, **NOT_FOUND, **_FAILURES},
)
async def update_product(
    id: int,
    body: ProductWrite,
    products: ProductAdapter = Depends(get_product_adapter),
):
    affected, product = await products.update(
        id, body.name, body.description, body.price,
    )
    return ProductWriteResult(
        affected_rows=affected, product=ProductRead.model_validate(product),
    )


@router.delete(
    "/product/{id}",
    response_class=PlainTextResponse,
    summary="Deleta um produto",
    responses={
        200: {"description": "Produto deletado com sucesso"},
        **NOT_FOUND,
        **_FAILURES,
    },
)
async def delete_product(
    id: int, products: ProductAdapter = Depends(get_product_adapter),
):
    await products.delete(id)
    return "Product Deleted with success!"
