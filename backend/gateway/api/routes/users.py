"""User Routes: document-store CRUD over the usuarios collection."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from gateway.adapters.document import UserAdapter
from gateway.api.deps import get_user_adapter
from gateway.api.responses import INVALID_BODY, NOT_FOUND, UPSTREAM_FAILURE
from gateway.schemas.common import MessageResponse
from gateway.schemas.user import UserRead, UserWrite

router = APIRouter(tags=["CRUD MongoDb"])


@router.get(
    "/mongodb/testar-conexao",
    response_class=PlainTextResponse,
    summary="Testa a conexão com o MongoDB",
    description="Verifica se a aplicação consegue se conectar ao MongoDB.",
    responses={
        200: {"description": "Conexão bem-sucedida"},
        **UPSTREAM_FAILURE,
    },
)
async def probe_connection(users: UserAdapter = Depends(get_user_adapter)):
    if await users.health_check():
        return "Conexão com o MongoDB bem-sucedida e usuário encontrado!"
    return "Conexão com o MongoDB bem-sucedida, mas nenhum usuário encontrado."


@router.post(
    "/usuarios",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Criar um novo usuário",
    description="Este endpoint cria um novo usuário no sistema.",
    responses={**INVALID_BODY, **UPSTREAM_FAILURE},
)
async def create_user(
    body: UserWrite, users: UserAdapter = Depends(get_user_adapter),
):
    return UserRead.model_validate(await users.create(body.model_dump()))


@router.get(
    "/usuarios",
    response_model=list[UserRead],
    summary="Listar todos os usuários",
    description="Este endpoint retorna todos os usuários cadastrados no sistema.",
    responses=UPSTREAM_FAILURE,
)
async def list_users(users: UserAdapter = Depends(get_user_adapter)):
    return [UserRead.model_validate(doc) for doc in await users.list_all()]


@router.get(
    "/usuarios/{id}",
    response_model=UserRead,
    summary="Obter um usuário específico",
    description="Este endpoint retorna um usuário baseado no ID fornecido.",
    responses={**NOT_FOUND, **UPSTREAM_FAILURE},
)
async def get_user(id: str, users: UserAdapter = Depends(get_user_adapter)):
    return UserRead.model_validate(await users.get(id))


@router.put(
    "/usuarios/{id}",
    response_model=UserRead,
    summary="Atualizar um usuário específico",
    description="Este endpoint atualiza um usuário baseado no ID fornecido.",
    responses={**INVALID_BODY, **NOT_FOUND, **UPSTREAM_FAILURE},
)
async def update_user(
    id: str, body: UserWrite, users: UserAdapter = Depends(get_user_adapter),
):
    return UserRead.model_validate(await users.update(id, body.model_dump()))


@router.delete(
    "/usuarios/{id}",
    response_model=MessageResponse,
    summary="Remover um usuário específico",
    description="Este endpoint remove um usuário baseado no ID fornecido.",
    responses={**NOT_FOUND, **UPSTREAM_FAILURE},
)
async def delete_user(id: str, users: UserAdapter = Depends(get_user_adapter)):
    await users.delete(id)
    return MessageResponse(message="Usuário removido com sucesso")
