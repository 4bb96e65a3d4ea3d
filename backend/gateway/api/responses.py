"""Shared response documentation: reused by every route's `responses=`.

Keeps the published error shapes identical to what the handlers render.
"""

from gateway.schemas.common import ErrorResponse

NOT_FOUND = {
    404: {"model": ErrorResponse, "description": "Registro não encontrado"},
}
INVALID_BODY = {
    400: {"model": ErrorResponse, "description": "Requisição inválida"},
}
UPSTREAM_FAILURE = {
    500: {"model": ErrorResponse, "description": "Falha no serviço de backend"},
}
BACKEND_UNAVAILABLE = {
    503: {"model": ErrorResponse, "description": "Backend indisponível"},
}
