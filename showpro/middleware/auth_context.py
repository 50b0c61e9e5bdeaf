from __future__ import annotations

from typing import Any, Awaitable, Callable

from fastapi import HTTPException, Request

from showpro.auth.jwt import verify_token


async def auth_context_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Any]],
):
    """
    Middleware de contexto (não-enforcement):

    - Se houver Authorization: Bearer <token> válido, coloca o usuário em request.state.username
    - NÃO consulta DB e NÃO bloqueia request em caso de token inválido
      (o gate real fica nas dependencies de rota).
    """
    request.state.username = None

    auth = request.headers.get("authorization")
    if not auth or not auth.startswith("Bearer "):
        return await call_next(request)

    token = auth.removeprefix("Bearer ").strip()
    if not token:
        return await call_next(request)

    try:
        payload = verify_token(token)
    except HTTPException:
        # Token inválido = sessão anônima; não muda endpoints públicos.
        return await call_next(request)

    username = payload.get("sub")
    if isinstance(username, str) and username:
        request.state.username = username

    return await call_next(request)
