from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from fastapi import HTTPException
from jose import jwt, JWTError

from showpro.config import JWT_ALGORITHM, JWT_EXPIRATION_HOURS, JWT_ISSUER, JWT_SECRET


def create_access_token(username: str) -> str:
    """
    Cria o token de sessão (JWT).

    Args:
        username: usuário autenticado pelo login local

    Returns:
        Token JWT codificado
    """
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "sub": username,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=JWT_EXPIRATION_HOURS)).timestamp()),
        "iss": JWT_ISSUER,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> Dict[str, Any]:
    """
    Verifica e decodifica um token JWT.

    Raises:
        HTTPException: Se o token for inválido ou expirado
    """
    try:
        return jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            issuer=JWT_ISSUER,
        )
    except JWTError as e:
        # Evita vazar detalhes internos no payload de erro.
        raise HTTPException(status_code=401, detail="Invalid token") from e
