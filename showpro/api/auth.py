import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from showpro.auth.dependencies import get_current_username
from showpro.auth.jwt import create_access_token
from showpro.config import LOCAL_ADMIN_PASSWORD, LOCAL_ADMIN_USER
from showpro.services.access_gate import safe_return_path

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


class LoginRequest(BaseModel):
    username: str
    password: str
    # Caminho original (path + query + fragment) recebido no redirect para o login.
    return_to: Optional[str] = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    return_to: str = "/"


class MeResponse(BaseModel):
    username: str


def _check_local_credentials(username: str, password: str) -> bool:
    """
    Login local placeholder: compara com LOCAL_ADMIN_USER/LOCAL_ADMIN_PASSWORD.

    Não é fronteira de segurança; sem senha configurada o login fica desabilitado.
    """
    if not LOCAL_ADMIN_PASSWORD:
        return False
    user_ok = hmac.compare_digest(username.encode("utf-8"), LOCAL_ADMIN_USER.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), LOCAL_ADMIN_PASSWORD.encode("utf-8"))
    return user_ok and password_ok


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest):
    """
    Autentica com as credenciais locais e devolve o token de sessão.

    `return_to` só é devolvido se for caminho local; senão volta "/".
    """
    if not _check_local_credentials(body.username, body.password):
        logger.warning(f"Login recusado para usuário {body.username!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password.",
        )
    return LoginResponse(
        access_token=create_access_token(body.username),
        return_to=safe_return_path(body.return_to),
    )


@router.get("/me", response_model=MeResponse)
def get_me(username: str = Depends(get_current_username)):
    """Retorna o usuário da sessão."""
    return MeResponse(username=username)
